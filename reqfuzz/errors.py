class FuzzError(Exception):
    """Base class for every error raised by reqfuzz."""


class MalformedTemplate(FuzzError):
    """A template holds an odd number of delimiter occurrences."""


class WordlistError(FuzzError):
    """The wordlist could not be opened or read."""


class TransportError(FuzzError):
    """A single request failed at the network level."""


class InvalidMethod(FuzzError):
    """The HTTP method is not one of the recognized verbs."""


class ConfigError(FuzzError):
    """Invalid run configuration (profile file, missing options, bad values)."""
