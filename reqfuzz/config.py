"""
Run configuration: command-line values merged over an optional YAML profile.

Example profile:

    method: POST
    url: http://localhost:8000/login
    headers:
      - "Content-Type: application/x-www-form-urlencoded"
    data: "user=admin&pass=##pw##"
    wordlist: passwords.txt
    threads: 20
"""
import logging
import yaml
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .errors import ConfigError, InvalidMethod

logger = logging.getLogger("reqfuzz.config")

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS", "CONNECT", "TRACE")

HEADER_SEPARATOR = ": "


@dataclass
class RunConfig:
    url: Optional[str] = None
    wordlist: Optional[str] = None
    method: str = "GET"
    headers: List[str] = field(default_factory=list)
    data: Optional[str] = None
    delimiter: str = "##"
    threads: int = 10
    delay: Optional[int] = None
    verbose: bool = False
    allow_redirects: bool = False
    timeout: float = 30.0
    insecure: bool = False

    def validate(self):
        if not self.url:
            raise ConfigError("A target URL is required (-u/--url)")
        if not self.wordlist:
            raise ConfigError("A wordlist is required (-w/--wordlist)")
        if not self.delimiter:
            raise ConfigError("Delimiter must be a non-empty string")
        if self.threads < 1:
            raise ConfigError(f"Thread count must be at least 1, got {self.threads}")
        if self.delay is not None and self.delay < 0:
            raise ConfigError(f"Delay must be >= 0 ms, got {self.delay}")
        if self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}")
        validate_method(self.method)


PROFILE_KEYS = {f.name for f in fields(RunConfig)}


def validate_method(method: str) -> str:
    if method not in HTTP_METHODS:
        raise InvalidMethod(f"Method not valid: {method!r} (expected one of {', '.join(HTTP_METHODS)})")
    return method


def parse_header_flags(flags: Sequence[str]) -> List[Tuple[str, str]]:
    """
    Splits "Key: Value" flags. Anything that doesn't split into exactly two
    parts is skipped, not an error.
    """
    headers = []
    for flag in flags:
        parts = flag.split(HEADER_SEPARATOR)
        if len(parts) != 2:
            logger.debug("Skipping malformed header flag %r", flag)
            continue
        headers.append((parts[0], parts[1]))
    return headers


def load_profile(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Failed to read profile {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in profile {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Profile {path} must be a mapping of option names to values")

    unknown = set(data) - PROFILE_KEYS
    if unknown:
        raise ConfigError(f"Unknown keys in profile {path}: {', '.join(sorted(unknown))}")

    headers = data.get("headers", [])
    if isinstance(headers, str):
        headers = [headers]
    if not isinstance(headers, list):
        raise ConfigError(f"'headers' in profile {path} must be a list of \"Key: Value\" strings")
    data["headers"] = [str(h) for h in headers]
    return data


def resolve_config(overrides: Dict[str, Any], profile: Optional[Dict[str, Any]] = None) -> RunConfig:
    """
    Command-line values (non-None entries of `overrides`) win over the
    profile, which wins over defaults. Header lists are concatenated,
    profile first.
    """
    merged: Dict[str, Any] = {}
    for source in (profile or {}, overrides):
        for key, value in source.items():
            if key not in PROFILE_KEYS or value is None:
                continue
            if key == "headers":
                merged.setdefault("headers", []).extend(value)
            else:
                merged[key] = value

    try:
        config = RunConfig(**merged)
        config.threads = int(config.threads)
        config.timeout = float(config.timeout)
        if config.delay is not None:
            config.delay = int(config.delay)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid configuration value: {e}") from e
    return config
