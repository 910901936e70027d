from typing import List

from .errors import WordlistError


def load_wordlist(path: str) -> List[str]:
    """
    Reads every line of `path` as one entry. Blank lines are kept as empty
    words; a trailing newline does not add an entry.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="replace", newline="") as f:
            data = f.read()
    except OSError as e:
        raise WordlistError(f"Failed to read wordlist {path}: {e}") from e
    # str.splitlines() would also break on form feeds and other separators
    lines = data.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]
