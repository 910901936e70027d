import threading
from typing import Iterable, List, Optional


class WorkQueue:
    """
    Shared pool of pending wordlist entries.

    Items live in a fixed arena and a cursor marks the next one to hand out.
    The cursor only moves forward under the lock, so each entry is delivered
    to exactly one caller exactly once and the queue never refills.
    """

    def __init__(self, words: Iterable[str]):
        self._items: List[str] = list(words)
        self._cursor = 0
        self._lock = threading.Lock()

    def try_take(self) -> Optional[str]:
        """Returns the next undelivered entry, or None once drained."""
        with self._lock:
            if self._cursor >= len(self._items):
                return None
            word = self._items[self._cursor]
            self._cursor += 1
            return word

    @property
    def total(self) -> int:
        return len(self._items)

    @property
    def remaining(self) -> int:
        with self._lock:
            return len(self._items) - self._cursor

    @property
    def drained(self) -> bool:
        return self.remaining == 0

    def __len__(self):
        return self.remaining
