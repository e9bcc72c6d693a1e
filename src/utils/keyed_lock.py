"""Per-key mutual exclusion for conversation turns."""

from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator, List


class KeyedLock:
    """
    Hands out one lock per key and forgets it once nobody holds or waits on it.

    Callers for different keys never block each other.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        # key -> [lock, holders_and_waiters]
        self._locks: Dict[str, List] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        """Acquire the lock for ``key`` for the duration of the block."""
        with self._guard:
            entry = self._locks.setdefault(key, [Lock(), 0])
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._locks[key]

    def active_keys(self) -> int:
        """Number of keys currently held or awaited."""
        with self._guard:
            return len(self._locks)
