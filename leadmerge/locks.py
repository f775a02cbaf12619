"""
Per-dataset mutual exclusion for read-modify-write merges.
"""
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List


class KeyedLock:
    """
    One lock per key, created on demand and dropped once nobody holds or waits on it.

    Merges on the same dataset run one at a time; merges on different datasets
    never block each other.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.Lock] = {}
        self._users: Dict[str, int] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
            self._users[key] = self._users.get(key, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._users[key] -= 1
                if self._users[key] == 0:
                    del self._users[key]
                    del self._locks[key]

    def active_keys(self) -> List[str]:
        """Keys currently held or waited on."""
        with self._guard:
            return sorted(self._locks)


# Shared by every MergeEngine that is not given its own KeyedLock, so separate
# engines and services in one process still serialize merges on a dataset.
DATASET_LOCKS = KeyedLock()
