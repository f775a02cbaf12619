import threading
from typing import Dict, List, Optional

from leadmerge.store.base import DatasetStore


class MemoryDatasetStore(DatasetStore):
    """Dict-backed store for tests and embedding in other processes."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None):
        self._data: Dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()

    def read(self, name: str) -> Optional[bytes]:
        with self._lock:
            return self._data.get(name)

    def write(self, name: str, data: bytes) -> None:
        with self._lock:
            self._data[name] = bytes(data)

    def list_names(self) -> List[str]:
        with self._lock:
            return sorted(self._data)
