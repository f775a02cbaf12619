"""
Directory-backed dataset store. Each dataset is one CSV file under `root`.
"""
import os
import tempfile
from pathlib import Path
from typing import List, Optional

from loguru import logger

from leadmerge.config import DATA_DIR, DATASET_EXTENSION
from leadmerge.errors import StoreReadError, StoreWriteError
from leadmerge.store.base import DatasetStore


class FileDatasetStore(DatasetStore):
    """
    Stores datasets as files in a single directory.

    Writes go to a temp file in the same directory and are moved into place
    with os.replace, so readers see either the old or the new file.
    """

    def __init__(self, root: Path | str = DATA_DIR):
        self.root = Path(root)

    def _path_for(self, name: str) -> Optional[Path]:
        path = (self.root / name).resolve()
        if path.parent != self.root.resolve():
            return None
        return path

    def lock_key(self, name: str) -> str:
        path = self._path_for(name)
        return str(path) if path is not None else name

    def read(self, name: str) -> Optional[bytes]:
        path = self._path_for(name)
        if path is None:
            raise StoreReadError(name, "dataset name must not leave the data directory")
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StoreReadError(name, str(e)) from e

    def write(self, name: str, data: bytes) -> None:
        path = self._path_for(name)
        if path is None:
            raise StoreWriteError(name, "dataset name must not leave the data directory")

        tmp_fd: int | None = None
        tmp_path: Path | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
            tmp_path = Path(tmp_name)
            with os.fdopen(tmp_fd, "wb") as handle:
                tmp_fd = None
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
            tmp_path = None
            logger.debug(f"💾 Wrote {len(data)} bytes to {path}")
        except OSError as e:
            raise StoreWriteError(name, str(e)) from e
        finally:
            if tmp_fd is not None:
                os.close(tmp_fd)
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)

    def list_names(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            entry.name
            for entry in self.root.iterdir()
            if entry.is_file() and entry.suffix == DATASET_EXTENSION and not entry.name.startswith(".")
        )
