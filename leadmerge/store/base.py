"""
Storage boundary for lead datasets.

A store only moves bytes. Absence is reported as `None` so callers can tell a
dataset that was never written apart from one that is empty.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from leadmerge.config import DATASET_EXTENSION, DEFAULT_DATASET


def normalize_dataset_name(name: Optional[str]) -> str:
    """
    Append the dataset extension when missing; blank names use the default dataset.

    Example: "leads" -> "leads.csv", "leads.csv" -> "leads.csv"
    """
    name = name or DEFAULT_DATASET
    if not name.endswith(DATASET_EXTENSION):
        name += DATASET_EXTENSION
    return name


class DatasetStore(ABC):
    """Readable/writable byte store keyed by normalized dataset name."""

    @abstractmethod
    def read(self, name: str) -> Optional[bytes]:
        """
        Return the dataset's bytes, or None if it has never been written.

        Raises:
            StoreReadError: If the dataset exists but cannot be read.
        """

    @abstractmethod
    def write(self, name: str, data: bytes) -> None:
        """
        Replace the dataset's content. Once this returns, reads see `data`.

        Raises:
            StoreWriteError: If the content could not be committed.
        """

    def lock_key(self, name: str) -> str:
        """Key merges on `name` are serialized under. Names that address the same dataset must share it."""
        return name

    @abstractmethod
    def list_names(self) -> List[str]:
        """Names of all datasets currently held, sorted."""
