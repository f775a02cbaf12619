"""Dataset stores addressed by dataset name."""
from leadmerge.store.base import DatasetStore, normalize_dataset_name
from leadmerge.store.file_store import FileDatasetStore
from leadmerge.store.memory_store import MemoryDatasetStore

__all__ = ["DatasetStore", "FileDatasetStore", "MemoryDatasetStore", "normalize_dataset_name"]
