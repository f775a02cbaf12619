from typing import List, Optional

from loguru import logger

from leadmerge.csv_codec import serialize_records
from leadmerge.errors import UploadTooLargeError
from leadmerge.merge_engine import MergeEngine
from leadmerge.models import LEAD_SCHEMA, BusinessRecord, DatasetExport, MergeOutcome, RecordSchema
from leadmerge.store import DatasetStore, FileDatasetStore, normalize_dataset_name


class LeadDatasetService:
    """
    Entry point used by the upload, table and download surfaces.

    Wraps a MergeEngine and its store. Reads never fail because a dataset is
    absent: fetch returns no records and export returns a header-only CSV.
    """

    def __init__(
        self,
        store: Optional[DatasetStore] = None,
        schema: RecordSchema = LEAD_SCHEMA,
        max_upload_bytes: Optional[int] = None,
        engine: Optional[MergeEngine] = None,
    ):
        self.store = store or FileDatasetStore()
        self.schema = schema
        self.max_upload_bytes = max_upload_bytes
        self.engine = engine or MergeEngine(self.store, schema=schema)

    def upload(
        self,
        content: bytes,
        dataset_name: Optional[str] = None,
        max_bytes: Optional[int] = None,
    ) -> MergeOutcome:
        """
        Merge an uploaded CSV into a dataset.

        Args:
            content (bytes): Raw file bytes.
            dataset_name (Optional[str]): Target dataset; blank means the default dataset.
            max_bytes (Optional[int]): Size ceiling for this call; falls back to the
                                       service's ceiling, and None means unlimited.

        Returns:
            MergeOutcome: Counts of admitted and skipped records plus the new total.
        """
        limit = max_bytes if max_bytes is not None else self.max_upload_bytes
        if limit is not None and len(content) > limit:
            raise UploadTooLargeError(len(content), limit)
        return self.engine.merge(content, normalize_dataset_name(dataset_name))

    def fetch(self, dataset_name: Optional[str] = None) -> List[BusinessRecord]:
        """Return every record in a dataset, in stored order."""
        name = normalize_dataset_name(dataset_name)
        records = self.engine.load_existing(name)
        logger.debug(f"📄 Fetched {len(records)} records from '{name}'")
        return records

    def export(self, dataset_name: Optional[str] = None) -> DatasetExport:
        """
        Serialize a dataset for download, using the normalized name as the attachment name.

        Records are re-serialized in schema column order, so an absent dataset
        exports as a header-only CSV.
        """
        name = normalize_dataset_name(dataset_name)
        records = self.engine.load_existing(name)
        return DatasetExport(content=serialize_records(records, self.schema), filename=name)

    def list_datasets(self) -> List[str]:
        return self.store.list_names()
