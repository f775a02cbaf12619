"""Schema-validated CSV ingestion and merge for scraped business leads."""
from leadmerge.dataset_service import LeadDatasetService
from leadmerge.merge_engine import MergeEngine
from leadmerge.models import LEAD_SCHEMA, BusinessRecord, DatasetExport, MergeOutcome, RecordSchema

__all__ = [
    "LEAD_SCHEMA",
    "BusinessRecord",
    "DatasetExport",
    "LeadDatasetService",
    "MergeEngine",
    "MergeOutcome",
    "RecordSchema",
]
