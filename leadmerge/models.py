"""
Typed data models for the lead ingestion pipeline.
All data structures used throughout the codebase should be defined here.
"""
from dataclasses import dataclass, fields
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class BusinessRecord:
    """One scraped business entry. Every field is kept as text."""
    name: str = ""
    phone: str = ""
    website: str = ""
    rating: str = ""
    review_count: str = ""
    category: str = ""
    address: str = ""
    link_id: str = ""


@dataclass(frozen=True)
class RecordSchema:
    """
    Fixed, ordered column contract shared by validation, parsing and serialization.

    `columns` are the CSV header names in order; `field_names` are the matching
    BusinessRecord attributes, position for position.
    """
    columns: Tuple[str, ...]
    field_names: Tuple[str, ...]

    def __post_init__(self):
        if len(self.columns) != len(self.field_names):
            raise ValueError(
                f"Schema has {len(self.columns)} columns but {len(self.field_names)} field names"
            )
        known = {f.name for f in fields(BusinessRecord)}
        unknown = [name for name in self.field_names if name not in known]
        if unknown:
            raise ValueError(f"Unknown BusinessRecord fields in schema: {unknown}")

    def __len__(self) -> int:
        return len(self.columns)

    def to_record(self, row: Dict[str, str]) -> BusinessRecord:
        """Build a BusinessRecord from a column-name keyed row."""
        values = {
            field_name: row.get(column, "")
            for column, field_name in zip(self.columns, self.field_names)
        }
        return BusinessRecord(**values)

    def to_row(self, record: BusinessRecord) -> List[str]:
        """Flatten a BusinessRecord into cell values in column order."""
        return [getattr(record, field_name) for field_name in self.field_names]


LEAD_SCHEMA = RecordSchema(
    columns=(
        "Name",
        "Phone",
        "Website",
        "Rating",
        "Reviews",
        "Category",
        "Address",
        "System_Link_ID",
    ),
    field_names=(
        "name",
        "phone",
        "website",
        "rating",
        "review_count",
        "category",
        "address",
        "link_id",
    ),
)


@dataclass(frozen=True)
class MergeOutcome:
    """Result of merging one upload into a dataset."""
    admitted: int  # Records appended to the dataset
    skipped: int  # Incoming rows not admitted (in-upload duplicates + already present)
    total: int  # Records in the dataset after the merge
    duplicates: int = 0  # Incoming rows collapsed by in-upload deduplication

    def to_dict(self) -> Dict[str, int]:
        return {
            "admitted": self.admitted,
            "skipped": self.skipped,
            "total": self.total,
            "duplicates": self.duplicates,
        }


@dataclass(frozen=True)
class DatasetExport:
    """Serialized dataset ready to be served as an attachment."""
    content: bytes
    filename: str
    media_type: str = "text/csv"
