"""
Exception hierarchy for lead ingestion.

Every error carries the structured context a caller needs to render an
actionable message (expected vs received columns, counts, dataset name).
`to_dict()` gives that context as a JSON-ready payload.
"""
from enum import Enum
from typing import Any, Dict, Optional, Sequence


class LeadMergeError(Exception):
    """Base class for all ingestion and storage failures."""

    def to_dict(self) -> Dict[str, Any]:
        return {"error": type(self).__name__, "details": str(self)}


class EmptyInputError(LeadMergeError):
    """Uploaded content has no non-blank line, so there is no header to validate."""

    def __init__(self):
        super().__init__("Uploaded CSV file is empty")


class SchemaErrorKind(str, Enum):
    COLUMN_COUNT_MISMATCH = "column_count_mismatch"
    COLUMN_MISMATCH = "column_mismatch"


class SchemaError(LeadMergeError):
    """
    Header row does not match the fixed schema.

    For COLUMN_COUNT_MISMATCH, `expected_count`/`actual_count` are set.
    For COLUMN_MISMATCH, `position` (1-based), `expected_name` and `actual_name` are set.
    """

    def __init__(
        self,
        kind: SchemaErrorKind,
        expected_columns: Sequence[str],
        received_columns: Sequence[str],
        position: Optional[int] = None,
        expected_name: Optional[str] = None,
        actual_name: Optional[str] = None,
    ):
        self.kind = kind
        self.expected_columns = list(expected_columns)
        self.received_columns = list(received_columns)
        self.expected_count = len(self.expected_columns)
        self.actual_count = len(self.received_columns)
        self.position = position
        self.expected_name = expected_name
        self.actual_name = actual_name
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.kind is SchemaErrorKind.COLUMN_COUNT_MISMATCH:
            return f"Expected {self.expected_count} columns, but found {self.actual_count}"
        return f'Column {self.position} should be "{self.expected_name}", but found "{self.actual_name}"'

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "error": "CSV validation failed",
            "kind": self.kind.value,
            "details": str(self),
            "expectedColumns": self.expected_columns,
            "receivedColumns": self.received_columns,
        }
        if self.kind is SchemaErrorKind.COLUMN_MISMATCH:
            payload["position"] = self.position
        return payload


class ParseError(LeadMergeError):
    """Row structure could not be parsed (unterminated quote, stray fields, bad encoding)."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        if self.line is not None:
            payload["line"] = self.line
        return payload


class NoDataRowsError(LeadMergeError):
    """Header is valid but the upload holds no data rows."""

    def __init__(self):
        super().__init__("Uploaded CSV file contains no data rows")


class UploadTooLargeError(LeadMergeError):
    """Upload exceeds the caller-supplied size ceiling."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"File size ({size / 1024 / 1024:.2f}MB) exceeds the maximum limit of "
            f"{limit / 1024 / 1024:.2f}MB"
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update({"size": self.size, "limit": self.limit})
        return payload


class StoreError(LeadMergeError):
    """The dataset store failed for a reason other than the dataset being absent."""

    _verb = "Accessing"

    def __init__(self, dataset_name: str, reason: str):
        self.dataset_name = dataset_name
        self.reason = reason
        super().__init__(f"{self._verb} dataset '{dataset_name}' failed: {reason}")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["dataset"] = self.dataset_name
        return payload


class StoreReadError(StoreError):
    _verb = "Reading"


class StoreWriteError(StoreError):
    _verb = "Writing"
