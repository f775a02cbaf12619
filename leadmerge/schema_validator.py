from typing import Sequence

from leadmerge.errors import SchemaError, SchemaErrorKind
from leadmerge.models import LEAD_SCHEMA, RecordSchema


def validate_header(header: Sequence[str], schema: RecordSchema = LEAD_SCHEMA) -> None:
    """
    Check an uploaded header row against the fixed column contract.

    The header must have exactly the schema's columns, in the same order, with
    case-sensitive names. Only the first mismatching position is reported.

    Args:
        header (Sequence[str]): Column names taken from the upload's header row.
        schema (RecordSchema): Column contract to enforce.

    Raises:
        SchemaError: COLUMN_COUNT_MISMATCH if the lengths differ,
                     COLUMN_MISMATCH at the first position whose name differs.
    """
    if len(header) != len(schema.columns):
        raise SchemaError(
            SchemaErrorKind.COLUMN_COUNT_MISMATCH,
            expected_columns=schema.columns,
            received_columns=header,
        )

    for position, (expected, actual) in enumerate(zip(schema.columns, header), start=1):
        if actual != expected:
            raise SchemaError(
                SchemaErrorKind.COLUMN_MISMATCH,
                expected_columns=schema.columns,
                received_columns=header,
                position=position,
                expected_name=expected,
                actual_name=actual,
            )
