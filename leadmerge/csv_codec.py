"""
CSV reading and writing for lead datasets.

Uploads and stored datasets go through the same tokenizer so that a file
written by `serialize_records` always parses back to the same records.
"""
import csv
import io
import sys
from typing import List, Optional, Sequence, Tuple

import pandas as pd

from leadmerge.errors import EmptyInputError, ParseError
from leadmerge.models import LEAD_SCHEMA, BusinessRecord, RecordSchema


def _lift_field_size_limit() -> None:
    """Remove the csv module's default 128K per-field cap, clamped to what the platform accepts."""
    limit = sys.maxsize
    while True:
        try:
            csv.field_size_limit(limit)
            return
        except OverflowError:
            limit //= 10


_lift_field_size_limit()


def decode_content(content: bytes) -> str:
    """Decode raw upload bytes as UTF-8, tolerating a leading byte-order mark."""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ParseError(f"File is not valid UTF-8 text: {e}") from e


def _is_blank_row(row: Sequence[str]) -> bool:
    return not row or (len(row) == 1 and not row[0].strip())


def read_header(text: str) -> List[str]:
    """
    Parse only the first non-blank line of `text` as a header row.

    Returns:
        List[str]: Header cells with surrounding whitespace trimmed.

    Raises:
        EmptyInputError: If `text` has no non-blank line.
        ParseError: If the header line itself cannot be tokenized.
    """
    first_line = next((line for line in text.splitlines() if line.strip()), None)
    if first_line is None:
        raise EmptyInputError()
    try:
        header = next(csv.reader([first_line], strict=True))
    except csv.Error as e:
        raise ParseError(f"Malformed header row: {e}", line=1) from e
    return [cell.strip() for cell in header]


def _tokenize(text: str) -> Tuple[Optional[List[str]], List[List[str]]]:
    """Split CSV text into (header, data rows), skipping blank lines."""
    reader = csv.reader(io.StringIO(text), strict=True)
    header: Optional[List[str]] = None
    rows: List[List[str]] = []
    try:
        for row in reader:
            if _is_blank_row(row):
                continue
            if header is None:
                header = [cell.strip() for cell in row]
                continue
            if len(row) != len(header):
                raise ParseError(
                    f"Invalid record length on line {reader.line_num}: "
                    f"expected {len(header)} fields, found {len(row)}",
                    line=reader.line_num,
                )
            rows.append(row)
    except csv.Error as e:
        raise ParseError(f"Malformed CSV near line {reader.line_num}: {e}", line=reader.line_num) from e
    return header, rows


def _frame_to_records(frame: pd.DataFrame, schema: RecordSchema) -> List[BusinessRecord]:
    if frame.empty:
        return []
    frame = frame.apply(lambda column: column.str.strip())
    return [schema.to_record(row) for row in frame.to_dict(orient="records")]


def parse_records(text: str, schema: RecordSchema = LEAD_SCHEMA) -> List[BusinessRecord]:
    """
    Parse CSV text whose header has already been validated against `schema`.

    Cells are mapped to record fields by schema position and trimmed.

    Raises:
        ParseError: On unterminated quotes or rows with the wrong number of fields.
    """
    header, rows = _tokenize(text)
    if header is None:
        return []
    frame = pd.DataFrame(rows, columns=list(schema.columns), dtype=str)
    return _frame_to_records(frame, schema)


def parse_dataset(text: str, schema: RecordSchema = LEAD_SCHEMA) -> List[BusinessRecord]:
    """
    Parse a stored dataset, mapping cells by the file's own header names.

    Columns the file lacks come back as empty strings and extra columns are
    ignored, so older files with a drifted header still load.
    """
    header, rows = _tokenize(text)
    if header is None:
        return []
    frame = pd.DataFrame(rows, columns=header, dtype=str)
    frame = frame.loc[:, ~frame.columns.duplicated()]
    return _frame_to_records(frame, schema)


def serialize_records(records: Sequence[BusinessRecord], schema: RecordSchema = LEAD_SCHEMA) -> bytes:
    """Write records as UTF-8 CSV bytes in schema column order, header first."""
    frame = pd.DataFrame([schema.to_row(record) for record in records], columns=list(schema.columns))
    return frame.to_csv(index=False, lineterminator="\n").encode("utf-8")
