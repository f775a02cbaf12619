"""
Tests for header validation against the fixed lead schema.
"""
import pytest

from leadmerge.errors import SchemaError, SchemaErrorKind
from leadmerge.models import LEAD_SCHEMA, RecordSchema
from leadmerge.schema_validator import validate_header


def test_exact_schema_is_accepted():
    validate_header(list(LEAD_SCHEMA.columns))


def test_schema_columns_are_the_fixed_contract():
    assert LEAD_SCHEMA.columns == (
        "Name", "Phone", "Website", "Rating", "Reviews", "Category", "Address", "System_Link_ID",
    )


@pytest.mark.parametrize("header", [
    [],
    ["Name", "Phone", "Website", "Rating", "Reviews", "Category", "Address"],
    list(LEAD_SCHEMA.columns) + ["Extra"],
])
def test_wrong_length_is_count_mismatch(header):
    with pytest.raises(SchemaError) as exc_info:
        validate_header(header)

    err = exc_info.value
    assert err.kind is SchemaErrorKind.COLUMN_COUNT_MISMATCH
    assert err.expected_count == 8
    assert err.actual_count == len(header)
    assert err.position is None
    assert str(err) == f"Expected 8 columns, but found {len(header)}"


def test_swapped_columns_report_first_mismatch():
    """Website/Rating swapped fails at position 3, not 4."""
    header = ["Name", "Phone", "Rating", "Website", "Reviews", "Category", "Address", "System_Link_ID"]

    with pytest.raises(SchemaError) as exc_info:
        validate_header(header)

    err = exc_info.value
    assert err.kind is SchemaErrorKind.COLUMN_MISMATCH
    assert err.position == 3
    assert err.expected_name == "Website"
    assert err.actual_name == "Rating"
    assert err.received_columns == header
    assert err.to_dict()["position"] == 3
    assert err.to_dict()["expectedColumns"] == list(LEAD_SCHEMA.columns)


def test_names_are_case_sensitive():
    header = list(LEAD_SCHEMA.columns)
    header[7] = "system_link_id"

    with pytest.raises(SchemaError) as exc_info:
        validate_header(header)

    assert exc_info.value.position == 8
    assert str(exc_info.value) == 'Column 8 should be "System_Link_ID", but found "system_link_id"'


def test_custom_schema_is_enforced():
    schema = RecordSchema(columns=("Name", "Address"), field_names=("name", "address"))

    validate_header(["Name", "Address"], schema)
    with pytest.raises(SchemaError):
        validate_header(list(LEAD_SCHEMA.columns), schema)


def test_schema_rejects_unknown_fields():
    with pytest.raises(ValueError):
        RecordSchema(columns=("Name",), field_names=("nickname",))
