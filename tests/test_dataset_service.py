"""
Tests for the upload/fetch/export surface used by the application routes.
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

import pytest

from leadmerge import LeadDatasetService
from leadmerge.errors import UploadTooLargeError
from leadmerge.models import LEAD_SCHEMA, BusinessRecord

from conftest import ACME, BOLT, make_csv

HEADER_ONLY = (",".join(LEAD_SCHEMA.columns) + "\n").encode()


@pytest.fixture
def service(memory_store):
    return LeadDatasetService(memory_store)


def test_fetch_absent_dataset_is_empty(service):
    assert service.fetch("never_written") == []


def test_export_absent_dataset_is_header_only(service):
    export = service.export("never_written")

    assert export.content == HEADER_ONLY
    assert export.filename == "never_written.csv"
    assert export.media_type == "text/csv"


def test_upload_then_fetch_and_export(service):
    outcome = service.upload(make_csv([ACME, BOLT]), "lawyers")

    records = service.fetch("lawyers.csv")
    export = service.export("lawyers")

    assert outcome.to_dict() == {"admitted": 2, "skipped": 0, "total": 2, "duplicates": 0}
    assert [r.link_id for r in records] == ["ID1", "ID2"]
    assert records[0] == BusinessRecord(*ACME)
    assert export.content.decode().splitlines() == [
        ",".join(LEAD_SCHEMA.columns),
        ",".join(ACME),
        ",".join(BOLT),
    ]
    assert service.list_datasets() == ["lawyers.csv"]


def test_blank_dataset_name_uses_default(service):
    service.upload(make_csv([ACME]), "")
    assert service.list_datasets() == ["leads.csv"]
    assert len(service.fetch(None)) == 1


def test_upload_over_call_ceiling_is_rejected(service, memory_store):
    content = make_csv([ACME])

    with pytest.raises(UploadTooLargeError) as exc_info:
        service.upload(content, "leads", max_bytes=len(content) - 1)

    assert exc_info.value.size == len(content)
    assert exc_info.value.to_dict()["limit"] == len(content) - 1
    assert memory_store.list_names() == []


def test_service_ceiling_applies_when_call_gives_none(memory_store):
    service = LeadDatasetService(memory_store, max_upload_bytes=10)

    with pytest.raises(UploadTooLargeError):
        service.upload(make_csv([ACME]), "leads")


def test_no_ceiling_by_default(service):
    big_upload = make_csv([[f"Biz {i}", "", "", "", "", "", "", f"ID{i}"] for i in range(5000)])
    assert service.upload(big_upload, "leads").admitted == 5000


def test_export_reorders_stored_columns_to_schema(memory_store, service):
    memory_store.write("legacy.csv", b"System_Link_ID,Name\nID7,Echo Dental\n")

    export = service.export("legacy")

    assert export.content.decode().splitlines() == [
        ",".join(LEAD_SCHEMA.columns),
        "Echo Dental,,,,,,,ID7",
    ]


def test_separate_services_on_one_store_serialize_merges(memory_store):
    """A service built per request must not lose another request's admissions."""
    first, second = LeadDatasetService(memory_store), LeadDatasetService(memory_store)
    original_read = memory_store.read
    barrier = threading.Barrier(2, timeout=0.2)

    def slow_read(name):
        try:
            barrier.wait()
        except threading.BrokenBarrierError:
            pass
        return original_read(name)

    with patch.object(memory_store, "read", side_effect=slow_read):
        with ThreadPoolExecutor(max_workers=2) as pool:
            futures = [
                pool.submit(first.upload, make_csv([ACME]), "leads"),
                pool.submit(second.upload, make_csv([BOLT]), "leads"),
            ]
            results = [f.result() for f in futures]

    assert sum(r.admitted for r in results) == 2
    assert sorted(r.link_id for r in first.fetch("leads")) == ["ID1", "ID2"]
