"""
Pytest configuration file.

Ensures the repo root is on sys.path so that 'import leadmerge' and 'import main' work,
and provides shared CSV builders and store fixtures.
"""
import sys
from pathlib import Path
from typing import List, Sequence

import pytest

# Add the repo root to sys.path
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from leadmerge.models import LEAD_SCHEMA  # noqa: E402
from leadmerge.store import FileDatasetStore, MemoryDatasetStore  # noqa: E402

HEADER = list(LEAD_SCHEMA.columns)

ACME = ["Acme", "555-1111", "acme.com", "4.5", "10", "Lawyer", "1 Main St", "ID1"]
BOLT = ["Bolt Legal", "555-2222", "bolt.com", "4.1", "32", "Lawyer", "2 Oak Ave", "ID2"]
CRUX = ["Crux & Co", "555-3333", "", "3.9", "7", "Notary", "3 Elm Rd", "ID3"]


def make_csv(rows: Sequence[Sequence[str]], header: Sequence[str] = HEADER) -> bytes:
    """Build CSV bytes from a header and rows, quoting cells that need it."""
    def cell(value: str) -> str:
        if any(ch in value for ch in ',"\n'):
            return '"' + value.replace('"', '""') + '"'
        return value

    lines: List[str] = [",".join(cell(c) for c in header)]
    lines.extend(",".join(cell(c) for c in row) for row in rows)
    return ("\n".join(lines) + "\n").encode("utf-8")


@pytest.fixture
def memory_store() -> MemoryDatasetStore:
    return MemoryDatasetStore()


@pytest.fixture
def file_store(tmp_path) -> FileDatasetStore:
    return FileDatasetStore(tmp_path / "datasets")
