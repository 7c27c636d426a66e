"""Tests for index persistence."""

import json
from pathlib import Path

import pytest

from sg_techdocs_search.index_store import IndexStore, IndexStoreError
from sg_techdocs_search.models import DocumentRecord, Section


@pytest.fixture
def store(tmp_path: Path) -> IndexStore:
    """Create a store writing to a temporary directory.

    Args:
        tmp_path: Pytest temporary directory fixture.

    Returns:
        IndexStore instance.
    """
    return IndexStore(tmp_path / "_site" / "search-index.json")


@pytest.fixture
def sample_record() -> DocumentRecord:
    """Create a sample record for testing.

    Returns:
        Sample DocumentRecord instance.
    """
    return DocumentRecord(
        title="Getting Started",
        url="/getting-started/",
        content="getting started\n\npkce implementation\n\nuse pkce.",
        summary="getting started\n\npkce implementation\n\nuse pkce.",
        keywords="getting started pkce implementation",
        sections=(Section(heading="PKCE Implementation", id="pkce-implementation", content="use pkce."),),
    )


def test_save_creates_file(store: IndexStore, sample_record: DocumentRecord) -> None:
    """Test writing the index creates parent directories."""
    count = store.save([sample_record])

    assert count == 1
    data = json.loads(store.index_path.read_text(encoding="utf-8"))
    assert data["pages"][0]["url"] == "/getting-started/"
    assert data["pages"][0]["sections"][0]["id"] == "pkce-implementation"


def test_load_returns_saved_records(store: IndexStore, sample_record: DocumentRecord) -> None:
    """Test that saved records load back unchanged."""
    store.save([sample_record])

    assert store.load() == [sample_record]


def test_load_accepts_records_without_sections() -> None:
    """Test that optional fields may be absent."""
    raw = json.dumps({"pages": [{"title": "Home", "url": "/", "content": "welcome"}]})

    records = IndexStore.loads(raw)

    assert records[0].sections == ()
    assert records[0].keywords == ""


def test_load_missing_file(store: IndexStore) -> None:
    """Test that a missing index raises OSError."""
    with pytest.raises(OSError):
        store.load()


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[]",
        '{"pages": {}}',
        '{"pages": ["home"]}',
        '{"pages": [{"title": "Home"}]}',
    ],
)
def test_loads_rejects_malformed_index(raw: str) -> None:
    """Test that malformed index data raises IndexStoreError."""
    with pytest.raises(IndexStoreError):
        IndexStore.loads(raw)
