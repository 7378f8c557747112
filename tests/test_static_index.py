"""Static fallback index tests."""

import json
from pathlib import Path

import pytest

from agency.search.indexer import SearchIndexer
from agency.search.static_index import (
    CATEGORIZED_INDEX_VERSION,
    SIMPLE_INDEX_VERSION,
    StaticIndexError,
    generate_static_index,
    index_filename,
)
from agency.search.store import SearchRecordStore


def load(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def indexed_store(indexer: SearchIndexer, store: SearchRecordStore) -> SearchRecordStore:
    """Store populated from the sample content."""
    indexer.reindex()
    return store


def test_simple_index_shape(indexed_store: SearchRecordStore, tmp_path: Path) -> None:
    """The simple format lists display title, slug and collection."""
    summary = generate_static_index(indexed_store, tmp_path, ["de", "en"])

    assert summary["files"] == ["search-index-de.json", "search-index-en.json"]
    text = (tmp_path / index_filename("de")).read_text(encoding="utf-8")
    assert "\n" not in text

    index = json.loads(text)
    assert index["version"] == SIMPLE_INDEX_VERSION
    assert index["locale"] == "de"
    assert index["docs"][0] == {
        "displayTitle": "Christian Poltéra",
        "slug": "christian-poltera",
        "relationTo": "artists",
    }
    assert len(index["docs"]) == 8
    assert summary["stats"]["de"] == {
        "totalResults": 8,
        "groups": {"artists": 1, "pages": 2, "posts": 2, "employees": 2, "repertoire": 1},
    }


def test_categorized_index_groups(indexed_store: SearchRecordStore, tmp_path: Path) -> None:
    """Posts split into projects and news, repertoire becomes recordings."""
    summary = generate_static_index(indexed_store, tmp_path, ["en"], "categorized")

    index = load(tmp_path / "search-index-en.json")
    assert index["version"] == CATEGORIZED_INDEX_VERSION
    results = index["results"]
    assert [d["relationId"] for d in results["projects"]] == ["new-album"]
    assert [d["relationId"] for d in results["news"]] == ["festival-news"]
    assert [d["relationId"] for d in results["recordings"]] == ["dvorak-concerto"]
    assert results["artists"][0]["title"] == "Christian Poltéra"
    assert results["artists"][0]["priority"] == 50
    assert summary["stats"]["en"]["groups"] == {
        "artists": 1,
        "projects": 1,
        "news": 1,
        "recordings": 1,
        "employees": 2,
        "pages": 2,
    }


def test_regeneration_is_stable(indexed_store: SearchRecordStore, tmp_path: Path) -> None:
    """Without data changes only the timestamp differs between runs."""
    generate_static_index(indexed_store, tmp_path, ["de"])
    first = load(tmp_path / "search-index-de.json")
    generate_static_index(indexed_store, tmp_path, ["de"])
    second = load(tmp_path / "search-index-de.json")

    assert first["docs"] == second["docs"]
    assert first["version"] == second["version"]


def test_no_temp_files_left(indexed_store: SearchRecordStore, tmp_path: Path) -> None:
    """Only the final index files remain in the output directory."""
    generate_static_index(indexed_store, tmp_path, ["de", "en"])
    assert sorted(p.name for p in tmp_path.iterdir()) == [
        "search-index-de.json",
        "search-index-en.json",
    ]


def test_empty_store_writes_empty_index(store: SearchRecordStore, tmp_path: Path) -> None:
    """An empty store still produces a valid file."""
    generate_static_index(store, tmp_path, ["de"])
    assert load(tmp_path / "search-index-de.json")["docs"] == []


def test_unwritable_output_dir(indexed_store: SearchRecordStore, tmp_path: Path) -> None:
    """Output directory problems raise StaticIndexError."""
    target = tmp_path / "public"
    target.write_text("file, not directory", encoding="utf-8")
    with pytest.raises(StaticIndexError):
        generate_static_index(indexed_store, target, ["de"])


def test_closed_store_raises(store: SearchRecordStore, tmp_path: Path) -> None:
    """Store failures raise StaticIndexError."""
    store.close()
    with pytest.raises(StaticIndexError):
        generate_static_index(store, tmp_path, ["de"])
