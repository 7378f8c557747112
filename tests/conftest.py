"""Pytest configuration and fixtures."""

import sys
from collections.abc import Iterator
from pathlib import Path
from typing import Any

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
import yaml
from fastapi.testclient import TestClient

from agency.app import create_app
from agency.config import Settings
from agency.content.repository import ContentRepository
from agency.search.indexer import SearchIndexer
from agency.search.store import SearchRecordStore


def rich_text(*paragraphs: str) -> dict[str, Any]:
    """Build a rich-text tree with one paragraph per string."""
    return {
        "root": {
            "type": "root",
            "children": [
                {"type": "paragraph", "children": [{"type": "text", "text": text}]}
                for text in paragraphs
            ],
        }
    }


SAMPLE_DOCUMENTS: dict[str, dict[str, dict[str, Any]]] = {
    "artists": {
        "christian-poltera": {
            "name": "Christian Poltéra",
            "instrument": ["cello"],
            "contact_persons": ["jane-doe", "max-muster", "former-colleague"],
            "biography": rich_text("Swiss cellist"),
        },
    },
    "employees": {
        "jane-doe": {
            "first_name": "Jane",
            "last_name": "Doe",
            "email": "jane@example.com",
            "position": {"de": "Künstlermanagerin", "en": "Artist manager"},
        },
        "max-muster": {"name": "Max Muster"},
    },
    "posts": {
        "new-album": {
            "title": {"de": "Neues Album", "en": "New album"},
            "categories": ["projects"],
            "content": rich_text("Recording with the orchestra"),
        },
        "festival-news": {
            "title": "Festival Sommer",
            "categories": ["news"],
        },
    },
    "repertoire": {
        "dvorak-concerto": {"title": "Antonín Dvořák Cellokonzert"},
    },
    "pages": {
        "impressum": {
            "title": {"de": "Impressum", "en": "Imprint"},
            "slug": {"de": "impressum", "en": "imprint"},
            "content": rich_text("Agentur GmbH", "Berlin"),
        },
        "about-us": {
            "title": {"de": "Über uns", "en": "About us"},
            "content": rich_text("Agency for classical music"),
        },
    },
}


def write_document(content_root: Path, collection: str, doc_id: str, data: Any) -> Path:
    """Write one YAML document into the content tree."""
    directory = content_root / collection
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{doc_id}.yaml"
    path.write_text(yaml.safe_dump(data, allow_unicode=True), encoding="utf-8")
    return path


@pytest.fixture
def content_root(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Create a content tree with sample documents."""
    root = tmp_path_factory.mktemp("content")
    for collection, documents in SAMPLE_DOCUMENTS.items():
        for doc_id, data in documents.items():
            write_document(root, collection, doc_id, data)
    return root


@pytest.fixture
def repository(content_root: Path) -> ContentRepository:
    """Create a repository over the sample content."""
    return ContentRepository(content_root)


@pytest.fixture
def store() -> Iterator[SearchRecordStore]:
    """Create an initialized in-memory record store."""
    record_store = SearchRecordStore()
    record_store.initialize()
    yield record_store
    record_store.close()


@pytest.fixture
def indexer(repository: ContentRepository, store: SearchRecordStore) -> SearchIndexer:
    """Create an indexer over the sample content and in-memory store."""
    return SearchIndexer(repository, store)


@pytest.fixture
def settings(tmp_path: Path, content_root: Path) -> Settings:
    """Create test settings."""
    return Settings(
        _env_file=None,
        host="127.0.0.1",
        port=8000,
        debug=True,
        content_root=content_root,
        database_path=str(tmp_path / "data" / "search.db"),
        public_dir=tmp_path / "public",
        reindex_on_startup=True,
        watch_content=False,
    )


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """Create test client with the lifespan running."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client
