"""Static per-locale JSON search indexes for client-side fallback.

The site's command palette loads ``search-index-{locale}.json`` when the
search endpoint is unreachable. Two shapes exist and a deployment must
use one consistently:

* ``simple``: ``{version, locale, updated, docs: [{displayTitle, slug,
  relationTo}]}``, minified.
* ``categorized``: ``{version, locale, updated, results: {artists,
  projects, news, recordings, employees, pages}}``, indented.
"""
import json
import os
import sqlite3
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Literal

import structlog

from agency.search.schemas import SearchRecord
from agency.search.store import SearchRecordStore

logger = structlog.get_logger()

IndexFormat = Literal["simple", "categorized"]

SIMPLE_INDEX_VERSION = "2025-12-01"
CATEGORIZED_INDEX_VERSION = "2025-11-24"

CATEGORIES: tuple[str, ...] = ("artists", "projects", "news", "recordings", "employees", "pages")

_CATEGORY_BY_COLLECTION: dict[str, str] = {
    "artists": "artists",
    "employees": "employees",
    "pages": "pages",
    "repertoire": "recordings",
}


class StaticIndexError(Exception):
    """Raised when a static index file cannot be written."""


def index_filename(locale: str) -> str:
    """Return the file name of a locale's static index."""
    return f"search-index-{locale}.json"


def _simple_doc(record: SearchRecord) -> dict[str, str]:
    return {
        "displayTitle": record.display_title or record.title or "Untitled",
        "slug": record.slug or "",
        "relationTo": record.doc.relation_to or "unknown",
    }


def _categorized_doc(record: SearchRecord) -> dict[str, Any]:
    return {
        "id": record.id,
        "title": record.display_title or record.title,
        "relationTo": record.doc.relation_to,
        "relationId": record.doc.value,
        "slug": record.slug or None,
        "priority": record.priority,
    }


def category_for(record: SearchRecord) -> str | None:
    """Map a record to its static index category, None if it has none."""
    collection = record.doc.relation_to
    if collection == "posts":
        return "projects" if record.category == "projects" else "news"
    return _CATEGORY_BY_COLLECTION.get(collection)


def build_simple_index(records: list[SearchRecord], locale: str, updated: str) -> dict[str, Any]:
    """Build the minimal fallback index for one locale."""
    return {
        "version": SIMPLE_INDEX_VERSION,
        "locale": locale,
        "updated": updated,
        "docs": [_simple_doc(record) for record in records],
    }


def build_categorized_index(
    records: list[SearchRecord], locale: str, updated: str
) -> dict[str, Any]:
    """Build the fallback index grouped by result category for one locale."""
    results: dict[str, list[dict[str, Any]]] = {category: [] for category in CATEGORIES}
    for record in records:
        category = category_for(record)
        if category is not None:
            results[category].append(_categorized_doc(record))

    return {
        "version": CATEGORIZED_INDEX_VERSION,
        "locale": locale,
        "updated": updated,
        "results": results,
    }


def write_index_file(path: Path, payload: dict[str, Any], indent: int | None) -> None:
    """Atomically replace a JSON file.

    The payload is written to a temporary file in the same directory and
    moved into place, so readers never see a partial file.

    Args:
        path: Destination file.
        payload: JSON-serializable content.
        indent: Indentation, or None for minified output.

    Raises:
        OSError: If writing or renaming fails.
    """
    separators = (",", ":") if indent is None else None
    text = json.dumps(payload, ensure_ascii=False, indent=indent, separators=separators)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def generate_static_index(
    store: SearchRecordStore,
    output_dir: Path,
    locales: tuple[str, ...] | list[str],
    index_format: IndexFormat = "simple",
) -> dict[str, Any]:
    """Write one static index file per locale.

    Each locale's file is replaced on its own; a failure on a later
    locale leaves files already written for earlier locales intact.

    Args:
        store: Search record store to dump.
        output_dir: Public directory for the JSON files.
        locales: Locales to generate.
        index_format: "simple" or "categorized".

    Returns:
        Summary with the written file names and per-locale counts.

    Raises:
        StaticIndexError: If reading records or writing a file fails.
    """
    files: list[str] = []
    stats: dict[str, dict[str, Any]] = {}

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StaticIndexError(f"Cannot create output directory {output_dir}") from e

    for locale in locales:
        updated = datetime.now(UTC).isoformat()
        try:
            records = store.find_all(locale)
        except sqlite3.Error as e:
            raise StaticIndexError(f"Failed to read search records for {locale}") from e

        if index_format == "categorized":
            payload = build_categorized_index(records, locale, updated)
            groups = {name: len(docs) for name, docs in payload["results"].items()}
            indent: int | None = 2
        else:
            payload = build_simple_index(records, locale, updated)
            groups = {}
            for doc in payload["docs"]:
                groups[doc["relationTo"]] = groups.get(doc["relationTo"], 0) + 1
            indent = None

        filename = index_filename(locale)
        try:
            write_index_file(output_dir / filename, payload, indent)
        except OSError as e:
            logger.error("static_index_write_failed", locale=locale, error=str(e))
            raise StaticIndexError(f"Failed to write {filename}") from e

        files.append(filename)
        stats[locale] = {"totalResults": len(records), "groups": groups}
        logger.info(
            "static_index_written",
            locale=locale,
            file=filename,
            format=index_format,
            documents=len(records),
        )

    return {"files": files, "stats": stats}
