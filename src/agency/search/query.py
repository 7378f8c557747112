"""Search query execution with contact-person enrichment."""
import sqlite3

import structlog

from agency.content.loader import ContentError
from agency.content.paths import SecurityError
from agency.content.repository import ContentRepository
from agency.search.normalize import normalize_text
from agency.search.schemas import (
    ContactPersonResult,
    SearchRecord,
    SearchResponse,
    SearchResult,
)
from agency.search.store import SearchRecordStore

logger = structlog.get_logger()

DEFAULT_LIMIT = 10


class SearchBackendError(Exception):
    """Raised when the store or the content repository fails during a search."""


def _to_result(record: SearchRecord) -> SearchResult:
    if record.id is None:
        raise SearchBackendError(
            f"Stored record without id: {record.doc.relation_to}/{record.doc.value}"
        )
    return SearchResult(
        id=record.id,
        title=record.title,
        display_title=record.display_title,
        slug=record.slug,
        relation_to=record.doc.relation_to,
        relation_id=record.doc.value,
        priority=record.priority,
        locale=record.locale,
    )


def search_records(
    store: SearchRecordStore,
    repository: ContentRepository,
    query: str,
    locale: str,
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
) -> SearchResponse:
    """Run a substring search over the stored records of one locale.

    The query is normalized the same way titles were at indexing time.
    Artist hits get their contact persons attached in one extra lookup.

    Args:
        store: Search record store.
        repository: Content repository for the contact-person lookup.
        query: Raw user query (non-empty).
        locale: Locale to search in.
        limit: Page size, already bounded by the caller.
        offset: Number of results to skip.

    Returns:
        Paginated response.

    Raises:
        SearchBackendError: If the store or the contact lookup fails.
    """
    normalized = normalize_text(query.strip())

    try:
        records, total = store.find(locale, contains=normalized, limit=limit, offset=offset)
    except sqlite3.Error as e:
        raise SearchBackendError("Search store query failed") from e

    results = [_to_result(record) for record in records]

    artist_ids = [r.relation_id for r in results if r.relation_to == "artists"]
    if artist_ids:
        try:
            contacts = repository.contact_persons(artist_ids)
        except (ContentError, SecurityError, OSError) as e:
            raise SearchBackendError("Contact person lookup failed") from e

        for result in results:
            if result.relation_to == "artists":
                result.contact_persons = [
                    ContactPersonResult.from_contact(c)
                    for c in contacts.get(result.relation_id, [])
                ]

    logger.info(
        "search_executed",
        query=normalized,
        locale=locale,
        total=total,
        returned=len(results),
    )
    return SearchResponse(results=results, total=total, limit=limit, offset=offset)
