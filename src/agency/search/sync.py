"""Build search records from source documents before they are stored.

``before_sync`` runs once per document and locale whenever a document is
saved. It combines the document's name or title with extra searchable
text, removes stopwords for the document's locale and normalizes the
result, so the stored ``title`` can be matched against a normalized
query with a plain substring test.
"""
from collections.abc import Mapping
from typing import Any

import structlog

from agency.content.instruments import instrument_labels
from agency.content.repository import employee_display_name
from agency.locale import DEFAULT_LOCALE
from agency.search.normalize import normalize_text
from agency.search.richtext import extract_plain_text
from agency.search.stopwords import filter_stopwords

logger = structlog.get_logger()

# Slug fragments of imprint and privacy pages. Their body text lists
# names and addresses that should not surface in search results.
LEGAL_SLUG_FRAGMENTS: tuple[str, ...] = (
    "impressum",
    "imprint",
    "datenschutz",
    "privacy-policy",
    "privacy",
)

CONTENT_COLLECTIONS: frozenset[str] = frozenset({"posts", "pages", "repertoire"})


def is_legal_slug(slug: str) -> bool:
    """Check whether a slug belongs to a legal page (case-insensitive substring)."""
    lowered = slug.lower()
    return any(fragment in lowered for fragment in LEGAL_SLUG_FRAGMENTS)


def post_category(categories: Any) -> str:
    """Pick the search category for a post from its categories."""
    if isinstance(categories, list) and "projects" in categories:
        return "projects"
    return "news"


def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _display_and_extra(collection: str, doc: Mapping[str, Any], slug: str) -> tuple[str, str]:
    if collection == "artists":
        instruments = doc.get("instrument")
        labels: list[str] = []
        if isinstance(instruments, list):
            for code in instruments:
                labels.extend(instrument_labels(str(code)))
        return _text(doc.get("name")), " ".join(labels)

    if collection == "employees":
        return employee_display_name(dict(doc)), ""

    if collection in CONTENT_COLLECTIONS:
        title = _text(doc.get("title"))
        content = doc.get("content")
        if not content or is_legal_slug(slug):
            return title, ""
        return title, extract_plain_text(content)

    return "", ""


def before_sync(original_doc: Mapping[str, Any], search_doc: Mapping[str, Any]) -> dict[str, Any]:
    """Turn a source document into its search record payload.

    Args:
        original_doc: Source document, already resolved for one locale.
        search_doc: Record shell with ``doc.relation_to`` and ``doc.value``.
            Keys other than the ones set here are preserved.

    Returns:
        The record payload with ``title``, ``display_title``, ``slug`` and
        ``locale`` set, plus ``category`` for posts.
    """
    reference = search_doc.get("doc")
    collection = ""
    if isinstance(reference, Mapping):
        collection = _text(reference.get("relation_to"))

    locale = _text(original_doc.get("locale")) or DEFAULT_LOCALE
    slug = _text(original_doc.get("slug"))

    display_title, extra = _display_and_extra(collection, original_doc, slug)
    full_content = f"{display_title} {extra}".strip()

    record: dict[str, Any] = {
        **search_doc,
        "title": normalize_text(filter_stopwords(full_content, locale)),
        "display_title": display_title,
        "slug": slug,
        "locale": locale,
    }
    if collection == "posts":
        record["category"] = post_category(original_doc.get("categories"))

    logger.debug(
        "search_record_built",
        collection=collection or None,
        doc_id=reference.get("value") if isinstance(reference, Mapping) else None,
        locale=locale,
    )
    return record
