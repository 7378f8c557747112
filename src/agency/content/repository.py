"""File-backed repository for source documents."""
from pathlib import Path
from typing import Any

import structlog

from agency.content.loader import read_document
from agency.content.paths import (
    COLLECTIONS,
    Collection,
    document_id_from_filename,
    resolve_document_path,
)
from agency.content.schemas import (
    COLLECTION_SCHEMAS,
    ContactPerson,
    SourceDocument,
    localize_value,
)
from agency.locale import DEFAULT_LOCALE
from agency.search.normalize import generate_slug

logger = structlog.get_logger()

# Field each collection derives a missing slug from.
SLUG_SOURCES: dict[str, str] = {
    "artists": "name",
    "posts": "title",
    "pages": "title",
}


def employee_display_name(employee: dict[str, Any]) -> str:
    """Return an employee's name, built from first and last name if needed."""
    name = employee.get("name") or ""
    if name:
        return name
    first = employee.get("first_name") or ""
    last = employee.get("last_name") or ""
    return f"{first} {last}".strip()


class ContentRepository:
    """Reads source documents from ``<content_root>/<collection>/<id>.yaml``.

    Documents may localize any field as a ``{"de": ..., "en": ...}`` map.
    ``localized`` flattens a document for a single locale, which is the
    shape the search sync hook consumes.
    """

    def __init__(self, content_root: Path, default_locale: str = DEFAULT_LOCALE) -> None:
        """Initialize repository.

        Args:
            content_root: Directory holding one folder per collection.
            default_locale: Locale used when a field lacks a translation.
        """
        self._root = content_root
        self._default_locale = default_locale

    def list_ids(self, collection: Collection) -> list[str]:
        """List document ids in a collection, sorted.

        Args:
            collection: Collection to list.

        Returns:
            Ids of files with a supported suffix and a valid name.
        """
        directory = self._root / collection

        try:
            files = list(directory.iterdir())
        except FileNotFoundError:
            logger.warning("collection_directory_not_found", path=str(directory))
            return []

        ids = {
            doc_id
            for file in files
            if file.is_file() and (doc_id := document_id_from_filename(file.name))
        }
        return sorted(ids)

    def get(self, collection: Collection, doc_id: str) -> SourceDocument | None:
        """Load and validate a single document.

        Args:
            collection: Collection the document belongs to.
            doc_id: Document id.

        Returns:
            The validated document, or None if no file exists.

        Raises:
            SecurityError: If the id is unsafe.
            ContentError: If the file cannot be read or is invalid.
        """
        path = resolve_document_path(self._root, collection, doc_id)
        if path is None:
            return None
        return read_document(path, COLLECTION_SCHEMAS[collection])

    def localized(
        self,
        collection: Collection,
        doc_id: str,
        locale: str,
    ) -> dict[str, Any] | None:
        """Load a document flattened for one locale.

        The result carries ``id`` and ``locale`` keys, and a slug derived
        from the name or title when the document has none.

        Args:
            collection: Collection the document belongs to.
            doc_id: Document id.
            locale: Locale to resolve localized fields for.

        Returns:
            Flattened document, or None if it does not exist.
        """
        document = self.get(collection, doc_id)
        if document is None:
            return None

        data = {
            key: localize_value(value, locale, self._default_locale)
            for key, value in document.model_dump().items()
        }

        source_field = SLUG_SOURCES.get(collection)
        if not data.get("slug") and source_field and data.get(source_field):
            data["slug"] = generate_slug(str(data[source_field]))

        data["id"] = doc_id
        data["locale"] = locale
        return data

    def find_by_ids(
        self,
        collection: Collection,
        ids: list[str],
        locale: str | None = None,
        depth: int = 0,
    ) -> list[dict[str, Any]]:
        """Load several documents, optionally populating relationships.

        Args:
            collection: Collection to read from.
            ids: Document ids. Missing documents are skipped.
            locale: Locale to resolve; defaults to the default locale.
            depth: With depth >= 1, artist ``contact_persons`` ids are
                replaced by the employee documents they reference.

        Returns:
            Flattened documents in the order of ``ids``.
        """
        resolved_locale = locale or self._default_locale
        docs: list[dict[str, Any]] = []

        for doc_id in dict.fromkeys(ids):
            doc = self.localized(collection, doc_id, resolved_locale)
            if doc is None:
                logger.warning("document_not_found", collection=collection, id=doc_id)
                continue

            if depth >= 1 and collection == "artists":
                doc["contact_persons"] = [
                    self.localized("employees", employee_id, resolved_locale)
                    for employee_id in doc.get("contact_persons") or []
                ]

            docs.append(doc)

        return docs

    def contact_persons(self, artist_ids: list[str]) -> dict[str, list[ContactPerson]]:
        """Resolve the reachable contact persons for each artist.

        Persons that no longer exist or have no email are left out.

        Args:
            artist_ids: Artist document ids.

        Returns:
            Map from artist id to its contact persons, for every artist
            that exists.
        """
        result: dict[str, list[ContactPerson]] = {}

        for artist in self.find_by_ids("artists", artist_ids, depth=1):
            persons: list[ContactPerson] = []
            for person in artist.get("contact_persons") or []:
                if not isinstance(person, dict) or not person.get("email"):
                    continue
                persons.append(
                    ContactPerson(
                        id=person["id"],
                        name=employee_display_name(person),
                        email=person["email"],
                    )
                )
            result[artist["id"]] = persons

        return result

    def iter_documents(self) -> list[tuple[Collection, str]]:
        """List (collection, id) for every document in every collection."""
        return [
            (collection, doc_id)
            for collection in COLLECTIONS
            for doc_id in self.list_ids(collection)
        ]

