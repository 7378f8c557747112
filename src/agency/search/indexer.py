"""Keeps the search record store in sync with the content repository."""
import structlog

from agency.content.loader import ContentError
from agency.content.paths import Collection, SecurityError
from agency.content.repository import ContentRepository
from agency.locale import SUPPORTED_LOCALES
from agency.search.schemas import SearchRecord
from agency.search.store import SearchRecordStore
from agency.search.sync import before_sync

logger = structlog.get_logger()

DEFAULT_PRIORITIES: dict[str, int] = {
    "artists": 50,
    "pages": 25,
    "posts": 20,
    "employees": 15,
    "repertoire": 10,
}


class SearchIndexer:
    """Runs the sync hook for documents and writes the resulting records."""

    def __init__(
        self,
        repository: ContentRepository,
        store: SearchRecordStore,
        locales: tuple[str, ...] | list[str] = SUPPORTED_LOCALES,
        priorities: dict[str, int] | None = None,
    ) -> None:
        """Initialize indexer.

        Args:
            repository: Source of documents.
            store: Destination for search records.
            locales: Locales to build one record each for.
            priorities: Ranking weight per collection.
        """
        self._repository = repository
        self._store = store
        self._locales = tuple(locales)
        self._priorities = priorities if priorities is not None else DEFAULT_PRIORITIES

    def build_records(self, collection: Collection, doc_id: str) -> list[SearchRecord]:
        """Build one search record per locale for a document.

        Args:
            collection: Source collection.
            doc_id: Source document id.

        Returns:
            Records for every locale, or an empty list if the document
            does not exist.
        """
        records: list[SearchRecord] = []
        for locale in self._locales:
            original_doc = self._repository.localized(collection, doc_id, locale)
            if original_doc is None:
                return []

            search_doc = {
                "title": "",
                "priority": self._priorities.get(collection, 0),
                "doc": {"relation_to": collection, "value": doc_id},
            }
            records.append(SearchRecord.model_validate(before_sync(original_doc, search_doc)))
        return records

    def sync_document(self, collection: Collection, doc_id: str) -> int:
        """Create, update or remove the records of one document.

        Args:
            collection: Source collection.
            doc_id: Source document id.

        Returns:
            Number of records written; 0 when the document is gone and its
            records were removed.
        """
        records = self.build_records(collection, doc_id)
        if not records:
            self.remove_document(collection, doc_id)
            return 0

        for record in records:
            self._store.upsert(record)

        logger.info(
            "search_document_synced",
            collection=collection,
            doc_id=doc_id,
            locales=[r.locale for r in records],
        )
        return len(records)

    def remove_document(self, collection: Collection, doc_id: str) -> None:
        """Remove every record of a document."""
        removed = self._store.delete_document(collection, doc_id)
        logger.info(
            "search_document_removed", collection=collection, doc_id=doc_id, removed=removed
        )

    def reindex(self) -> int:
        """Rebuild the whole store from the repository.

        Documents that cannot be read are logged and skipped. The new
        records replace the old ones in a single transaction once every
        document has been built.

        Returns:
            Total number of records written.
        """
        new_records: list[SearchRecord] = []

        for collection, doc_id in self._repository.iter_documents():
            try:
                records = self.build_records(collection, doc_id)
            except (ContentError, SecurityError) as e:
                logger.warning(
                    "search_reindex_skip",
                    collection=collection,
                    doc_id=doc_id,
                    error=str(e),
                )
                continue

            new_records.extend(records)

        self._store.replace_all(new_records)
        logger.info("search_reindexed", record_count=len(new_records))
        return len(new_records)
