"""SQLite-backed store for search records."""

import sqlite3
import threading
from pathlib import Path

import structlog

from agency.search.schemas import DocReference, SearchRecord

logger = structlog.get_logger()

_COLUMNS = "id, relation_to, doc_id, locale, title, display_title, slug, priority, category"
_ORDER = "ORDER BY priority DESC, relation_to, doc_id"
_UPSERT = """
    INSERT INTO search_records
        (relation_to, doc_id, locale, title, display_title, slug, priority, category)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
    ON CONFLICT (relation_to, doc_id, locale) DO UPDATE SET
        title = excluded.title,
        display_title = excluded.display_title,
        slug = excluded.slug,
        priority = excluded.priority,
        category = excluded.category
"""


def _record_params(record: SearchRecord) -> tuple[str, str, str, str, str, str, int, str | None]:
    return (
        record.doc.relation_to,
        record.doc.value,
        record.locale,
        record.title,
        record.display_title,
        record.slug,
        record.priority,
        record.category,
    )


def _row_to_record(row: tuple) -> SearchRecord:
    record_id, relation_to, doc_id, locale, title, display_title, slug, priority, category = row
    return SearchRecord(
        id=record_id,
        title=title,
        display_title=display_title,
        slug=slug,
        locale=locale,
        priority=priority,
        doc=DocReference(relation_to=relation_to, value=doc_id),
        category=category,
    )


class SearchRecordStore:
    """Search collection persisted in SQLite.

    One row per (collection, document id, locale). Thread-safe via a lock;
    the connection uses check_same_thread=False since indexing runs in
    worker threads while queries run on the event loop.
    """

    def __init__(self, database_path: str = ":memory:") -> None:
        """Initialize store (call initialize() before use).

        Args:
            database_path: SQLite file path, or ":memory:".
        """
        self._path = database_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        """Database location."""
        return self._path

    def initialize(self) -> None:
        """Open the database and create the records table."""
        if self._path != ":memory:":
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS search_records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                relation_to TEXT NOT NULL,
                doc_id TEXT NOT NULL,
                locale TEXT NOT NULL,
                title TEXT NOT NULL DEFAULT '',
                display_title TEXT NOT NULL DEFAULT '',
                slug TEXT NOT NULL DEFAULT '',
                priority INTEGER NOT NULL DEFAULT 0,
                category TEXT,
                UNIQUE (relation_to, doc_id, locale)
            )
            """)
        self._conn.execute(
            "CREATE INDEX IF NOT EXISTS idx_search_records_locale "
            "ON search_records (locale, priority)"
        )
        self._conn.commit()
        logger.info("search_store_initialized", path=self._path)

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise sqlite3.ProgrammingError("Search store is not initialized")
        return self._conn

    def upsert(self, record: SearchRecord) -> None:
        """Insert or replace the record for its document and locale.

        Args:
            record: Record to store. Its id is ignored.
        """
        with self._lock:
            conn = self._connection()
            conn.execute(_UPSERT, _record_params(record))
            conn.commit()

    def replace_all(self, records: list[SearchRecord]) -> None:
        """Swap the whole table for the given records in one transaction.

        Readers see either the old or the new records, never a mix. On
        failure the old records are kept.

        Args:
            records: Complete new contents of the store.
        """
        with self._lock:
            conn = self._connection()
            with conn:
                conn.execute("DELETE FROM search_records")
                conn.executemany(_UPSERT, [_record_params(r) for r in records])

    def delete_document(self, relation_to: str, doc_id: str) -> int:
        """Remove every locale's record for a source document.

        Args:
            relation_to: Source collection.
            doc_id: Source document id.

        Returns:
            Number of records removed.
        """
        with self._lock:
            conn = self._connection()
            cursor = conn.execute(
                "DELETE FROM search_records WHERE relation_to = ? AND doc_id = ?",
                (relation_to, doc_id),
            )
            conn.commit()
            return cursor.rowcount

    def count(self, locale: str | None = None) -> int:
        """Count records, optionally for one locale."""
        with self._lock:
            conn = self._connection()
            if locale is None:
                row = conn.execute("SELECT COUNT(*) FROM search_records").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) FROM search_records WHERE locale = ?", (locale,)
                ).fetchone()
        return row[0]

    def find(
        self,
        locale: str,
        contains: str | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[SearchRecord], int]:
        """Find records for a locale, highest priority first.

        Args:
            locale: Locale to search in.
            contains: Substring the title must contain. The match is
                case-sensitive; titles are stored normalized.
            limit: Maximum records to return, None for all.
            offset: Number of records to skip.

        Returns:
            Tuple of (page of records, total matching records).
        """
        where = "WHERE locale = ?"
        params: list[str | int] = [locale]
        if contains:
            where += " AND instr(title, ?) > 0"
            params.append(contains)

        with self._lock:
            conn = self._connection()
            total = conn.execute(
                f"SELECT COUNT(*) FROM search_records {where}", params
            ).fetchone()[0]
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM search_records {where} {_ORDER} LIMIT ? OFFSET ?",
                [*params, -1 if limit is None else limit, offset],
            ).fetchall()

        return [_row_to_record(row) for row in rows], total

    def find_all(self, locale: str) -> list[SearchRecord]:
        """Return every record for a locale in stable order."""
        records, _ = self.find(locale)
        return records

    def find_by_document(self, relation_to: str, doc_id: str) -> list[SearchRecord]:
        """Return the records of one source document, ordered by locale."""
        with self._lock:
            conn = self._connection()
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM search_records "
                "WHERE relation_to = ? AND doc_id = ? ORDER BY locale",
                (relation_to, doc_id),
            ).fetchall()
        return [_row_to_record(row) for row in rows]

    def close(self) -> None:
        """Close the database connection."""
        with self._lock:
            if self._conn:
                self._conn.close()
                self._conn = None
                logger.info("search_store_closed")
