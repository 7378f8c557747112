"""Queue consumer that keeps search records in sync with content changes."""

import asyncio
import sqlite3

import structlog

from agency.content.loader import ContentError
from agency.content.paths import SecurityError
from agency.events.types import DocumentEvent
from agency.search.indexer import SearchIndexer

logger = structlog.get_logger()


async def run_sync_subscriber(
    queue: "asyncio.Queue[DocumentEvent]",
    indexer: SearchIndexer,
) -> None:
    """Consume document events and update the search record store.

    Runs as a long-lived asyncio task. Deletions remove a document's
    records; creations and modifications rebuild them. Indexer calls run
    in a worker thread.

    Args:
        queue: Queue fed by the content watcher.
        indexer: Indexer to apply changes with.
    """
    logger.info("search_subscriber_started")

    try:
        while True:
            event = await queue.get()
            try:
                if event.is_removal:
                    await asyncio.to_thread(
                        indexer.remove_document, event.collection, event.doc_id
                    )
                else:
                    await asyncio.to_thread(
                        indexer.sync_document, event.collection, event.doc_id
                    )
            except (ContentError, SecurityError, sqlite3.Error) as e:
                logger.warning(
                    "search_sync_skipped",
                    collection=event.collection,
                    doc_id=event.doc_id,
                    error=str(e),
                )
            finally:
                queue.task_done()
    except asyncio.CancelledError:
        logger.info("search_subscriber_stopped")
        raise
