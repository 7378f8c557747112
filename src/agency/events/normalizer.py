"""Turns raw filesystem events into document change events."""

import uuid
from datetime import UTC, datetime
from pathlib import Path

import structlog
from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEvent,
)

from agency.content.paths import collection_for_path
from agency.events.types import DocumentEvent, EventType

logger = structlog.get_logger()

EVENT_TYPES: dict[type[FileSystemEvent], EventType] = {
    FileCreatedEvent: EventType.DOCUMENT_CREATED,
    FileModifiedEvent: EventType.DOCUMENT_MODIFIED,
    FileDeletedEvent: EventType.DOCUMENT_DELETED,
}


def _as_text(raw: str | bytes) -> str:
    if isinstance(raw, str):
        return raw
    return bytes(raw).decode("utf-8", errors="replace")


def _document_event(
    path_str: str, event_type: EventType, content_root: Path
) -> DocumentEvent | None:
    path = Path(path_str)
    target = collection_for_path(content_root, path)
    if target is None:
        logger.debug("event_not_a_document", path=path_str)
        return None

    collection, doc_id = target
    return DocumentEvent(
        id=str(uuid.uuid4()),
        type=event_type,
        timestamp=datetime.now(UTC),
        collection=collection,
        doc_id=doc_id,
        path=path.name,
    )


def normalize_event(raw_event: FileSystemEvent, content_root: Path) -> list[DocumentEvent]:
    """Transform a raw filesystem event into document events.

    A move becomes a deletion of the source document and a modification
    of the destination document; either side is dropped when it is not a
    document path (editors that save through a temp file and rename).

    Args:
        raw_event: Raw watchdog filesystem event.
        content_root: Root directory of the content repository.

    Returns:
        Zero, one or two document events.
    """
    if isinstance(raw_event, FileMovedEvent):
        candidates = [
            (_as_text(raw_event.src_path), EventType.DOCUMENT_DELETED),
            (_as_text(raw_event.dest_path), EventType.DOCUMENT_MODIFIED),
        ]
    else:
        event_type = EVENT_TYPES.get(type(raw_event))
        if event_type is None:
            return []
        candidates = [(_as_text(raw_event.src_path), event_type)]

    events: list[DocumentEvent] = []
    for path_str, event_type in candidates:
        event = _document_event(path_str, event_type, content_root)
        if event is not None:
            events.append(event)
    return events
