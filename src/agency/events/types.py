"""Document change event types."""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """What happened to a source document file."""

    DOCUMENT_CREATED = "document.created"
    DOCUMENT_MODIFIED = "document.modified"
    DOCUMENT_DELETED = "document.deleted"


TEMP_FILE_PATTERNS: tuple[str, ...] = (
    ".swp",
    ".swo",
    ".swn",
    ".tmp",
    ".temp",
    "~",
    ".DS_Store",
    ".git",
    ".4913",
)


class DocumentEvent(BaseModel):
    """Typed change event for one source document.

    Attributes:
        id: Unique event identifier (UUID).
        type: Event type.
        timestamp: Event timestamp in UTC.
        collection: Collection of the changed document.
        doc_id: Id of the changed document.
        path: File name within the collection directory.
    """

    id: str = Field(description="Unique event identifier (UUID)")
    type: EventType
    timestamp: datetime = Field(description="Event timestamp (UTC)")
    collection: str
    doc_id: str
    path: str | None = None

    @property
    def is_removal(self) -> bool:
        """Whether the document no longer exists."""
        return self.type == EventType.DOCUMENT_DELETED
