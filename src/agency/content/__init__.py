"""Content module for file-based source documents."""

from agency.content.loader import (
    ContentError,
    ContentValidationError,
    FileSystemError,
    read_document,
)
from agency.content.paths import (
    COLLECTIONS,
    Collection,
    SecurityError,
    collection_for_path,
    resolve_document_path,
)
from agency.content.repository import ContentRepository

__all__ = [
    "COLLECTIONS",
    "Collection",
    "ContentError",
    "ContentRepository",
    "ContentValidationError",
    "FileSystemError",
    "SecurityError",
    "collection_for_path",
    "read_document",
    "resolve_document_path",
]
