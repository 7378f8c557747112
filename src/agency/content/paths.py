"""Collection catalogue and security-first path resolution for documents."""
import re
from pathlib import Path
from typing import Literal

Collection = Literal["artists", "employees", "posts", "repertoire", "pages"]

COLLECTIONS: tuple[Collection, ...] = (
    "artists",
    "employees",
    "posts",
    "repertoire",
    "pages",
)

DOCUMENT_SUFFIXES: tuple[str, ...] = (".yaml", ".yml", ".json")

VALID_ID_PATTERN = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9_-]*$")


class SecurityError(Exception):
    """Raised when a path operation violates security constraints."""

    def __init__(self, message: str, path: str) -> None:
        """Initialize security error.

        Args:
            message: Error description.
            path: The offending path value.
        """
        super().__init__(message)
        self.path = path


def is_collection(name: str) -> bool:
    """Check whether a name is one of the known document collections."""
    return name in COLLECTIONS


def resolve_document_path(
    content_root: Path,
    collection: Collection,
    doc_id: str,
) -> Path | None:
    """Resolve a document id to its file within the collection directory.

    Args:
        content_root: Root directory holding one folder per collection.
        collection: Collection the document belongs to.
        doc_id: Document id (filename without extension).

    Returns:
        Path of the first existing file with a supported suffix, or None.

    Raises:
        SecurityError: If the id contains null bytes or traversal
            sequences, or resolves outside the collection directory.
    """
    if "\0" in doc_id:
        raise SecurityError("Document id contains null byte", doc_id)

    if ".." in doc_id or "/" in doc_id or "\\" in doc_id:
        raise SecurityError("Document id contains directory traversal sequence", doc_id)

    collection_dir = (content_root / collection).resolve()

    for suffix in DOCUMENT_SUFFIXES:
        candidate = (collection_dir / f"{doc_id}{suffix}").resolve()
        if candidate.parent != collection_dir:
            raise SecurityError(
                f"Path resolves outside collection directory: {collection_dir}",
                doc_id,
            )
        if candidate.is_file():
            return candidate

    return None


def document_id_from_filename(filename: str) -> str | None:
    """Extract a document id from a filename.

    Args:
        filename: Name of the file, including its extension.

    Returns:
        The id if the suffix is supported and the stem is a valid id.
    """
    path = Path(filename)
    if path.suffix.lower() not in DOCUMENT_SUFFIXES:
        return None

    doc_id = path.stem
    if not VALID_ID_PATTERN.match(doc_id):
        return None

    return doc_id


def collection_for_path(
    content_root: Path,
    path: Path,
) -> tuple[Collection, str] | None:
    """Map a document file path back to its collection and id.

    Args:
        content_root: Root directory holding one folder per collection.
        path: Absolute path of a document file.

    Returns:
        (collection, id) if the path is a document directly inside a
        collection directory, otherwise None.
    """
    try:
        relative = path.resolve().relative_to(content_root.resolve())
    except ValueError:
        return None

    if len(relative.parts) != 2:
        return None

    collection, filename = relative.parts
    if not is_collection(collection):
        return None

    doc_id = document_id_from_filename(filename)
    if doc_id is None:
        return None

    return collection, doc_id  # type: ignore[return-value]
