"""Document file parsing and validation."""
import errno
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


class ContentError(Exception):
    """Base class for failures reading source documents."""

    def __init__(self, message: str, path: str) -> None:
        """Initialize content error.

        Args:
            message: Error description.
            path: Path that caused the error.
        """
        super().__init__(message)
        self.path = path


class FileSystemError(ContentError):
    """Raised when file operations fail."""

    def __init__(self, message: str, path: str, code: str | None = None) -> None:
        """Initialize filesystem error.

        Args:
            message: Error description.
            path: Path that caused the error.
            code: Optional error code (e.g., ENOENT).
        """
        super().__init__(message, path)
        self.code = code


class ContentValidationError(ContentError):
    """Raised when a document does not match its collection schema."""

    def __init__(
        self, message: str, path: str, validation_error: ValidationError | None = None
    ) -> None:
        """Initialize validation error.

        Args:
            message: Error description.
            path: Path of the invalid file.
            validation_error: Pydantic validation error details, if any.
        """
        super().__init__(message, path)
        self.validation_error = validation_error


def parse_document(raw: str) -> dict[str, Any] | None:
    """Parse a YAML (or JSON) document body.

    Args:
        raw: File content.

    Returns:
        The parsed mapping, or None if the content is not a mapping.

    Raises:
        yaml.YAMLError: If the content is not valid YAML.
    """
    data = yaml.safe_load(raw)
    if not isinstance(data, dict):
        return None
    return data


def read_document(filepath: Path, schema: type[T]) -> T:
    """Read and validate a source document file.

    Args:
        filepath: Absolute path to the YAML or JSON file.
        schema: Pydantic model class for the document's collection.

    Returns:
        The validated document.

    Raises:
        FileSystemError: If the file cannot be read.
        ContentValidationError: If the file is not UTF-8, not a mapping,
            or fails schema validation.
    """
    try:
        raw = filepath.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileSystemError(
            f"File not found: {filepath}",
            str(filepath),
            "ENOENT",
        ) from e
    except PermissionError as e:
        raise FileSystemError(
            f"Permission denied: {filepath}",
            str(filepath),
            "EACCES",
        ) from e
    except UnicodeDecodeError as e:
        raise ContentValidationError(
            f"Document is not valid UTF-8: {filepath}",
            str(filepath),
        ) from e
    except OSError as e:
        raise FileSystemError(
            f"Failed to read file: {e}",
            str(filepath),
            errno.errorcode.get(e.errno) if e.errno else None,
        ) from e

    try:
        data = parse_document(raw)
    except yaml.YAMLError as e:
        raise ContentValidationError(
            f"Unparseable document {filepath}: {e}",
            str(filepath),
        ) from e

    if data is None:
        raise ContentValidationError(
            f"Document is not a mapping: {filepath}",
            str(filepath),
        )

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ContentValidationError(
            f"Invalid document {filepath}",
            str(filepath),
            e,
        ) from e
