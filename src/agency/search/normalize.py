"""Diacritic-insensitive text normalization and slug generation."""
import re
import unicodedata

_COMBINING_MARKS = re.compile(r"[\u0300-\u036f]")
_SLUG_INVALID = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def _strip_diacritics(text: str) -> str:
    return _COMBINING_MARKS.sub("", unicodedata.normalize("NFD", text))


def normalize_text(text: str | None) -> str:
    """Lowercase text and remove combining diacritical marks.

    Applied to indexed titles and to incoming queries alike, so that
    "Poltéra" and "poltera" compare equal.

    Examples:
        "Christian Poltéra" -> "christian poltera"
        "Antonín Dvořák" -> "antonin dvorak"

    Args:
        text: Text to normalize. None is treated as empty.

    Returns:
        Lowercase text without diacritics.
    """
    if not text:
        return ""
    return _strip_diacritics(text.lower())


def generate_slug(text: str) -> str:
    """Generate a URL-friendly slug.

    Examples:
        "Hello World" -> "hello-world"
        "Künstler Konzert 2024" -> "kunstler-konzert-2024"

    Args:
        text: Source text, typically a name or title.

    Returns:
        Lowercase ASCII slug with hyphen separators.
    """
    slug = _strip_diacritics(text.lower())
    slug = _SLUG_INVALID.sub("", slug).strip()
    slug = _WHITESPACE.sub("-", slug)
    return _HYPHENS.sub("-", slug)
