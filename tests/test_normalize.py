"""Text normalization, slug and locale tests."""

import pytest

from agency.locale import DEFAULT_LOCALE, is_supported_locale, validate_locale
from agency.search.normalize import generate_slug, normalize_text


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Christian Poltéra", "christian poltera"),
        ("Antonín Dvořák", "antonin dvorak"),
        ("BEETHOVEN", "beethoven"),
        ("Ça va", "ca va"),
    ],
)
def test_normalize_strips_case_and_diacritics(text: str, expected: str) -> None:
    """Accents and case do not affect the normalized form."""
    assert normalize_text(text) == expected


def test_normalize_empty_values() -> None:
    """None and empty strings normalize to an empty string."""
    assert normalize_text(None) == ""
    assert normalize_text("") == ""


def test_normalize_is_idempotent() -> None:
    """Normalizing twice gives the same result as once."""
    once = normalize_text("Grieg: Holberg-Suite für Streichorchester")
    assert normalize_text(once) == once


def test_normalize_accented_and_plain_match() -> None:
    """An accented name and its plain spelling normalize identically."""
    assert normalize_text("Poltéra") == normalize_text("poltera")


def test_normalize_keeps_sharp_s() -> None:
    """Characters without a decomposition are kept as-is."""
    assert normalize_text("Straße") == "straße"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Hello World", "hello-world"),
        ("Künstler Konzert 2024", "kunstler-konzert-2024"),
        ("  Über   uns  ", "uber-uns"),
        ("Bach -- Suites!", "bach-suites"),
    ],
)
def test_generate_slug(text: str, expected: str) -> None:
    """Slugs are lowercase ASCII joined by single hyphens."""
    assert generate_slug(text) == expected


def test_supported_locales() -> None:
    """Only German and English are supported."""
    assert is_supported_locale("de")
    assert is_supported_locale("en")
    assert not is_supported_locale("fr")
    assert not is_supported_locale(None)


@pytest.mark.parametrize("value", [None, "", "fr", "EN"])
def test_validate_locale_falls_back_to_german(value: str | None) -> None:
    """Unsupported or missing locales fall back to the default."""
    assert validate_locale(value) == DEFAULT_LOCALE == "de"


def test_validate_locale_keeps_supported() -> None:
    """Supported locales pass through unchanged."""
    assert validate_locale("en") == "en"
