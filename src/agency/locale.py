"""Supported site locales and validation helpers."""
from typing import Literal

import structlog

logger = structlog.get_logger()

SupportedLocale = Literal["de", "en"]

SUPPORTED_LOCALES: tuple[SupportedLocale, ...] = ("de", "en")
DEFAULT_LOCALE: SupportedLocale = "de"


def is_supported_locale(locale: str | None) -> bool:
    """Check whether a locale code is served by the site.

    Args:
        locale: Locale code to check.

    Returns:
        True for "de" and "en".
    """
    return locale in SUPPORTED_LOCALES


def validate_locale(locale: str | None) -> SupportedLocale:
    """Validate a locale code, falling back to the default locale.

    Args:
        locale: Raw locale code, possibly empty or unsupported.

    Returns:
        The locale if supported, otherwise "de".
    """
    if locale == "de" or locale == "en":
        return locale

    if locale:
        logger.warning("locale_unsupported", locale=locale, fallback=DEFAULT_LOCALE)

    return DEFAULT_LOCALE
