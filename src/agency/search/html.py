"""HTML helpers for safe string insertion into markup."""
import html
import re

_DANGEROUS_SCHEME = re.compile(r"^(javascript|data|vbscript):", re.IGNORECASE)
_ALLOWED_SCHEME = re.compile(r"^(https?|mailto):", re.IGNORECASE)

SAFE_URL_PLACEHOLDER = "#"


def escape_html(text: str) -> str:
    """Escape &, <, >, double and single quotes as HTML entities.

    Args:
        text: Raw text that may contain markup characters.

    Returns:
        Text safe for element content and quoted attributes.
    """
    return html.escape(text, quote=True)


def sanitize_url(url: str) -> str:
    """Reject URLs that could execute script when placed in markup.

    Only http(s), mailto and root-relative URLs are allowed.

    Args:
        url: URL to check.

    Returns:
        The trimmed URL, or "#" when it is not allowed.
    """
    trimmed = url.strip()

    if _DANGEROUS_SCHEME.match(trimmed):
        return SAFE_URL_PLACEHOLDER

    if not _ALLOWED_SCHEME.match(trimmed) and not trimmed.startswith("/"):
        return SAFE_URL_PLACEHOLDER

    return trimmed
