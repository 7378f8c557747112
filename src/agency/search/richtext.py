"""Text, image and HTML extraction from rich-text document trees.

Rich-text fields are stored as nested node trees: a ``root`` node with
recursive ``children`` arrays, where leaves are ``text`` nodes or
``upload`` nodes carrying a ``value`` with the uploaded file's ``url``
and ``alt``.
"""
import json
import re
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from agency.search.html import SAFE_URL_PLACEHOLDER, escape_html, sanitize_url

DEFAULT_SERVER_URL = "http://localhost:3000"
EMPTY_TEXT_PLACEHOLDER = "No description provided"
MAX_ALT_LENGTH = 200

_SERVER_URL_PATTERN = re.compile(r"^https?://.+")

_PARAGRAPH_STYLE = "color: #222126; font-size: 14px; margin: 12px 0; line-height: 1.6;"
_EMPTY_PARAGRAPH_STYLE = "color: #222126; font-size: 14px; margin: 0; line-height: 1.6;"
_IMAGE_WRAPPER_STYLE = "margin: 16px 0;"
_IMAGE_STYLE = "max-width: 100%; height: auto; border: 1px solid #e3e3e3; border-radius: 4px;"


class RichTextError(ValueError):
    """Raised when rich-text input or the base URL cannot be used."""


@dataclass
class RichTextContent:
    """Plain text and image URLs extracted from a rich-text tree.

    Attributes:
        text: Text leaves joined by single spaces.
        images: Absolute URLs of upload leaves, in document order.
    """

    text: str
    images: list[str] = field(default_factory=list)


def _resolve_base_url(server_url: str | None) -> str:
    if server_url is not None and not _SERVER_URL_PATTERN.match(server_url):
        raise RichTextError("server_url must be a valid HTTP(S) URL")
    return server_url or DEFAULT_SERVER_URL


def _load_tree(data: str | Mapping[str, Any]) -> Any:
    if isinstance(data, str):
        try:
            return json.loads(data)
        except json.JSONDecodeError as e:
            raise RichTextError(f"Invalid rich-text JSON: {e.msg}") from e
    return data


def _absolute_url(url: str, base_url: str) -> str:
    if url.startswith("http"):
        return url
    if url.startswith("/"):
        return f"{base_url.rstrip('/')}{url}"
    return f"{base_url.rstrip('/')}/{url}"


def _upload_url(node: Mapping[str, Any]) -> str | None:
    if node.get("type") != "upload":
        return None
    value = node.get("value")
    if not isinstance(value, Mapping):
        return None
    url = value.get("url")
    return url if isinstance(url, str) and url else None


def _walk(tree: Any) -> Iterator[tuple[str, Any]]:
    """Yield ("text", str) and ("upload", node) leaves depth-first.

    Uses an explicit stack so nesting depth is not bounded by the
    interpreter's recursion limit.
    """
    stack: list[Any] = [tree]
    while stack:
        node = stack.pop()
        if not isinstance(node, Mapping):
            continue

        if _upload_url(node) is not None:
            yield "upload", node
            continue

        text = node.get("text")
        if isinstance(text, str) and text:
            yield "text", text
            continue

        children = node.get("children")
        if isinstance(children, list):
            stack.extend(reversed(children))
            continue

        if "root" in node:
            stack.append(node["root"])


def parse_rich_text(
    data: str | Mapping[str, Any],
    server_url: str | None = None,
) -> RichTextContent:
    """Extract text and image URLs from a rich-text tree.

    Args:
        data: Rich-text tree, or its JSON serialization.
        server_url: Base URL for relative upload URLs.

    Returns:
        Extracted content. The text is a placeholder when the tree holds
        no text at all.

    Raises:
        RichTextError: If the JSON is invalid or server_url is not HTTP(S).
    """
    base_url = _resolve_base_url(server_url)
    tree = _load_tree(data)

    texts: list[str] = []
    images: list[str] = []
    for kind, leaf in _walk(tree):
        if kind == "upload":
            images.append(_absolute_url(_upload_url(leaf) or "", base_url))
        else:
            texts.append(leaf)

    text = " ".join(texts).strip() or EMPTY_TEXT_PLACEHOLDER
    return RichTextContent(text=text, images=images)


def extract_plain_text(data: Any) -> str:
    """Extract searchable text from a rich-text tree.

    Never raises: malformed or missing input gives an empty string, so
    a broken field cannot block indexing of the rest of the document.

    Args:
        data: Rich-text tree, its JSON serialization, or anything else.

    Returns:
        Text leaves joined by single spaces, or "".
    """
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError:
            return ""

    return " ".join(leaf for kind, leaf in _walk(data) if kind == "text").strip()


def extract_images(
    data: str | Mapping[str, Any],
    server_url: str | None = None,
) -> list[str]:
    """Extract absolute image URLs from a rich-text tree."""
    return parse_rich_text(data, server_url).images


def _render_upload(node: Mapping[str, Any], base_url: str) -> str:
    value = node["value"]
    src = sanitize_url(_upload_url(node) or "")
    if src != SAFE_URL_PLACEHOLDER and src.startswith("/"):
        src = f"{base_url.rstrip('/')}{src}"

    alt = value.get("alt") or "Screenshot"
    if not isinstance(alt, str):
        alt = str(alt)
    if len(alt) > MAX_ALT_LENGTH:
        alt = alt[: MAX_ALT_LENGTH - 3] + "..."

    return (
        f'<div style="{_IMAGE_WRAPPER_STYLE}">'
        f'<img src="{escape_html(src)}" alt="{escape_html(alt)}" style="{_IMAGE_STYLE}" />'
        "</div>"
    )


def _render_node(node: Any, base_url: str) -> str:
    if not isinstance(node, Mapping):
        return ""

    if _upload_url(node) is not None:
        return _render_upload(node, base_url)

    children = node.get("children")

    if node.get("type") == "paragraph":
        content = (
            "".join(_render_node(child, base_url) for child in children)
            if isinstance(children, list)
            else ""
        )
        return f'<p style="{_PARAGRAPH_STYLE}">{content}</p>' if content else ""

    text = node.get("text")
    if isinstance(text, str) and text:
        return escape_html(text)

    if isinstance(children, list):
        return "".join(_render_node(child, base_url) for child in children)

    if "root" in node:
        return _render_node(node["root"], base_url)

    return ""


def rich_text_to_html(
    data: str | Mapping[str, Any],
    server_url: str | None = None,
) -> str:
    """Convert a rich-text tree to HTML for email bodies.

    Images stay inline at their original position. All text is escaped
    and image sources are sanitized.

    Args:
        data: Rich-text tree, or its JSON serialization.
        server_url: Base URL for root-relative image sources.

    Returns:
        HTML fragment.

    Raises:
        RichTextError: If the JSON is invalid or server_url is not HTTP(S).
    """
    base_url = _resolve_base_url(server_url)
    tree = _load_tree(data)

    rendered = _render_node(tree, base_url).strip()
    if rendered:
        return rendered
    return f'<p style="{_EMPTY_PARAGRAPH_STYLE}">{EMPTY_TEXT_PLACEHOLDER}</p>'
