"""Rich-text extraction and HTML rendering tests."""

import json
from typing import Any

import pytest

from agency.search.html import escape_html, sanitize_url
from agency.search.richtext import (
    EMPTY_TEXT_PLACEHOLDER,
    RichTextError,
    extract_images,
    extract_plain_text,
    parse_rich_text,
    rich_text_to_html,
)


def upload(url: str, alt: str | None = None) -> dict[str, Any]:
    value: dict[str, Any] = {"url": url}
    if alt is not None:
        value["alt"] = alt
    return {"type": "upload", "value": value}


def paragraph(*children: dict[str, Any]) -> dict[str, Any]:
    return {"type": "paragraph", "children": list(children)}


def text(value: str) -> dict[str, Any]:
    return {"type": "text", "text": value}


def tree(*children: dict[str, Any]) -> dict[str, Any]:
    return {"root": {"type": "root", "children": list(children)}}


def test_parse_collects_text_and_images_in_order() -> None:
    """Text and uploads are collected in document order."""
    data = tree(
        paragraph(text("Hello"), text("world")),
        upload("/media/a.png"),
        paragraph(text("again")),
        upload("https://cdn.example.com/b.png"),
    )

    content = parse_rich_text(data)

    assert content.text == "Hello world again"
    assert content.images == [
        "http://localhost:3000/media/a.png",
        "https://cdn.example.com/b.png",
    ]


def test_parse_uses_server_url_for_relative_images() -> None:
    """Relative upload URLs are prefixed with the given base URL."""
    data = tree(upload("/media/a.png"))
    assert extract_images(data, "https://agency.example") == [
        "https://agency.example/media/a.png"
    ]


def test_parse_accepts_json_string() -> None:
    """A serialized tree is parsed before traversal."""
    data = json.dumps(tree(paragraph(text("Serialized"))))
    assert parse_rich_text(data).text == "Serialized"


def test_parse_rejects_invalid_json() -> None:
    """Unparseable JSON raises RichTextError."""
    with pytest.raises(RichTextError):
        parse_rich_text("{not json")


@pytest.mark.parametrize("server_url", ["ftp://example.com", "example.com", "http://"])
def test_parse_rejects_invalid_server_url(server_url: str) -> None:
    """Only absolute HTTP(S) base URLs are accepted."""
    with pytest.raises(RichTextError):
        parse_rich_text(tree(), server_url)


def test_parse_empty_tree_gives_placeholder() -> None:
    """A tree without text yields the placeholder."""
    content = parse_rich_text(tree(paragraph()))
    assert content.text == EMPTY_TEXT_PLACEHOLDER
    assert content.images == []


def test_parse_skips_malformed_nodes() -> None:
    """Nodes that are not mappings or lack children are ignored."""
    data = tree(
        "stray string",  # type: ignore[arg-type]
        {"type": "paragraph"},
        {"children": "not a list"},
        {"type": "upload", "value": "not a mapping"},
        paragraph(text("kept")),
    )
    assert parse_rich_text(data).text == "kept"


def test_parse_handles_deep_nesting() -> None:
    """Deeply nested trees are traversed without recursion errors."""
    node: dict[str, Any] = text("deep")
    for _ in range(5000):
        node = {"type": "list", "children": [node]}
    assert parse_rich_text({"root": node}).text == "deep"


def test_extract_plain_text_is_tolerant() -> None:
    """Broken input yields an empty string instead of raising."""
    assert extract_plain_text(None) == ""
    assert extract_plain_text("{broken") == ""
    assert extract_plain_text(42) == ""
    assert extract_plain_text(tree()) == ""


def test_extract_plain_text_joins_leaves() -> None:
    """Text leaves are joined by single spaces."""
    data = tree(paragraph(text("Swiss"), text("cellist")), upload("/x.png"))
    assert extract_plain_text(data) == "Swiss cellist"


def test_html_renders_paragraphs_and_escapes_text() -> None:
    """Text is escaped inside styled paragraphs."""
    html = rich_text_to_html(tree(paragraph(text("<script>alert(1)</script>"))))

    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
    assert html.startswith("<p style=")


def test_html_drops_empty_paragraphs() -> None:
    """Paragraphs without content produce no markup."""
    html = rich_text_to_html(tree(paragraph(), paragraph(text("Text"))))
    assert html.count("<p") == 1


def test_html_sanitizes_image_sources() -> None:
    """Script URLs in image sources are replaced with '#'."""
    html = rich_text_to_html(tree(upload("javascript:alert(1)")))
    assert 'src="#"' in html
    assert "javascript" not in html


def test_html_prefixes_root_relative_images() -> None:
    """Root-relative sources become absolute with the base URL."""
    html = rich_text_to_html(tree(upload("/media/a.png", "Cover")), "https://agency.example")
    assert 'src="https://agency.example/media/a.png"' in html
    assert 'alt="Cover"' in html


def test_html_truncates_and_escapes_alt() -> None:
    """Long alt texts are cut to 200 characters including the ellipsis."""
    html = rich_text_to_html(tree(upload("https://x.example/a.png", '"' + "a" * 300)))
    alt = html.split('alt="')[1].split('" style=')[0]
    assert alt.startswith("&quot;")
    assert alt.endswith("...")
    assert len(alt.replace("&quot;", '"')) == 200


def test_html_default_alt() -> None:
    """Images without alt text get a generic description."""
    html = rich_text_to_html(tree(upload("https://x.example/a.png")))
    assert 'alt="Screenshot"' in html


def test_html_empty_tree_gives_placeholder() -> None:
    """An empty tree renders a placeholder paragraph."""
    html = rich_text_to_html(tree())
    assert EMPTY_TEXT_PLACEHOLDER in html
    assert html.startswith("<p")


def test_html_rejects_invalid_json() -> None:
    """Unparseable JSON raises RichTextError."""
    with pytest.raises(RichTextError):
        rich_text_to_html("[unterminated")


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("javascript:alert(1)", "#"),
        ("JavaScript:alert(1)", "#"),
        ("data:text/html;base64,xyz", "#"),
        ("vbscript:msgbox", "#"),
        ("ftp://example.com/file", "#"),
        ("relative/path.png", "#"),
        ("  https://example.com/a.png ", "https://example.com/a.png"),
        ("mailto:info@example.com", "mailto:info@example.com"),
        ("/media/a.png", "/media/a.png"),
    ],
)
def test_sanitize_url(url: str, expected: str) -> None:
    """Only http(s), mailto and root-relative URLs survive."""
    assert sanitize_url(url) == expected


def test_escape_html_escapes_quotes() -> None:
    """Both quote characters are escaped for attribute safety."""
    assert escape_html("<a href=\"x\">'") == "&lt;a href=&quot;x&quot;&gt;&#x27;"


def test_single_paragraph_without_images() -> None:
    """A plain paragraph yields its text and no images."""
    data = {
        "root": {
            "children": [
                {"type": "paragraph", "children": [{"type": "text", "text": "Hello world"}]}
            ]
        }
    }
    content = parse_rich_text(data)
    assert content.text == "Hello world"
    assert content.images == []


def test_relative_upload_resolved_against_base() -> None:
    """Relative upload URLs are joined to the base URL."""
    data = tree(upload("/api/images/file/x.jpg"))
    assert parse_rich_text(data, "https://example.com").images == [
        "https://example.com/api/images/file/x.jpg"
    ]
