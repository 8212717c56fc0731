"""Convert styled text spans into inline nodes."""

from __future__ import annotations

from typing import Iterable

from notion2view.ids import looks_like_page_id, to_viewer_href
from notion2view.schemas.rich_text import Annotations, Color, InlineNode, TextSpan, decode_spans

__all__ = [
    "annotations_to_classes",
    "decode_spans",
    "extract_plain_text",
    "normalize_newlines",
    "render_rich_text",
    "resolve_href",
]


def normalize_newlines(text: str) -> str:
    """Turn literal two-character ``\\n`` sequences into real line breaks."""
    return text.replace("\\n", "\n")


def color_to_classes(color: Color) -> list[str]:
    if color is Color.DEFAULT:
        return []
    if color.is_background:
        return [f"bg-{color.base}", "highlight"]
    return [f"color-{color.base}"]


def annotations_to_classes(annotations: Annotations) -> tuple[str, ...]:
    """Map a span's annotation set to semantic style classes."""
    classes: list[str] = []
    if annotations.bold:
        classes.append("bold")
    if annotations.italic:
        classes.append("italic")
    if annotations.underline:
        classes.append("underline")
    if annotations.strikethrough:
        classes.append("strikethrough")
    if annotations.code:
        classes.append("code")
    classes.extend(color_to_classes(annotations.color))
    return tuple(classes)


def resolve_href(href: str) -> tuple[str, bool]:
    """Resolve a span link.

    Store-internal links arrive as a bare ``/<page id>`` path and are routed
    to the in-app viewer.

    Returns:
        Tuple of (resolved href, is_external).
    """
    if href.startswith("/") and looks_like_page_id(href):
        return to_viewer_href(href), False
    return href, True


def render_rich_text(spans: Iterable[TextSpan]) -> list[InlineNode]:
    """Render each span into one inline node, keeping order."""
    nodes: list[InlineNode] = []
    for span in spans:
        text = normalize_newlines(span.text)
        href = None
        external = False
        if span.href:
            href, external = resolve_href(span.href)
        nodes.append(
            InlineNode(
                text=text,
                classes=annotations_to_classes(span.annotations),
                href=href,
                external=external,
                multiline="\n" in text,
            )
        )
    return nodes


def extract_plain_text(spans: Iterable[TextSpan]) -> str:
    """Concatenate span text without styling."""
    return "".join(span.text for span in spans).strip()
