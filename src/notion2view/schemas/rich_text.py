"""Styled inline text models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class Color(str, Enum):
    """Text and highlight colors the store defines."""

    DEFAULT = "default"
    GRAY = "gray"
    BROWN = "brown"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    RED = "red"
    GRAY_BACKGROUND = "gray_background"
    BROWN_BACKGROUND = "brown_background"
    ORANGE_BACKGROUND = "orange_background"
    YELLOW_BACKGROUND = "yellow_background"
    GREEN_BACKGROUND = "green_background"
    BLUE_BACKGROUND = "blue_background"
    PURPLE_BACKGROUND = "purple_background"
    PINK_BACKGROUND = "pink_background"
    RED_BACKGROUND = "red_background"

    @property
    def is_background(self) -> bool:
        return self.value.endswith("_background")

    @property
    def base(self) -> str:
        return self.value.removesuffix("_background")

    @classmethod
    def parse(cls, value: object) -> "Color":
        """Decode a raw color value, falling back to ``default``."""
        try:
            return cls(value)
        except ValueError:
            return cls.DEFAULT


class Annotations(BaseModel):
    """Style flags carried by one text span."""

    model_config = ConfigDict(frozen=True)

    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False
    color: Color = Color.DEFAULT


class TextSpan(BaseModel):
    """One run of text with uniform styling and an optional hyperlink."""

    model_config = ConfigDict(frozen=True)

    text: str
    annotations: Annotations = Annotations()
    href: str | None = None


class InlineNode(BaseModel):
    """A rendered inline text node.

    Attributes:
        text: Text with escaped newlines normalized.
        classes: Semantic style classes for the span's annotations.
        href: Resolved link target; internal page links are already rewritten.
        external: True when ``href`` leaves the application.
        multiline: True when ``text`` contains a line break.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    classes: tuple[str, ...] = ()
    href: str | None = None
    external: bool = False
    multiline: bool = False


def decode_spans(raw: object) -> tuple[TextSpan, ...]:
    """Decode a raw rich-text array from the API, skipping malformed items.

    Text comes from ``plain_text``, falling back to ``text.content``; the link
    comes from ``href``, falling back to ``text.link.url``.
    """
    if not isinstance(raw, list):
        return ()

    spans: list[TextSpan] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        text_obj = item.get("text") if isinstance(item.get("text"), dict) else {}
        text = item.get("plain_text")
        if not isinstance(text, str):
            text = text_obj.get("content") if isinstance(text_obj.get("content"), str) else ""

        href = item.get("href")
        if not href:
            link = text_obj.get("link")
            href = link.get("url") if isinstance(link, dict) else None

        raw_annotations = item.get("annotations") if isinstance(item.get("annotations"), dict) else {}
        annotations = Annotations(
            bold=bool(raw_annotations.get("bold")),
            italic=bool(raw_annotations.get("italic")),
            underline=bool(raw_annotations.get("underline")),
            strikethrough=bool(raw_annotations.get("strikethrough")),
            code=bool(raw_annotations.get("code")),
            color=Color.parse(raw_annotations.get("color", "default")),
        )
        spans.append(
            TextSpan(text=text, annotations=annotations, href=href if isinstance(href, str) and href else None)
        )
    return tuple(spans)
