"""Shared schemas for notion2view."""

from notion2view.schemas.blocks import Block, BlockType, ListRun, decode_block
from notion2view.schemas.panels import PanelKind, PromoCard, PromoImage
from notion2view.schemas.records import (
    ContentEntry,
    EventDate,
    EventEntry,
    EventThumbnail,
    FormField,
    FormSchema,
    PropertyInfo,
)
from notion2view.schemas.results import CategoryIndex, ContentListing, DocumentContent, ViewNode
from notion2view.schemas.rich_text import Annotations, Color, InlineNode, TextSpan, decode_spans

__all__ = [
    "Annotations",
    "Block",
    "BlockType",
    "CategoryIndex",
    "Color",
    "ContentEntry",
    "ContentListing",
    "DocumentContent",
    "EventDate",
    "EventEntry",
    "EventThumbnail",
    "FormField",
    "FormSchema",
    "InlineNode",
    "ListRun",
    "PanelKind",
    "PromoCard",
    "PromoImage",
    "PropertyInfo",
    "TextSpan",
    "ViewNode",
    "decode_block",
    "decode_spans",
]
