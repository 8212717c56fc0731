"""Service-level result models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from notion2view.schemas.blocks import Block, BlockType
from notion2view.schemas.panels import PanelKind, PromoCard
from notion2view.schemas.records import ContentEntry
from notion2view.schemas.rich_text import InlineNode


class DocumentContent(BaseModel):
    """A normalized document: its title and flattened block sequence."""

    title: str | None = None
    blocks: list[Block] = Field(default_factory=list)


class ViewNode(BaseModel):
    """Render-ready form of one flattened block.

    Container blocks carry their own flattened, normalized ``children``.
    """

    id: str
    type: BlockType
    inline: list[InlineNode] = Field(default_factory=list)
    caption: list[InlineNode] = Field(default_factory=list)
    href: str | None = None
    image_url: str | None = None
    language: str | None = None
    icon: str | None = None
    label: str | None = None
    panel_kind: PanelKind | None = None
    promo: PromoCard | None = None
    gallery: list[str] | None = None
    children: list["ViewNode"] = Field(default_factory=list)


class ContentListing(BaseModel):
    """One page of a collection query."""

    items: list[ContentEntry] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: str | None = None


class CategoryIndex(BaseModel):
    first_categories: list[str] = Field(default_factory=list)
    second_categories: dict[str, list[str]] = Field(default_factory=dict)
