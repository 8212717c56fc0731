"""Turn a flattened block sequence into render-ready view nodes."""

from __future__ import annotations

from typing import Iterable

from notion2view.callouts import classify_panel
from notion2view.flatten import flatten_blocks, is_container
from notion2view.ids import to_content_href, to_viewer_href
from notion2view.panels import extract_panel_images, parse_promo
from notion2view.rich_text import render_rich_text
from notion2view.schemas import Block, PanelKind, ViewNode
from notion2view.schemas.blocks import (
    CalloutPayload,
    ChildDatabasePayload,
    ChildPagePayload,
    CodePayload,
    ImagePayload,
    LinkToPagePayload,
)

_GALLERY_KINDS = {PanelKind.THUMBNAIL, PanelKind.DETAIL_GALLERY}


def page_href(page_id: str, content_id: str | None = None) -> str:
    if content_id:
        return to_content_href(content_id, page_id)
    return to_viewer_href(page_id)


def build_node(block: Block, *, content_id: str | None = None) -> ViewNode:
    """Normalize one block. Container children are flattened and normalized too."""
    payload = block.payload
    node: dict = {"id": block.id, "type": block.type, "inline": render_rich_text(block.rich_text)}

    if isinstance(payload, ImagePayload):
        node["image_url"] = payload.url
        node["caption"] = render_rich_text(payload.caption)
    elif isinstance(payload, CodePayload):
        node["language"] = payload.language
        node["caption"] = render_rich_text(payload.caption)
    elif isinstance(payload, CalloutPayload):
        node["icon"] = payload.icon
    elif isinstance(payload, (ChildPagePayload, ChildDatabasePayload)):
        node["label"] = payload.title or None
        if isinstance(payload, ChildPagePayload):
            node["href"] = page_href(block.id, content_id)
    elif isinstance(payload, LinkToPagePayload) and payload.target == "page" and payload.target_id:
        node["href"] = page_href(payload.target_id, content_id)

    panel_kind = classify_panel(block)
    node["panel_kind"] = panel_kind
    if panel_kind is PanelKind.PROMO:
        node["promo"] = parse_promo(block, content_id=content_id)
    elif panel_kind in _GALLERY_KINDS:
        node["gallery"] = extract_panel_images(block)

    if is_container(block) and block.children:
        node["children"] = build_view(block.children, content_id=content_id)

    return ViewNode(**node)


def build_view(blocks: Iterable[Block], *, content_id: str | None = None) -> list[ViewNode]:
    """Flatten ``blocks`` and normalize every resulting node.

    Args:
        blocks: A block forest or an already flattened sequence.
        content_id: Content entry the document belongs to, if any.
    """
    return [build_node(block, content_id=content_id) for block in flatten_blocks(blocks)]
