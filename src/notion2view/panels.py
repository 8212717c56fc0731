"""Parse the informal markup inside promo and gallery panels.

Authors describe a promo card by nesting images and ``key: value`` lines
inside a panel, for example::

    - title: Summer Sale
    - description: Two weeks only
    - layoutType: carousel
    - url: https://example.com/sale

Parsing is best effort. Nothing here raises on author content; anything
missing or malformed is left at its default.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from notion2view.ids import extract_page_id, looks_like_page_id, to_content_href, to_viewer_href
from notion2view.rich_text import extract_plain_text
from notion2view.schemas import Block, BlockType, PromoCard, PromoImage
from notion2view.schemas.blocks import ImagePayload

logger = logging.getLogger(__name__)

_URL_RE = re.compile(r"https?://[^\s)]+", re.IGNORECASE)
_URL_TRAILING_RE = re.compile(r"[),.;]+$")
_BULLET_PREFIX_RE = re.compile(r"^[-*]\s+")
_NUMBER_PREFIX_RE = re.compile(r"^\d+\.\s+")

DEFAULT_IMAGE_ALT = "promo-image"


def collect_descendants(blocks: Iterable[Block]) -> list[Block]:
    """Every block below ``blocks``, in depth-first pre-order."""
    collected: list[Block] = []
    for block in blocks:
        collected.append(block)
        if block.children:
            collected.extend(collect_descendants(block.children))
    return collected


def strip_list_prefix(text: str) -> str:
    """Drop a leading ``- ``, ``* `` or ``1. `` marker."""
    stripped = _BULLET_PREFIX_RE.sub("", text.strip())
    return _NUMBER_PREFIX_RE.sub("", stripped)


def parse_key_value_line(text: str) -> tuple[str, str] | None:
    """Split ``key: value`` on the first colon.

    Returns:
        Tuple of (lower-cased key, stripped value), or None when the line
        has no key.
    """
    normalized = strip_list_prefix(text)
    key, sep, value = normalized.partition(":")
    key = key.strip().lower()
    if not sep or not key:
        return None
    return key, value.strip()


def find_first_url(text: str) -> str | None:
    match = _URL_RE.search(text)
    if not match:
        return None
    return _URL_TRAILING_RE.sub("", match.group(0)) or None


def normalize_click_href(url: str, content_id: str | None = None) -> str:
    """Route links to store pages inside the application.

    With a content context, page links go to the content's nested page
    route. Without one, they go to the document viewer. Other links pass
    through unchanged.
    """
    value = url.strip()
    if not value:
        return value
    page_id = extract_page_id(value)
    if page_id is None:
        return value
    if content_id:
        return to_content_href(content_id, page_id)
    return to_viewer_href(value)


def image_url(block: Block) -> str | None:
    if block.type is BlockType.IMAGE and isinstance(block.payload, ImagePayload):
        return block.payload.url
    return None


def _caption_target(caption: str) -> str | None:
    if not caption:
        return None
    found = find_first_url(caption)
    if found:
        return found
    if looks_like_page_id(caption):
        return caption.strip()
    return None


def _promo_image(block: Block, content_id: str | None) -> PromoImage | None:
    url = image_url(block)
    if not url:
        return None
    caption = extract_plain_text(block.payload.caption)
    target = _caption_target(caption)
    return PromoImage(
        url=url,
        click_href=normalize_click_href(target, content_id) if target else None,
        alt=caption or DEFAULT_IMAGE_ALT,
    )


def parse_promo(block: Block, *, content_id: str | None = None) -> PromoCard:
    """Assemble a :class:`PromoCard` from a panel's descendants.

    Args:
        block: The promo panel.
        content_id: Content entry the document belongs to, used to route
            linked pages under that entry.
    """
    images: list[PromoImage] = []
    meta: dict[str, str] = {}

    for node in collect_descendants(block.children):
        if node.type is BlockType.IMAGE:
            image = _promo_image(node, content_id)
            if image is not None:
                images.append(image)
            continue

        text = extract_plain_text(node.rich_text)
        if not text:
            continue
        parsed = parse_key_value_line(text)
        if parsed is None:
            continue
        key, value = parsed
        if key in meta:
            continue

        if key in {"title", "description"}:
            if value:
                meta[key] = value
        elif key == "layouttype":
            lowered = value.lower()
            if "carousel" in lowered:
                meta[key] = "carousel"
            elif "banner" in lowered:
                meta[key] = "banner"
        elif key == "aspectratio":
            lowered = value.lower()
            if "horizontal" in lowered:
                meta[key] = "horizontal"
            elif "vertical" in lowered:
                meta[key] = "vertical"
        elif key == "url":
            found = find_first_url(value) or value
            if found:
                meta[key] = found

    logger.debug("Parsed promo panel %s: %d images, keys=%s", block.id, len(images), sorted(meta))
    return PromoCard(
        title=meta.get("title"),
        description=meta.get("description"),
        layout_type=meta.get("layouttype", "banner"),
        aspect_ratio=meta.get("aspectratio", "vertical"),
        images=images,
        cta_href=normalize_click_href(meta["url"], content_id) if "url" in meta else None,
    )


def extract_panel_images(block: Block) -> list[str]:
    """Image URLs anywhere inside a panel, in document order."""
    return [url for url in map(image_url, collect_descendants(block.children)) if url]
