"""Classify annotated panels by the marker text authors put in them."""

from __future__ import annotations

from notion2view.rich_text import extract_plain_text
from notion2view.schemas import Block, BlockType, Color, PanelKind
from notion2view.schemas.blocks import CalloutPayload

# Checked top to bottom; the first kind with a matching marker wins.
PANEL_MARKERS: tuple[tuple[PanelKind, tuple[str, ...]], ...] = (
    (PanelKind.THUMBNAIL, ("thumbnail", "썸네일")),
    (PanelKind.DETAIL_GALLERY, ("detail-page", "detail page", "상세페이지")),
    (PanelKind.INFO_PANEL, ("info-panel", "info panel", "상세정보")),
    (PanelKind.APPLY_SLOT, ("apply-slot", "apply slot", "신청버튼")),
    (PanelKind.PROMO, ("promo", "홍보")),
)

PROMO_PANEL_COLOR = Color.GREEN_BACKGROUND


def extract_callout_text(block: Block) -> str:
    """Return a callout's own text, or an empty string for other blocks."""
    if block.type is not BlockType.CALLOUT:
        return ""
    return extract_plain_text(block.rich_text)


def classify_panel(block: Block) -> PanelKind | None:
    """Decide which structured extractor applies to a panel.

    Returns:
        The matching :class:`PanelKind`, or None for a generic panel.
    """
    if block.type is not BlockType.CALLOUT:
        return None

    text = extract_callout_text(block).lower()
    if text:
        for kind, markers in PANEL_MARKERS:
            if any(marker in text for marker in markers):
                return kind

    if isinstance(block.payload, CalloutPayload) and block.payload.color is PROMO_PANEL_COLOR:
        return PanelKind.PROMO
    return None
