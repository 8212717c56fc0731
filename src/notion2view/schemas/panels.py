"""Structured records derived from annotated panels."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class PanelKind(str, Enum):
    """Structured meaning of an annotated panel, in classification priority order."""

    THUMBNAIL = "thumbnail"
    DETAIL_GALLERY = "detail-gallery"
    INFO_PANEL = "info-panel"
    APPLY_SLOT = "apply-slot"
    PROMO = "promo"


class PromoImage(BaseModel):
    """An image inside a promo panel."""

    url: str
    click_href: str | None = None
    alt: str | None = None


class PromoCard(BaseModel):
    """Promo card assembled from a panel's images and ``key: value`` lines."""

    title: str | None = None
    description: str | None = None
    layout_type: Literal["banner", "carousel"] = "banner"
    aspect_ratio: Literal["horizontal", "vertical"] = "vertical"
    images: list[PromoImage] = Field(default_factory=list)
    cta_href: str | None = None

    @property
    def layout(self) -> Literal["placeholder", "single", "gallery", "strip"]:
        """How a renderer should lay the images out."""
        if not self.images:
            return "placeholder"
        if len(self.images) == 1:
            return "single"
        if self.layout_type == "carousel":
            return "gallery"
        return "strip"
