"""notion2view: normalize block-based store documents for rendering."""

from notion2view.callouts import classify_panel
from notion2view.client import NotionClient
from notion2view.exceptions import (
    ConfigurationError,
    DepthExceededError,
    InvalidDocumentId,
    InvalidReferenceError,
    Notion2viewError,
    NotFoundError,
    PartialDataDegraded,
    RateLimitError,
    SourceUnavailableError,
)
from notion2view.fetch import BlockTreeFetcher
from notion2view.flatten import flatten_blocks, group_list_runs
from notion2view.normalize import build_view
from notion2view.panels import parse_promo
from notion2view.projection import SchemaCache
from notion2view.rich_text import render_rich_text
from notion2view.schemas import Block, BlockType, DocumentContent, PanelKind, PromoCard, ViewNode
from notion2view.service import NotionService

__all__ = [
    "Block",
    "BlockTreeFetcher",
    "BlockType",
    "ConfigurationError",
    "DepthExceededError",
    "DocumentContent",
    "InvalidDocumentId",
    "InvalidReferenceError",
    "Notion2viewError",
    "NotFoundError",
    "NotionClient",
    "NotionService",
    "PanelKind",
    "PartialDataDegraded",
    "PromoCard",
    "RateLimitError",
    "SchemaCache",
    "SourceUnavailableError",
    "ViewNode",
    "build_view",
    "classify_panel",
    "flatten_blocks",
    "group_list_runs",
    "parse_promo",
    "render_rich_text",
]
