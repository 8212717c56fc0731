"""Fetch a document's complete block tree from the store."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, TypeVar

from notion2view.client import NotionClient
from notion2view.config import NOTION2VIEW_FETCH_CONCURRENCY, NOTION2VIEW_MAX_DEPTH
from notion2view.exceptions import DepthExceededError
from notion2view.ids import normalize_page_id
from notion2view.schemas import Block, decode_block

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def gather_in_order(*aws: Awaitable[T]) -> list[T]:
    """Await concurrently and return results in argument order.

    If any awaitable fails, the others are cancelled before the error
    propagates.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


class BlockTreeFetcher:
    """Resolve a page's children recursively, in authoring order.

    Siblings are resolved depth-first, left to right. With ``concurrency``
    above 1, sibling subtrees are fetched in parallel with at most that many
    requests in flight; results are still returned in sibling order.
    """

    def __init__(
        self,
        client: NotionClient,
        *,
        max_depth: int = NOTION2VIEW_MAX_DEPTH,
        concurrency: int = NOTION2VIEW_FETCH_CONCURRENCY,
    ) -> None:
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.client = client
        self.max_depth = max_depth
        self.concurrency = concurrency

    async def fetch_document_tree(self, document_id: str) -> list[Block]:
        """Fetch every block under a page.

        Args:
            document_id: Page id (dashed or compact) or page URL.

        Returns:
            The page's top-level blocks with ``children`` fully populated.

        Raises:
            InvalidReferenceError: If ``document_id`` cannot be normalized.
            SourceUnavailableError: If any request fails.
            DepthExceededError: If nesting exceeds ``max_depth``.
        """
        page_id = normalize_page_id(document_id)
        semaphore = asyncio.Semaphore(self.concurrency) if self.concurrency > 1 else None
        blocks = await self._fetch_children(page_id, depth=1, semaphore=semaphore)
        logger.debug("Fetched %d top-level blocks for %s", len(blocks), page_id)
        return blocks

    async def list_all_children(
        self, block_id: str, *, semaphore: asyncio.Semaphore | None = None
    ) -> list[dict[str, Any]]:
        """Collect a block's direct children across every cursor page."""
        raw_blocks: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            if semaphore is None:
                data = await self.client.list_block_children(block_id, start_cursor=cursor)
            else:
                async with semaphore:
                    data = await self.client.list_block_children(block_id, start_cursor=cursor)
            raw_blocks.extend(item for item in data.get("results") or [] if isinstance(item, dict))
            cursor = data.get("next_cursor") or None
            if cursor is None:
                return raw_blocks

    async def _fetch_children(
        self, block_id: str, *, depth: int, semaphore: asyncio.Semaphore | None
    ) -> list[Block]:
        if depth > self.max_depth:
            raise DepthExceededError(
                f"Block {block_id} is nested deeper than {self.max_depth} levels"
            )

        raw_blocks = await self.list_all_children(block_id, semaphore=semaphore)

        if semaphore is None:
            return [await self._resolve(raw, depth=depth, semaphore=None) for raw in raw_blocks]

        return await gather_in_order(
            *(self._resolve(raw, depth=depth, semaphore=semaphore) for raw in raw_blocks)
        )

    async def _resolve(
        self, raw: dict[str, Any], *, depth: int, semaphore: asyncio.Semaphore | None
    ) -> Block:
        children: list[Block] = []
        if raw.get("has_children") and raw.get("id"):
            children = await self._fetch_children(str(raw["id"]), depth=depth + 1, semaphore=semaphore)
        return decode_block(raw, children)
