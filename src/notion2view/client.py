"""Thin async client for the document store's REST API."""

from __future__ import annotations

from typing import Any

import httpx

from notion2view.config import (
    NOTION2VIEW_API_BASE,
    NOTION2VIEW_API_VERSION,
    NOTION2VIEW_FETCH_TIMEOUT_S,
    NOTION2VIEW_TOKEN,
    NOTION2VIEW_USER_AGENT,
)
from notion2view.exceptions import ConfigurationError
from notion2view.http_utils import request_json

_MAX_PAGE_SIZE = 100


class NotionClient:
    """Pooled HTTP access to pages, block children, and databases.

    Use as an async context manager, or call :meth:`aclose` when done.
    """

    def __init__(
        self,
        token: str | None = None,
        *,
        api_base: str = NOTION2VIEW_API_BASE,
        api_version: str = NOTION2VIEW_API_VERSION,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        token = token if token is not None else NOTION2VIEW_TOKEN
        if not token:
            raise ConfigurationError("NOTION2VIEW_TOKEN (or NOTION_TOKEN) is not set")
        self.api_base = api_base.rstrip("/")
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(NOTION2VIEW_FETCH_TIMEOUT_S),
            headers={"User-Agent": NOTION2VIEW_USER_AGENT},
        )
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Notion-Version": api_version,
            "Content-Type": "application/json",
        }

    async def __aenter__(self) -> "NotionClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        return await request_json(
            "GET", f"{self.api_base}{path}", client=self._http, params=params, headers=self._headers
        )

    async def _post(self, path: str, body: dict[str, Any]) -> dict[str, Any]:
        return await request_json(
            "POST", f"{self.api_base}{path}", client=self._http, json=body, headers=self._headers
        )

    async def retrieve_page(self, page_id: str) -> dict[str, Any]:
        return await self._get(f"/pages/{page_id}")

    async def retrieve_database(self, database_id: str) -> dict[str, Any]:
        return await self._get(f"/databases/{database_id}")

    async def list_block_children(
        self,
        block_id: str,
        *,
        start_cursor: str | None = None,
        page_size: int = _MAX_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Fetch one page of a block's direct children.

        Returns:
            The raw ``{"results", "has_more", "next_cursor"}`` envelope.
        """
        return await self._get(
            f"/blocks/{block_id}/children",
            params={"start_cursor": start_cursor, "page_size": min(page_size, _MAX_PAGE_SIZE)},
        )

    async def query_database(
        self,
        database_id: str,
        *,
        filter: dict[str, Any] | None = None,
        sorts: list[dict[str, Any]] | None = None,
        start_cursor: str | None = None,
        page_size: int = _MAX_PAGE_SIZE,
    ) -> dict[str, Any]:
        """Run one page of a collection query."""
        body: dict[str, Any] = {"page_size": min(page_size, _MAX_PAGE_SIZE)}
        if filter:
            body["filter"] = filter
        if sorts:
            body["sorts"] = sorts
        if start_cursor:
            body["start_cursor"] = start_cursor
        return await self._post(f"/databases/{database_id}/query", body)
