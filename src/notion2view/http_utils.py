"""HTTP utilities for talking to the document store with rate-limit handling."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final

import httpx

from notion2view.config import (
    NOTION2VIEW_FETCH_BACKOFF_S,
    NOTION2VIEW_FETCH_MAX_RETRIES,
    NOTION2VIEW_FETCH_TIMEOUT_S,
    NOTION2VIEW_USER_AGENT,
)
from notion2view.exceptions import NotFoundError, RateLimitError, SourceUnavailableError

logger = logging.getLogger(__name__)

# Only rate limiting is retried here; other failures surface to the caller.
RETRY_STATUS_CODES: Final[frozenset[int]] = frozenset({429})

_MAX_RETRY_AFTER_S: Final[float] = 30.0


async def request_json(
    method: str,
    url: str,
    *,
    client: httpx.AsyncClient | None = None,
    params: dict[str, Any] | None = None,
    json: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> dict[str, Any]:
    """Send a request and decode its JSON object body.

    Args:
        method: HTTP method.
        url: The URL to request.
        client: Optional httpx.AsyncClient for connection pooling. If not
            provided, a new client is created for this request.
        params: Query parameters; ``None`` values are dropped.
        json: JSON request body.
        headers: Extra request headers.

    Returns:
        The decoded JSON object.

    Raises:
        NotFoundError: On 404.
        RateLimitError: If still rate limited after all retries.
        SourceUnavailableError: On network errors, other non-2xx statuses,
            or a body that is not a JSON object.
    """
    query = {key: value for key, value in (params or {}).items() if value is not None}

    async def do_request(http_client: httpx.AsyncClient) -> dict[str, Any]:
        for attempt in range(NOTION2VIEW_FETCH_MAX_RETRIES + 1):
            try:
                response = await http_client.request(
                    method, url, params=query or None, json=json, headers=headers
                )
            except httpx.RequestError as exc:
                raise SourceUnavailableError(f"Request to {url} failed: {exc}") from exc

            if response.status_code not in RETRY_STATUS_CODES:
                return _decode_response(response, url)

            if attempt < NOTION2VIEW_FETCH_MAX_RETRIES:
                delay = _retry_delay(response, attempt)
                logger.debug("Rate limited by %s, retrying in %.2fs", url, delay)
                await asyncio.sleep(delay)

        raise RateLimitError(
            f"Rate limited by {url} after {NOTION2VIEW_FETCH_MAX_RETRIES + 1} attempts",
            status_code=429,
        )

    if client is not None:
        return await do_request(client)

    async with httpx.AsyncClient(
        timeout=httpx.Timeout(NOTION2VIEW_FETCH_TIMEOUT_S),
        headers={"User-Agent": NOTION2VIEW_USER_AGENT},
    ) as new_client:
        return await do_request(new_client)


def _retry_delay(response: httpx.Response, attempt: int) -> float:
    retry_after = response.headers.get("Retry-After")
    if retry_after:
        try:
            return min(float(retry_after), _MAX_RETRY_AFTER_S)
        except ValueError:
            pass
    return NOTION2VIEW_FETCH_BACKOFF_S * (2**attempt)


def _decode_response(response: httpx.Response, url: str) -> dict[str, Any]:
    if response.status_code == 404:
        raise NotFoundError(
            f"Not found at {url}: {_error_message(response)}", status_code=404
        )
    if not response.is_success:
        raise SourceUnavailableError(
            f"HTTP {response.status_code} from {url}: {_error_message(response)}",
            status_code=response.status_code,
        )
    try:
        payload = response.json()
    except ValueError as exc:
        raise SourceUnavailableError(f"Invalid JSON from {url}") from exc
    if not isinstance(payload, dict):
        raise SourceUnavailableError(f"Unexpected response shape from {url}")
    return payload


def _error_message(response: httpx.Response) -> str:
    """Best-effort error text: the store's ``message`` field or the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase or "unknown error"
