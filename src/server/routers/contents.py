"""Content catalog endpoints for the API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from notion2view.config import NOTION2VIEW_PAGE_SIZE
from notion2view.exceptions import NotFoundError
from notion2view.schemas import ContentEntry
from notion2view.service import NotionService
from server.dependencies import get_service
from server.models import ContentsResponse, ErrorResponse

router = APIRouter()


@router.get(
    "/api/contents",
    response_model=ContentsResponse,
    responses={502: {"model": ErrorResponse, "description": "Document store unavailable"}},
)
async def list_contents(
    status_filter: list[str] = Query(default=["OPEN"], alias="status"),
    first_category: str | None = Query(default=None, alias="firstCategory"),
    second_category: str | None = Query(default=None, alias="secondCategory"),
    cursor: str | None = Query(default=None),
    page_size: int = Query(default=NOTION2VIEW_PAGE_SIZE, ge=1, le=100),
    service: NotionService = Depends(get_service),
) -> ContentsResponse:
    """List catalog entries with the category index.

    ``secondCategory`` only applies together with ``firstCategory``.
    """
    first = first_category.strip() if first_category and first_category.strip() else None
    second = second_category.strip() if first and second_category and second_category.strip() else None
    listing, categories = await service.browse_contents(
        status=status_filter,
        first_category=first,
        second_category=second,
        page_size=page_size,
        cursor=cursor,
    )
    return ContentsResponse(
        categories=categories,
        contents=listing.items,
        has_more=listing.has_more,
        next_cursor=listing.next_cursor,
    )


@router.get(
    "/api/contents/{page_id}",
    response_model=ContentEntry,
    responses={404: {"model": ErrorResponse, "description": "Content not found"}},
)
async def get_content(page_id: str, service: NotionService = Depends(get_service)) -> ContentEntry:
    """Return one catalog entry by page id (dashed or compact)."""
    content = await service.get_content(page_id)
    if content is None:
        raise NotFoundError(f"Content {page_id!r} not found", status_code=404)
    return content
