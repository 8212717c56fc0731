"""Document endpoint for the API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from notion2view.ids import normalize_page_id
from notion2view.service import NotionService
from notion2view.utils.logging_config import get_logger
from server.dependencies import get_service
from server.models import DocumentResponse, ErrorResponse

logger = get_logger(__name__)

router = APIRouter()

COMMON_ERROR_RESPONSES: dict[int | str, dict] = {
    400: {"model": ErrorResponse, "description": "Invalid document reference"},
    404: {"model": ErrorResponse, "description": "Document not found"},
    422: {"model": ErrorResponse, "description": "Document nested too deeply"},
    502: {"model": ErrorResponse, "description": "Document store unavailable"},
}


@router.get("/api/documents", response_model=DocumentResponse, responses=COMMON_ERROR_RESPONSES)
async def get_document(
    ref: str = Query(..., description="Page URL or id, dashed or compact"),
    content_id: str | None = Query(default=None, description="Content entry the page belongs to"),
    service: NotionService = Depends(get_service),
) -> DocumentResponse:
    """Fetch a document and return its flattened blocks and render-ready nodes.

    **Query Parameters**
    - **ref** (`str`): Page URL or bare id
    - **content_id** (`str`, optional): Routes linked pages under this content entry

    **Returns**
    - **DocumentResponse**: Title, flattened blocks and view nodes
    """
    page_id = normalize_page_id(ref)
    document, view = await service.render_document(page_id, content_id=content_id)
    logger.info("Served document", extra={"page_id": page_id, "blocks": len(document.blocks)})
    return DocumentResponse(page_id=page_id, title=document.title, blocks=document.blocks, view=view)
