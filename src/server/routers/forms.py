"""Form schema endpoint for the API."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from notion2view.service import NotionService, normalize_form_type
from server.dependencies import get_service
from server.models import ErrorResponse, FormSchemaResponse

router = APIRouter()


@router.get(
    "/api/forms/{form_type}",
    response_model=FormSchemaResponse,
    responses={400: {"model": ErrorResponse, "description": "Unknown form type"}},
)
async def get_form_schema(form_type: str, service: NotionService = Depends(get_service)) -> FormSchemaResponse:
    """Return the ordered field descriptors of a form."""
    key = normalize_form_type(form_type)
    schema = await service.get_form_schema(key)
    return FormSchemaResponse(type=key, form_schema=schema)
