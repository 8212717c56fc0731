"""Event listing endpoints for the API."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from notion2view.exceptions import NotFoundError
from notion2view.fetch import gather_in_order
from notion2view.schemas import EventEntry
from notion2view.service import NotionService
from server.dependencies import get_service
from server.models import ErrorResponse, EventsResponse

router = APIRouter()


@router.get("/api/events", response_model=EventsResponse)
async def list_events(service: NotionService = Depends(get_service)) -> EventsResponse:
    """Return visible events and their ordered thumbnails."""
    events, thumbnails = await gather_in_order(service.list_events(), service.list_event_thumbnails())
    return EventsResponse(events=events, thumbnails=thumbnails)


@router.get(
    "/api/events/{page_id}",
    response_model=EventEntry,
    responses={404: {"model": ErrorResponse, "description": "Event not found"}},
)
async def get_event(page_id: str, service: NotionService = Depends(get_service)) -> EventEntry:
    """Return one event; STAGING events are reported as not found."""
    event = await service.get_event(page_id)
    if event is None:
        raise NotFoundError(f"Event {page_id!r} not found", status_code=404)
    return event
