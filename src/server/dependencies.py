"""FastAPI dependencies."""

from __future__ import annotations

from fastapi import Request

from notion2view.exceptions import ConfigurationError
from notion2view.service import NotionService


def get_service(request: Request) -> NotionService:
    """Return the service created at startup.

    Raises
    ------
    ConfigurationError
        If the service could not be created, e.g. because no API token is set.

    """
    service = getattr(request.app.state, "service", None)
    if service is None:
        startup_error = getattr(request.app.state, "startup_error", None)
        raise startup_error or ConfigurationError("Service is not initialized")
    return service
