"""FastAPI application for notion2view."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from notion2view.client import NotionClient
from notion2view.exceptions import (
    ConfigurationError,
    DepthExceededError,
    InvalidReferenceError,
    Notion2viewError,
    NotFoundError,
    SourceUnavailableError,
)
from notion2view.service import NotionService
from notion2view.utils.logging_config import get_logger
from server.routers import contents, documents, events, forms

logger = get_logger(__name__)

# Checked in order; subclasses before their bases.
_ERROR_STATUS: tuple[tuple[type[Exception], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (SourceUnavailableError, status.HTTP_502_BAD_GATEWAY),
    (InvalidReferenceError, status.HTTP_400_BAD_REQUEST),
    (DepthExceededError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ConfigurationError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(exc: Exception) -> int:
    for exc_type, code in _ERROR_STATUS:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_notion2view_error(request: Request, exc: Exception) -> JSONResponse:
    """Translate library errors into JSON error responses."""
    code = status_for(exc)
    log = logger.error if code >= 500 else logger.warning
    log(
        "Request failed",
        extra={"path": request.url.path, "status_code": code, "error": str(exc)},
    )
    return JSONResponse(status_code=code, content={"error": str(exc)})


def create_app(*, service: NotionService | None = None) -> FastAPI:
    """Create the application.

    Parameters
    ----------
    service : NotionService | None
        Service to serve requests with. When omitted, a client and service
        are created from the environment at startup and closed at shutdown.

    Returns
    -------
    FastAPI
        The configured application.

    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        app.state.service = service
        app.state.startup_error = None
        client: NotionClient | None = None
        if service is None:
            try:
                client = NotionClient()
            except ConfigurationError as exc:
                logger.error("notion2view is not configured", extra={"error": str(exc)})
                app.state.startup_error = exc
            else:
                app.state.service = NotionService(client)
                logger.info("notion2view service ready")

        yield

        if client is not None:
            await client.aclose()
        app.state.service = None

    app = FastAPI(
        title="notion2view",
        description="Normalized documents, listings and form schemas from a Notion workspace",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_exception_handler(Notion2viewError, handle_notion2view_error)

    app.include_router(documents.router)
    app.include_router(contents.router)
    app.include_router(events.router)
    app.include_router(forms.router)

    @app.get("/health", tags=["infrastructure"])
    async def health_check() -> JSONResponse:
        """Liveness probe; reports whether the service is configured."""
        if app.state.service is None:
            return JSONResponse(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"status": "unconfigured"})
        return JSONResponse(content={"status": "healthy"})

    return app


app = create_app()
