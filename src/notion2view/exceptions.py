"""Custom exceptions for notion2view."""

from __future__ import annotations


class Notion2viewError(Exception):
    """Base exception for notion2view operations."""


class ConfigurationError(Notion2viewError):
    """Required configuration (API token, database id) is missing."""


class SourceUnavailableError(Notion2viewError):
    """The document store could not be reached or answered with an error status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(SourceUnavailableError):
    """The document store answered 404 for the requested object."""


class RateLimitError(SourceUnavailableError):
    """Rate limited by the document store after all retries."""


class InvalidReferenceError(Notion2viewError, ValueError):
    """A document id or URL cannot be normalized to the store's address format."""


InvalidDocumentId = InvalidReferenceError


class DepthExceededError(Notion2viewError):
    """The block tree is nested deeper than the configured maximum."""


class PartialDataDegraded(Notion2viewError):
    """A secondary, non-essential fetch failed; callers substitute a default."""
