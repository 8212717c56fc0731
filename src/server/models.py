"""Pydantic response models for the API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from notion2view.schemas import (
    Block,
    CategoryIndex,
    ContentEntry,
    EventEntry,
    EventThumbnail,
    FormSchema,
    ViewNode,
)


class DocumentResponse(BaseModel):
    """Response model for the /api/documents endpoint.

    Attributes
    ----------
    page_id : str
        Canonical (dashed) id of the document.
    title : str | None
        The document title, if the page has one.
    blocks : list[Block]
        The flattened block sequence.
    view : list[ViewNode]
        Render-ready nodes, one per entry of ``blocks``.

    """

    page_id: str = Field(..., description="Canonical document id")
    title: str | None = Field(default=None, description="Document title")
    blocks: list[Block] = Field(default_factory=list, description="Flattened block sequence")
    view: list[ViewNode] = Field(default_factory=list, description="Render-ready nodes")


class ContentsResponse(BaseModel):
    """Response model for the /api/contents endpoint.

    Attributes
    ----------
    categories : CategoryIndex
        Category index; empty when it could not be built.
    contents : list[ContentEntry]
        One page of catalog entries.
    has_more : bool
        Whether another page follows.
    next_cursor : str | None
        Cursor for the next page.

    """

    categories: CategoryIndex = Field(default_factory=CategoryIndex)
    contents: list[ContentEntry] = Field(default_factory=list)
    has_more: bool = False
    next_cursor: str | None = None


class EventsResponse(BaseModel):
    """Response model for the /api/events endpoint."""

    events: list[EventEntry] = Field(default_factory=list)
    thumbnails: list[EventThumbnail] = Field(default_factory=list)


class FormSchemaResponse(BaseModel):
    """Response model for the /api/forms endpoint.

    Attributes
    ----------
    type : str
        The requested form type.
    form_schema : FormSchema
        Field descriptors, serialized as ``schema``.

    """

    model_config = ConfigDict(populate_by_name=True)

    type: str
    form_schema: FormSchema = Field(..., alias="schema")


class ErrorResponse(BaseModel):
    """Error response model.

    Attributes
    ----------
    error : str
        Error message describing what went wrong.

    """

    error: str = Field(..., description="Error message")
