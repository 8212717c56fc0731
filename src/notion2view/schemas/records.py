"""Domain records projected from database rows."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

ContentStatus = Literal["OPEN", "STOP", "PENDING"]
ContentAccess = Literal["FREE", "MEMBER", "PRO"]
EventStatus = Literal["OPEN", "PENDING", "FINISH", "STAGING"]
EventType = Literal["CHALLENGE", "SOCIALING", "EVENT"]
FormFieldType = Literal[
    "title",
    "rich_text",
    "number",
    "select",
    "multi_select",
    "date",
    "checkbox",
    "url",
    "email",
    "phone_number",
    "files",
]


class PropertyInfo(BaseModel):
    """Declared name and type of one database property."""

    name: str
    type: str


class ContentEntry(BaseModel):
    """A catalog entry from the contents database."""

    page_id: str
    url: str
    title: str
    description: str | None = None
    status: ContentStatus = "PENDING"
    access: ContentAccess = "FREE"
    first_category: str | None = None
    second_category: str | None = None
    cover_image: str | None = None
    created_at: str
    updated_at: str


class EventDate(BaseModel):
    start: str | None = None
    end: str | None = None
    has_start_time: bool = False
    has_end_time: bool = False


class EventEntry(BaseModel):
    """A listing from the events database."""

    page_id: str
    title: str
    description: str | None = None
    status: EventStatus = "PENDING"
    type: EventType = "SOCIALING"
    event_date: EventDate | None = None
    participation_fee: float | None = None
    location: str | None = None
    cover_image: str | None = None
    created_at: str
    updated_at: str


class EventThumbnail(BaseModel):
    page_id: str
    order: float = 0
    status: EventStatus
    url: str | None = None
    cover_image: str | None = None


class FormField(BaseModel):
    """One input of a form collected into a database."""

    id: str
    name: str
    type: FormFieldType
    required: bool = False
    options: list[str] | None = None
    is_long_text: bool = False
    max_selections: int | None = None
    order: int | None = None
    description: str | None = None
    placeholder: str | None = None


class FormSchema(BaseModel):
    database_id: str
    fields: list[FormField] = Field(default_factory=list)
    submit_url: str = ""
    cover_image: str | None = None
