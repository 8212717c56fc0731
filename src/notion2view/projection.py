"""Project database rows and schemas into typed domain records.

Rows are scanned by case-insensitive property name and declared property
type, so declaration order does not matter. A property with the expected
name but a different type is ignored. Nothing here raises on malformed rows;
a projector returns None only when the row lacks what identifies it.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Iterable, Mapping, get_args

from notion2view.exceptions import PartialDataDegraded, SourceUnavailableError
from notion2view.schemas import (
    ContentEntry,
    EventDate,
    EventEntry,
    EventThumbnail,
    FormField,
    FormSchema,
    PropertyInfo,
)
from notion2view.schemas.records import ContentAccess, ContentStatus, EventStatus, EventType, FormFieldType

logger = logging.getLogger(__name__)

Properties = Mapping[str, Any]
SchemaIndex = dict[str, PropertyInfo]
DatabaseLoader = Callable[[str], Awaitable[dict[str, Any]]]

_SELECT_TYPES = ("select", "status")
_FORM_FIELD_TYPES = frozenset(get_args(FormFieldType))
_PLACEHOLDER_TYPES = frozenset({"title", "rich_text", "number", "url", "email", "phone_number"})
_ORDER_PREFIX_RE = re.compile(r"^\s*(\d+)\.\s*")
_REQUIRED_SUFFIX_RE = re.compile(r"\s*(?:\*|\((?:required|필수)\))\s*$", re.IGNORECASE)
_MAX_SELECTIONS_RE = re.compile(r"(?:max|최대)\s*(\d+)", re.IGNORECASE)
_LONG_TEXT_MARKERS = ("long", "장문", "상세")


# Property extractors


def _string(value: object) -> str | None:
    """Return ``value`` when it is a non-empty string, else None."""
    return value if isinstance(value, str) and value else None


def _rich_text_plain(items: object) -> str | None:
    if not isinstance(items, list):
        return None
    text = "".join(
        _string(item.get("plain_text")) or "" for item in items if isinstance(item, dict)
    ).strip()
    return text or None


def extract_text_from_property(prop: object) -> str | None:
    """Plain text of a title, rich_text, select, status, or scalar text property."""
    if not isinstance(prop, dict):
        return None
    prop_type = prop.get("type")
    value = prop.get(prop_type) if isinstance(prop_type, str) else None
    if prop_type in {"title", "rich_text"}:
        return _rich_text_plain(value)
    if prop_type in _SELECT_TYPES:
        name = value.get("name") if isinstance(value, dict) else None
        return name.strip() or None if isinstance(name, str) else None
    if prop_type in {"url", "email", "phone_number"}:
        return value.strip() or None if isinstance(value, str) else None
    return None


def extract_number_from_property(prop: object) -> float | None:
    if not isinstance(prop, dict) or prop.get("type") != "number":
        return None
    value = prop.get("number")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def extract_url_from_property(prop: object) -> str | None:
    if not isinstance(prop, dict) or prop.get("type") != "url":
        return None
    value = prop.get("url")
    return value or None if isinstance(value, str) else None


def _has_time(value: str) -> bool:
    _, sep, time_part = value.partition("T")
    return bool(sep and time_part)


def extract_date_range_from_property(prop: object) -> EventDate | None:
    if not isinstance(prop, dict) or prop.get("type") != "date":
        return None
    date = prop.get("date")
    if not isinstance(date, dict):
        return None
    start = date.get("start") if isinstance(date.get("start"), str) else None
    if not start:
        return None
    end = date.get("end") if isinstance(date.get("end"), str) else None
    return EventDate(
        start=start,
        end=end or None,
        has_start_time=_has_time(start),
        has_end_time=_has_time(end) if end else False,
    )


def extract_cover_image(obj: object) -> str | None:
    """URL of a page's or database's cover, external or hosted."""
    if not isinstance(obj, dict) or not isinstance(obj.get("cover"), dict):
        return None
    cover = obj["cover"]
    source = cover.get("type")
    if source in {"external", "file"} and isinstance(cover.get(source), dict):
        return _string(cover[source].get("url"))
    return None


def extract_page_title(page: object) -> str | None:
    """Text of the page's title-typed property, whatever it is named."""
    for prop in _properties(page).values():
        if isinstance(prop, dict) and prop.get("type") == "title":
            return extract_text_from_property(prop)
    return None


def _properties(page: object) -> Properties:
    if not isinstance(page, dict) or not isinstance(page.get("properties"), dict):
        return {}
    return page["properties"]


def find_property(properties: Properties, names: Iterable[str], types: Iterable[str]) -> dict | None:
    """First property whose lower-cased name and declared type both match."""
    wanted_names = {name.lower() for name in names}
    wanted_types = set(types)
    for key, prop in properties.items():
        if key.lower() in wanted_names and isinstance(prop, dict) and prop.get("type") in wanted_types:
            return prop
    return None


def _choice(value: str | None, allowed: tuple[str, ...], default: str | None) -> str | None:
    return value if value in allowed else default


def _timestamps(page: Mapping[str, Any]) -> tuple[str, str]:
    created_at = _string(page.get("created_time")) or datetime.now(timezone.utc).isoformat()
    return created_at, _string(page.get("last_edited_time")) or created_at


# Records


def project_content(page: object) -> ContentEntry | None:
    """Map a contents-database row to a :class:`ContentEntry`."""
    if not isinstance(page, dict) or not page.get("id"):
        return None
    title = extract_page_title(page)
    if not title:
        return None

    props = _properties(page)
    page_id = str(page["id"])
    created_at, updated_at = _timestamps(page)
    status = extract_text_from_property(find_property(props, ["status"], _SELECT_TYPES))
    access = extract_text_from_property(find_property(props, ["access"], _SELECT_TYPES))
    return ContentEntry(
        page_id=page_id,
        url=_string(page.get("url")) or f"https://notion.so/{page_id.replace('-', '')}",
        title=title,
        description=extract_text_from_property(find_property(props, ["description"], ["rich_text"])),
        status=_choice(status, get_args(ContentStatus), "PENDING"),
        access=_choice(access, get_args(ContentAccess), "FREE"),
        first_category=extract_text_from_property(find_property(props, ["firstCategory"], _SELECT_TYPES)),
        second_category=extract_text_from_property(find_property(props, ["secondCategory"], _SELECT_TYPES)),
        cover_image=extract_cover_image(page),
        created_at=created_at,
        updated_at=updated_at,
    )


def project_event(page: object) -> EventEntry | None:
    """Map an events-database row to an :class:`EventEntry`."""
    if not isinstance(page, dict) or not page.get("id"):
        return None
    title = extract_page_title(page)
    if not title:
        return None

    props = _properties(page)
    created_at, updated_at = _timestamps(page)
    status = extract_text_from_property(find_property(props, ["status"], _SELECT_TYPES))
    event_type = extract_text_from_property(find_property(props, ["type"], _SELECT_TYPES))
    location = None
    for key, prop in props.items():
        if key.lower() == "location":
            location = extract_text_from_property(prop)
            break
    return EventEntry(
        page_id=str(page["id"]),
        title=title,
        description=extract_text_from_property(find_property(props, ["description"], ["rich_text"])),
        status=_choice(status, get_args(EventStatus), "PENDING"),
        type=_choice(event_type, get_args(EventType), "SOCIALING"),
        event_date=extract_date_range_from_property(find_property(props, ["event_date", "eventDate"], ["date"])),
        participation_fee=extract_number_from_property(
            find_property(props, ["participation_fee", "participationFee"], ["number"])
        ),
        location=location,
        cover_image=extract_cover_image(page),
        created_at=created_at,
        updated_at=updated_at,
    )


def project_event_thumbnail(page: object) -> EventThumbnail | None:
    """Map a thumbnail-database row; rows without a known status are dropped."""
    if not isinstance(page, dict) or not page.get("id"):
        return None
    props = _properties(page)
    status = _choice(
        extract_text_from_property(find_property(props, ["status"], _SELECT_TYPES)),
        get_args(EventStatus),
        None,
    )
    if status is None:
        return None
    return EventThumbnail(
        page_id=str(page["id"]),
        order=extract_number_from_property(find_property(props, ["order"], ["number"])) or 0,
        status=status,
        url=extract_url_from_property(find_property(props, ["url"], ["url"])),
        cover_image=extract_cover_image(page),
    )


# Form schemas


def parse_field_name(name: str) -> tuple[str, int | None, bool]:
    """Split a property name into (display name, order, required).

    ``"02. Phone number *"`` gives ``("Phone number", 2, True)``.
    """
    order = None
    match = _ORDER_PREFIX_RE.match(name)
    if match:
        order = int(match.group(1))
        name = name[match.end():]
    required = False
    stripped = _REQUIRED_SUFFIX_RE.sub("", name)
    if stripped != name:
        required = True
    return stripped.strip(), order, required


def _options(prop: Mapping[str, Any], prop_type: str) -> list[str] | None:
    config = prop.get(prop_type) if isinstance(prop.get(prop_type), dict) else {}
    options = config.get("options")
    if not isinstance(options, list):
        return []
    return [opt["name"] for opt in options if isinstance(opt, dict) and isinstance(opt.get("name"), str)]


def project_form_field(name: str, prop: object) -> FormField | None:
    """Describe one form input, or None for property types a form cannot collect."""
    if not isinstance(prop, dict) or prop.get("type") not in _FORM_FIELD_TYPES:
        return None
    prop_type = prop["type"]
    display_name, order, required = parse_field_name(name)
    description = prop.get("description") if isinstance(prop.get("description"), str) else None
    description = description.strip() or None if description else None
    hint = f"{name} {description or ''}".lower()

    max_selections = None
    if prop_type == "multi_select" and description:
        match = _MAX_SELECTIONS_RE.search(description)
        if match:
            max_selections = int(match.group(1))

    return FormField(
        id=str(prop.get("id") or name),
        name=display_name or name,
        type=prop_type,
        required=required,
        options=_options(prop, prop_type) if prop_type in {"select", "multi_select"} else None,
        is_long_text=prop_type == "rich_text" and any(marker in hint for marker in _LONG_TEXT_MARKERS),
        max_selections=max_selections,
        order=order,
        description=description,
        placeholder=description if prop_type in _PLACEHOLDER_TYPES else None,
    )


def project_form_schema(database: object, *, submit_url: str = "", database_id: str | None = None) -> FormSchema:
    """Build a form description from a database's property schema.

    Fields are ordered by their ``NN.`` prefix; unprefixed fields follow in
    declaration order.
    """
    db = database if isinstance(database, dict) else {}
    props = _properties(db)
    indexed: list[tuple[int, FormField]] = []
    for index, (name, prop) in enumerate(props.items()):
        field = project_form_field(name, prop)
        if field is not None:
            indexed.append((index, field))
    indexed.sort(key=lambda item: (item[1].order if item[1].order is not None else math.inf, item[0]))
    return FormSchema(
        database_id=str(db.get("id") or database_id or ""),
        fields=[field for _, field in indexed],
        submit_url=submit_url,
        cover_image=extract_cover_image(db),
    )


# Query filters


def build_property_index(database: object) -> SchemaIndex:
    """Map lower-cased property names to their declared name and type."""
    index: SchemaIndex = {}
    for name, prop in _properties(database).items():
        prop_type = prop.get("type") if isinstance(prop, dict) else None
        index[name.lower()] = PropertyInfo(name=name, type=prop_type if isinstance(prop_type, str) else "unknown")
    return index


def build_equals_filter(info: PropertyInfo, value: str | None) -> dict[str, Any] | None:
    """Equality filter in the wire shape the property's type requires.

    Unknown types fall back to the select shape. Blank values give None.
    """
    stripped = (value or "").strip()
    if not stripped:
        return None
    if info.type == "status":
        return {"property": info.name, "status": {"equals": stripped}}
    if info.type == "multi_select":
        return {"property": info.name, "multi_select": {"contains": stripped}}
    return {"property": info.name, "select": {"equals": stripped}}


def build_any_of_filter(info: PropertyInfo, values: Iterable[str | None]) -> dict[str, Any] | None:
    filters = [f for f in (build_equals_filter(info, value) for value in values) if f]
    if not filters:
        return None
    if len(filters) == 1:
        return filters[0]
    return {"or": filters}


def combine_filters(filters: Iterable[dict[str, Any] | None]) -> dict[str, Any] | None:
    present = [f for f in filters if f]
    if not present:
        return None
    if len(present) == 1:
        return present[0]
    return {"and": present}


class SchemaCache:
    """Read-through cache of database property schemas.

    Entries are written only on a miss and are never evicted. Re-deriving an
    entry yields the same value, so concurrent misses need no lock.
    """

    def __init__(self) -> None:
        self._entries: dict[str, SchemaIndex] = {}

    def __contains__(self, database_id: object) -> bool:
        return database_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, database_id: str, loader: DatabaseLoader) -> SchemaIndex:
        """Return the schema index, loading it on a miss.

        Raises:
            PartialDataDegraded: If the schema cannot be loaded. Failed loads
                are not cached.
        """
        cached = self._entries.get(database_id)
        if cached:
            return cached
        try:
            database = await loader(database_id)
        except SourceUnavailableError as exc:
            raise PartialDataDegraded(f"Schema for database {database_id} unavailable: {exc}") from exc
        index = build_property_index(database)
        if index:
            self._entries[database_id] = index
        return index

    async def find(self, database_id: str, name: str, loader: DatabaseLoader) -> PropertyInfo | None:
        """Look up one property by case-insensitive name."""
        index = await self.get(database_id, loader)
        return index.get(name.lower())
