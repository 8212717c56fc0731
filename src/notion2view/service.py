"""Service boundary used by the HTTP layer and other consumers."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Iterable, TypeVar

from notion2view.client import NotionClient
from notion2view.config import (
    NOTION2VIEW_CATEGORY_TTL_SECONDS,
    NOTION2VIEW_FETCH_CONCURRENCY,
    NOTION2VIEW_FORM_SUBMIT_URL,
    NOTION2VIEW_MAX_DEPTH,
    NOTION2VIEW_PAGE_SIZE,
    NOTION2VIEW_RENDER_DEADLINE_S,
    NOTION_CONTENTS_DATABASE_ID,
    NOTION_EVENT_THUMBNAIL_DATABASE_ID,
    NOTION_EVENTS_DATABASE_ID,
    NOTION_FORM_DATABASE_IDS,
)
from notion2view.exceptions import (
    ConfigurationError,
    InvalidReferenceError,
    NotFoundError,
    PartialDataDegraded,
    SourceUnavailableError,
)
from notion2view.fetch import BlockTreeFetcher, gather_in_order
from notion2view.flatten import flatten_blocks
from notion2view.ids import normalize_page_id
from notion2view.normalize import build_view
from notion2view.projection import (
    SchemaCache,
    build_any_of_filter,
    build_equals_filter,
    combine_filters,
    extract_page_title,
    project_content,
    project_event,
    project_event_thumbnail,
    project_form_schema,
)
from notion2view.schemas import (
    CategoryIndex,
    ContentEntry,
    ContentListing,
    DocumentContent,
    EventEntry,
    EventThumbnail,
    FormSchema,
    PropertyInfo,
    ViewNode,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Statuses shown publicly; STAGING rows are drafts.
VISIBLE_EVENT_STATUSES = ("OPEN", "PENDING", "FINISH")
DEFAULT_CONTENT_STATUSES = ("OPEN",)
DEFAULT_FORM_TYPE = "DORAN_BOOK"


def normalize_form_type(form_type: str) -> str:
    """Canonical key of a form type: stripped and upper-cased."""
    return form_type.strip().upper()


class NotionService:
    """Documents, listings, and form schemas backed by one :class:`NotionClient`.

    The service owns its :class:`SchemaCache`; pass one in to share it
    between services.
    """

    def __init__(
        self,
        client: NotionClient,
        *,
        schema_cache: SchemaCache | None = None,
        max_depth: int = NOTION2VIEW_MAX_DEPTH,
        concurrency: int = NOTION2VIEW_FETCH_CONCURRENCY,
        render_deadline_s: float | None = NOTION2VIEW_RENDER_DEADLINE_S,
        contents_database_id: str = NOTION_CONTENTS_DATABASE_ID,
        events_database_id: str = NOTION_EVENTS_DATABASE_ID,
        thumbnail_database_id: str = NOTION_EVENT_THUMBNAIL_DATABASE_ID,
        form_database_ids: dict[str, str] | None = None,
        form_submit_url: str = NOTION2VIEW_FORM_SUBMIT_URL,
        category_ttl_s: float = NOTION2VIEW_CATEGORY_TTL_SECONDS,
    ) -> None:
        self.client = client
        self.schema_cache = schema_cache if schema_cache is not None else SchemaCache()
        self.fetcher = BlockTreeFetcher(client, max_depth=max_depth, concurrency=concurrency)
        self.render_deadline_s = render_deadline_s if render_deadline_s and render_deadline_s > 0 else None
        self.contents_database_id = contents_database_id
        self.events_database_id = events_database_id
        self.thumbnail_database_id = thumbnail_database_id
        self.form_database_ids = dict(NOTION_FORM_DATABASE_IDS if form_database_ids is None else form_database_ids)
        self.form_submit_url = form_submit_url
        self.category_ttl_s = category_ttl_s
        self._category_index: tuple[float, CategoryIndex] | None = None

    # Documents

    async def get_document(self, reference: str) -> DocumentContent:
        """Fetch a page's title and flattened body.

        Args:
            reference: Page URL or bare id, dashed or compact.

        Raises:
            InvalidReferenceError: If no page id can be extracted.
            SourceUnavailableError: On transport failure or deadline expiry.
            DepthExceededError: If the page is nested too deeply.
        """
        page_id = normalize_page_id(reference)
        page, tree = await self._with_deadline(
            gather_in_order(self.client.retrieve_page(page_id), self.fetcher.fetch_document_tree(page_id)),
            what=f"document {page_id}",
        )
        blocks = flatten_blocks(tree)
        logger.info("Fetched document %s (%d blocks)", page_id, len(blocks))
        return DocumentContent(title=extract_page_title(page), blocks=blocks)

    async def render_document(
        self, reference: str, *, content_id: str | None = None
    ) -> tuple[DocumentContent, list[ViewNode]]:
        """Fetch a document and normalize it into view nodes."""
        document = await self.get_document(reference)
        return document, build_view(document.blocks, content_id=content_id)

    async def _with_deadline(self, aw: Awaitable[T], *, what: str) -> T:
        if self.render_deadline_s is None:
            return await aw
        try:
            return await asyncio.wait_for(aw, timeout=self.render_deadline_s)
        except asyncio.TimeoutError as exc:
            raise SourceUnavailableError(
                f"Fetching {what} did not finish within {self.render_deadline_s:g}s"
            ) from exc

    # Contents

    async def list_contents(
        self,
        *,
        status: Iterable[str] | None = DEFAULT_CONTENT_STATUSES,
        first_category: str | None = None,
        second_category: str | None = None,
        page_size: int = NOTION2VIEW_PAGE_SIZE,
        cursor: str | None = None,
    ) -> ContentListing:
        """Query one page of the contents catalog.

        Filters whose property the schema does not declare are skipped.
        """
        database_id = self._require(self.contents_database_id, "NOTION_CONTENTS_DATABASE_ID")
        filters: list[dict[str, Any] | None] = []

        statuses = [value for value in (status or []) if value and value.strip()]
        if statuses:
            info = await self._find_property(database_id, "status")
            if info is not None:
                filters.append(build_any_of_filter(info, statuses))

        for name, value in (("firstCategory", first_category), ("secondCategory", second_category)):
            if value and value.strip():
                info = await self._find_property(database_id, name)
                if info is not None:
                    filters.append(build_equals_filter(info, value))

        data = await self.client.query_database(
            database_id,
            filter=combine_filters(filters),
            start_cursor=cursor or None,
            page_size=page_size,
        )
        items = _project_all(project_content, data.get("results"))
        return ContentListing(
            items=items,
            has_more=bool(data.get("has_more")),
            next_cursor=data.get("next_cursor") or None,
        )

    async def list_categories(self) -> CategoryIndex:
        """Distinct categories across every catalog entry, sorted.

        The index is kept for ``category_ttl_s`` seconds. Failed builds are
        not cached.
        """
        database_id = self._require(self.contents_database_id, "NOTION_CONTENTS_DATABASE_ID")
        if self._category_index is not None and self.category_ttl_s > 0:
            built_at, cached = self._category_index
            if time.monotonic() - built_at < self.category_ttl_s:
                return cached

        entries = _project_all(project_content, await self._query_all(database_id))

        first: set[str] = set()
        second: dict[str, set[str]] = {}
        for entry in entries:
            if not entry.first_category:
                continue
            first.add(entry.first_category)
            if entry.second_category:
                second.setdefault(entry.first_category, set()).add(entry.second_category)
        index = CategoryIndex(
            first_categories=sorted(first),
            second_categories={key: sorted(values) for key, values in second.items()},
        )
        self._category_index = (time.monotonic(), index)
        return index

    async def browse_contents(self, **listing_params: Any) -> tuple[ContentListing, CategoryIndex]:
        """A listing page plus the category index, fetched concurrently.

        The category index is secondary: if it cannot be built, an empty
        index is returned alongside the listing.
        """
        listing, categories = await gather_in_order(
            self.list_contents(**listing_params),
            self._category_index_or_empty(),
        )
        return listing, categories

    async def _category_index_or_empty(self) -> CategoryIndex:
        try:
            return await self._load_category_index()
        except PartialDataDegraded as exc:
            logger.warning("Category index unavailable: %s", exc)
            return CategoryIndex()

    async def _load_category_index(self) -> CategoryIndex:
        try:
            return await self.list_categories()
        except SourceUnavailableError as exc:
            raise PartialDataDegraded(f"Could not build the category index: {exc}") from exc

    async def get_content(self, page_id: str) -> ContentEntry | None:
        """Catalog entry for a page, or None if the store has no such page."""
        page = await self._retrieve_page_or_none(page_id)
        return project_content(page) if page is not None else None

    # Events

    async def list_events(self) -> list[EventEntry]:
        database_id = self._require(self.events_database_id, "NOTION_EVENTS_DATABASE_ID")
        pages = await self._query_all(database_id, filter=await self._visible_status_filter(database_id))
        return [event for event in _project_all(project_event, pages) if event.status != "STAGING"]

    async def list_event_thumbnails(self) -> list[EventThumbnail]:
        """Visible event thumbnails, sorted by their ``order`` property."""
        database_id = self._require(self.thumbnail_database_id, "NOTION_EVENT_THUMBNAIL_DATABASE_ID")
        pages = await self._query_all(database_id, filter=await self._visible_status_filter(database_id))
        thumbnails = [
            thumb for thumb in _project_all(project_event_thumbnail, pages) if thumb.status != "STAGING"
        ]
        return sorted(thumbnails, key=lambda thumb: thumb.order)

    async def get_event(self, page_id: str) -> EventEntry | None:
        """An event by page id; missing and STAGING events both give None."""
        page = await self._retrieve_page_or_none(page_id)
        event = project_event(page) if page is not None else None
        if event is None or event.status == "STAGING":
            return None
        return event

    async def _visible_status_filter(self, database_id: str) -> dict[str, Any] | None:
        info = await self._find_property(database_id, "status")
        if info is None:
            return None
        return build_any_of_filter(info, VISIBLE_EVENT_STATUSES)

    # Forms

    async def get_form_schema(self, form_type: str = DEFAULT_FORM_TYPE) -> FormSchema:
        """Describe the fields of a form collected into a database.

        Raises:
            InvalidReferenceError: If ``form_type`` is not a known form.
            ConfigurationError: If the form's database id is not configured.
        """
        key = normalize_form_type(form_type)
        if key not in self.form_database_ids:
            raise InvalidReferenceError(
                f"Unknown form type {form_type!r}; expected one of {', '.join(sorted(self.form_database_ids))}"
            )
        database_id = self._require(self.form_database_ids[key], f"NOTION_{key}_APPLY_DATABASE_ID")
        database = await self.client.retrieve_database(database_id)
        return project_form_schema(database, submit_url=self.form_submit_url, database_id=database_id)

    # Helpers

    @staticmethod
    def _require(value: str, env_name: str) -> str:
        if not value:
            raise ConfigurationError(f"{env_name} is not set")
        return value

    async def _find_property(self, database_id: str, name: str) -> PropertyInfo | None:
        try:
            return await self.schema_cache.find(database_id, name, self.client.retrieve_database)
        except PartialDataDegraded as exc:
            logger.warning("Skipping %s filter: %s", name, exc)
            return None

    async def _retrieve_page_or_none(self, page_id: str) -> dict[str, Any] | None:
        try:
            return await self.client.retrieve_page(normalize_page_id(page_id))
        except NotFoundError:
            return None

    async def _query_all(self, database_id: str, *, filter: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        rows: list[dict[str, Any]] = []
        cursor: str | None = None
        while True:
            data = await self.client.query_database(database_id, filter=filter, start_cursor=cursor)
            rows.extend(row for row in data.get("results") or [] if isinstance(row, dict))
            cursor = data.get("next_cursor") or None
            if cursor is None:
                return rows


def _project_all(projector: Callable[[object], T | None], rows: object) -> list[T]:
    if not isinstance(rows, list):
        return []
    return [record for record in map(projector, rows) if record is not None]
