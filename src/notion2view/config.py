"""Local configuration for notion2view."""

from __future__ import annotations

import os


DEFAULT_API_BASE = "https://api.notion.com/v1"
DEFAULT_API_VERSION = "2022-06-28"
DEFAULT_FETCH_TIMEOUT_S = 10.0
DEFAULT_FETCH_MAX_RETRIES = 2
DEFAULT_FETCH_BACKOFF_S = 0.5
DEFAULT_USER_AGENT = "notion2view/0.1"
DEFAULT_MAX_DEPTH = 25
DEFAULT_FETCH_CONCURRENCY = 1
DEFAULT_RENDER_DEADLINE_S = 60.0
DEFAULT_PAGE_SIZE = 10
DEFAULT_FORM_SUBMIT_URL = ""
DEFAULT_CATEGORY_TTL_SECONDS = 60 * 60

NOTION2VIEW_TOKEN = os.getenv("NOTION2VIEW_TOKEN", os.getenv("NOTION_TOKEN", ""))
NOTION2VIEW_API_BASE = os.getenv("NOTION2VIEW_API_BASE", DEFAULT_API_BASE).rstrip("/")
NOTION2VIEW_API_VERSION = os.getenv("NOTION2VIEW_API_VERSION", DEFAULT_API_VERSION)
NOTION2VIEW_FETCH_TIMEOUT_S = float(os.getenv("NOTION2VIEW_FETCH_TIMEOUT_S", str(DEFAULT_FETCH_TIMEOUT_S)))
NOTION2VIEW_FETCH_MAX_RETRIES = int(os.getenv("NOTION2VIEW_FETCH_MAX_RETRIES", str(DEFAULT_FETCH_MAX_RETRIES)))
NOTION2VIEW_FETCH_BACKOFF_S = float(os.getenv("NOTION2VIEW_FETCH_BACKOFF_S", str(DEFAULT_FETCH_BACKOFF_S)))
NOTION2VIEW_USER_AGENT = os.getenv("NOTION2VIEW_USER_AGENT", DEFAULT_USER_AGENT)

# Guard against pathological nesting in author content.
NOTION2VIEW_MAX_DEPTH = int(os.getenv("NOTION2VIEW_MAX_DEPTH", str(DEFAULT_MAX_DEPTH)))
NOTION2VIEW_FETCH_CONCURRENCY = int(os.getenv("NOTION2VIEW_FETCH_CONCURRENCY", str(DEFAULT_FETCH_CONCURRENCY)))
NOTION2VIEW_RENDER_DEADLINE_S = float(os.getenv("NOTION2VIEW_RENDER_DEADLINE_S", str(DEFAULT_RENDER_DEADLINE_S)))
NOTION2VIEW_PAGE_SIZE = int(os.getenv("NOTION2VIEW_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)))
# Zero or less disables the category index cache.
NOTION2VIEW_CATEGORY_TTL_SECONDS = float(
    os.getenv("NOTION2VIEW_CATEGORY_TTL_SECONDS", str(DEFAULT_CATEGORY_TTL_SECONDS))
)

NOTION_CONTENTS_DATABASE_ID = os.getenv("NOTION_CONTENTS_DATABASE_ID", "")
NOTION_EVENTS_DATABASE_ID = os.getenv("NOTION_EVENTS_DATABASE_ID", "")
NOTION_EVENT_THUMBNAIL_DATABASE_ID = os.getenv("NOTION_EVENT_THUMBNAIL_DATABASE_ID", "")
NOTION_FORM_DATABASE_IDS = {
    "DORAN_BOOK": os.getenv("NOTION_DORAN_BOOK_APPLY_DATABASE_ID", ""),
    "EVENT": os.getenv("NOTION_EVENT_APPLY_DATABASE_ID", ""),
    "VIVID": os.getenv("NOTION_VIVID_APPLY_DATABASE_ID", ""),
}
NOTION2VIEW_FORM_SUBMIT_URL = os.getenv("NOTION2VIEW_FORM_SUBMIT_URL", DEFAULT_FORM_SUBMIT_URL)
