"""Normalize document references into the store's identifier formats.

The store addresses objects by a 36-character hyphenated UUID, while the
application's routes carry the 32-character compact form. Both are accepted
wherever a reference enters the system.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qs, quote, urlsplit

from notion2view.exceptions import InvalidReferenceError

_DASHED_ID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)
_COMPACT_ID_RE = re.compile(r"^[0-9a-f]{32}$", re.IGNORECASE)
_TRAILING_ID_RE = re.compile(
    r"(?:^|[^0-9a-f])("
    r"[0-9a-f]{32}"
    r"|[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
    r")$",
    re.IGNORECASE,
)
_ALLOWED_HOST_SUFFIXES = ("notion.so", "notion.site")

VIEWER_ROUTE = "/notion"


def looks_like_page_id(value: str) -> bool:
    """Return True for a bare id, optionally prefixed with a single slash."""
    candidate = value.strip()
    if candidate.startswith("/"):
        candidate = candidate[1:]
    return bool(_DASHED_ID_RE.match(candidate) or _COMPACT_ID_RE.match(candidate))


def compact_page_id(page_id: str) -> str:
    """Return the 32-character routing form of an id."""
    return page_id.strip().replace("-", "").lower()


def dash_page_id(page_id: str) -> str:
    """Return the 36-character canonical form of an id."""
    compact = compact_page_id(page_id)
    if not _COMPACT_ID_RE.match(compact):
        raise InvalidReferenceError(f"Not a document id: {page_id!r}")
    return f"{compact[:8]}-{compact[8:12]}-{compact[12:16]}-{compact[16:20]}-{compact[20:]}"


def extract_page_id(reference: str | None) -> str | None:
    """Extract a page id from a bare id or a store URL.

    Supported forms:
    - ``{id}`` or ``/{id}`` in dashed or compact form
    - ``https://www.notion.so/{id}``
    - ``https://www.notion.so/Page-Title-{id}``
    - ``https://team.notion.site/Page-Title-{id}?pvs=4``
    - ``https://www.notion.so/workspace/Page?p={id}``

    Returns:
        The canonical 36-character id, or None when nothing matches.
    """
    if not reference:
        return None
    text = reference.strip()
    if looks_like_page_id(text):
        return dash_page_id(text.lstrip("/"))

    parsed = urlsplit(text)
    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        return None
    if parsed.username or parsed.password:
        return None
    host = parsed.hostname.lower()
    if not any(host == suffix or host.endswith(f".{suffix}") for suffix in _ALLOWED_HOST_SUFFIXES):
        return None

    peek = parse_qs(parsed.query).get("p")
    if peek and looks_like_page_id(peek[0]):
        return dash_page_id(peek[0])

    segment = parsed.path.rstrip("/").rsplit("/", 1)[-1]
    match = _TRAILING_ID_RE.search(segment)
    if match:
        return dash_page_id(match.group(1))
    return None


def normalize_page_id(reference: str) -> str:
    """Like :func:`extract_page_id` but raise on failure.

    Raises:
        InvalidReferenceError: If no id can be extracted.
    """
    page_id = extract_page_id(reference)
    if page_id is None:
        raise InvalidReferenceError(f"Cannot resolve a document id from {reference!r}")
    return page_id


def to_viewer_href(page_ref: str) -> str:
    """Route an internal page reference to the application's document viewer."""
    return f"{VIEWER_ROUTE}?pageUrl={quote(page_ref, safe='')}"


def to_content_href(content_id: str, page_id: str) -> str:
    """Route a page nested under a content entry."""
    return f"/contents/{content_id}/notion/{compact_page_id(page_id)}"
