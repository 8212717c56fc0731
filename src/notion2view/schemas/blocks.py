"""Typed block tree models and the raw-payload decoder."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Annotated, Any, Callable, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from notion2view.schemas.rich_text import Color, TextSpan, decode_spans

logger = logging.getLogger(__name__)


class BlockType(str, Enum):
    """Block type tags understood by the pipeline."""

    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_ITEM = "bulleted_list_item"
    NUMBERED_ITEM = "numbered_list_item"
    QUOTE = "quote"
    CODE = "code"
    IMAGE = "image"
    DIVIDER = "divider"
    CALLOUT = "callout"
    TOGGLE = "toggle"
    CHILD_PAGE = "child_page"
    CHILD_DATABASE = "child_database"
    LINK_TO_PAGE = "link_to_page"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    SYNCED_BLOCK = "synced_block"
    UNSUPPORTED = "unsupported"


class _Payload(BaseModel):
    model_config = ConfigDict(frozen=True)


class TextPayload(_Payload):
    kind: Literal["text"] = "text"
    rich_text: tuple[TextSpan, ...] = ()
    color: Color = Color.DEFAULT


class HeadingPayload(_Payload):
    kind: Literal["heading"] = "heading"
    rich_text: tuple[TextSpan, ...] = ()
    color: Color = Color.DEFAULT
    is_toggleable: bool = False


class CodePayload(_Payload):
    kind: Literal["code"] = "code"
    rich_text: tuple[TextSpan, ...] = ()
    language: str = "plain text"
    caption: tuple[TextSpan, ...] = ()


class ImagePayload(_Payload):
    kind: Literal["image"] = "image"
    source: Literal["external", "file"] | None = None
    url: str | None = None
    caption: tuple[TextSpan, ...] = ()


class CalloutPayload(_Payload):
    kind: Literal["callout"] = "callout"
    rich_text: tuple[TextSpan, ...] = ()
    color: Color = Color.DEFAULT
    icon: str | None = None


class ChildPagePayload(_Payload):
    kind: Literal["child_page"] = "child_page"
    title: str = ""


class ChildDatabasePayload(_Payload):
    kind: Literal["child_database"] = "child_database"
    title: str = ""


class LinkToPagePayload(_Payload):
    kind: Literal["link_to_page"] = "link_to_page"
    target: Literal["page", "database"] | None = None
    target_id: str | None = None


class SyncedBlockPayload(_Payload):
    kind: Literal["synced_block"] = "synced_block"
    synced_from: str | None = None


class EmptyPayload(_Payload):
    kind: Literal["empty"] = "empty"


class UnsupportedPayload(_Payload):
    kind: Literal["unsupported"] = "unsupported"
    raw_type: str = ""
    data: dict[str, Any] = Field(default_factory=dict)


BlockPayload = Annotated[
    Union[
        TextPayload,
        HeadingPayload,
        CodePayload,
        ImagePayload,
        CalloutPayload,
        ChildPagePayload,
        ChildDatabasePayload,
        LinkToPagePayload,
        SyncedBlockPayload,
        EmptyPayload,
        UnsupportedPayload,
    ],
    Field(discriminator="kind"),
]


class Block(BaseModel):
    """One node of a document tree.

    ``children`` is populated by the fetcher only after the node's subtree
    has been retrieved; ``has_children`` mirrors the store's flag.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    type: BlockType
    payload: BlockPayload
    has_children: bool = False
    children: tuple["Block", ...] = ()

    @property
    def rich_text(self) -> tuple[TextSpan, ...]:
        """The block's own inline text, empty for types without any."""
        if isinstance(self.payload, (TextPayload, HeadingPayload, CodePayload, CalloutPayload)):
            return self.payload.rich_text
        return ()

    def with_children(self, children: tuple["Block", ...] | list["Block"]) -> "Block":
        return self.model_copy(update={"children": tuple(children)})


class ListRun(BaseModel):
    """Consecutive list items of one kind, grouped for rendering."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["bulleted", "numbered"]
    items: tuple[Block, ...]


def _text(data: Mapping[str, Any]) -> TextPayload:
    return TextPayload(rich_text=decode_spans(data.get("rich_text")), color=Color.parse(data.get("color")))


def _heading(data: Mapping[str, Any]) -> HeadingPayload:
    return HeadingPayload(
        rich_text=decode_spans(data.get("rich_text")),
        color=Color.parse(data.get("color")),
        is_toggleable=bool(data.get("is_toggleable")),
    )


def _code(data: Mapping[str, Any]) -> CodePayload:
    return CodePayload(
        rich_text=decode_spans(data.get("rich_text")),
        language=data.get("language") or "plain text",
        caption=decode_spans(data.get("caption")),
    )


def _image(data: Mapping[str, Any]) -> ImagePayload:
    source = data.get("type")
    url = None
    if source in {"external", "file"} and isinstance(data.get(source), dict):
        url = data[source].get("url") or None
    return ImagePayload(
        source=source if source in {"external", "file"} else None,
        url=url,
        caption=decode_spans(data.get("caption")),
    )


def _callout(data: Mapping[str, Any]) -> CalloutPayload:
    icon = data.get("icon") if isinstance(data.get("icon"), dict) else {}
    icon_value = icon.get("emoji")
    if not icon_value and isinstance(icon.get("external"), dict):
        icon_value = icon["external"].get("url")
    return CalloutPayload(
        rich_text=decode_spans(data.get("rich_text")),
        color=Color.parse(data.get("color")),
        icon=icon_value or None,
    )


def _child_page(data: Mapping[str, Any]) -> ChildPagePayload:
    return ChildPagePayload(title=data.get("title") or "")


def _child_database(data: Mapping[str, Any]) -> ChildDatabasePayload:
    return ChildDatabasePayload(title=data.get("title") or "")


def _link_to_page(data: Mapping[str, Any]) -> LinkToPagePayload:
    link_type = data.get("type")
    if link_type == "page_id":
        return LinkToPagePayload(target="page", target_id=data.get("page_id"))
    if link_type == "database_id":
        return LinkToPagePayload(target="database", target_id=data.get("database_id"))
    return LinkToPagePayload()


def _synced_block(data: Mapping[str, Any]) -> SyncedBlockPayload:
    synced_from = data.get("synced_from") if isinstance(data.get("synced_from"), dict) else {}
    return SyncedBlockPayload(synced_from=synced_from.get("block_id"))


def _empty(data: Mapping[str, Any]) -> EmptyPayload:
    return EmptyPayload()


_PAYLOAD_DECODERS: dict[BlockType, Callable[[Mapping[str, Any]], Any]] = {
    BlockType.PARAGRAPH: _text,
    BlockType.HEADING_1: _heading,
    BlockType.HEADING_2: _heading,
    BlockType.HEADING_3: _heading,
    BlockType.BULLETED_ITEM: _text,
    BlockType.NUMBERED_ITEM: _text,
    BlockType.QUOTE: _text,
    BlockType.TOGGLE: _text,
    BlockType.CODE: _code,
    BlockType.IMAGE: _image,
    BlockType.DIVIDER: _empty,
    BlockType.CALLOUT: _callout,
    BlockType.CHILD_PAGE: _child_page,
    BlockType.CHILD_DATABASE: _child_database,
    BlockType.LINK_TO_PAGE: _link_to_page,
    BlockType.COLUMN_LIST: _empty,
    BlockType.COLUMN: _empty,
    BlockType.SYNCED_BLOCK: _synced_block,
}


def decode_block(raw: Mapping[str, Any], children: tuple[Block, ...] | list[Block] = ()) -> Block:
    """Decode one raw API block object into a :class:`Block`.

    Unknown type tags, and known tags whose payload fails validation, decode
    to ``unsupported`` carrying the raw tag and payload.
    """
    raw_type = str(raw.get("type") or "")
    data = raw.get(raw_type) if isinstance(raw.get(raw_type), dict) else {}
    common = {
        "id": str(raw.get("id") or ""),
        "has_children": bool(raw.get("has_children")),
        "children": tuple(children),
    }

    try:
        block_type = BlockType(raw_type)
    except ValueError:
        block_type = BlockType.UNSUPPORTED

    decoder = _PAYLOAD_DECODERS.get(block_type)
    if decoder is not None:
        try:
            return Block(type=block_type, payload=decoder(data), **common)
        except ValidationError as exc:
            logger.warning("Malformed %s block %s: %s", raw_type, common["id"], exc)

    return Block(
        type=BlockType.UNSUPPORTED,
        payload=UnsupportedPayload(raw_type=raw_type, data=dict(data)),
        **common,
    )
