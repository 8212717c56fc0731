"""Tests for block decoding."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from notion2view.schemas import Block, BlockType, Color, TextSpan, decode_block
from notion2view.schemas.blocks import (
    CalloutPayload,
    ChildDatabasePayload,
    ChildPagePayload,
    CodePayload,
    EmptyPayload,
    HeadingPayload,
    ImagePayload,
    LinkToPagePayload,
    SyncedBlockPayload,
    TextPayload,
    UnsupportedPayload,
)

from factories import raw_block, raw_callout, raw_image, raw_paragraph, span


class TestDecodeBlock:
    """Tests for decode_block."""

    def test_paragraph(self) -> None:
        block = decode_block(raw_paragraph("p1", "Hello"))

        assert block.id == "p1"
        assert block.type is BlockType.PARAGRAPH
        assert isinstance(block.payload, TextPayload)
        assert block.rich_text == (TextSpan(text="Hello"),)
        assert block.children == ()

    @pytest.mark.parametrize(
        "block_type",
        ["bulleted_list_item", "numbered_list_item", "quote", "toggle"],
    )
    def test_text_types(self, block_type: str) -> None:
        block = decode_block(raw_block("b", block_type, rich_text=[span("item")], color="blue"))

        assert block.type.value == block_type
        assert isinstance(block.payload, TextPayload)
        assert block.payload.color is Color.BLUE

    def test_heading(self) -> None:
        block = decode_block(raw_block("h", "heading_2", rich_text=[span("Title")], is_toggleable=True))

        assert block.type is BlockType.HEADING_2
        assert isinstance(block.payload, HeadingPayload)
        assert block.payload.is_toggleable is True

    def test_code(self) -> None:
        block = decode_block(raw_block("c", "code", rich_text=[span("print(1)")], language="python", caption=[]))

        assert isinstance(block.payload, CodePayload)
        assert block.payload.language == "python"

    def test_code_defaults_language(self) -> None:
        block = decode_block(raw_block("c", "code", rich_text=[]))

        assert block.payload.language == "plain text"

    def test_external_image(self) -> None:
        block = decode_block(raw_image("i", "https://img.example/a.png", caption="cap"))

        assert isinstance(block.payload, ImagePayload)
        assert block.payload.source == "external"
        assert block.payload.url == "https://img.example/a.png"
        assert block.payload.caption == (TextSpan(text="cap"),)
        assert block.rich_text == ()

    def test_hosted_image(self) -> None:
        block = decode_block(
            raw_block("i", "image", type="file", file={"url": "https://s3.example/x.png", "expiry_time": "..."})
        )

        assert block.payload.source == "file"
        assert block.payload.url == "https://s3.example/x.png"

    def test_image_without_url(self) -> None:
        block = decode_block(raw_block("i", "image", type="external", external={}))

        assert block.payload.url is None

    def test_callout(self) -> None:
        block = decode_block(raw_callout("co", "promo", color="green_background"))

        assert isinstance(block.payload, CalloutPayload)
        assert block.payload.color is Color.GREEN_BACKGROUND
        assert block.payload.icon == "💡"
        assert block.has_children is True

    def test_divider_and_columns_are_empty(self) -> None:
        for block_type in ("divider", "column_list", "column"):
            assert isinstance(decode_block(raw_block("d", block_type)).payload, EmptyPayload)

    def test_child_page_and_database(self) -> None:
        page = decode_block(raw_block("cp", "child_page", title="Sub page"))
        database = decode_block(raw_block("cd", "child_database", title="Table"))

        assert page.payload == ChildPagePayload(title="Sub page")
        assert database.payload == ChildDatabasePayload(title="Table")

    def test_link_to_page(self) -> None:
        block = decode_block(raw_block("l", "link_to_page", type="page_id", page_id="target"))

        assert block.payload == LinkToPagePayload(target="page", target_id="target")

    def test_link_to_database(self) -> None:
        block = decode_block(raw_block("l", "link_to_page", type="database_id", database_id="db"))

        assert block.payload == LinkToPagePayload(target="database", target_id="db")

    def test_synced_block(self) -> None:
        original = decode_block(raw_block("s", "synced_block", synced_from=None))
        mirror = decode_block(raw_block("s2", "synced_block", synced_from={"type": "block_id", "block_id": "s"}))

        assert original.payload == SyncedBlockPayload(synced_from=None)
        assert mirror.payload == SyncedBlockPayload(synced_from="s")

    def test_unknown_type_is_unsupported(self) -> None:
        block = decode_block(raw_block("t", "table_of_contents", color="gray"))

        assert block.type is BlockType.UNSUPPORTED
        assert block.payload == UnsupportedPayload(raw_type="table_of_contents", data={"color": "gray"})

    def test_malformed_known_type_is_unsupported(self) -> None:
        """A known type whose payload fails validation degrades instead of raising."""
        block = decode_block(raw_block("c", "code", rich_text=[], language=["not", "a", "string"]))

        assert block.type is BlockType.UNSUPPORTED
        assert block.payload.raw_type == "code"

    def test_missing_payload_decodes_with_defaults(self) -> None:
        block = decode_block({"id": "p", "type": "paragraph", "has_children": False})

        assert block.type is BlockType.PARAGRAPH
        assert block.rich_text == ()

    def test_children_attached(self) -> None:
        child = decode_block(raw_paragraph("c", "child"))
        parent = decode_block(raw_paragraph("p", "parent", has_children=True), [child])

        assert parent.children == (child,)


class TestBlockModel:
    """Tests for the Block model."""

    def test_is_frozen(self) -> None:
        block = decode_block(raw_paragraph("p", "x"))

        with pytest.raises(ValidationError):
            block.id = "other"

    def test_with_children_returns_copy(self) -> None:
        child = decode_block(raw_paragraph("c"))
        block = decode_block(raw_paragraph("p"))

        updated = block.with_children([child])

        assert updated.children == (child,)
        assert block.children == ()

    def test_round_trips_through_json(self) -> None:
        """The payload union is discriminated, so serialized blocks reload intact."""
        block = decode_block(raw_callout("co", "note"), [decode_block(raw_image("i", "https://x/y.png"))])

        assert Block.model_validate_json(block.model_dump_json()) == block
