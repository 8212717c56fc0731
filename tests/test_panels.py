"""Tests for promo and gallery panel parsing."""

from __future__ import annotations

import pytest

from notion2view.panels import (
    collect_descendants,
    extract_panel_images,
    find_first_url,
    normalize_click_href,
    parse_key_value_line,
    parse_promo,
    strip_list_prefix,
)
from notion2view.schemas import Block, PromoCard, PromoImage, decode_block

from factories import COMPACT_PAGE_ID, PAGE_ID, raw_block, raw_callout, raw_image, raw_paragraph, span


def panel(*children: Block) -> Block:
    return decode_block(raw_callout("promo", "promo", color="green_background"), children)


def text(block_id: str, value: str) -> Block:
    return decode_block(raw_paragraph(block_id, value))


def bullet(block_id: str, value: str, *children: Block) -> Block:
    return decode_block(
        raw_block(block_id, "bulleted_list_item", has_children=bool(children), rich_text=[span(value)]),
        children,
    )


def image(block_id: str, url: str, caption: str = "") -> Block:
    return decode_block(raw_image(block_id, url, caption))


class TestHelpers:
    """Tests for the line-level helpers."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("- title: x", "title: x"),
            ("* title: x", "title: x"),
            ("1. title: x", "title: x"),
            ("  12. title: x ", "title: x"),
            ("title: x", "title: x"),
            ("-title: x", "-title: x"),
        ],
    )
    def test_strip_list_prefix(self, raw: str, expected: str) -> None:
        assert strip_list_prefix(raw) == expected

    def test_key_value_splits_on_first_colon(self) -> None:
        assert parse_key_value_line("- URL: https://example.com/a") == ("url", "https://example.com/a")

    @pytest.mark.parametrize("raw", ["no colon here", ": value only", "   "])
    def test_key_value_rejects_lines_without_key(self, raw: str) -> None:
        assert parse_key_value_line(raw) is None

    def test_find_first_url_trims_trailing_punctuation(self) -> None:
        assert find_first_url("see (https://example.com/x), then") == "https://example.com/x"
        assert find_first_url("go to https://a.example/b.") == "https://a.example/b"

    def test_find_first_url_none(self) -> None:
        assert find_first_url("no links") is None

    def test_collect_descendants_is_preorder(self) -> None:
        tree = [bullet("a", "a", bullet("a1", "a1", text("a1x", "x"))), text("b", "b")]

        assert [block.id for block in collect_descendants(tree)] == ["a", "a1", "a1x", "b"]


class TestNormalizeClickHref:
    def test_external_passes_through(self) -> None:
        assert normalize_click_href(" https://example.com ") == "https://example.com"

    def test_page_id_with_content_context(self) -> None:
        assert normalize_click_href(PAGE_ID, "c1") == f"/contents/c1/notion/{COMPACT_PAGE_ID}"

    def test_notion_url_with_content_context(self) -> None:
        url = f"https://www.notion.so/Sale-{COMPACT_PAGE_ID}"

        assert normalize_click_href(url, "c1") == f"/contents/c1/notion/{COMPACT_PAGE_ID}"

    def test_page_id_without_context_goes_to_viewer(self) -> None:
        assert normalize_click_href(COMPACT_PAGE_ID) == f"/notion?pageUrl={COMPACT_PAGE_ID}"


class TestParsePromo:
    """Tests for parse_promo."""

    def test_two_images_no_metadata(self) -> None:
        """Defaults apply and nothing raises when only images are present."""
        card = parse_promo(panel(image("i1", "https://img/1.png"), image("i2", "https://img/2.png")))

        assert card.layout_type == "banner"
        assert card.aspect_ratio == "vertical"
        assert [img.url for img in card.images] == ["https://img/1.png", "https://img/2.png"]
        assert all(img.click_href is None for img in card.images)
        assert card.title is None
        assert card.description is None
        assert card.cta_href is None

    def test_title_from_list_item(self) -> None:
        card = parse_promo(panel(bullet("t", "- Title: Summer Sale")))

        assert card.title == "Summer Sale"

    def test_url_scanned_for_embedded_link(self) -> None:
        card = parse_promo(panel(text("u", "url: check https://example.com/x now")))

        assert card.cta_href == "https://example.com/x"

    def test_url_falls_back_to_raw_value(self) -> None:
        card = parse_promo(panel(text("u", "url: /events/summer")))

        assert card.cta_href == "/events/summer"

    def test_full_card(self) -> None:
        card = parse_promo(
            panel(
                text("t", "title: Summer Sale"),
                text("d", "description: Two weeks only"),
                text("l", "layoutType: Carousel please"),
                text("a", "aspectRatio: horizontal"),
                image("i1", "https://img/1.png", caption="https://shop.example/1"),
                image("i2", "https://img/2.png"),
            )
        )

        assert card == PromoCard(
            title="Summer Sale",
            description="Two weeks only",
            layout_type="carousel",
            aspect_ratio="horizontal",
            images=[
                PromoImage(url="https://img/1.png", click_href="https://shop.example/1", alt="https://shop.example/1"),
                PromoImage(url="https://img/2.png", click_href=None, alt="promo-image"),
            ],
        )
        assert card.layout == "gallery"

    def test_first_occurrence_wins(self) -> None:
        card = parse_promo(panel(text("a", "title: First"), text("b", "title: Second")))

        assert card.title == "First"

    def test_empty_value_does_not_claim_key(self) -> None:
        card = parse_promo(panel(text("a", "title:"), text("b", "title: Real")))

        assert card.title == "Real"

    def test_unrecognized_layout_values_keep_defaults(self) -> None:
        card = parse_promo(panel(text("l", "layoutType: grid"), text("a", "aspectRatio: square")))

        assert card.layout_type == "banner"
        assert card.aspect_ratio == "vertical"

    def test_metadata_nested_in_list_items(self) -> None:
        card = parse_promo(panel(bullet("wrap", "meta", text("t", "title: Deep"), image("i", "https://img/d.png"))))

        assert card.title == "Deep"
        assert [img.url for img in card.images] == ["https://img/d.png"]

    def test_unknown_keys_and_plain_lines_ignored(self) -> None:
        card = parse_promo(panel(text("x", "color: red"), text("y", "just words"), text("z", "")))

        assert card == PromoCard()

    def test_caption_page_id_routes_under_content(self) -> None:
        card = parse_promo(panel(image("i", "https://img/1.png", caption=COMPACT_PAGE_ID)), content_id="c9")

        assert card.images[0].click_href == f"/contents/c9/notion/{COMPACT_PAGE_ID}"

    def test_cta_notion_link_routes_under_content(self) -> None:
        card = parse_promo(
            panel(text("u", f"url: https://www.notion.so/Detail-{COMPACT_PAGE_ID}")), content_id="c9"
        )

        assert card.cta_href == f"/contents/c9/notion/{COMPACT_PAGE_ID}"

    def test_caption_without_link_is_alt_only(self) -> None:
        card = parse_promo(panel(image("i", "https://img/1.png", caption="A beach")))

        assert card.images[0].click_href is None
        assert card.images[0].alt == "A beach"

    def test_images_without_url_are_skipped(self) -> None:
        broken = decode_block(raw_block("i", "image", type="file", file={}))

        assert parse_promo(panel(broken)).images == []

    def test_panel_without_children(self) -> None:
        assert parse_promo(panel()) == PromoCard()


class TestPromoLayout:
    @pytest.mark.parametrize(
        ("count", "layout_type", "expected"),
        [(0, "banner", "placeholder"), (1, "carousel", "single"), (3, "carousel", "gallery"), (3, "banner", "strip")],
    )
    def test_layout(self, count: int, layout_type: str, expected: str) -> None:
        card = PromoCard(layout_type=layout_type, images=[PromoImage(url=f"u{i}") for i in range(count)])

        assert card.layout == expected


class TestExtractPanelImages:
    def test_collects_nested_images_in_order(self) -> None:
        gallery = decode_block(
            raw_callout("g", "썸네일"),
            [image("a", "https://img/a.png"), bullet("b", "x", image("c", "https://img/c.png")), text("t", "x")],
        )

        assert extract_panel_images(gallery) == ["https://img/a.png", "https://img/c.png"]
