"""Tests for tree flattening."""

from __future__ import annotations

import random

import pytest

from notion2view.flatten import CONTAINER_TYPES, flatten_blocks, group_list_runs
from notion2view.schemas import Block, BlockType, ListRun, decode_block

from factories import raw_block, raw_callout, raw_paragraph


def paragraph(block_id: str, *children: Block) -> Block:
    return decode_block(raw_paragraph(block_id, block_id, has_children=bool(children)), children)


def node(block_type: str, block_id: str, *children: Block) -> Block:
    return decode_block(raw_block(block_id, block_type, has_children=bool(children), rich_text=[]), children)


def preorder_ids(blocks: list[Block] | tuple[Block, ...]) -> list[str]:
    """Pre-order walk that does not descend into containers."""
    ids: list[str] = []
    for block in blocks:
        ids.append(block.id)
        if block.type not in CONTAINER_TYPES:
            ids.extend(preorder_ids(block.children))
    return ids


def random_forest(rng: random.Random, depth: int = 0, counter: list[int] | None = None) -> list[Block]:
    counter = counter if counter is not None else [0]
    types = ["paragraph", "bulleted_list_item", "heading_1", "callout", "toggle", "quote", "column_list", "code"]
    forest = []
    for _ in range(rng.randint(0, 4 if depth < 3 else 0)):
        counter[0] += 1
        children = random_forest(rng, depth + 1, counter)
        forest.append(node(rng.choice(types), f"b{counter[0]}", *children))
    return forest


class TestFlattenBlocks:
    """Tests for flatten_blocks."""

    def test_leaf_blocks_unchanged(self) -> None:
        blocks = [paragraph("a"), paragraph("b")]

        assert flatten_blocks(blocks) == blocks

    def test_non_container_children_are_spliced(self) -> None:
        tree = [paragraph("p", paragraph("c1", paragraph("g1")), paragraph("c2")), paragraph("after")]

        flat = flatten_blocks(tree)

        assert [block.id for block in flat] == ["p", "c1", "g1", "c2", "after"]
        assert all(block.children == () for block in flat)

    def test_spliced_block_keeps_has_children_flag(self) -> None:
        (parent, _) = flatten_blocks([paragraph("p", paragraph("c"))])

        assert parent.children == ()
        assert parent.has_children is True

    @pytest.mark.parametrize("block_type", sorted(t.value for t in CONTAINER_TYPES))
    def test_containers_keep_children(self, block_type: str) -> None:
        container = node(block_type, "box", paragraph("inner", paragraph("deep")))

        (flat,) = flatten_blocks([container])

        assert flat == container
        assert flat.children[0].children[0].id == "deep"

    def test_container_nested_in_paragraph(self) -> None:
        callout = decode_block(raw_callout("co", "note"), [paragraph("in")])
        tree = [paragraph("p", callout, paragraph("x"))]

        flat = flatten_blocks(tree)

        assert [block.id for block in flat] == ["p", "co", "x"]
        assert flat[1].children == callout.children

    def test_container_allow_list(self) -> None:
        assert CONTAINER_TYPES == {
            BlockType.CALLOUT,
            BlockType.TOGGLE,
            BlockType.QUOTE,
            BlockType.COLUMN_LIST,
            BlockType.COLUMN,
            BlockType.SYNCED_BLOCK,
            BlockType.CHILD_PAGE,
            BlockType.CHILD_DATABASE,
            BlockType.LINK_TO_PAGE,
        }

    def test_empty_forest(self) -> None:
        assert flatten_blocks([]) == []


class TestFlattenProperties:
    """Order preservation, idempotence and container opacity on random forests."""

    @pytest.mark.parametrize("seed", range(25))
    def test_order_preservation(self, seed: int) -> None:
        forest = random_forest(random.Random(seed))

        assert [block.id for block in flatten_blocks(forest)] == preorder_ids(forest)

    @pytest.mark.parametrize("seed", range(25))
    def test_idempotence(self, seed: int) -> None:
        flat = flatten_blocks(random_forest(random.Random(seed)))

        assert flatten_blocks(flat) == flat

    @pytest.mark.parametrize("seed", range(25))
    def test_container_opacity(self, seed: int) -> None:
        forest = random_forest(random.Random(seed))

        def containers(blocks: list[Block] | tuple[Block, ...]) -> dict[str, Block]:
            found: dict[str, Block] = {}
            for block in blocks:
                if block.type in CONTAINER_TYPES:
                    found[block.id] = block
                else:
                    found.update(containers(block.children))
            return found

        before = containers(forest)
        after = {block.id: block for block in flatten_blocks(forest) if block.type in CONTAINER_TYPES}

        assert after.keys() == before.keys()
        for block_id, block in after.items():
            assert block.children == before[block_id].children


class TestGroupListRuns:
    """Tests for group_list_runs."""

    def test_groups_consecutive_items_by_kind(self) -> None:
        blocks = [
            paragraph("intro"),
            node("bulleted_list_item", "b1"),
            node("bulleted_list_item", "b2"),
            node("numbered_list_item", "n1"),
            paragraph("outro"),
            node("bulleted_list_item", "b3"),
        ]

        grouped = group_list_runs(blocks)

        assert [type(item).__name__ for item in grouped] == ["Block", "ListRun", "ListRun", "Block", "ListRun"]
        assert isinstance(grouped[1], ListRun)
        assert grouped[1].kind == "bulleted"
        assert [item.id for item in grouped[1].items] == ["b1", "b2"]
        assert grouped[2].kind == "numbered"
        assert [item.id for item in grouped[4].items] == ["b3"]

    def test_no_lists(self) -> None:
        blocks = [paragraph("a"), paragraph("b")]

        assert group_list_runs(blocks) == blocks
