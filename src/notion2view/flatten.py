"""Linearize a block forest for rendering."""

from __future__ import annotations

from typing import Iterable

from notion2view.schemas import Block, BlockType, ListRun

# Types whose children stay nested under them.
CONTAINER_TYPES = frozenset(
    {
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
)

_LIST_KINDS = {
    BlockType.BULLETED_ITEM: "bulleted",
    BlockType.NUMBERED_ITEM: "numbered",
}


def is_container(block: Block) -> bool:
    return block.type in CONTAINER_TYPES


def flatten_blocks(blocks: Iterable[Block]) -> list[Block]:
    """Splice non-container children into the parent sequence.

    Container blocks are emitted untouched. Any other block is emitted with
    its ``children`` cleared, immediately followed by its recursively
    flattened children.
    """
    flattened: list[Block] = []
    for block in blocks:
        if is_container(block) or not block.children:
            flattened.append(block)
            continue
        flattened.append(block.with_children(()))
        flattened.extend(flatten_blocks(block.children))
    return flattened


def group_list_runs(blocks: Iterable[Block]) -> list[Block | ListRun]:
    """Group consecutive list items of the same kind into runs."""
    grouped: list[Block | ListRun] = []
    run_kind: str | None = None
    run_items: list[Block] = []

    def close_run() -> None:
        nonlocal run_kind, run_items
        if run_kind is not None:
            grouped.append(ListRun(kind=run_kind, items=tuple(run_items)))
        run_kind, run_items = None, []

    for block in blocks:
        kind = _LIST_KINDS.get(block.type)
        if kind is None:
            close_run()
            grouped.append(block)
            continue
        if kind != run_kind:
            close_run()
            run_kind = kind
        run_items.append(block)
    close_run()
    return grouped
