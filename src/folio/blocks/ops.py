"""Pure operations over an ordered block sequence.

Every function takes the current sequence (a tuple of Blocks) and returns
the next one; nothing here touches a rendering surface. All operations are
total: an id that is not in the sequence leaves it unchanged, so late UI
callbacks referring to an already-removed block are harmless.

Two invariants hold for every returned sequence:
- it is never empty (removing the last block yields a fresh empty paragraph)
- ids are unique
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from ..errors import ValidationError
from .models import (
    Block,
    BlockType,
    CalloutMetadata,
    CheckboxMetadata,
    ListMetadata,
    default_metadata,
    new_block_id,
)

logger = logging.getLogger(__name__)

Blocks = tuple[Block, ...]

_UPDATABLE_FIELDS = frozenset({"type", "content", "metadata"})


@dataclass(frozen=True)
class MergeResult:
    """Where the caret belongs after a merge: end of the previous block's old text."""

    focus_id: str
    caret: int


def index_of(blocks: Sequence[Block], block_id: str) -> int:
    """Position of ``block_id`` in the sequence, or -1."""
    for i, block in enumerate(blocks):
        if block.id == block_id:
            return i
    return -1


def fresh_document() -> Blocks:
    """A store's starting point: one empty paragraph."""
    return (Block.create(BlockType.PARAGRAPH),)


def ensure_not_empty(blocks: Iterable[Block]) -> Blocks:
    blocks = tuple(blocks)
    return blocks if blocks else fresh_document()


# =============================================================================
# Create / Update / Delete
# =============================================================================


def insert_after(blocks: Blocks, after_id: str | None, block: Block) -> Blocks:
    """Insert ``block`` right after ``after_id``.

    An unknown ``after_id`` inserts at the start of the document.
    """
    if index_of(blocks, block.id) != -1:
        logger.warning("Refusing to insert duplicate block id %s", block.id)
        return blocks
    index = index_of(blocks, after_id) if after_id else -1
    return blocks[: index + 1] + (block,) + blocks[index + 1 :]


def update(blocks: Blocks, block_id: str, **fields: Any) -> Blocks:
    """Merge ``fields`` (type, content, metadata) into the matching block.

    Metadata that does not fit the resulting type is replaced with that
    type's default.
    """
    unknown = set(fields) - _UPDATABLE_FIELDS
    if unknown:
        raise ValidationError("Unknown block fields", field="fields", value=sorted(unknown))

    index = index_of(blocks, block_id)
    if index == -1:
        return blocks

    if "type" in fields:
        fields["type"] = BlockType.parse(fields["type"])

    updated = dataclasses.replace(blocks[index], **fields)
    return blocks[:index] + (updated,) + blocks[index + 1 :]


def delete(blocks: Blocks, block_id: str) -> Blocks:
    """Remove a block; deleting the only block leaves a fresh empty paragraph."""
    index = index_of(blocks, block_id)
    if index == -1:
        return blocks
    if len(blocks) == 1:
        return fresh_document()
    return blocks[:index] + blocks[index + 1 :]


def clear_all() -> Blocks:
    """Replace the whole document with a single empty paragraph."""
    return fresh_document()


def retype(blocks: Blocks, block_id: str, new_type: BlockType | str) -> Blocks:
    """Change a block's type and reset its metadata to the new type's default."""
    new_type = BlockType.parse(new_type)
    return update(blocks, block_id, type=new_type, metadata=default_metadata(new_type))


# =============================================================================
# Split / Merge
# =============================================================================


def split(
    blocks: Blocks,
    block_id: str,
    offset: int,
    full_text: str,
    new_id: str | None = None,
) -> tuple[Blocks, str | None]:
    """Split a text block at ``offset`` of ``full_text``.

    The block keeps ``full_text[:offset]``; a new block with the rest is
    inserted right after it. Checkbox and callout blocks continue as their
    own type (a new checkbox starts unchecked, a new callout keeps the
    source's variant); anything else continues as a paragraph.

    Returns the new sequence and the id of the new block, or None when
    nothing was split.
    """
    index = index_of(blocks, block_id)
    if index == -1:
        return blocks, None

    block = blocks[index]
    if not block.is_text():
        return blocks, None

    offset = max(0, min(offset, len(full_text)))
    before, after = full_text[:offset], full_text[offset:]

    if block.type == BlockType.CHECKBOX:
        new_block = Block.create(BlockType.CHECKBOX, content=after, metadata=CheckboxMetadata(), id=new_id)
    elif block.type == BlockType.CALLOUT:
        metadata = block.metadata if isinstance(block.metadata, CalloutMetadata) else None
        new_block = Block.create(BlockType.CALLOUT, content=after, metadata=metadata, id=new_id)
    else:
        new_block = Block.create(BlockType.PARAGRAPH, content=after, id=new_id)

    if index_of(blocks, new_block.id) != -1:
        logger.warning("Split would reuse existing id %s; ignoring", new_block.id)
        return blocks, None

    head = dataclasses.replace(block, content=before)
    return blocks[:index] + (head, new_block) + blocks[index + 1 :], new_block.id


def merge(blocks: Blocks, block_id: str) -> tuple[Blocks, MergeResult | None]:
    """Fold a block into the one before it.

    The caret target is always reported for any block that has a
    predecessor, even when the pair cannot be merged because one of them
    is not a text block; callers use it to refocus.
    """
    index = index_of(blocks, block_id)
    if index <= 0:
        return blocks, None

    previous, current = blocks[index - 1], blocks[index]
    result = MergeResult(focus_id=previous.id, caret=len(previous.content))

    if not (previous.is_text() and current.is_text()):
        return blocks, result

    merged = dataclasses.replace(previous, content=previous.content + current.content)
    return blocks[: index - 1] + (merged,) + blocks[index + 1 :], result


# =============================================================================
# Move / Reorder / Replace
# =============================================================================


def move(blocks: Blocks, block_id: str, direction: str) -> Blocks:
    """Swap a block with its neighbour; no-op at either end."""
    if direction not in ("up", "down"):
        raise ValidationError("Unknown move direction", field="direction", value=direction)

    index = index_of(blocks, block_id)
    if index == -1:
        return blocks

    target = index - 1 if direction == "up" else index + 1
    if target < 0 or target >= len(blocks):
        return blocks

    reordered = list(blocks)
    reordered[index], reordered[target] = reordered[target], reordered[index]
    return tuple(reordered)


def reorder(blocks: Blocks, dragged_id: str, target_id: str) -> Blocks:
    """Move ``dragged_id`` into the slot of ``target_id`` (drag and drop).

    The dragged block is removed first, which shifts every later index
    down by one; dropping onto a later block therefore reinserts at
    ``target_index - 1``.
    """
    if dragged_id == target_id:
        return blocks

    dragged_index = index_of(blocks, dragged_id)
    target_index = index_of(blocks, target_id)
    if dragged_index == -1 or target_index == -1:
        return blocks

    remaining = list(blocks)
    dragged = remaining.pop(dragged_index)
    insert_at = target_index - 1 if dragged_index < target_index else target_index
    remaining.insert(insert_at, dragged)
    return tuple(remaining)


def replace_with(blocks: Blocks, block_id: str, new_blocks: Sequence[Block]) -> Blocks:
    """Replace one block with a run of new blocks (structured paste)."""
    index = index_of(blocks, block_id)
    if index == -1 or not new_blocks:
        return blocks

    kept_ids = {b.id for i, b in enumerate(blocks) if i != index}
    incoming: list[Block] = []
    for block in new_blocks:
        if block.id in kept_ids:
            block = dataclasses.replace(block, id=new_block_id())
        kept_ids.add(block.id)
        incoming.append(block)

    return blocks[:index] + tuple(incoming) + blocks[index + 1 :]


# =============================================================================
# List items
# =============================================================================


def insert_list_item(blocks: Blocks, block_id: str, after_index: int) -> Blocks:
    """Insert an empty list item after ``after_index`` in a list block."""
    index = index_of(blocks, block_id)
    if index == -1 or not blocks[index].is_list():
        return blocks

    items = list(blocks[index].metadata.items)
    position = max(0, min(after_index + 1, len(items)))
    items.insert(position, "")
    return update(blocks, block_id, metadata=ListMetadata(items=tuple(items)))


def set_list_item(blocks: Blocks, block_id: str, item_index: int, text: str) -> Blocks:
    index = index_of(blocks, block_id)
    if index == -1 or not blocks[index].is_list():
        return blocks

    items = list(blocks[index].metadata.items)
    if not 0 <= item_index < len(items):
        return blocks
    items[item_index] = text
    return update(blocks, block_id, metadata=ListMetadata(items=tuple(items)))


def remove_list_item(blocks: Blocks, block_id: str, item_index: int) -> Blocks:
    """Remove an empty list item; a list always keeps at least one item."""
    index = index_of(blocks, block_id)
    if index == -1 or not blocks[index].is_list():
        return blocks

    items = list(blocks[index].metadata.items)
    if len(items) <= 1 or not 0 <= item_index < len(items) or items[item_index]:
        return blocks
    del items[item_index]
    return update(blocks, block_id, metadata=ListMetadata(items=tuple(items)))
