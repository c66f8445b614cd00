"""The Block Store: single owner of the document's block sequence.

All mutation goes through the store, which applies a pure operation from
``folio.blocks.ops``, keeps the result only if it differs, and notifies
subscribers (the autosave scheduler, host re-render hooks).
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Sequence

from ..errors import InvariantError
from . import ops
from .models import Block, BlockType
from .ops import Blocks, MergeResult

logger = logging.getLogger(__name__)

Subscriber = Callable[[Blocks], None]


class BlockStore:
    """Ordered, never-empty sequence of blocks with change notification."""

    def __init__(self, blocks: Sequence[Block] | None = None) -> None:
        self._blocks: Blocks = ()
        self._subscribers: list[Subscriber] = []
        self._commit(ops.ensure_not_empty(blocks or ()), notify=False)

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def blocks(self) -> Blocks:
        return self._blocks

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks)

    def get(self, block_id: str) -> Block | None:
        index = ops.index_of(self._blocks, block_id)
        return self._blocks[index] if index != -1 else None

    def index_of(self, block_id: str) -> int:
        return ops.index_of(self._blocks, block_id)

    def ids(self) -> list[str]:
        return [b.id for b in self._blocks]

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Call ``callback(blocks)`` after every change. Returns an unsubscribe function."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _commit(self, blocks: Blocks, *, notify: bool = True) -> bool:
        if blocks is self._blocks or blocks == self._blocks:
            return False

        if not blocks:
            raise InvariantError("Block store cannot be empty", invariant="non_empty")
        seen: set[str] = set()
        for block in blocks:
            if block.id in seen:
                raise InvariantError("Duplicate block id", invariant="unique_ids", block_id=block.id)
            seen.add(block.id)

        self._blocks = blocks
        if notify:
            for callback in list(self._subscribers):
                callback(blocks)
        return True

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def replace_all(self, blocks: Sequence[Block]) -> None:
        self._commit(ops.ensure_not_empty(blocks))

    def add(self, after_id: str | None, block_type: BlockType | str = BlockType.PARAGRAPH, **fields) -> str:
        """Create a block of ``block_type`` after ``after_id``; returns its id."""
        block = Block.create(block_type, **fields)
        self._commit(ops.insert_after(self._blocks, after_id, block))
        logger.debug("Added %s block %s after %s", block.type.value, block.id, after_id)
        return block.id

    def update(self, block_id: str, **fields) -> bool:
        return self._commit(ops.update(self._blocks, block_id, **fields))

    def delete(self, block_id: str) -> bool:
        changed = self._commit(ops.delete(self._blocks, block_id))
        if changed:
            logger.debug("Deleted block %s", block_id)
        return changed

    def clear(self) -> None:
        self._commit(ops.clear_all())
        logger.debug("Cleared document")

    def split(self, block_id: str, offset: int, full_text: str) -> str | None:
        blocks, new_id = ops.split(self._blocks, block_id, offset, full_text)
        self._commit(blocks)
        return new_id

    def merge(self, block_id: str) -> MergeResult | None:
        blocks, result = ops.merge(self._blocks, block_id)
        self._commit(blocks)
        return result

    def move(self, block_id: str, direction: str) -> bool:
        return self._commit(ops.move(self._blocks, block_id, direction))

    def retype(self, block_id: str, new_type: BlockType | str) -> bool:
        return self._commit(ops.retype(self._blocks, block_id, new_type))

    def reorder(self, dragged_id: str, target_id: str) -> bool:
        return self._commit(ops.reorder(self._blocks, dragged_id, target_id))

    def replace_with(self, block_id: str, new_blocks: Sequence[Block]) -> bool:
        return self._commit(ops.replace_with(self._blocks, block_id, new_blocks))

    def insert_list_item(self, block_id: str, after_index: int) -> bool:
        return self._commit(ops.insert_list_item(self._blocks, block_id, after_index))

    def set_list_item(self, block_id: str, item_index: int, text: str) -> bool:
        return self._commit(ops.set_list_item(self._blocks, block_id, item_index, text))

    def remove_list_item(self, block_id: str, item_index: int) -> bool:
        return self._commit(ops.remove_list_item(self._blocks, block_id, item_index))
