"""Drag-and-drop reordering of blocks."""

from __future__ import annotations

import logging

from .blocks.store import BlockStore

logger = logging.getLogger(__name__)


class DragReorder:
    """Tracks the dragged block and the block under the pointer.

    State is cleared on every drop and on drag end, whether or not the
    drop changed anything.
    """

    def __init__(self, store: BlockStore) -> None:
        self.store = store
        self.dragged_id: str | None = None
        self.drag_over_id: str | None = None

    @property
    def active(self) -> bool:
        return self.dragged_id is not None

    def start(self, block_id: str) -> None:
        self.dragged_id = block_id
        self.drag_over_id = None

    def over(self, block_id: str) -> bool:
        """Pointer moved over ``block_id``; returns True if the drop is accepted."""
        if not self.active:
            return False
        self.drag_over_id = block_id
        return True

    def drop(self, target_id: str) -> bool:
        """Reinsert the dragged block at the target's slot. Returns True if moved."""
        dragged_id = self.dragged_id
        self.cancel()

        if dragged_id is None or dragged_id == target_id:
            return False

        moved = self.store.reorder(dragged_id, target_id)
        if moved:
            logger.debug("Dragged %s onto %s", dragged_id, target_id)
        return moved

    def cancel(self) -> None:
        self.dragged_id = None
        self.drag_over_id = None
