"""Tests for drag.py - drag-and-drop reordering."""

from __future__ import annotations

import pytest

from folio.blocks.models import Block
from folio.blocks.store import BlockStore
from folio.drag import DragReorder


@pytest.fixture
def store() -> BlockStore:
    return BlockStore([Block.create(content=c.upper(), id=c) for c in "abcd"])


class TestDragReorder:
    """Test the drag controller."""

    def test_drop_forward(self, store: BlockStore) -> None:
        """Dragging A onto C in [A, B, C, D] gives [B, A, C, D]."""
        drag = DragReorder(store)
        drag.start("a")
        drag.over("c")

        assert drag.drop("c") is True
        assert store.ids() == ["b", "a", "c", "d"]

    def test_drop_backward(self, store: BlockStore) -> None:
        drag = DragReorder(store)
        drag.start("c")

        drag.drop("a")

        assert store.ids() == ["c", "a", "b", "d"]

    def test_state_cleared_after_drop(self, store: BlockStore) -> None:
        drag = DragReorder(store)
        drag.start("a")
        drag.over("b")

        drag.drop("b")

        assert drag.dragged_id is None
        assert drag.drag_over_id is None
        assert not drag.active

    def test_drop_on_self_is_noop(self, store: BlockStore) -> None:
        drag = DragReorder(store)
        drag.start("b")

        assert drag.drop("b") is False
        assert store.ids() == ["a", "b", "c", "d"]
        assert not drag.active

    def test_over_without_drag_is_ignored(self, store: BlockStore) -> None:
        drag = DragReorder(store)

        assert drag.over("b") is False
        assert drag.drag_over_id is None

    def test_drop_without_drag(self, store: BlockStore) -> None:
        assert DragReorder(store).drop("a") is False

    def test_drop_unknown_target_clears_state(self, store: BlockStore) -> None:
        drag = DragReorder(store)
        drag.start("a")

        assert drag.drop("zzz") is False
        assert store.ids() == ["a", "b", "c", "d"]
        assert not drag.active

    def test_cancel(self, store: BlockStore) -> None:
        drag = DragReorder(store)
        drag.start("a")
        drag.over("c")

        drag.cancel()

        assert not drag.active
        assert drag.drop("c") is False
