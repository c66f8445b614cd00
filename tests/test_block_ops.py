"""Tests for blocks/ops.py - pure operations over the block sequence.

Tests:
- Insert / update / delete
- Split and merge
- Move and drag reorder
- Structured replace
- List item editing
"""

from __future__ import annotations

import pytest

from folio.blocks import ops
from folio.blocks.models import (
    Block,
    BlockType,
    CalloutMetadata,
    CalloutVariant,
    CheckboxMetadata,
    CodeMetadata,
    ListMetadata,
)
from folio.errors import ValidationError


def _seq(*ids: str) -> tuple[Block, ...]:
    return tuple(Block.create(BlockType.PARAGRAPH, content=i.upper(), id=i) for i in ids)


def _ids(blocks) -> list[str]:
    return [b.id for b in blocks]


# =============================================================================
# Insert / Update / Delete
# =============================================================================


class TestInsert:
    """Test insert_after."""

    def test_insert_after_middle(self) -> None:
        blocks = ops.insert_after(_seq("a", "b"), "a", Block.create(id="n"))

        assert _ids(blocks) == ["a", "n", "b"]

    def test_insert_after_last(self) -> None:
        blocks = ops.insert_after(_seq("a", "b"), "b", Block.create(id="n"))

        assert _ids(blocks) == ["a", "b", "n"]

    def test_unknown_after_id_inserts_first(self) -> None:
        blocks = ops.insert_after(_seq("a", "b"), "missing", Block.create(id="n"))

        assert _ids(blocks) == ["n", "a", "b"]

    def test_none_after_id_inserts_first(self) -> None:
        blocks = ops.insert_after(_seq("a"), None, Block.create(id="n"))

        assert _ids(blocks) == ["n", "a"]

    def test_duplicate_id_is_refused(self) -> None:
        original = _seq("a", "b")

        assert ops.insert_after(original, "a", Block.create(id="b")) is original


class TestUpdate:
    """Test update."""

    def test_update_content(self) -> None:
        blocks = ops.update(_seq("a", "b"), "b", content="new")

        assert blocks[1].content == "new"
        assert blocks[1].id == "b"

    def test_update_unknown_id_is_noop(self) -> None:
        original = _seq("a")

        assert ops.update(original, "zzz", content="x") is original

    def test_update_type_resets_mismatched_metadata(self) -> None:
        blocks = ops.update(_seq("a"), "a", type="code")

        assert blocks[0].type is BlockType.CODE
        assert blocks[0].metadata == CodeMetadata()

    def test_update_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValidationError):
            ops.update(_seq("a"), "a", id="other")


class TestDelete:
    """Test delete and clear_all."""

    def test_delete_middle(self) -> None:
        assert _ids(ops.delete(_seq("a", "b", "c"), "b")) == ["a", "c"]

    def test_delete_only_block_leaves_fresh_paragraph(self) -> None:
        blocks = ops.delete(_seq("a"), "a")

        assert len(blocks) == 1
        assert blocks[0].id != "a"
        assert blocks[0].type is BlockType.PARAGRAPH
        assert blocks[0].content == ""

    def test_delete_unknown_is_noop(self) -> None:
        original = _seq("a", "b")

        assert ops.delete(original, "zzz") is original

    def test_clear_all(self) -> None:
        blocks = ops.clear_all()

        assert len(blocks) == 1
        assert blocks[0].content == ""


class TestRetype:
    """Test retype."""

    def test_retype_sets_default_metadata(self) -> None:
        blocks = ops.retype(_seq("a"), "a", BlockType.BULLET_LIST)

        assert blocks[0].type is BlockType.BULLET_LIST
        assert blocks[0].metadata == ListMetadata()
        assert blocks[0].content == "A"

    def test_retype_replaces_existing_metadata(self) -> None:
        checked = (Block.create(BlockType.CHECKBOX, id="a", metadata=CheckboxMetadata(checked=True)),)

        blocks = ops.retype(checked, "a", BlockType.CHECKBOX)

        assert blocks[0].metadata == CheckboxMetadata(checked=False)


# =============================================================================
# Split / Merge
# =============================================================================


class TestSplit:
    """Test split."""

    def test_split_hello_world(self) -> None:
        """Splitting "HelloWorld" at 5 yields "Hello" and a new "World"."""
        blocks = (Block.create(content="HelloWorld", id="p"),)

        blocks, new_id = ops.split(blocks, "p", 5, "HelloWorld")

        assert [b.content for b in blocks] == ["Hello", "World"]
        assert blocks[0].id == "p"
        assert blocks[1].id == new_id
        assert blocks[1].type is BlockType.PARAGRAPH

    def test_split_at_end_creates_empty_block(self) -> None:
        blocks, new_id = ops.split(_seq("a"), "a", 1, "A")

        assert [b.content for b in blocks] == ["A", ""]
        assert new_id is not None

    def test_split_offset_is_clamped(self) -> None:
        blocks, _ = ops.split(_seq("a"), "a", 99, "abc")

        assert [b.content for b in blocks] == ["abc", ""]

    def test_heading_continues_as_paragraph(self) -> None:
        blocks = (Block.create(BlockType.HEADING_1, content="Title", id="h"),)

        blocks, _ = ops.split(blocks, "h", 5, "Title")

        assert blocks[0].type is BlockType.HEADING_1
        assert blocks[1].type is BlockType.PARAGRAPH

    def test_checkbox_continues_unchecked(self) -> None:
        blocks = (Block.create(BlockType.CHECKBOX, content="buy milk", id="c", metadata=CheckboxMetadata(True)),)

        blocks, _ = ops.split(blocks, "c", 3, "buy milk")

        assert blocks[1].type is BlockType.CHECKBOX
        assert blocks[1].metadata == CheckboxMetadata(checked=False)
        assert blocks[1].content == " milk"

    def test_callout_keeps_variant(self) -> None:
        metadata = CalloutMetadata(variant=CalloutVariant.WARNING)
        blocks = (Block.create(BlockType.CALLOUT, content="careful now", id="w", metadata=metadata),)

        blocks, _ = ops.split(blocks, "w", 7, "careful now")

        assert blocks[1].type is BlockType.CALLOUT
        assert blocks[1].metadata == metadata

    def test_split_non_text_block_is_noop(self) -> None:
        original = (Block.create(BlockType.CODE, content="x = 1", id="code"),)

        blocks, new_id = ops.split(original, "code", 2, "x = 1")

        assert blocks is original
        assert new_id is None

    def test_split_unknown_id(self) -> None:
        original = _seq("a")

        assert ops.split(original, "zzz", 0, "") == (original, None)

    def test_explicit_new_id(self) -> None:
        blocks, new_id = ops.split(_seq("a"), "a", 0, "A", new_id="fixed")

        assert new_id == "fixed"
        assert _ids(blocks) == ["a", "fixed"]


class TestMerge:
    """Test merge."""

    def test_merge_into_previous(self) -> None:
        blocks = (Block.create(content="Hello", id="a"), Block.create(content="World", id="b"))

        blocks, result = ops.merge(blocks, "b")

        assert [b.content for b in blocks] == ["HelloWorld"]
        assert result == ops.MergeResult(focus_id="a", caret=5)

    def test_merge_first_block_is_noop(self) -> None:
        original = _seq("a", "b")

        assert ops.merge(original, "a") == (original, None)

    def test_merge_with_non_text_previous_reports_caret(self) -> None:
        """The caret target is reported even when nothing is merged."""
        original = (Block.create(BlockType.CODE, content="x = 1", id="code"), Block.create(content="B", id="b"))

        blocks, result = ops.merge(original, "b")

        assert blocks is original
        assert result == ops.MergeResult(focus_id="code", caret=5)


# =============================================================================
# Move / Reorder / Replace
# =============================================================================


class TestMove:
    """Test move up/down."""

    def test_move_up(self) -> None:
        assert _ids(ops.move(_seq("a", "b", "c"), "b", "up")) == ["b", "a", "c"]

    def test_move_down(self) -> None:
        assert _ids(ops.move(_seq("a", "b", "c"), "b", "down")) == ["a", "c", "b"]

    def test_move_first_up_is_noop(self) -> None:
        original = _seq("a", "b")

        assert ops.move(original, "a", "up") is original

    def test_move_last_down_is_noop(self) -> None:
        original = _seq("a", "b")

        assert ops.move(original, "b", "down") is original

    def test_bad_direction_raises(self) -> None:
        with pytest.raises(ValidationError):
            ops.move(_seq("a"), "a", "left")


class TestReorder:
    """Test drag-and-drop reorder."""

    def test_drag_forward(self) -> None:
        """Dropping A onto C in [A, B, C, D] gives [B, A, C, D]."""
        blocks = ops.reorder(_seq("a", "b", "c", "d"), "a", "c")

        assert _ids(blocks) == ["b", "a", "c", "d"]

    def test_drag_backward(self) -> None:
        blocks = ops.reorder(_seq("a", "b", "c", "d"), "d", "b")

        assert _ids(blocks) == ["a", "d", "b", "c"]

    def test_drop_on_self_is_noop(self) -> None:
        original = _seq("a", "b")

        assert ops.reorder(original, "a", "a") is original

    def test_unknown_ids_are_noop(self) -> None:
        original = _seq("a", "b")

        assert ops.reorder(original, "a", "zzz") is original
        assert ops.reorder(original, "zzz", "a") is original


class TestReplaceWith:
    """Test structured replace."""

    def test_replace_middle_block(self) -> None:
        new = [Block.create(BlockType.HEADING_1, content="T", id="n1"), Block.create(content="body", id="n2")]

        blocks = ops.replace_with(_seq("a", "b", "c"), "b", new)

        assert _ids(blocks) == ["a", "n1", "n2", "c"]

    def test_colliding_ids_are_reassigned(self) -> None:
        new = [Block.create(content="x", id="a"), Block.create(content="y", id="b")]

        blocks = ops.replace_with(_seq("a", "b"), "b", new)

        ids = _ids(blocks)
        assert len(set(ids)) == len(ids)
        assert ids[0] == "a"
        assert ids[2] == "b"
        assert [b.content for b in blocks] == ["A", "x", "y"]

    def test_empty_replacement_is_noop(self) -> None:
        original = _seq("a")

        assert ops.replace_with(original, "a", []) is original


# =============================================================================
# List items
# =============================================================================


class TestListItems:
    """Test list item editing."""

    @pytest.fixture
    def bullet(self) -> tuple[Block, ...]:
        return (Block.create(BlockType.BULLET_LIST, id="l", metadata=ListMetadata(items=("one", "two"))),)

    def test_insert_item_after_index(self, bullet) -> None:
        blocks = ops.insert_list_item(bullet, "l", 0)

        assert blocks[0].metadata.items == ("one", "", "two")

    def test_set_item(self, bullet) -> None:
        blocks = ops.set_list_item(bullet, "l", 1, "TWO")

        assert blocks[0].metadata.items == ("one", "TWO")

    def test_set_item_out_of_range_is_noop(self, bullet) -> None:
        assert ops.set_list_item(bullet, "l", 5, "x") is bullet

    def test_remove_empty_item(self, bullet) -> None:
        blocks = ops.insert_list_item(bullet, "l", 1)
        blocks = ops.remove_list_item(blocks, "l", 2)

        assert blocks[0].metadata.items == ("one", "two")

    def test_remove_non_empty_item_is_noop(self, bullet) -> None:
        assert ops.remove_list_item(bullet, "l", 0) is bullet

    def test_last_item_is_kept(self) -> None:
        single = (Block.create(BlockType.ORDERED_LIST, id="l"),)

        assert ops.remove_list_item(single, "l", 0) is single

    def test_non_list_block_is_noop(self) -> None:
        original = _seq("a")

        assert ops.insert_list_item(original, "a", 0) is original
