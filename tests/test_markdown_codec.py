"""Tests for blocks/markdown.py - Markdown <-> Blocks.

Tests:
- Markdown -> Blocks parsing for every block type
- Blocks -> Markdown rendering
- Deterministic ids
- Round-trip consistency
"""

from __future__ import annotations

from folio.blocks.markdown import SEPARATOR_HTML, blocks_to_text, text_to_blocks
from folio.blocks.models import (
    Block,
    BlockType,
    CalloutMetadata,
    CalloutVariant,
    CheckboxMetadata,
    CodeMetadata,
    ImageMetadata,
    ListMetadata,
)


# =============================================================================
# Markdown Parser Tests
# =============================================================================


class TestMarkdownParser:
    """Test Markdown to Blocks parsing."""

    def test_parse_paragraph(self) -> None:
        """Parse a simple paragraph."""
        blocks = text_to_blocks("Hello world")

        assert len(blocks) == 1
        assert blocks[0].type is BlockType.PARAGRAPH
        assert blocks[0].content == "Hello world"

    def test_parse_headings(self) -> None:
        blocks = text_to_blocks("# One\n\n## Two\n\n### Three")

        assert [b.type for b in blocks] == [BlockType.HEADING_1, BlockType.HEADING_2, BlockType.HEADING_3]
        assert [b.content for b in blocks] == ["One", "Two", "Three"]

    def test_deep_heading_maps_to_heading_3(self) -> None:
        blocks = text_to_blocks("##### Deep")

        assert blocks[0].type is BlockType.HEADING_3
        assert blocks[0].content == "Deep"

    def test_inline_markup_is_kept(self) -> None:
        """Bold, italic, code spans and links stay as Markdown in content."""
        blocks = text_to_blocks("Some **bold**, *italic*, `code` and [a link](https://example.com)")

        assert blocks[0].content == "Some **bold**, *italic*, `code` and [a link](https://example.com)"

    def test_parse_code_block(self) -> None:
        blocks = text_to_blocks("```python\ndef hello():\n    return 1\n```")

        assert blocks[0].type is BlockType.CODE
        assert blocks[0].content == "def hello():\n    return 1"
        assert blocks[0].metadata == CodeMetadata(language="python")

    def test_code_block_without_language(self) -> None:
        blocks = text_to_blocks("```\nplain\n```")

        assert blocks[0].metadata == CodeMetadata(language="plaintext")

    def test_parse_bulleted_list(self) -> None:
        """Consecutive items share one list block."""
        blocks = text_to_blocks("- one\n- two\n- three")

        assert len(blocks) == 1
        assert blocks[0].type is BlockType.BULLET_LIST
        assert blocks[0].metadata == ListMetadata(items=("one", "two", "three"))

    def test_parse_numbered_list(self) -> None:
        blocks = text_to_blocks("1. first\n2. second")

        assert blocks[0].type is BlockType.ORDERED_LIST
        assert blocks[0].metadata.items == ("first", "second")

    def test_parse_checkbox_unchecked(self) -> None:
        blocks = text_to_blocks("- [ ] Buy milk")

        assert len(blocks) == 1
        assert blocks[0].type is BlockType.CHECKBOX
        assert blocks[0].content == "Buy milk"
        assert blocks[0].metadata == CheckboxMetadata(checked=False)

    def test_parse_checkbox_checked(self) -> None:
        blocks = text_to_blocks("- [x] Done")

        assert blocks[0].metadata == CheckboxMetadata(checked=True)
        assert blocks[0].content == "Done"

    def test_each_checkbox_is_its_own_block(self) -> None:
        blocks = text_to_blocks("- [ ] a\n- [x] b")

        assert [b.type for b in blocks] == [BlockType.CHECKBOX, BlockType.CHECKBOX]
        assert [b.metadata.checked for b in blocks] == [False, True]

    def test_parse_image(self) -> None:
        blocks = text_to_blocks("![A cat](https://example.com/cat.png)")

        assert blocks[0].type is BlockType.IMAGE
        assert blocks[0].metadata == ImageMetadata(url="https://example.com/cat.png", caption="A cat")
        assert blocks[0].content == "A cat"

    def test_parse_callout_emoji(self) -> None:
        blocks = text_to_blocks("> \U0001F4A1 Remember this")

        assert blocks[0].type is BlockType.CALLOUT
        assert blocks[0].content == "Remember this"
        assert blocks[0].metadata == CalloutMetadata(variant=CalloutVariant.INFO)

    def test_parse_callout_warning_emoji(self) -> None:
        blocks = text_to_blocks("> ⚠️ Careful")

        assert blocks[0].metadata.variant is CalloutVariant.WARNING
        assert blocks[0].content == "Careful"

    def test_parse_callout_keyword(self) -> None:
        blocks = text_to_blocks("> Error: disk full")

        assert blocks[0].metadata.variant is CalloutVariant.ERROR
        assert blocks[0].content == "disk full"

    def test_plain_quote_is_info_callout(self) -> None:
        blocks = text_to_blocks("> just a quote")

        assert blocks[0].metadata.variant is CalloutVariant.INFO
        assert blocks[0].content == "just a quote"

    def test_parse_thematic_break(self) -> None:
        blocks = text_to_blocks("Above\n\n---\n\nBelow")

        assert [b.type for b in blocks] == [BlockType.PARAGRAPH, BlockType.DIVIDER, BlockType.PARAGRAPH]

    def test_parse_separator_html(self) -> None:
        blocks = text_to_blocks(f"Above\n\n{SEPARATOR_HTML}\n\nBelow")

        assert blocks[1].type is BlockType.DIVIDER

    def test_parse_multiple_blocks(self) -> None:
        markdown = "# Title\n\nIntro text.\n\n- a\n- b\n\n```js\nx()\n```"

        blocks = text_to_blocks(markdown)

        assert [b.type for b in blocks] == [
            BlockType.HEADING_1,
            BlockType.PARAGRAPH,
            BlockType.BULLET_LIST,
            BlockType.CODE,
        ]


# =============================================================================
# Ids
# =============================================================================


class TestBlockIds:
    """Test id assignment."""

    def test_deterministic_ids_are_stable(self) -> None:
        first = text_to_blocks("# A\n\nB", deterministic=True)
        second = text_to_blocks("# A\n\nB", deterministic=True)

        assert [b.id for b in first] == [b.id for b in second]
        assert first[0].id.startswith("blk-")
        assert first[0].id.endswith("-0")
        assert first[1].id.endswith("-1")

    def test_deterministic_ids_depend_on_text(self) -> None:
        first = text_to_blocks("one", deterministic=True)
        second = text_to_blocks("two", deterministic=True)

        assert first[0].id != second[0].id

    def test_explicit_seed(self) -> None:
        blocks = text_to_blocks("x", deterministic=True, seed="doc")

        assert blocks[0].id == "blk-doc-0"

    def test_random_ids_differ(self) -> None:
        first = text_to_blocks("same")
        second = text_to_blocks("same")

        assert first[0].id != second[0].id


# =============================================================================
# Markdown Renderer Tests
# =============================================================================


class TestMarkdownRenderer:
    """Test Blocks to Markdown rendering."""

    def test_render_headings_and_paragraph(self) -> None:
        blocks = [
            Block.create(BlockType.HEADING_1, content="Title"),
            Block.create(BlockType.HEADING_2, content="Sub"),
            Block.create(BlockType.HEADING_3, content="Small"),
            Block.create(content="Body"),
        ]

        assert blocks_to_text(blocks) == "# Title\n\n## Sub\n\n### Small\n\nBody"

    def test_render_bulleted_list(self) -> None:
        block = Block.create(BlockType.BULLET_LIST, metadata=ListMetadata(items=("a", "b")))

        assert blocks_to_text([block]) == "- a\n- b"

    def test_render_numbered_list(self) -> None:
        block = Block.create(BlockType.ORDERED_LIST, metadata=ListMetadata(items=("a", "b", "c")))

        assert blocks_to_text([block]) == "1. a\n2. b\n3. c"

    def test_render_checkbox(self) -> None:
        checked = Block.create(BlockType.CHECKBOX, content="Done", metadata=CheckboxMetadata(checked=True))
        empty = Block.create(BlockType.CHECKBOX)

        assert blocks_to_text([checked]) == "- [x] Done"
        assert blocks_to_text([empty]) == "- [ ]"

    def test_render_code_block(self) -> None:
        block = Block.create(BlockType.CODE, content="print(1)", metadata=CodeMetadata(language="python"))

        assert blocks_to_text([block]) == "```python\nprint(1)\n```"

    def test_render_callout(self) -> None:
        block = Block.create(
            BlockType.CALLOUT,
            content="Heads up",
            metadata=CalloutMetadata(variant=CalloutVariant.SUCCESS),
        )

        assert blocks_to_text([block]) == "> ✅ Heads up"

    def test_render_image(self) -> None:
        block = Block.create(BlockType.IMAGE, metadata=ImageMetadata(url="cat.png", caption="Cat"))

        assert blocks_to_text([block]) == "![Cat](cat.png)"

    def test_render_image_without_url_is_caption(self) -> None:
        block = Block.create(BlockType.IMAGE, content="Pending", metadata=ImageMetadata(caption="Pending"))

        assert blocks_to_text([block]) == "Pending"

    def test_render_divider(self) -> None:
        assert blocks_to_text([Block.create(BlockType.DIVIDER)]) == SEPARATOR_HTML


# =============================================================================
# Round trip
# =============================================================================


class TestRoundTrip:
    """Test that rendering then parsing keeps the block structure."""

    def test_roundtrip_complex_document(self) -> None:
        original = [
            Block.create(BlockType.HEADING_1, content="Plan"),
            Block.create(content="Some **bold** text"),
            Block.create(BlockType.BULLET_LIST, metadata=ListMetadata(items=("one", "two"))),
            Block.create(BlockType.CHECKBOX, content="ship it", metadata=CheckboxMetadata(checked=True)),
            Block.create(BlockType.CODE, content="x = 1", metadata=CodeMetadata(language="python")),
            Block.create(BlockType.CALLOUT, content="Note", metadata=CalloutMetadata(variant=CalloutVariant.WARNING)),
            Block.create(BlockType.DIVIDER),
            Block.create(BlockType.IMAGE, content="Cat", metadata=ImageMetadata(url="cat.png", caption="Cat")),
        ]

        parsed = text_to_blocks(blocks_to_text(original))

        assert [b.type for b in parsed] == [b.type for b in original]
        assert [b.content for b in parsed] == [b.content for b in original]
        assert [b.metadata for b in parsed] == [b.metadata for b in original]


# =============================================================================
# Edge cases
# =============================================================================


class TestEdgeCases:
    """Test edge cases."""

    def test_empty_markdown(self) -> None:
        """Empty text still yields one empty paragraph."""
        blocks = text_to_blocks("")

        assert len(blocks) == 1
        assert blocks[0].type is BlockType.PARAGRAPH
        assert blocks[0].content == ""

    def test_whitespace_only(self) -> None:
        blocks = text_to_blocks("   \n\n  ")

        assert len(blocks) == 1
        assert blocks[0].content == ""

    def test_render_empty_blocks(self) -> None:
        assert blocks_to_text([]) == ""
