"""Convert between Markdown text and editor blocks.

Parsing uses the mistletoe library for the block structure; inline markup
inside a block (emphasis, links, code spans) is written back out as
Markdown so a block's content round-trips. Rendering is the inverse and
joins blocks with blank lines.
"""

from __future__ import annotations

import hashlib
import re
from typing import Any, Iterable, Sequence

from mistletoe import Document
from mistletoe.block_token import (
    BlockCode,
    CodeFence,
    Heading,
    HtmlBlock,
    List,
    ListItem,
    Paragraph,
    Quote,
    SetextHeading,
    ThematicBreak,
)
from mistletoe.span_token import (
    AutoLink,
    Emphasis,
    EscapeSequence,
    Image,
    InlineCode,
    LineBreak,
    Link,
    RawText,
    Strikethrough,
    Strong,
)

from .models import (
    Block,
    BlockType,
    CalloutMetadata,
    CalloutVariant,
    CheckboxMetadata,
    CodeMetadata,
    ImageMetadata,
    ListMetadata,
    new_block_id,
)

SEPARATOR_HTML = '<hr class="article-separator" />'

CALLOUT_EMOJIS: dict[CalloutVariant, str] = {
    CalloutVariant.INFO: "\U0001F4A1",
    CalloutVariant.WARNING: "⚠️",
    CalloutVariant.SUCCESS: "✅",
    CalloutVariant.ERROR: "❌",
}

_CHECKBOX_PATTERN = re.compile(r"^\[([xX ])\]\s*(.*)$", re.DOTALL)
_EMOJI_PREFIX_PATTERN = re.compile("^(\U0001F4A1|⚠️?|✅|❌)\\s*")
_KEYWORD_PREFIX_PATTERN = re.compile(r"^(tip:|warning:|success:|error:)\s*", re.IGNORECASE)


class _IdSource:
    """Hands out block ids: stable ``blk-<seed>-<n>`` or random uuids."""

    def __init__(self, text: str, deterministic: bool, seed: str | None) -> None:
        self.deterministic = deterministic
        self.seed = seed or _stable_hash(text or "content")
        self.counter = 0

    def next(self) -> str:
        if not self.deterministic:
            return new_block_id()
        block_id = f"blk-{self.seed}-{self.counter}"
        self.counter += 1
        return block_id


def _stable_hash(text: str) -> str:
    return hashlib.sha1(text.encode("utf-8")).hexdigest()[:10]


# =============================================================================
# Markdown -> Blocks
# =============================================================================


def text_to_blocks(
    text: str,
    deterministic: bool = False,
    seed: str | None = None,
) -> list[Block]:
    """Parse Markdown text into blocks.

    Args:
        text: The Markdown text to parse.
        deterministic: Produce reproducible ids derived from the text
            (used on initial load) instead of random ones.
        seed: Optional explicit seed for deterministic ids.

    Returns:
        The blocks in document order; never empty.
    """
    ids = _IdSource(text, deterministic, seed)
    blocks: list[Block] = []

    for token in Document(text).children:
        blocks.extend(_convert_token(token, ids))

    if not blocks:
        blocks.append(Block(id=ids.next(), type=BlockType.PARAGRAPH))
    return blocks


def _convert_token(token: Any, ids: _IdSource) -> list[Block]:
    """Convert a mistletoe block token to zero or more blocks."""
    if isinstance(token, (Heading, SetextHeading)):
        return [_convert_heading(token, ids)]
    elif isinstance(token, Paragraph):
        return [_convert_paragraph(token, ids)]
    elif isinstance(token, (BlockCode, CodeFence)):
        return [_convert_code(token, ids)]
    elif isinstance(token, List):
        return _convert_list(token, ids)
    elif isinstance(token, Quote):
        return [_convert_callout(token, ids)]
    elif isinstance(token, ThematicBreak):
        return [Block(id=ids.next(), type=BlockType.DIVIDER)]
    elif isinstance(token, HtmlBlock):
        if "article-separator" in (getattr(token, "content", "") or "").lower():
            return [Block(id=ids.next(), type=BlockType.DIVIDER)]

    # Unknown token type - keep whatever text it carries as a paragraph
    text = _plain_text(token).strip()
    if text:
        return [Block(id=ids.next(), type=BlockType.PARAGRAPH, content=text)]
    return []


def _convert_heading(token: Heading | SetextHeading, ids: _IdSource) -> Block:
    level = token.level
    if level == 1:
        block_type = BlockType.HEADING_1
    elif level == 2:
        block_type = BlockType.HEADING_2
    else:
        block_type = BlockType.HEADING_3

    return Block(id=ids.next(), type=block_type, content=_render_inline(token.children).strip())


def _convert_paragraph(token: Paragraph, ids: _IdSource) -> Block:
    children = list(token.children or ())

    # A paragraph that is only an image becomes an image block
    if len(children) == 1 and isinstance(children[0], Image):
        image = children[0]
        caption = _plain_text(image)
        return Block(
            id=ids.next(),
            type=BlockType.IMAGE,
            content=caption,
            metadata=ImageMetadata(url=image.src, caption=caption),
        )

    text = _render_inline(children)
    if "article-separator" in text.lower():
        return Block(id=ids.next(), type=BlockType.DIVIDER)

    checkbox = _checkbox_block(text, ids)
    if checkbox is not None:
        return checkbox

    return Block(id=ids.next(), type=BlockType.PARAGRAPH, content=text)


def _checkbox_block(text: str, ids: _IdSource) -> Block | None:
    match = _CHECKBOX_PATTERN.match(text)
    if not match:
        return None
    return Block(
        id=ids.next(),
        type=BlockType.CHECKBOX,
        content=match.group(2).strip(),
        metadata=CheckboxMetadata(checked=match.group(1).lower() == "x"),
    )


def _convert_code(token: BlockCode | CodeFence, ids: _IdSource) -> Block:
    language = (getattr(token, "language", "") or "").strip() or "plaintext"
    return Block(
        id=ids.next(),
        type=BlockType.CODE,
        content=_plain_text(token).rstrip("\n"),
        metadata=CodeMetadata(language=language),
    )


def _convert_list(token: List, ids: _IdSource) -> list[Block]:
    """Convert a list token; runs of plain items share one list block.

    Checklist items (``- [ ] ...``) break the run and become checkbox blocks.
    """
    block_type = BlockType.ORDERED_LIST if token.start is not None else BlockType.BULLET_LIST
    blocks: list[Block] = []
    run: list[str] = []

    def flush() -> None:
        if run:
            blocks.append(Block(id=ids.next(), type=block_type, metadata=ListMetadata(items=tuple(run))))
            run.clear()

    for item in token.children or ():
        if not isinstance(item, ListItem):
            continue
        texts = _list_item_texts(item)
        checkbox = _checkbox_block(texts[0], ids) if texts else None
        if checkbox is not None:
            flush()
            blocks.append(checkbox)
            run.extend(texts[1:])
        else:
            run.extend(texts or [""])

    flush()
    return blocks


def _list_item_texts(item: ListItem) -> list[str]:
    """Text of a list item, followed by any nested items flattened."""
    lines: list[str] = []
    nested: list[str] = []
    for child in item.children or ():
        if isinstance(child, List):
            for sub in child.children or ():
                nested.extend(_list_item_texts(sub))
        elif isinstance(child, Paragraph):
            lines.append(_render_inline(child.children))
        else:
            lines.append(_plain_text(child).rstrip("\n"))
    head = "\n".join(lines) if lines else ""
    return [head, *nested] if (lines or not nested) else nested


def _convert_callout(token: Quote, ids: _IdSource) -> Block:
    parts = []
    for child in token.children or ():
        if isinstance(child, Paragraph):
            parts.append(_render_inline(child.children))
        else:
            parts.append(_plain_text(child))
    content = "\n".join(parts).strip()

    variant = _detect_callout_variant(content)
    clean = _KEYWORD_PREFIX_PATTERN.sub("", _EMOJI_PREFIX_PATTERN.sub("", content, count=1), count=1)

    return Block(
        id=ids.next(),
        type=BlockType.CALLOUT,
        content=clean,
        metadata=CalloutMetadata(variant=variant),
    )


def _detect_callout_variant(content: str) -> CalloutVariant:
    lowered = content.lower()
    if content.startswith(CALLOUT_EMOJIS[CalloutVariant.INFO]) or "tip:" in lowered:
        return CalloutVariant.INFO
    if content.startswith("⚠") or "warning:" in lowered:
        return CalloutVariant.WARNING
    if content.startswith(CALLOUT_EMOJIS[CalloutVariant.SUCCESS]) or "success:" in lowered:
        return CalloutVariant.SUCCESS
    if content.startswith(CALLOUT_EMOJIS[CalloutVariant.ERROR]) or "error:" in lowered:
        return CalloutVariant.ERROR
    return CalloutVariant.INFO


def _render_inline(tokens: Iterable[Any] | None) -> str:
    """Write inline tokens back out as Markdown."""
    return "".join(_render_inline_token(token) for token in tokens or ())


def _render_inline_token(token: Any) -> str:
    if isinstance(token, RawText):
        return token.content
    elif isinstance(token, Strong):
        return f"**{_render_inline(token.children)}**"
    elif isinstance(token, Emphasis):
        return f"*{_render_inline(token.children)}*"
    elif isinstance(token, Strikethrough):
        return f"~~{_render_inline(token.children)}~~"
    elif isinstance(token, InlineCode):
        code = _plain_text(token)
        fence = "``" if "`" in code else "`"
        pad = " " if fence == "``" else ""
        return f"{fence}{pad}{code}{pad}{fence}"
    elif isinstance(token, Image):
        return f"![{_plain_text(token)}]({token.src})"
    elif isinstance(token, AutoLink):
        return f"<{_plain_text(token)}>"
    elif isinstance(token, Link):
        title = getattr(token, "title", "")
        suffix = f' "{title}"' if title else ""
        return f"[{_render_inline(token.children)}]({token.target}{suffix})"
    elif isinstance(token, EscapeSequence):
        return "\\" + _plain_text(token)
    elif isinstance(token, LineBreak):
        return "\n"
    return _render_inline(getattr(token, "children", None))


def _plain_text(token: Any) -> str:
    """Extract plain text from a token."""
    if isinstance(token, RawText):
        return token.content
    children = getattr(token, "children", None)
    if not children:
        return ""
    return "".join(_plain_text(child) for child in children)


# =============================================================================
# Blocks -> Markdown
# =============================================================================


def blocks_to_text(blocks: Sequence[Block]) -> str:
    """Render blocks to Markdown, one blank line between blocks."""
    return "\n\n".join(_render_block(block) for block in blocks)


def _render_block(block: Block) -> str:
    match block.type:
        case BlockType.HEADING_1:
            return f"# {block.content}"
        case BlockType.HEADING_2:
            return f"## {block.content}"
        case BlockType.HEADING_3:
            return f"### {block.content}"
        case BlockType.BULLET_LIST:
            return "\n".join(f"- {item}" for item in block.metadata.items)
        case BlockType.ORDERED_LIST:
            return "\n".join(f"{i}. {item}" for i, item in enumerate(block.metadata.items, start=1))
        case BlockType.CODE:
            return f"```{block.metadata.language}\n{block.content}\n```"
        case BlockType.CHECKBOX:
            mark = "x" if block.metadata.checked else " "
            return f"- [{mark}] {block.content}".rstrip()
        case BlockType.CALLOUT:
            return f"> {CALLOUT_EMOJIS[block.metadata.variant]} {block.content}"
        case BlockType.IMAGE:
            caption = block.metadata.caption or block.content
            return f"![{caption}]({block.metadata.url})" if block.metadata.url else caption
        case BlockType.DIVIDER:
            return SEPARATOR_HTML
    return block.content
