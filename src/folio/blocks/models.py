"""Data models for the block-based editor.

This module defines the core data structures for Notion-style blocks:
the block type tag, the per-type metadata variants and the Block itself.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from ..errors import ValidationError


class BlockType(str, Enum):
    """Supported block types."""

    # Text blocks
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"

    # List blocks (items live in metadata)
    BULLET_LIST = "bullet_list"
    ORDERED_LIST = "ordered_list"
    CHECKBOX = "checkbox"

    # Special blocks
    IMAGE = "image"
    CODE = "code"
    CALLOUT = "callout"
    DIVIDER = "divider"

    @classmethod
    def parse(cls, value: BlockType | str) -> BlockType:
        """Coerce a host-supplied value into a BlockType."""
        if isinstance(value, BlockType):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("Unknown block type", field="type", value=value) from None


class CalloutVariant(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"
    ERROR = "error"


# Block types whose content is edited as a single run of text. Enter splits
# them and Backspace at the start merges them.
TEXT_BLOCK_TYPES = frozenset({
    BlockType.PARAGRAPH,
    BlockType.HEADING_1,
    BlockType.HEADING_2,
    BlockType.HEADING_3,
    BlockType.CALLOUT,
    BlockType.CHECKBOX,
})

LIST_BLOCK_TYPES = frozenset({BlockType.BULLET_LIST, BlockType.ORDERED_LIST})


@dataclass(frozen=True)
class ListMetadata:
    """Items of a bullet or ordered list. Never empty."""

    items: tuple[str, ...] = ("",)

    def __post_init__(self) -> None:
        if not self.items:
            object.__setattr__(self, "items", ("",))
        elif not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))


@dataclass(frozen=True)
class CheckboxMetadata:
    checked: bool = False


@dataclass(frozen=True)
class ImageMetadata:
    url: str = ""
    caption: str = ""


@dataclass(frozen=True)
class CodeMetadata:
    language: str = "plaintext"


@dataclass(frozen=True)
class CalloutMetadata:
    variant: CalloutVariant = CalloutVariant.INFO


BlockMetadata = Union[ListMetadata, CheckboxMetadata, ImageMetadata, CodeMetadata, CalloutMetadata]


def default_metadata(block_type: BlockType) -> BlockMetadata | None:
    """Return the fresh metadata a block of ``block_type`` starts with."""
    match block_type:
        case BlockType.BULLET_LIST | BlockType.ORDERED_LIST:
            return ListMetadata()
        case BlockType.CHECKBOX:
            return CheckboxMetadata()
        case BlockType.IMAGE:
            return ImageMetadata()
        case BlockType.CODE:
            return CodeMetadata()
        case BlockType.CALLOUT:
            return CalloutMetadata()
        case BlockType.PARAGRAPH | BlockType.HEADING_1 | BlockType.HEADING_2 | BlockType.HEADING_3:
            return None
        case BlockType.DIVIDER:
            return None
    raise ValidationError("Unknown block type", field="type", value=block_type)


_METADATA_CLASSES: dict[BlockType, type | None] = {
    block_type: type(meta) if meta is not None else None
    for block_type in BlockType
    for meta in [default_metadata(block_type)]
}


def metadata_matches(block_type: BlockType, metadata: BlockMetadata | None) -> bool:
    """Check whether ``metadata`` has the shape ``block_type`` expects."""
    expected = _METADATA_CLASSES[block_type]
    if expected is None:
        return metadata is None
    return isinstance(metadata, expected)


def new_block_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class Block:
    """A content block in the editor.

    Blocks are immutable values; every edit produces a new Block through
    the operations in ``folio.blocks.ops``. The id is stable across
    reorders and content edits.
    """

    id: str
    type: BlockType = BlockType.PARAGRAPH
    content: str = ""

    # Type-specific payload (list items, checked state, image url, ...)
    metadata: BlockMetadata | None = field(default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", BlockType.parse(self.type))
        if not metadata_matches(self.type, self.metadata):
            object.__setattr__(self, "metadata", default_metadata(self.type))

    @classmethod
    def create(
        cls,
        block_type: BlockType | str = BlockType.PARAGRAPH,
        *,
        content: str = "",
        metadata: BlockMetadata | None = None,
        id: str | None = None,
    ) -> Block:
        """Create a block with a fresh id and type-default metadata."""
        block_type = BlockType.parse(block_type)
        return cls(
            id=id or new_block_id(),
            type=block_type,
            content=content,
            metadata=metadata if metadata is not None else default_metadata(block_type),
        )

    def is_text(self) -> bool:
        """Check if this block type is edited as a single text run."""
        return self.type in TEXT_BLOCK_TYPES

    def is_list(self) -> bool:
        return self.type in LIST_BLOCK_TYPES

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "type": self.type.value,
            "content": self.content,
            "metadata": _metadata_to_dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Block:
        """Create from dictionary."""
        block_type = BlockType.parse(data["type"])
        return cls(
            id=data["id"],
            type=block_type,
            content=data.get("content", ""),
            metadata=_metadata_from_dict(block_type, data.get("metadata")),
        )


def _metadata_to_dict(metadata: BlockMetadata | None) -> dict[str, Any] | None:
    match metadata:
        case ListMetadata(items=items):
            return {"items": list(items)}
        case CheckboxMetadata(checked=checked):
            return {"checked": checked}
        case ImageMetadata(url=url, caption=caption):
            return {"url": url, "caption": caption}
        case CodeMetadata(language=language):
            return {"language": language}
        case CalloutMetadata(variant=variant):
            return {"variant": variant.value}
    return None


def _metadata_from_dict(block_type: BlockType, data: dict[str, Any] | None) -> BlockMetadata | None:
    if not data:
        return default_metadata(block_type)

    match block_type:
        case BlockType.BULLET_LIST | BlockType.ORDERED_LIST:
            return ListMetadata(items=tuple(str(item) for item in data.get("items", [])))
        case BlockType.CHECKBOX:
            return CheckboxMetadata(checked=bool(data.get("checked", False)))
        case BlockType.IMAGE:
            return ImageMetadata(url=data.get("url", ""), caption=data.get("caption", ""))
        case BlockType.CODE:
            return CodeMetadata(language=data.get("language") or "plaintext")
        case BlockType.CALLOUT:
            try:
                variant = CalloutVariant(data.get("variant", "info"))
            except ValueError:
                variant = CalloutVariant.INFO
            return CalloutMetadata(variant=variant)
    return None
