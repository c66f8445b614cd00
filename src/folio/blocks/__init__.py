"""Block model, operations and Markdown codec for the editor.

Key components:
- models: Block, BlockType and the per-type metadata dataclasses
- ops: Pure sequence operations (insert, split, merge, move, reorder)
- store: BlockStore, the single owner of the block sequence
- markdown: Markdown <-> Blocks conversion
- placeholders: Localized placeholders and menu labels
"""

from .markdown import blocks_to_text, text_to_blocks
from .models import (
    Block,
    BlockType,
    CalloutMetadata,
    CalloutVariant,
    CheckboxMetadata,
    CodeMetadata,
    ImageMetadata,
    ListMetadata,
    default_metadata,
)
from .ops import MergeResult
from .placeholders import label_for, placeholder_for
from .store import BlockStore

__all__ = [
    "Block",
    "BlockType",
    "BlockStore",
    "CalloutMetadata",
    "CalloutVariant",
    "CheckboxMetadata",
    "CodeMetadata",
    "ImageMetadata",
    "ListMetadata",
    "MergeResult",
    "default_metadata",
    "text_to_blocks",
    "blocks_to_text",
    "label_for",
    "placeholder_for",
]
