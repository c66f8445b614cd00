"""Folio - a block-based rich-text editing engine.

A document is an ordered list of typed blocks persisted as Markdown.
The engine owns the block sequence and the editing state machines
(insert menu, drag reorder, selection toolbar, autosave); a host
rendering layer draws the blocks and forwards user events.
"""

from .blocks import Block, BlockStore, BlockType, blocks_to_text, text_to_blocks
from .editor import BlockEditor, FocusRequest
from .errors import FolioError, ImageReadError, InvariantError, ValidationError

__version__ = "0.1.0"

__all__ = [
    "Block",
    "BlockEditor",
    "BlockStore",
    "BlockType",
    "FocusRequest",
    "FolioError",
    "ImageReadError",
    "InvariantError",
    "ValidationError",
    "blocks_to_text",
    "text_to_blocks",
]
