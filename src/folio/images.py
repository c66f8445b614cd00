"""Reading uploaded images into image blocks.

The read runs off the event loop; when it completes the data URL is
written into the target block's metadata through the store. If the block
was removed in the meantime the update is a no-op. A failed read is logged
and leaves the block untouched.
"""

from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from pathlib import Path

from .blocks.models import BlockType, ImageMetadata
from .blocks.store import BlockStore
from .errors import ImageReadError

logger = logging.getLogger(__name__)

DEFAULT_MIME = "application/octet-stream"

ImageSource = bytes | str | Path


def to_data_url(data: bytes, mime_type: str | None = None) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type or DEFAULT_MIME};base64,{encoded}"


def read_image(source: ImageSource, mime_type: str | None = None) -> str:
    """Read image bytes (raw or from a file) into a data URL.

    Raises:
        ImageReadError: If the file cannot be read.
    """
    if isinstance(source, bytes):
        return to_data_url(source, mime_type)

    path = Path(source)
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ImageReadError(f"Cannot read image: {e}", source=str(path)) from e

    guessed, _ = mimetypes.guess_type(path.name)
    return to_data_url(data, mime_type or guessed)


def apply_image(store: BlockStore, block_id: str, url: str) -> bool:
    """Set the url of an image block, keeping its caption."""
    block = store.get(block_id)
    if block is None or block.type != BlockType.IMAGE:
        return False
    caption = block.metadata.caption if isinstance(block.metadata, ImageMetadata) else ""
    return store.update(block_id, metadata=ImageMetadata(url=url, caption=caption))


async def load_image(
    store: BlockStore,
    block_id: str,
    source: ImageSource,
    mime_type: str | None = None,
) -> bool:
    """Read ``source`` in a worker thread and apply it to ``block_id``.

    Returns True if the block was updated.
    """
    try:
        url = await asyncio.to_thread(read_image, source, mime_type)
    except ImageReadError as e:
        logger.warning("Image read failed for block %s: %s", block_id, e.message)
        return False
    return apply_image(store, block_id, url)
