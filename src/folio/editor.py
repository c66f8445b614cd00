"""The block editor: one store plus the controllers that act on it.

``BlockEditor`` is the seam between a host rendering layer and the engine.
The host forwards key presses, input, paste, drag and image events; the
editor turns them into store operations. Caret moves that follow a
mutation (split, merge, add) are queued as focus requests and applied by
``flush_focus`` once the host has re-rendered the affected blocks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import ModuleType
from typing import Callable, Protocol, Sequence

from .autosave import AutosaveScheduler, TimerFactory
from .blocks import markdown
from .blocks.models import (
    Block,
    BlockType,
    CalloutMetadata,
    CalloutVariant,
    CheckboxMetadata,
    CodeMetadata,
    ImageMetadata,
)
from .blocks.ops import MergeResult
from .blocks.placeholders import placeholder_for
from .blocks.store import BlockStore
from .drag import DragReorder
from .images import ImageSource, load_image
from .menu import TRIGGER, InsertMenu, RecentTypes
from .paste import PasteKind, classify_paste
from .settings import settings
from .surface import TextSurface, get_caret_offset, is_caret_at_start, set_caret_offset, surface_text
from .toolbar import FormattingHost, SelectionToolbar

logger = logging.getLogger(__name__)


class BlockCodec(Protocol):
    """Converts between persisted text and blocks (``folio.blocks.markdown`` by default)."""

    def text_to_blocks(self, text: str, deterministic: bool = False) -> list[Block]:
        ...

    def blocks_to_text(self, blocks: Sequence[Block]) -> str:
        ...


@dataclass(frozen=True)
class FocusRequest:
    block_id: str
    caret: int


class BlockEditor:
    def __init__(
        self,
        initial_text: str = "",
        on_change: Callable[[str], None] | None = None,
        *,
        locale: str | None = None,
        codec: BlockCodec | ModuleType | None = None,
        host: FormattingHost | None = None,
        timers: TimerFactory | None = None,
        autosave_delay: float | None = None,
    ) -> None:
        self.locale = locale or settings.locale
        self.codec = codec or markdown

        if initial_text.strip():
            self.store = BlockStore(self.codec.text_to_blocks(initial_text, deterministic=True))
        else:
            self.store = BlockStore()

        self.menu = InsertMenu(locale=self.locale)
        self.drag = DragReorder(self.store)
        self.toolbar = SelectionToolbar(host, locale=self.locale) if host is not None else None
        self.autosave = AutosaveScheduler(
            self.store,
            self.codec.blocks_to_text,
            on_change,
            delay=autosave_delay,
            timers=timers,
        )
        self.recent = RecentTypes()
        self.focused_id: str | None = None
        self._pending_focus: list[FocusRequest] = []

        logger.debug("Editor loaded with %d blocks", len(self.store))

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    @property
    def blocks(self) -> tuple[Block, ...]:
        return self.store.blocks

    def text(self) -> str:
        return self.codec.blocks_to_text(self.store.blocks)

    def placeholder(self, block_id: str) -> str:
        block = self.store.get(block_id)
        return placeholder_for(block.type, self.locale) if block else ""

    def menu_options(self) -> list[BlockType]:
        return self.menu.options(self.recent)

    # -------------------------------------------------------------------------
    # Focus
    # -------------------------------------------------------------------------

    def focus(self, block_id: str) -> None:
        self.focused_id = block_id

    @property
    def pending_focus(self) -> list[FocusRequest]:
        return list(self._pending_focus)

    def _request_focus(self, block_id: str, caret: int) -> None:
        self._pending_focus.append(FocusRequest(block_id, caret))

    def flush_focus(self, resolve: Callable[[str], TextSurface | None]) -> list[FocusRequest]:
        """Apply queued caret moves. Call after the host has painted.

        ``resolve`` maps a block id to its surface; requests for blocks that
        no longer have one are dropped.
        """
        requests, self._pending_focus = self._pending_focus, []
        applied = []
        for request in requests:
            surface = resolve(request.block_id)
            if surface is None:
                continue
            focus = getattr(surface, "focus", None)
            if callable(focus):
                focus()
            set_caret_offset(surface, request.caret)
            self.focused_id = request.block_id
            applied.append(request)
        return applied

    # -------------------------------------------------------------------------
    # Block operations
    # -------------------------------------------------------------------------

    def add_block(
        self,
        after_id: str | None,
        block_type: BlockType | str = BlockType.PARAGRAPH,
        *,
        content: str = "",
        focus: bool = True,
    ) -> str:
        block_type = BlockType.parse(block_type)
        new_id = self.store.add(after_id, block_type, content=content)
        self.recent = self.recent.record(block_type)
        if focus:
            self._request_focus(new_id, 0)
        return new_id

    def update(self, block_id: str, **fields) -> bool:
        return self.store.update(block_id, **fields)

    def delete(self, block_id: str) -> bool:
        return self.store.delete(block_id)

    def move(self, block_id: str, direction: str) -> bool:
        return self.store.move(block_id, direction)

    def retype(self, block_id: str, block_type: BlockType | str) -> bool:
        return self.store.retype(block_id, block_type)

    def split(self, block_id: str, offset: int, full_text: str) -> str | None:
        new_id = self.store.split(block_id, offset, full_text)
        if new_id is not None:
            self._request_focus(new_id, 0)
        return new_id

    def merge(self, block_id: str) -> MergeResult | None:
        result = self.store.merge(block_id)
        if result is not None:
            self._request_focus(result.focus_id, result.caret)
        return result

    def clear_all(self) -> None:
        self.menu.close()
        self.drag.cancel()
        self.store.clear()

    # -------------------------------------------------------------------------
    # Keyboard and input
    # -------------------------------------------------------------------------

    def handle_key(
        self,
        block_id: str,
        surface: TextSurface,
        key: str,
        *,
        shift: bool = False,
        mod: bool = False,
    ) -> bool:
        """Handle a key press in a block. Returns True if the host should
        suppress its default behavior."""
        if mod and shift and key == "Backspace":
            self.clear_all()
            return True

        block = self.store.get(block_id)
        if block is None:
            return False

        if self.menu.is_open_for(block_id):
            handled, chosen = self.menu.handle_key(key, self.store, self.recent)
            if chosen is not None:
                self.recent = self.recent.record(chosen)
            if handled:
                return True

        if key == "Enter" and not shift and block.is_text():
            self.split(block_id, get_caret_offset(surface), surface_text(surface))
            return True

        if key == "Backspace" and block.is_text():
            if not surface_text(surface):
                self.delete(block_id)
                return True
            if is_caret_at_start(surface):
                self.merge(block_id)
                return True

        if mod and key == "/":
            self.menu.toggle(block_id)
            return True

        return False

    def handle_input(self, block_id: str, text: str) -> None:
        """The host reports the new text of a block after user input."""
        if text == TRIGGER:
            if self.menu.is_open_for(block_id):
                self.menu.set_search("")
            else:
                self.menu.open(block_id)
            self.store.update(block_id, content="")
            return

        if self.menu.is_open_for(block_id) and text.startswith(TRIGGER):
            self.menu.set_search(text[len(TRIGGER):])
            self.store.update(block_id, content="")
            return

        self.store.update(block_id, content=text)

    def handle_blur(self, block_id: str, text: str) -> None:
        self.store.update(block_id, content=text)

    def handle_paste(self, block_id: str, text: str) -> bool:
        """Decompose structured pastes into blocks. Returns True if handled;
        plain pastes are left to the host."""
        if classify_paste(text) is PasteKind.PLAIN:
            return False
        new_blocks = self.codec.text_to_blocks(text)
        return self.store.replace_with(block_id, new_blocks)

    # -------------------------------------------------------------------------
    # Insert menu
    # -------------------------------------------------------------------------

    def toggle_menu(self, block_id: str) -> None:
        self.menu.toggle(block_id)

    def choose_menu_option(self, block_type: BlockType | str) -> BlockType | None:
        chosen = self.menu.choose(BlockType.parse(block_type), self.store)
        if chosen is not None:
            self.recent = self.recent.record(chosen)
        return chosen

    def menu_action(self, action: str) -> bool:
        """Run one of the menu's block actions (move_up, move_down, delete) and close."""
        block_id = self.menu.block_id
        if block_id is None:
            return False
        if action == "move_up":
            changed = self.store.move(block_id, "up")
        elif action == "move_down":
            changed = self.store.move(block_id, "down")
        elif action == "delete":
            changed = self.store.delete(block_id)
        else:
            return False
        self.menu.close()
        return changed

    # -------------------------------------------------------------------------
    # Drag and drop
    # -------------------------------------------------------------------------

    def start_drag(self, block_id: str) -> None:
        self.drag.start(block_id)

    def drag_over(self, block_id: str) -> bool:
        return self.drag.over(block_id)

    def drop(self, target_id: str) -> bool:
        return self.drag.drop(target_id)

    def end_drag(self) -> None:
        self.drag.cancel()

    # -------------------------------------------------------------------------
    # Type-specific edits
    # -------------------------------------------------------------------------

    def list_item_key(self, block_id: str, index: int, key: str, item_text: str) -> bool:
        """Enter adds an item after ``index``; Backspace removes an empty item."""
        if key == "Enter":
            self.store.set_list_item(block_id, index, item_text)
            self.store.insert_list_item(block_id, index)
            return True
        if key == "Backspace" and not item_text:
            return self.store.remove_list_item(block_id, index)
        return False

    def set_list_item(self, block_id: str, index: int, text: str) -> bool:
        return self.store.set_list_item(block_id, index, text)

    def set_checked(self, block_id: str, checked: bool) -> bool:
        return self._update_metadata(block_id, BlockType.CHECKBOX, CheckboxMetadata(checked=checked))

    def set_code_language(self, block_id: str, language: str) -> bool:
        return self._update_metadata(block_id, BlockType.CODE, CodeMetadata(language=language or "plaintext"))

    def set_callout_variant(self, block_id: str, variant: CalloutVariant | str) -> bool:
        return self._update_metadata(block_id, BlockType.CALLOUT, CalloutMetadata(variant=CalloutVariant(variant)))

    def set_image_caption(self, block_id: str, caption: str) -> bool:
        block = self.store.get(block_id)
        if block is None or block.type != BlockType.IMAGE:
            return False
        return self.store.update(
            block_id,
            content=caption,
            metadata=ImageMetadata(url=block.metadata.url, caption=caption),
        )

    def set_image_url(self, block_id: str, url: str) -> bool:
        block = self.store.get(block_id)
        if block is None or block.type != BlockType.IMAGE:
            return False
        return self.store.update(block_id, metadata=ImageMetadata(url=url, caption=block.metadata.caption))

    def remove_image(self, block_id: str) -> bool:
        return self._update_metadata(block_id, BlockType.IMAGE, ImageMetadata(), content="")

    async def load_image(self, block_id: str, source: ImageSource, mime_type: str | None = None) -> bool:
        return await load_image(self.store, block_id, source, mime_type)

    def _update_metadata(self, block_id: str, expected: BlockType, metadata, **fields) -> bool:
        block = self.store.get(block_id)
        if block is None or block.type != expected:
            return False
        return self.store.update(block_id, metadata=metadata, **fields)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def save_now(self) -> None:
        self.autosave.flush()

    def close(self) -> None:
        self.autosave.close()
