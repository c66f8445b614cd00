"""Insert menu: the contextual "pick a block type" state machine.

Two states, closed and open. While open the menu keeps a search string and
a selected index over the combined option list (recent types first when
there is no search, then everything else). Navigation wraps around.
Enter retypes the block the menu was opened on; Escape or a click outside
closes without touching the block.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from .blocks.models import BlockType
from .blocks.placeholders import DEFAULT_LOCALE, label_for, menu_types
from .blocks.store import BlockStore
from .settings import settings

logger = logging.getLogger(__name__)

TRIGGER = "/"

# Never offered by the menu
_EXCLUDED = frozenset({BlockType.DIVIDER})


class MenuState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


@dataclass(frozen=True)
class RecentTypes:
    """Recently used block types, most recent first, without repeats."""

    types: tuple[BlockType, ...] = ()
    limit: int = field(default_factory=lambda: settings.recent_limit)

    def record(self, block_type: BlockType) -> RecentTypes:
        if block_type in (BlockType.PARAGRAPH, BlockType.DIVIDER):
            return self
        rest = tuple(t for t in self.types if t != block_type)
        return RecentTypes(types=((block_type,) + rest)[: self.limit], limit=self.limit)

    def __iter__(self):
        return iter(self.types)

    def __len__(self) -> int:
        return len(self.types)


class InsertMenu:
    """Filtering and keyboard navigation for the insert menu."""

    def __init__(self, locale: str = DEFAULT_LOCALE) -> None:
        self.locale = locale
        self.state = MenuState.CLOSED
        self.block_id: str | None = None
        self.search = ""
        self.selected_index = 0

    @property
    def is_open(self) -> bool:
        return self.state is MenuState.OPEN

    def is_open_for(self, block_id: str) -> bool:
        return self.is_open and self.block_id == block_id

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def open(self, block_id: str) -> None:
        self.state = MenuState.OPEN
        self.block_id = block_id
        self.search = ""
        self.selected_index = 0
        logger.debug("Insert menu opened on %s", block_id)

    def close(self) -> None:
        self.state = MenuState.CLOSED
        self.block_id = None
        self.search = ""
        self.selected_index = 0

    def toggle(self, block_id: str) -> None:
        if self.is_open_for(block_id):
            self.close()
        else:
            self.open(block_id)

    def set_search(self, search: str) -> None:
        if not self.is_open:
            return
        self.search = search
        self.selected_index = 0

    def click_outside(self) -> None:
        self.close()

    # -------------------------------------------------------------------------
    # Options
    # -------------------------------------------------------------------------

    def filtered_types(self) -> list[BlockType]:
        """All offered types whose label contains the search, case-insensitively."""
        offered = [t for t in menu_types(self.locale) if t not in _EXCLUDED]
        if not self.search:
            return offered
        needle = self.search.lower()
        return [t for t in offered if needle in label_for(t, self.locale).lower()]

    def recent_group(self, recent: RecentTypes) -> list[BlockType]:
        """Recent types shown above everything else; empty while searching."""
        if self.search:
            return []
        return [t for t in recent if t not in _EXCLUDED]

    def options(self, recent: RecentTypes = RecentTypes()) -> list[BlockType]:
        group = self.recent_group(recent)
        return group + [t for t in self.filtered_types() if t not in group]

    def selected(self, recent: RecentTypes = RecentTypes()) -> BlockType | None:
        options = self.options(recent)
        if not options:
            return None
        return options[self.selected_index % len(options)]

    # -------------------------------------------------------------------------
    # Keys
    # -------------------------------------------------------------------------

    def move_down(self, recent: RecentTypes = RecentTypes()) -> None:
        count = len(self.options(recent))
        if count:
            self.selected_index = (self.selected_index + 1) % count

    def move_up(self, recent: RecentTypes = RecentTypes()) -> None:
        count = len(self.options(recent))
        if count:
            self.selected_index = (self.selected_index - 1 + count) % count

    def choose(self, block_type: BlockType, store: BlockStore) -> BlockType | None:
        """Retype the menu's block to ``block_type`` and close."""
        if not self.is_open or self.block_id is None:
            return None
        store.retype(self.block_id, block_type)
        logger.debug("Insert menu retyped %s to %s", self.block_id, block_type.value)
        self.close()
        return block_type

    def confirm(self, store: BlockStore, recent: RecentTypes = RecentTypes()) -> BlockType | None:
        """Enter: apply the selected option. With no options the menu stays open."""
        selected = self.selected(recent)
        if selected is None:
            return None
        return self.choose(selected, store)

    def handle_key(self, key: str, store: BlockStore, recent: RecentTypes = RecentTypes()) -> tuple[bool, BlockType | None]:
        """Route a key press while open.

        Returns ``(handled, chosen_type)``.
        """
        if not self.is_open:
            return False, None
        if key == "ArrowDown":
            self.move_down(recent)
        elif key == "ArrowUp":
            self.move_up(recent)
        elif key == "Enter":
            return True, self.confirm(store, recent)
        elif key == "Escape":
            self.close()
        else:
            return False, None
        return True, None
