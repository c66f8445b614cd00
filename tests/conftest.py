from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from folio.blocks.models import Block, BlockType
from folio.blocks.store import BlockStore


@dataclass
class ManualTimer:
    delay: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualTimers:
    """Timer factory that only fires when the test says so."""

    timers: list[ManualTimer] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    @property
    def live(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def fire_all(self) -> None:
        """Run every timer that was not cancelled, oldest first."""
        for timer in list(self.timers):
            if not timer.cancelled:
                timer.cancelled = True
                timer.callback()


@pytest.fixture
def timers() -> ManualTimers:
    return ManualTimers()


def _make_blocks(*specs: tuple[str, BlockType | str, str]) -> list[Block]:
    return [Block.create(block_type, content=content, id=block_id) for block_id, block_type, content in specs]


@pytest.fixture
def three_paragraphs() -> BlockStore:
    """Store holding paragraphs a, b, c with contents A, B, C."""
    return BlockStore(
        _make_blocks(
            ("a", BlockType.PARAGRAPH, "A"),
            ("b", BlockType.PARAGRAPH, "B"),
            ("c", BlockType.PARAGRAPH, "C"),
        )
    )
