"""Autosave: debounce store mutations into one serialize-and-emit call.

Every mutation cancels the pending timer and starts a new one. When the
delay passes without another mutation, the whole store is serialized and
handed to the change callback. Last mutation wins; there is no retry.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol, Sequence

from .blocks.models import Block
from .blocks.store import BlockStore
from .settings import settings

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> Any:
        ...


class TimerFactory(Protocol):
    """Anything with ``call_later``; an asyncio event loop qualifies."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...


class ThreadTimers:
    """Timer factory backed by ``threading.Timer`` (daemon threads)."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


class AutosaveScheduler:
    """Debounced serializer attached to a BlockStore."""

    def __init__(
        self,
        store: BlockStore,
        serialize: Callable[[Sequence[Block]], str],
        on_change: Callable[[str], None] | None,
        *,
        delay: float | None = None,
        timers: TimerFactory | None = None,
    ) -> None:
        self.store = store
        self.serialize = serialize
        self.on_change = on_change
        self.delay = settings.autosave_delay if delay is None else delay
        self.timers = timers or ThreadTimers()
        self._handle: TimerHandle | None = None
        self._generation = 0
        self._lock = threading.Lock()
        self._unsubscribe = store.subscribe(self._on_mutation)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _on_mutation(self, _blocks: Sequence[Block]) -> None:
        self.schedule()

    def schedule(self) -> None:
        """Cancel any pending save and start the delay over."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._generation += 1
            generation = self._generation
            self._handle = self.timers.call_later(self.delay, lambda: self._fire(generation))

    def cancel(self) -> None:
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
                self._handle = None
                self._generation += 1

    def flush(self) -> None:
        """Save now if a save is pending."""
        if self.pending:
            self.cancel()
            self._emit()

    def close(self) -> None:
        self.cancel()
        self._unsubscribe()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # A timer that lost the race with a newer mutation
            if generation != self._generation:
                return
            self._handle = None
        self._emit()

    def _emit(self) -> None:
        text = self.serialize(self.store.blocks)
        logger.debug("Autosave emitting %d chars for %d blocks", len(text), len(self.store))
        if self.on_change is not None:
            self.on_change(text)
