"""Selection toolbar: a floating formatting bar that follows the selection.

Visible only for a non-collapsed selection anchored inside the editing
container with a non-empty bounding box. Clicking a toolbar button can
move focus and clear the live selection, so the last evaluated range is
kept and restored right before each formatting command is issued.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .errors import ValidationError
from .settings import settings
from .surface import Rect, SelectionRange, TextPoint

logger = logging.getLogger(__name__)

HIGHLIGHT_COLOR = "#FFF1A6"

_LINK_PROMPTS = {"en": "Paste a link", "es": "Pega un enlace"}


class FormatCommand(str, Enum):
    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    STRIKETHROUGH = "strikethrough"
    HIGHLIGHT = "highlight"
    INLINE_CODE = "inline_code"
    LINK = "link"
    UNLINK = "unlink"
    ALIGN_LEFT = "align_left"
    ALIGN_CENTER = "align_center"
    ALIGN_RIGHT = "align_right"

    @classmethod
    def parse(cls, value: FormatCommand | str) -> FormatCommand:
        if isinstance(value, FormatCommand):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValidationError("Unknown formatting command", field="command", value=value) from None


# Commands that map one-to-one onto a host command (name, value)
_HOST_COMMANDS: dict[FormatCommand, tuple[str, str | None]] = {
    FormatCommand.BOLD: ("bold", None),
    FormatCommand.ITALIC: ("italic", None),
    FormatCommand.UNDERLINE: ("underline", None),
    FormatCommand.STRIKETHROUGH: ("strikeThrough", None),
    FormatCommand.HIGHLIGHT: ("hiliteColor", HIGHLIGHT_COLOR),
    FormatCommand.UNLINK: ("unlink", None),
    FormatCommand.ALIGN_LEFT: ("justifyLeft", None),
    FormatCommand.ALIGN_CENTER: ("justifyCenter", None),
    FormatCommand.ALIGN_RIGHT: ("justifyRight", None),
}


class FormattingHost(Protocol):
    """What the toolbar needs from the host platform."""

    def container_rect(self) -> Rect:
        ...

    def contains(self, point: TextPoint) -> bool:
        ...

    def current_selection(self) -> SelectionRange | None:
        ...

    def restore_selection(self, selection: SelectionRange | None) -> None:
        ...

    def selection_rect(self, selection: SelectionRange) -> Rect | None:
        ...

    def selected_text(self, selection: SelectionRange) -> str:
        ...

    def exec_command(self, command: str, value: str | None = None) -> None:
        ...

    def prompt(self, message: str, default: str = "") -> str | None:
        ...


@dataclass(frozen=True)
class ToolbarState:
    visible: bool = False
    x: float = 0.0
    y: float = 0.0


def inline_code_html(text: str) -> str:
    """Wrap text in a code element, escaping markup-significant characters."""
    safe = html.escape(text, quote=False) if text else "&nbsp;"
    return f"<code>{safe}</code>"


class SelectionToolbar:
    def __init__(self, host: FormattingHost, *, locale: str = "en", offset: float | None = None) -> None:
        self.host = host
        self.locale = locale
        self.offset = settings.toolbar_offset if offset is None else offset
        self.state = ToolbarState()
        self._saved: SelectionRange | None = None

    @property
    def visible(self) -> bool:
        return self.state.visible

    def hide(self) -> None:
        if self.state.visible:
            self.state = ToolbarState(visible=False, x=self.state.x, y=self.state.y)
        self._saved = None

    def refresh(self) -> ToolbarState:
        """Re-evaluate visibility and position from the live selection."""
        selection = self.host.current_selection()
        if selection is None or selection.collapsed:
            self.hide()
            return self.state

        if not self.host.contains(selection.anchor):
            self.hide()
            return self.state

        rect = self.host.selection_rect(selection)
        if rect is None or rect.is_empty():
            self.hide()
            return self.state

        container = self.host.container_rect()
        self._saved = selection
        x = rect.left - container.left + rect.width / 2
        y = rect.top - container.top - self.offset
        self.state = ToolbarState(visible=True, x=x, y=max(y, 0))
        return self.state

    def on_scroll(self, inside_container: bool) -> None:
        if inside_container:
            self.hide()

    def on_focus_out(self, inside_container: bool) -> None:
        if not inside_container:
            self.hide()

    def _restore(self) -> SelectionRange | None:
        if self._saved is not None:
            self.host.restore_selection(self._saved)
        return self._saved

    def apply(self, command: FormatCommand | str) -> None:
        """Restore the saved range, issue the host command, re-evaluate."""
        command = FormatCommand.parse(command)

        if command is FormatCommand.LINK:
            self._insert_link()
        elif command is FormatCommand.INLINE_CODE:
            self._wrap_inline_code()
        else:
            name, value = _HOST_COMMANDS[command]
            self._restore()
            self.host.exec_command(name, value)

        logger.debug("Applied %s", command.value)
        self.refresh()

    def _insert_link(self) -> None:
        self._restore()
        message = _LINK_PROMPTS.get(self.locale, _LINK_PROMPTS["en"])
        url = self.host.prompt(message, "https://")
        if url:
            self.host.exec_command("createLink", url)
        else:
            self.host.exec_command("unlink")

    def _wrap_inline_code(self) -> None:
        selection = self._restore() or self.host.current_selection()
        if selection is None:
            return
        self.host.exec_command("insertHTML", inline_code_html(self.host.selected_text(selection)))
