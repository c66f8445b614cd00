"""Text-surface adapter: caret and selection state of editable regions.

The engine never looks at a rendering tree directly. It reads and writes
caret positions through the ``TextSurface`` protocol, which exposes a
surface's inline text spans in document order and the one live selection.
``BufferSurface`` and ``BufferContainer`` are an in-memory implementation
for hosts that keep their own text buffers (and for tests).

Caret helpers must run after the host has reflected the latest store
content into the surface, otherwise offsets are computed against stale text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, Sequence, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def is_empty(self) -> bool:
        return self.width == 0 and self.height == 0


@dataclass(frozen=True, order=True)
class TextPoint:
    """A position inside a surface: span index plus offset within that span."""

    surface_id: str
    span: int
    offset: int


@dataclass(frozen=True)
class SelectionRange:
    anchor: TextPoint
    focus: TextPoint

    @classmethod
    def caret(cls, point: TextPoint) -> SelectionRange:
        return cls(anchor=point, focus=point)

    @property
    def collapsed(self) -> bool:
        return self.anchor == self.focus

    @property
    def start(self) -> TextPoint:
        """Earlier endpoint when both ends are in one surface, else the anchor."""
        if self.anchor.surface_id == self.focus.surface_id:
            return min(self.anchor, self.focus)
        return self.anchor

    @property
    def end(self) -> TextPoint:
        if self.anchor.surface_id == self.focus.surface_id:
            return max(self.anchor, self.focus)
        return self.focus


@runtime_checkable
class TextSurface(Protocol):
    """An editable region that can report and accept caret/selection state."""

    @property
    def surface_id(self) -> str:
        ...

    def spans(self) -> Sequence[str]:
        """Inline text spans in document order."""
        ...

    def selection(self) -> SelectionRange | None:
        """The live selection, wherever it currently is."""
        ...

    def select(self, selection: SelectionRange | None) -> None:
        ...


# =============================================================================
# Caret primitives
# =============================================================================


def surface_text(surface: TextSurface) -> str:
    return "".join(surface.spans())


def flat_offset(spans: Sequence[str], point: TextPoint) -> int | None:
    """Flattened character offset of ``point``, or None if it is not in ``spans``."""
    if not spans:
        return 0 if point.span == 0 else None
    if not 0 <= point.span < len(spans):
        return None
    offset = max(0, min(point.offset, len(spans[point.span])))
    return sum(len(s) for s in spans[: point.span]) + offset


def get_caret_offset(surface: TextSurface) -> int:
    """Offset of the caret within the surface's flattened text.

    Falls back to the full text length when there is no selection or the
    selection starts outside this surface. Never raises.
    """
    spans = surface.spans()
    text_length = sum(len(s) for s in spans)

    selection = surface.selection()
    if selection is None:
        return text_length

    start = selection.start
    if start.surface_id != surface.surface_id:
        return text_length

    offset = flat_offset(spans, start)
    if offset is None:
        logger.warning("Selection points at missing span %d in %s", start.span, surface.surface_id)
        return text_length
    return offset


def point_at(surface: TextSurface, position: int) -> TextPoint:
    """Walk the spans and find the span/offset pair holding ``position``."""
    spans = surface.spans()
    remaining = max(position, 0)
    for index, span in enumerate(spans):
        if remaining <= len(span):
            return TextPoint(surface.surface_id, index, remaining)
        remaining -= len(span)

    # Past the end: collapse to the very end of the content
    if not spans:
        return TextPoint(surface.surface_id, 0, 0)
    return TextPoint(surface.surface_id, len(spans) - 1, len(spans[-1]))


def set_caret_offset(surface: TextSurface, position: int) -> None:
    """Place a collapsed caret at ``position`` of the surface's text."""
    surface.select(SelectionRange.caret(point_at(surface, position)))


def is_caret_at_start(surface: TextSurface) -> bool:
    return get_caret_offset(surface) == 0


def is_caret_at_end(surface: TextSurface) -> bool:
    return get_caret_offset(surface) == len(surface_text(surface))


# =============================================================================
# In-memory implementation
# =============================================================================


class SelectionModel:
    """The single live selection and focus shared by all buffer surfaces."""

    def __init__(self) -> None:
        self.range: SelectionRange | None = None
        self.focused: str | None = None


class BufferSurface:
    """A surface backed by a list of text spans.

    Geometry is a monospace layout starting at ``origin``: every character
    is ``char_width`` wide and each ``\\n`` starts a new line of
    ``line_height``.
    """

    def __init__(
        self,
        surface_id: str,
        text: str | Sequence[str] = "",
        *,
        selection_model: SelectionModel | None = None,
        origin: Rect | None = None,
        char_width: float = 8.0,
        line_height: float = 20.0,
    ) -> None:
        self._surface_id = surface_id
        self._spans: list[str] = [text] if isinstance(text, str) else list(text)
        self.model = selection_model or SelectionModel()
        self.origin = origin or Rect(0, 0)
        self.char_width = char_width
        self.line_height = line_height

    @property
    def surface_id(self) -> str:
        return self._surface_id

    @property
    def text(self) -> str:
        return "".join(self._spans)

    def spans(self) -> list[str]:
        return list(self._spans)

    def set_text(self, text: str | Sequence[str]) -> None:
        """Replace the rendered content; a selection inside the surface is dropped."""
        self._spans = [text] if isinstance(text, str) else list(text)
        current = self.model.range
        if current is not None and self.surface_id in (current.anchor.surface_id, current.focus.surface_id):
            self.model.range = None

    def selection(self) -> SelectionRange | None:
        return self.model.range

    def select(self, selection: SelectionRange | None) -> None:
        self.model.range = selection

    def focus(self) -> None:
        self.model.focused = self.surface_id

    def has_focus(self) -> bool:
        return self.model.focused == self.surface_id

    def _line_col(self, offset: int) -> tuple[int, int]:
        before = self.text[:offset]
        line = before.count("\n")
        col = len(before) - (before.rfind("\n") + 1)
        return line, col

    def rect_between(self, start: int, end: int) -> Rect:
        """Bounding rectangle of the text between two flattened offsets."""
        start_line, start_col = self._line_col(start)
        end_line, end_col = self._line_col(end)
        top = self.origin.top + start_line * self.line_height

        if start_line == end_line:
            return Rect(
                left=self.origin.left + start_col * self.char_width,
                top=top,
                width=(end_col - start_col) * self.char_width,
                height=self.line_height if end > start else 0.0,
            )

        lines = self.text.split("\n")[start_line : end_line + 1]
        return Rect(
            left=self.origin.left,
            top=top,
            width=max(len(line) for line in lines) * self.char_width,
            height=(end_line - start_line + 1) * self.line_height,
        )


class BufferContainer:
    """An editing container holding buffer surfaces.

    Acts as the formatting host for the selection toolbar. Formatting
    commands rewrite the selected text with inline markup.
    """

    _WRAPPERS: dict[str, tuple[str, str]] = {
        "bold": ("**", "**"),
        "italic": ("*", "*"),
        "underline": ("<u>", "</u>"),
        "strikeThrough": ("~~", "~~"),
        "hiliteColor": ("<mark>", "</mark>"),
    }

    def __init__(
        self,
        rect: Rect,
        *,
        selection_model: SelectionModel | None = None,
        prompt_responses: Sequence[str | None] = (),
    ) -> None:
        self.rect = rect
        self.model = selection_model or SelectionModel()
        self.surfaces: dict[str, BufferSurface] = {}
        self.commands: list[tuple[str, str | None]] = []
        self.alignment: dict[str, str] = {}
        self._prompt_responses = list(prompt_responses)

    def add_surface(self, surface_id: str, text: str = "", **kwargs) -> BufferSurface:
        surface = BufferSurface(surface_id, text, selection_model=self.model, **kwargs)
        self.surfaces[surface_id] = surface
        return surface

    # -- selection host --------------------------------------------------------

    def container_rect(self) -> Rect:
        return self.rect

    def current_selection(self) -> SelectionRange | None:
        return self.model.range

    def restore_selection(self, selection: SelectionRange | None) -> None:
        self.model.range = selection

    def contains(self, point: TextPoint) -> bool:
        return point.surface_id in self.surfaces

    def _bounds(self, selection: SelectionRange) -> tuple[BufferSurface, int, int] | None:
        surface = self.surfaces.get(selection.anchor.surface_id)
        if surface is None or selection.focus.surface_id != surface.surface_id:
            return None
        spans = surface.spans()
        start = flat_offset(spans, selection.start)
        end = flat_offset(spans, selection.end)
        if start is None or end is None:
            return None
        return surface, start, end

    def selection_rect(self, selection: SelectionRange) -> Rect | None:
        bounds = self._bounds(selection)
        if bounds is None:
            return None
        surface, start, end = bounds
        return surface.rect_between(start, end)

    def selected_text(self, selection: SelectionRange) -> str:
        bounds = self._bounds(selection)
        if bounds is None:
            return ""
        surface, start, end = bounds
        return surface.text[start:end]

    # -- formatting host -------------------------------------------------------

    def prompt(self, message: str, default: str = "") -> str | None:
        if not self._prompt_responses:
            return None
        return self._prompt_responses.pop(0)

    def exec_command(self, command: str, value: str | None = None) -> None:
        self.commands.append((command, value))
        selection = self.model.range
        bounds = self._bounds(selection) if selection is not None else None
        if bounds is None:
            return
        surface, start, end = bounds
        text = surface.text
        selected = text[start:end]

        if command in self._WRAPPERS:
            before, after = self._WRAPPERS[command]
            replacement = f"{before}{selected}{after}"
        elif command == "insertHTML":
            replacement = value or ""
        elif command == "createLink":
            replacement = f"[{selected}]({value})"
        elif command.startswith("justify"):
            self.alignment[surface.surface_id] = command[len("justify"):].lower()
            return
        else:
            # unlink and anything unknown leave the text as is
            return

        surface.set_text(text[:start] + replacement + text[end:])
        end_point = point_at(surface, start + len(replacement))
        self.model.range = SelectionRange(anchor=point_at(surface, start), focus=end_point)
