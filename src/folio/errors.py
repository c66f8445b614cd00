"""Folio Error Hierarchy.

Provides a small structured error hierarchy for the editing engine:
- FolioError: Base exception for all engine errors
- ValidationError: Unrecognized values coming from the host (type, direction, command)
- InvariantError: The store would be left empty or holding duplicate ids
- ImageReadError: Reading image bytes for an image block failed

Block operations never raise for an unknown block id; a missing id is a
no-op. These errors cover malformed host input and engine bugs.

Usage:
    from folio.errors import ValidationError

    if direction not in ("up", "down"):
        raise ValidationError("Unknown move direction", field="direction", value=direction)
"""

from __future__ import annotations

from typing import Any


def _truncate(value: str, max_len: int) -> str:
    if len(value) <= max_len:
        return value
    return value[: max_len - 3] + "..."


class FolioError(Exception):
    """Base exception for all Folio errors.

    Attributes:
        message: Human-readable error description
        recoverable: Whether the operation can be retried
        context: Additional context for debugging
    """

    def __init__(
        self,
        message: str,
        *,
        recoverable: bool = False,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.recoverable = recoverable
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to a structured dictionary for host-side reporting."""
        return {
            "type": type(self).__name__.lower().replace("error", ""),
            "message": self.message,
            "recoverable": self.recoverable,
            **{k: v for k, v in self.context.items() if v is not None},
        }


class ValidationError(FolioError):
    """A value supplied by the host is not one the engine understands.

    Example:
        raise ValidationError("Unknown block type", field="type", value="table")
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.pop("context", {})
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = _truncate(str(value), 100)
        super().__init__(message, recoverable=False, context=context)
        self.field = field


class InvariantError(FolioError):
    """A store replacement would break a structural invariant."""

    def __init__(self, message: str, *, invariant: str, block_id: str | None = None) -> None:
        super().__init__(
            message,
            recoverable=False,
            context={"invariant": invariant, "block_id": block_id},
        )
        self.invariant = invariant


class ImageReadError(FolioError):
    """Image bytes could not be read for an image block."""

    def __init__(self, message: str, *, source: str | None = None) -> None:
        super().__init__(
            message,
            recoverable=True,
            context={"source": _truncate(source, 200) if source else None},
        )
