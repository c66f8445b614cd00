"""Paste classification: should clipboard text become several blocks?"""

from __future__ import annotations

import logging
from enum import Enum

from .settings import settings

logger = logging.getLogger(__name__)


class PasteKind(str, Enum):
    STRUCTURED = "structured"
    PLAIN = "plain"


# Substrings that suggest Markdown structure: headings, code fences,
# bullets, numbered items and paragraph breaks.
STRUCTURE_MARKERS: tuple[str, ...] = ("# ", "## ", "```", "- ", "* ", "1. ", "\n\n")


def has_structure_markers(text: str) -> bool:
    return any(marker in text for marker in STRUCTURE_MARKERS)


def classify_paste(text: str, min_length: int | None = None) -> PasteKind:
    """Classify pasted plain text.

    Structured only when the text is longer than ``min_length`` (default
    from settings) and carries at least one structure marker. Plain pastes
    are left to the host's default behavior.
    """
    threshold = settings.paste_min_length if min_length is None else min_length
    if len(text) > threshold and has_structure_markers(text):
        logger.debug("Paste of %d chars classified as structured", len(text))
        return PasteKind.STRUCTURED
    return PasteKind.PLAIN
