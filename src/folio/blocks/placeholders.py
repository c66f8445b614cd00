"""Localized placeholder text and menu labels per block type."""

from __future__ import annotations

from .models import BlockType

DEFAULT_LOCALE = "en"

_PLACEHOLDERS: dict[str, dict[BlockType, str]] = {
    "en": {
        BlockType.PARAGRAPH: "Type / for commands",
        BlockType.HEADING_1: "Heading 1",
        BlockType.HEADING_2: "Heading 2",
        BlockType.HEADING_3: "Heading 3",
        BlockType.BULLET_LIST: "List item",
        BlockType.ORDERED_LIST: "List item",
        BlockType.CHECKBOX: "Checklist item",
        BlockType.CODE: "Enter code...",
        BlockType.CALLOUT: "Write a callout...",
        BlockType.DIVIDER: "",
        BlockType.IMAGE: "Add a caption",
    },
    "es": {
        BlockType.PARAGRAPH: "Escribe / para comandos",
        BlockType.HEADING_1: "Encabezado 1",
        BlockType.HEADING_2: "Encabezado 2",
        BlockType.HEADING_3: "Encabezado 3",
        BlockType.BULLET_LIST: "Elemento de lista",
        BlockType.ORDERED_LIST: "Elemento de lista",
        BlockType.CHECKBOX: "Elemento de checklist",
        BlockType.CODE: "Ingresa código...",
        BlockType.CALLOUT: "Escribe una nota...",
        BlockType.DIVIDER: "",
        BlockType.IMAGE: "Agrega una leyenda",
    },
}

# Labels shown (and searched) in the insert menu. Order is menu order.
_LABELS: dict[str, dict[BlockType, str]] = {
    "en": {
        BlockType.PARAGRAPH: "Text",
        BlockType.HEADING_1: "Heading 1",
        BlockType.HEADING_2: "Heading 2",
        BlockType.HEADING_3: "Heading 3",
        BlockType.BULLET_LIST: "Bullet List",
        BlockType.ORDERED_LIST: "Numbered List",
        BlockType.CHECKBOX: "Checklist",
        BlockType.IMAGE: "Image",
        BlockType.CODE: "Code",
        BlockType.CALLOUT: "Callout",
        BlockType.DIVIDER: "Divider",
    },
    "es": {
        BlockType.PARAGRAPH: "Texto",
        BlockType.HEADING_1: "Encabezado 1",
        BlockType.HEADING_2: "Encabezado 2",
        BlockType.HEADING_3: "Encabezado 3",
        BlockType.BULLET_LIST: "Lista con viñetas",
        BlockType.ORDERED_LIST: "Lista numerada",
        BlockType.CHECKBOX: "Checklist",
        BlockType.IMAGE: "Imagen",
        BlockType.CODE: "Código",
        BlockType.CALLOUT: "Nota destacada",
        BlockType.DIVIDER: "Divisor",
    },
}


def _for_locale(table: dict[str, dict[BlockType, str]], locale: str) -> dict[BlockType, str]:
    return table.get(locale) or table[DEFAULT_LOCALE]


def placeholder_for(block_type: BlockType, locale: str = DEFAULT_LOCALE) -> str:
    """Empty-state placeholder for a block; unknown locales fall back to English."""
    return _for_locale(_PLACEHOLDERS, locale).get(block_type, "")


def label_for(block_type: BlockType, locale: str = DEFAULT_LOCALE) -> str:
    return _for_locale(_LABELS, locale).get(block_type, block_type.value)


def menu_types(locale: str = DEFAULT_LOCALE) -> list[BlockType]:
    """Block types in menu order."""
    return list(_for_locale(_LABELS, locale))
