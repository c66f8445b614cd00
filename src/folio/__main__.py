"""Folio - block editing engine command line.

Usage:
    folio blocks FILE           Print the blocks parsed from a Markdown file as JSON
    folio normalize FILE        Print the Markdown the editor would save for FILE
    folio paste-check FILE      Classify FILE's text as a structured or plain paste

FILE may be ``-`` to read standard input.

Environment Variables:
    FOLIO_LOG_LEVEL             Logging level (default: INFO)
    FOLIO_LOG_PATH              Also log to this rotating file
    FOLIO_PASTE_MIN_LENGTH      Paste length threshold (default: 50)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .blocks.markdown import blocks_to_text, text_to_blocks
from .logging_setup import configure_logging
from .paste import PasteKind, classify_paste
from .settings import settings

logger = logging.getLogger(__name__)


def _read_source(name: str) -> str:
    if name == "-":
        return sys.stdin.read()
    return Path(name).read_text(encoding="utf-8")


def cmd_blocks(text: str, deterministic: bool) -> int:
    blocks = text_to_blocks(text, deterministic=deterministic)
    print(json.dumps([block.to_dict() for block in blocks], indent=2, ensure_ascii=False))
    return 0


def cmd_normalize(text: str) -> int:
    print(blocks_to_text(text_to_blocks(text, deterministic=True)))
    return 0


def cmd_paste_check(text: str) -> int:
    kind = classify_paste(text)
    result = {"kind": kind.value, "length": len(text), "threshold": settings.paste_min_length}
    if kind is PasteKind.STRUCTURED:
        result["blocks"] = len(text_to_blocks(text))
    print(json.dumps(result))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="folio",
        description="Folio - block-based rich-text editing engine",
        epilog="""
Examples:
  folio blocks notes.md            Show the block structure of notes.md
  folio normalize notes.md         Re-save notes.md through the block model
  pbpaste | folio paste-check -    Would this clipboard text split into blocks?
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.log_level.upper(),
        help=f"Logging level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version="%(prog)s 0.1.0",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    blocks = commands.add_parser("blocks", help="Print parsed blocks as JSON")
    blocks.add_argument("file", help="Markdown file, or - for stdin")
    blocks.add_argument(
        "--random-ids",
        action="store_true",
        help="Use random block ids instead of ids derived from the text",
    )

    normalize = commands.add_parser("normalize", help="Round-trip a file through the block model")
    normalize.add_argument("file", help="Markdown file, or - for stdin")

    paste_check = commands.add_parser("paste-check", help="Classify text as a structured or plain paste")
    paste_check.add_argument("file", help="Text file, or - for stdin")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        text = _read_source(args.file)
    except OSError as e:
        logger.error("Cannot read %s: %s", args.file, e)
        print(f"Error: cannot read {args.file}", file=sys.stderr)
        return 1

    if args.command == "blocks":
        return cmd_blocks(text, deterministic=not args.random_ids)
    elif args.command == "normalize":
        return cmd_normalize(text)
    elif args.command == "paste-check":
        return cmd_paste_check(text)
    return 1


if __name__ == "__main__":
    sys.exit(main())
