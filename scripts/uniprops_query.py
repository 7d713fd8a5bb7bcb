#!/usr/bin/env python3
"""Look up characters in a compiled uniprops tables artifact.

Usage:
  python3 scripts/uniprops_query.py --tables data/uniprops_tables.json A 7 U+0663 0xFF10

Each argument is either a single character or a codepoint written as
``U+XXXX`` / ``0xXXXX``. Prints one JSON row per argument. Exit 2 if the
artifact is missing, 1 if it is malformed.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from uniprops.artifact import DEFAULT_ARTIFACT_NAME, load_tables
from uniprops.classifier import CharacterClassifier
from uniprops.errors import ArtifactFormatError, TableNotBuiltError
from uniprops.types import format_codepoint

log = logging.getLogger("uniprops_query")


def parse_char_arg(text: str) -> int:
    """Return the codepoint named by a CLI argument."""
    if len(text) == 1:
        return ord(text)
    upper = text.upper()
    for prefix in ("U+", "0X"):
        if upper.startswith(prefix):
            return int(text[len(prefix):], 16)
    raise ValueError(f"expected one character or U+XXXX, got {text!r}")


def _lookup(classifier: CharacterClassifier, cp: int) -> dict[str, Any]:
    row: dict[str, Any] = {"codepoint": format_codepoint(cp)}
    try:
        row["category"] = classifier.category(cp)
    except TableNotBuiltError:
        row["category"] = None
    try:
        row["digit_value"] = classifier.digit_value(cp)
    except TableNotBuiltError:
        row["digit_value"] = None
    return row


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Query general category and decimal digit value per character.",
    )
    parser.add_argument(
        "--tables",
        type=Path,
        default=Path(DEFAULT_ARTIFACT_NAME),
        help=f"Compiled tables artifact (default: {DEFAULT_ARTIFACT_NAME})",
    )
    parser.add_argument("chars", nargs="+", help="Characters or U+XXXX codepoints")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        codepoints = [parse_char_arg(arg) for arg in args.chars]
    except ValueError as exc:
        parser.error(str(exc))

    if not args.tables.exists():
        log.error("Tables artifact not found: %s", args.tables)
        return 2
    try:
        classifier = CharacterClassifier(load_tables(args.tables))
    except ArtifactFormatError as exc:
        log.error("Unreadable tables artifact %s: %s", args.tables, exc)
        return 1

    rows = [_lookup(classifier, cp) for cp in codepoints]
    sys.stdout.buffer.write(orjson.dumps(rows, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
