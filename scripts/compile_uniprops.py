#!/usr/bin/env python3
"""Compile UnicodeData.txt into the uniprops lookup-table artifact.

Writes the tables artifact plus a ``<stem>.manifest.json`` sidecar and
prints a JSON build summary to stdout. Logs go to stderr.

Usage:
  python3 scripts/compile_uniprops.py \
    --input data/ucd/UnicodeData.txt \
    --output data/uniprops_tables.json

Restricted builds:
  python3 scripts/compile_uniprops.py --input UnicodeData.txt --output t.json \
    --categories Nd --no-verify
  python3 scripts/compile_uniprops.py --input UnicodeData.txt --output t.json \
    --exclude-codepoints 0038,0660..0669

Comparing with an earlier build:
  python3 scripts/compile_uniprops.py --input UnicodeData.txt --output t.json \
    --compare-with previous/t.manifest.json

Exit codes: 0 success, 1 malformed input or failed consistency check,
2 input file or previous manifest missing.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from uniprops.artifact import DEFAULT_ARTIFACT_NAME
from uniprops.build_manifest import compare_manifests, load_manifest
from uniprops.builder import BuildConfig, RecordFilter, accept_all, build
from uniprops.errors import ConsistencyError, UnicodeDataParseError
from uniprops.types import MAX_CODEPOINT, Record

log = logging.getLogger("compile_uniprops")


def parse_codepoint_set(text: str) -> frozenset[int]:
    """Parse ``0038,0660..0669`` (hex, inclusive ranges) into a codepoint set."""
    out: set[int] = set()
    for part in text.split(","):
        part = part.strip()
        if not part:
            continue
        lo_text, sep, hi_text = part.partition("..")
        lo = int(lo_text, 16)
        hi = int(hi_text, 16) if sep else lo
        if hi < lo or hi > MAX_CODEPOINT:
            raise ValueError(f"invalid codepoint range {part!r}")
        out.update(range(lo, hi + 1))
    return frozenset(out)


def make_filter(categories: frozenset[str] | None) -> RecordFilter:
    if categories is None:
        return accept_all

    def _keep(record: Record) -> bool:
        return record.category in categories

    return _keep


def _write_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS))
    sys.stdout.buffer.write(b"\n")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Compile UnicodeData.txt into category and digit lookup tables.",
    )
    parser.add_argument("--input", type=Path, required=True, help="Path to UnicodeData.txt")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path(DEFAULT_ARTIFACT_NAME),
        help=f"Artifact path (default: {DEFAULT_ARTIFACT_NAME})",
    )
    parser.add_argument("--no-categories", action="store_true", help="Skip the category table")
    parser.add_argument("--no-digits", action="store_true", help="Skip the digit table")
    parser.add_argument(
        "--exclude-codepoints",
        default="",
        help=(
            "Hex codepoints/ranges to leave unassigned, e.g. 0038,0660..0669. "
            "Codepoints inside a First/Last range split that range."
        ),
    )
    parser.add_argument(
        "--categories",
        default="",
        help="Comma-separated categories to keep, e.g. Nd,Lu (default: all)",
    )
    parser.add_argument(
        "--no-verify",
        action="store_true",
        help="Skip the Nd <-> digit value consistency check",
    )
    parser.add_argument(
        "--compare-with",
        type=Path,
        default=None,
        help="Previous build manifest; adds a \"comparison\" section to the summary",
    )
    parser.add_argument("--verbose", "-v", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    if not args.input.exists():
        log.error("Input not found: %s", args.input)
        return 2

    try:
        excluded = parse_codepoint_set(args.exclude_codepoints)
    except ValueError as exc:
        parser.error(f"--exclude-codepoints: {exc}")
    previous = None
    if args.compare_with is not None:
        if not args.compare_with.exists():
            log.error("Manifest not found: %s", args.compare_with)
            return 2
        try:
            previous = load_manifest(args.compare_with)
        except ValueError as exc:
            log.error("Unreadable manifest %s: %s", args.compare_with, exc)
            return 1

    categories = frozenset(c.strip() for c in args.categories.split(",") if c.strip()) or None

    config = BuildConfig(
        filter=make_filter(categories),
        exclude=excluded,
        with_categories=not args.no_categories,
        with_digits=not args.no_digits,
        out_file=args.output,
        verify=not args.no_verify,
    )

    try:
        result = build(args.input, config)
    except UnicodeDataParseError as exc:
        log.error("Malformed input %s: %s", args.input, exc)
        return 1
    except ConsistencyError as exc:
        log.error("Consistency check failed: %s", exc)
        return 1

    summary: dict[str, Any] = {
        "status": "ok",
        "artifact": str(result.artifact_path),
        "manifest": str(result.manifest_path),
        "run_id": result.manifest["run_id"],
        "records_total": result.manifest["input_source"]["records_total"],
        "records_included": result.manifest["input_source"]["records_included"],
        "table_stats": result.manifest["table_stats"],
        "timings_sec": result.manifest["timings_sec"],
    }
    if previous is not None:
        summary["comparison"] = compare_manifests(result.manifest, previous)
        log.info("Compared against run %s", previous.get("run_id"))
    _write_json(summary)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
