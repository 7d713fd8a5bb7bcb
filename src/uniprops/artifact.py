"""Serialized form of CompiledTables.

The artifact is a single JSON document. The category index is packed at
its narrowest width (uint8 or uint16) and both binary arrays are base64
encoded, so the file loads with one ``orjson.loads`` and no per-codepoint
parsing.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from uniprops.category_table import CHUNK_COUNT, CHUNK_SIZE, CategoryTable, index_width_for
from uniprops.digit_table import DigitTable
from uniprops.errors import ArtifactFormatError
from uniprops.io_utils import b64decode, b64encode, load_json, pack_uints, save_json, unpack_uints
from uniprops.tables import CompiledTables

log = logging.getLogger(__name__)

ARTIFACT_FORMAT = "uniprops-tables"
ARTIFACT_FORMAT_VERSION = 1
DEFAULT_ARTIFACT_NAME = "uniprops_tables.json"


def category_table_to_dict(table: CategoryTable) -> dict[str, Any]:
    width = table.index_width
    return {
        "labels": list(table.categories),
        "index_width": width,
        "chunk_index": b64encode(pack_uints(table.chunk_index, width)),
        "blocks": b64encode(table.blocks),
    }


def category_table_from_dict(payload: Any) -> CategoryTable:
    if not isinstance(payload, dict):
        raise ArtifactFormatError("categories section must be an object")
    try:
        labels = payload["labels"]
        width = payload["index_width"]
        chunk_index = unpack_uints(b64decode(payload["chunk_index"]), width)
        blocks = b64decode(payload["blocks"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ArtifactFormatError(f"malformed categories section: {exc}") from exc

    if not isinstance(labels, list) or not all(isinstance(x, str) for x in labels):
        raise ArtifactFormatError("categories.labels must be a list of strings")
    if len(chunk_index) != CHUNK_COUNT:
        raise ArtifactFormatError(
            f"categories.chunk_index has {len(chunk_index)} entries, expected {CHUNK_COUNT}",
        )
    if len(blocks) % CHUNK_SIZE or not blocks:
        raise ArtifactFormatError("categories.blocks must be a non-empty multiple of 256 bytes")
    block_count = len(blocks) // CHUNK_SIZE
    if width != index_width_for(block_count):
        raise ArtifactFormatError(
            f"index_width {width} does not match {block_count} unique blocks",
        )
    if max(chunk_index) >= block_count:
        raise ArtifactFormatError("categories.chunk_index refers past the last block")
    if max(blocks) > len(labels):
        raise ArtifactFormatError("categories.blocks refers to an unknown label")

    try:
        return CategoryTable(categories=tuple(labels), chunk_index=chunk_index, blocks=blocks)
    except ValueError as exc:
        raise ArtifactFormatError(str(exc)) from exc


def digit_table_to_dict(table: DigitTable) -> dict[str, Any]:
    return {
        "starts": list(table.starts),
        "ends": list(table.ends),
        "bases": list(table.bases),
    }


def digit_table_from_dict(payload: Any) -> DigitTable:
    if not isinstance(payload, dict):
        raise ArtifactFormatError("digits section must be an object")
    try:
        starts = tuple(int(x) for x in payload["starts"])
        ends = tuple(int(x) for x in payload["ends"])
        bases = tuple(int(x) for x in payload["bases"])
        return DigitTable(starts=starts, ends=ends, bases=bases)
    except (KeyError, TypeError, ValueError) as exc:
        raise ArtifactFormatError(f"malformed digits section: {exc}") from exc


def tables_to_dict(tables: CompiledTables) -> dict[str, Any]:
    return {
        "format": ARTIFACT_FORMAT,
        "format_version": ARTIFACT_FORMAT_VERSION,
        "categories": (
            category_table_to_dict(tables.category_table)
            if tables.category_table is not None
            else None
        ),
        "digits": (
            digit_table_to_dict(tables.digit_table)
            if tables.digit_table is not None
            else None
        ),
        "custom": tables.custom,
    }


def tables_from_dict(payload: Any) -> CompiledTables:
    if not isinstance(payload, dict):
        raise ArtifactFormatError("artifact root must be an object")
    if payload.get("format") != ARTIFACT_FORMAT:
        raise ArtifactFormatError(f"unknown artifact format {payload.get('format')!r}")
    if payload.get("format_version") != ARTIFACT_FORMAT_VERSION:
        raise ArtifactFormatError(
            f"unsupported artifact version {payload.get('format_version')!r}, "
            f"expected {ARTIFACT_FORMAT_VERSION}",
        )
    categories = payload.get("categories")
    digits = payload.get("digits")
    custom = payload.get("custom") or {}
    if not isinstance(custom, dict):
        raise ArtifactFormatError("custom section must be an object")
    return CompiledTables(
        category_table=category_table_from_dict(categories) if categories is not None else None,
        digit_table=digit_table_from_dict(digits) if digits is not None else None,
        custom=custom,
    )


def save_tables(tables: CompiledTables, path: Path) -> Path:
    """Write the compiled tables artifact to ``path``."""
    save_json(tables_to_dict(tables), path, pretty=False)
    log.info("Wrote tables artifact %s", path)
    return path


def load_tables(path: Path) -> CompiledTables:
    """Load and validate a compiled tables artifact."""
    try:
        payload = load_json(path)
    except ValueError as exc:
        # orjson.JSONDecodeError subclasses ValueError
        raise ArtifactFormatError(f"{path}: not valid JSON ({exc})") from exc
    return tables_from_dict(payload)
