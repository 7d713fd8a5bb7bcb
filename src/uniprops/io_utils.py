"""I/O utilities for JSON artifacts and packed integer arrays.

JSON goes through orjson; integer arrays are packed little-endian with
``struct`` and carried inside JSON as base64 text.
"""
from __future__ import annotations

import base64
import binascii
import struct
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import orjson

_STRUCT_CODES = {1: "B", 2: "H", 4: "I"}


def load_json(path: Path) -> Any:
    """Load JSON from a file."""
    return orjson.loads(path.read_bytes())


def dumps_json(obj: Any, *, pretty: bool = True) -> bytes:
    opts = orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS if pretty else orjson.OPT_SORT_KEYS
    return orjson.dumps(obj, option=opts)


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(dumps_json(obj, pretty=pretty))


def pack_uints(values: Sequence[int], width: int) -> bytes:
    """Pack unsigned integers as little-endian elements of ``width`` bytes."""
    code = _STRUCT_CODES.get(width)
    if code is None:
        raise ValueError(f"unsupported element width: {width}")
    return struct.pack(f"<{len(values)}{code}", *values)


def unpack_uints(data: bytes, width: int) -> tuple[int, ...]:
    code = _STRUCT_CODES.get(width)
    if code is None:
        raise ValueError(f"unsupported element width: {width}")
    if len(data) % width:
        raise ValueError(f"packed data length {len(data)} is not a multiple of {width}")
    return struct.unpack(f"<{len(data) // width}{code}", data)


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def b64decode(text: str) -> bytes:
    try:
        return base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError(f"invalid base64 payload: {exc}") from exc
