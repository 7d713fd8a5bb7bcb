"""Deduplicated two-level category table.

The codepoint space 0..=0x10FFFF is cut into 4352 chunks of 256 codepoints.
Each chunk is rendered as 256 slot bytes (0 = unassigned, k = k-th label),
identical chunks are stored once, and a per-chunk index points at the stored
copy. Lookup is two array reads:

    block = chunk_index[cp >> 8]
    slot  = blocks[(block << 8) | (cp & 0xFF)]

Most planes are empty or uniform (CJK, Hangul, private use), so a handful of
a few hundred unique chunks covers the whole space.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from uniprops.types import CODEPOINT_LIMIT, MAX_CODEPOINT, CategoryLabel, CategoryRun, to_codepoint

CHUNK_SHIFT = 8
CHUNK_SIZE = 1 << CHUNK_SHIFT
CHUNK_MASK = CHUNK_SIZE - 1
CHUNK_COUNT = CODEPOINT_LIMIT >> CHUNK_SHIFT

# Slot bytes reserve 0 for "unassigned".
MAX_LABELS = 255


def index_width_for(block_count: int) -> int:
    """Narrowest element width (bytes) able to address ``block_count`` blocks."""
    return 1 if block_count <= 0x100 else 2


@dataclass(frozen=True, slots=True)
class CategoryTable:
    """Compiled codepoint -> general category lookup."""

    categories: tuple[CategoryLabel, ...]
    chunk_index: tuple[int, ...]
    blocks: bytes

    def __post_init__(self) -> None:
        if len(self.categories) > MAX_LABELS:
            raise ValueError(f"at most {MAX_LABELS} category labels fit a slot byte")
        if len(self.chunk_index) != CHUNK_COUNT:
            raise ValueError(
                f"chunk_index must have {CHUNK_COUNT} entries, got {len(self.chunk_index)}",
            )
        if len(self.blocks) % CHUNK_SIZE:
            raise ValueError("blocks length must be a multiple of the chunk size")

    @property
    def block_count(self) -> int:
        return len(self.blocks) // CHUNK_SIZE

    @property
    def index_width(self) -> int:
        return index_width_for(self.block_count)

    def from_char(self, c: int | str) -> CategoryLabel | None:
        """Return the general category of ``c``, or None if unassigned/out of range."""
        cp = to_codepoint(c)
        if cp < 0 or cp > MAX_CODEPOINT:
            return None
        slot = self.blocks[(self.chunk_index[cp >> CHUNK_SHIFT] << CHUNK_SHIFT) | (cp & CHUNK_MASK)]
        return self.categories[slot - 1] if slot else None

    def unique_block(self, block_id: int) -> tuple[CategoryLabel | None, ...]:
        """Decode one stored chunk into its 256 optional labels."""
        raw = self.blocks[block_id * CHUNK_SIZE:(block_id + 1) * CHUNK_SIZE]
        return tuple(self.categories[s - 1] if s else None for s in raw)

    def expand(self) -> bytes:
        """Non-deduplicated slot table covering every codepoint (4352 x 256 bytes)."""
        return b"".join(
            self.blocks[block_id * CHUNK_SIZE:(block_id + 1) * CHUNK_SIZE]
            for block_id in self.chunk_index
        )

    def stats(self) -> dict[str, Any]:
        return {
            "labels": len(self.categories),
            "chunks": CHUNK_COUNT,
            "unique_blocks": self.block_count,
            "index_width": self.index_width,
            "table_bytes": CHUNK_COUNT * self.index_width + len(self.blocks),
        }


def compile_category_table(runs: Sequence[CategoryRun]) -> CategoryTable:
    """Compile ascending, non-overlapping category runs into a CategoryTable."""
    labels = tuple(sorted({run.category for run in runs}))
    if len(labels) > MAX_LABELS:
        raise ValueError(f"too many distinct categories: {len(labels)}")
    slot_of = {label: i + 1 for i, label in enumerate(labels)}

    block_ids: dict[bytes, int] = {}
    unique_blocks: list[bytes] = []
    chunk_index: list[int] = []

    run_iter = iter(runs)
    current = next(run_iter, None)

    for chunk_start in range(0, CODEPOINT_LIMIT, CHUNK_SIZE):
        chunk_end = chunk_start + CHUNK_MASK
        chunk = bytearray(CHUNK_SIZE)

        while current is not None and current.end < chunk_start:
            current = next(run_iter, None)
        while current is not None and current.start <= chunk_end:
            lo = max(current.start, chunk_start) - chunk_start
            hi = min(current.end, chunk_end) - chunk_start
            chunk[lo:hi + 1] = bytes((slot_of[current.category],)) * (hi - lo + 1)
            if current.end > chunk_end:
                # Run spills into the next chunk; keep the cursor on it.
                break
            current = next(run_iter, None)

        key = bytes(chunk)
        block_id = block_ids.get(key)
        if block_id is None:
            block_id = len(unique_blocks)
            block_ids[key] = block_id
            unique_blocks.append(key)
        chunk_index.append(block_id)

    return CategoryTable(
        categories=labels,
        chunk_index=tuple(chunk_index),
        blocks=b"".join(unique_blocks),
    )
