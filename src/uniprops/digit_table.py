"""Affine range table for decimal digit values.

Decimal digits come in contiguous "0".."9" runs per script, so the whole
Nd category compresses to a few dozen ranges with a base value each.
"""
from __future__ import annotations

from bisect import bisect_right
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from uniprops.types import DigitRange, Record, to_codepoint

ASCII_MAX = 0x7F
ASCII_ZERO = 0x30
ASCII_NINE = 0x39


def compile_digit_ranges(records: Iterable[Record]) -> list[DigitRange]:
    """Merge ascending digit records into maximal affine ranges.

    A record extends the open range only if it is the next codepoint and
    its value continues the progression ``base + (cp - start)``.
    """

    ranges: list[DigitRange] = []
    start = end = base = -1

    for record in records:
        value = record.decimal_digit_value
        if value is None:
            continue
        cp = record.codepoint
        if start >= 0 and cp == end + 1 and value == base + (cp - start):
            end = cp
            continue
        if start >= 0:
            ranges.append(DigitRange(start=start, end=end, base=base))
        start = end = cp
        base = value

    if start >= 0:
        ranges.append(DigitRange(start=start, end=end, base=base))
    return ranges


def _covers_ascii_digits(starts: Sequence[int], ends: Sequence[int], bases: Sequence[int]) -> bool:
    i = bisect_right(starts, ASCII_ZERO) - 1
    return (
        i >= 0
        and ends[i] >= ASCII_NINE
        and bases[i] + (ASCII_ZERO - starts[i]) == 0
    )


@dataclass(frozen=True, slots=True)
class DigitTable:
    """Compiled codepoint -> decimal digit value lookup.

    ``ascii_fast_path`` is derived: it is set only when the table holds the
    complete '0'..'9' run, so a filtered table that dropped an ASCII digit
    still answers None for it.
    """

    starts: tuple[int, ...]
    ends: tuple[int, ...]
    bases: tuple[int, ...]
    ascii_fast_path: bool = field(init=False, compare=False)

    def __post_init__(self) -> None:
        if not len(self.starts) == len(self.ends) == len(self.bases):
            raise ValueError("starts, ends and bases must have equal length")
        prev_end = -1
        for start, end, base in zip(self.starts, self.ends, self.bases):
            if start <= prev_end or end < start:
                raise ValueError(f"digit ranges must be ascending and disjoint at {start:#x}")
            if not 0 <= base <= 9:
                raise ValueError(f"digit base must be in 0..9, got {base}")
            if base + (end - start) > 9:
                raise ValueError(
                    f"digit range at {start:#x} reaches value {base + (end - start)}, above 9"
                )
            prev_end = end
        object.__setattr__(
            self, "ascii_fast_path", _covers_ascii_digits(self.starts, self.ends, self.bases),
        )

    @classmethod
    def from_ranges(cls, ranges: Sequence[DigitRange]) -> DigitTable:
        return cls(
            starts=tuple(r.start for r in ranges),
            ends=tuple(r.end for r in ranges),
            bases=tuple(r.base for r in ranges),
        )

    def ranges(self) -> list[DigitRange]:
        return [
            DigitRange(start=s, end=e, base=b)
            for s, e, b in zip(self.starts, self.ends, self.bases)
        ]

    def get_digit_value(self, c: int | str) -> int | None:
        """Return the decimal digit value of ``c`` (0..9), or None."""
        cp = to_codepoint(c)
        if cp <= ASCII_MAX and self.ascii_fast_path:
            return cp - ASCII_ZERO if ASCII_ZERO <= cp <= ASCII_NINE else None
        i = bisect_right(self.starts, cp) - 1
        if i < 0 or cp > self.ends[i]:
            return None
        return self.bases[i] + (cp - self.starts[i])

    def stats(self) -> dict[str, Any]:
        return {
            "ranges": len(self.starts),
            "digits": sum(e - s + 1 for s, e in zip(self.starts, self.ends)),
            "ascii_fast_path": self.ascii_fast_path,
        }


def compile_digit_table(records: Iterable[Record]) -> DigitTable:
    return DigitTable.from_ranges(compile_digit_ranges(records))
