"""Core types shared by the uniprops compilers."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import TypeAlias


MAX_CODEPOINT = 0x10FFFF
CODEPOINT_LIMIT = MAX_CODEPOINT + 1

# Category label of decimal digits; the one label both tables must agree on.
DECIMAL_DIGIT_CATEGORY = "Nd"

_CATEGORY_RE = re.compile(r"^[A-Z][a-z]$")

CategoryLabel: TypeAlias = str


class PositionTag(enum.Enum):
    """Marker for the two boundary rows of a bracketed range pair."""

    FIRST = "First"
    LAST = "Last"
    NONE = "None"


def to_codepoint(value: int | str) -> int:
    """Return the integer codepoint for an int or a one-character string."""
    if isinstance(value, str):
        if len(value) != 1:
            raise ValueError(f"expected a single character, got {value!r}")
        return ord(value)
    return value


def format_codepoint(cp: int) -> str:
    return f"U+{cp:04X}"


@dataclass(frozen=True, slots=True)
class Record:
    """One validated UnicodeData.txt entry, reduced to the fields we compile."""

    codepoint: int
    category: CategoryLabel
    decimal_digit_value: int | None = None
    position_tag: PositionTag = PositionTag.NONE
    name: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.codepoint <= MAX_CODEPOINT:
            raise ValueError(f"codepoint out of range: {self.codepoint:#x}")
        if not _CATEGORY_RE.match(self.category):
            raise ValueError(f"malformed general category {self.category!r}")
        if self.decimal_digit_value is not None and not 0 <= self.decimal_digit_value <= 9:
            raise ValueError(
                f"decimal digit value must be in 0..9, got {self.decimal_digit_value}",
            )


@dataclass(frozen=True, slots=True)
class CategoryRun:
    """Maximal ascending interval of codepoints sharing one category."""

    category: CategoryLabel
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"run end {self.end:#x} precedes start {self.start:#x}")

    def __contains__(self, cp: object) -> bool:
        return isinstance(cp, int) and self.start <= cp <= self.end


@dataclass(frozen=True, slots=True)
class DigitRange:
    """Affine digit range: value(cp) = base + (cp - start) for cp in [start, end]."""

    start: int
    end: int
    base: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError(f"range end {self.end:#x} precedes start {self.start:#x}")
        if not 0 <= self.base <= 9:
            raise ValueError(f"digit base must be in 0..9, got {self.base}")
        top = self.base + (self.end - self.start)
        if top > 9:
            raise ValueError(f"digit range at {self.start:#x} reaches value {top}, above 9")

    def value_at(self, cp: int) -> int:
        return self.base + (cp - self.start)
