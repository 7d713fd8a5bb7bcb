"""Cross-table check: a codepoint is Nd exactly when it has a digit value."""

from __future__ import annotations

from collections.abc import Iterable

from uniprops.category_table import CategoryTable
from uniprops.digit_table import DigitTable
from uniprops.errors import ConsistencyError
from uniprops.types import CODEPOINT_LIMIT, DECIMAL_DIGIT_CATEGORY


def find_inconsistencies(
    category_table: CategoryTable,
    digit_table: DigitTable,
    *,
    codepoints: Iterable[int] | None = None,
) -> list[int]:
    """Return codepoints where the category table and digit table disagree.

    Defaults to scanning every codepoint in 0..=0x10FFFF.
    """

    if codepoints is None:
        codepoints = range(CODEPOINT_LIMIT)
    from_char = category_table.from_char
    get_digit_value = digit_table.get_digit_value
    return [
        cp
        for cp in codepoints
        if (from_char(cp) == DECIMAL_DIGIT_CATEGORY) != (get_digit_value(cp) is not None)
    ]


def verify_consistency(category_table: CategoryTable, digit_table: DigitTable) -> None:
    """Raise ConsistencyError if the two tables disagree anywhere."""
    bad = find_inconsistencies(category_table, digit_table)
    if bad:
        raise ConsistencyError(bad)
