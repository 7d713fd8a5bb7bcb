"""Character classification and decimal normalization over compiled tables."""
from __future__ import annotations

from uniprops.category_table import CategoryTable
from uniprops.digit_table import ASCII_ZERO, DigitTable
from uniprops.errors import TableNotBuiltError
from uniprops.tables import CompiledTables
from uniprops.types import DECIMAL_DIGIT_CATEGORY, CategoryLabel


class CharacterClassifier:
    """Query facade for one set of compiled tables.

    Every lookup is total: characters outside the tables (unassigned,
    filtered out, or beyond U+10FFFF) yield None rather than an error. Asking
    for a table that was disabled at build time raises TableNotBuiltError.
    """

    __slots__ = ("tables",)

    def __init__(self, tables: CompiledTables) -> None:
        self.tables = tables

    @property
    def category_table(self) -> CategoryTable:
        table = self.tables.category_table
        if table is None:
            raise TableNotBuiltError("category table was not built (with_categories=False)")
        return table

    @property
    def digit_table(self) -> DigitTable:
        table = self.tables.digit_table
        if table is None:
            raise TableNotBuiltError("digit table was not built (with_digits=False)")
        return table

    def category(self, ch: int | str) -> CategoryLabel | None:
        return self.category_table.from_char(ch)

    def digit_value(self, ch: int | str) -> int | None:
        return self.digit_table.get_digit_value(ch)

    def is_decimal(self, ch: int | str) -> bool:
        return self.digit_value(ch) is not None

    def is_category(self, ch: int | str, label: CategoryLabel) -> bool:
        return self.category(ch) == label

    def is_decimal_category(self, ch: int | str) -> bool:
        return self.is_category(ch, DECIMAL_DIGIT_CATEGORY)

    def normalize_decimal(self, ch: int | str) -> str | None:
        """Map any decimal digit to its ASCII form ('٣' -> '3'); None otherwise."""
        value = self.digit_value(ch)
        return chr(ASCII_ZERO + value) if value is not None else None

    def normalize_decimals(self, text: str) -> str:
        """Replace every decimal digit in ``text`` by its ASCII form."""
        lookup = self.digit_table.get_digit_value
        out: list[str] = []
        for ch in text:
            value = lookup(ch)
            out.append(ch if value is None else chr(ASCII_ZERO + value))
        return "".join(out)

    def normalize_decimals_filtering(self, text: str) -> str:
        """Keep only the decimal digits of ``text``, in ASCII form."""
        lookup = self.digit_table.get_digit_value
        return "".join(
            chr(ASCII_ZERO + value)
            for value in map(lookup, text)
            if value is not None
        )
