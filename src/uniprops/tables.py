"""The compiled table set handed from the compiler to the runtime."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from uniprops.category_table import CategoryTable
from uniprops.digit_table import DigitTable


@dataclass(frozen=True, slots=True)
class CompiledTables:
    """Output of one compile pass. Either table is None when disabled."""

    category_table: CategoryTable | None
    digit_table: DigitTable | None
    custom: dict[str, Any] = field(default_factory=dict)

    def stats(self) -> dict[str, Any]:
        return {
            "categories": self.category_table.stats() if self.category_table is not None else None,
            "digits": self.digit_table.stats() if self.digit_table is not None else None,
            "custom": sorted(self.custom),
        }
