"""Per-codepoint reference answers from the interpreter's ``unicodedata``."""
from __future__ import annotations

import unicodedata


def reference_category(cp: int) -> str | None:
    cat = unicodedata.category(chr(cp))
    return None if cat == "Cn" else cat


def reference_digit(cp: int) -> int | None:
    return unicodedata.decimal(chr(cp), None)
