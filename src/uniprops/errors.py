"""Exception types raised by the uniprops compiler and artifact loader."""
from __future__ import annotations


class UnipropsError(Exception):
    """Base class for all uniprops failures."""


class UnicodeDataParseError(UnipropsError, ValueError):
    """Raised when a UnicodeData.txt row cannot be turned into a Record."""

    def __init__(self, message: str, *, line_number: int | None = None, line: str | None = None) -> None:
        self.line_number = line_number
        self.line = line
        where = f"line {line_number}: " if line_number is not None else ""
        super().__init__(f"{where}{message}")


class ConsistencyError(UnipropsError):
    """Raised when the category and digit tables disagree about Nd codepoints."""

    def __init__(self, codepoints: list[int]) -> None:
        self.codepoints = codepoints
        preview = ", ".join(f"U+{cp:04X}" for cp in codepoints[:8])
        more = f" (+{len(codepoints) - 8} more)" if len(codepoints) > 8 else ""
        super().__init__(
            f"{len(codepoints)} codepoint(s) violate Nd <-> digit value agreement: {preview}{more}"
        )


class ArtifactFormatError(UnipropsError, ValueError):
    """Raised when a compiled tables artifact is corrupt or of an unknown format."""


class TableNotBuiltError(UnipropsError, LookupError):
    """Raised when querying a table that was disabled at build time."""
