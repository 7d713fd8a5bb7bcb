"""UnicodeData.txt reader.

Turns the semicolon-delimited rows of the Unicode Character Database file
(UAX #44, section 4.2) into validated, codepoint-ascending ``Record`` values.

Large homogeneous ranges (CJK ideographs, Hangul syllables, private use
planes) are listed in the source as two rows whose names carry a
``<Range Name, First>`` / ``<Range Name, Last>`` suffix. The reader only
tags those rows; expanding the range is the run builder's job.

Any malformed row aborts the read with ``UnicodeDataParseError``.
"""
from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Iterable
from pathlib import Path

from uniprops.errors import UnicodeDataParseError
from uniprops.types import MAX_CODEPOINT, PositionTag, Record

log = logging.getLogger(__name__)

FIELD_COUNT = 15

# Field positions within a UnicodeData.txt row.
F_CODEPOINT = 0
F_NAME = 1
F_CATEGORY = 2
F_DECIMAL_DIGIT = 6

_SKIP_RE = re.compile(r"^\s*(#.*)?$")
_HEX_RE = re.compile(r"^[0-9A-Fa-f]{4,6}$")
_NAME_RANGE_RE = re.compile(r"^<([^,]*), (First|Last)>$")


def position_tag_for_name(name: str) -> tuple[PositionTag, str | None]:
    """Return the range tag and range name encoded in a record name, if any."""
    m = _NAME_RANGE_RE.match(name)
    if not m:
        return PositionTag.NONE, None
    tag = PositionTag.FIRST if m.group(2) == "First" else PositionTag.LAST
    return tag, m.group(1)


def parse_unicode_data_line(line: str, *, line_number: int | None = None) -> Record:
    """Parse one UnicodeData.txt row into a Record."""
    text = line.rstrip("\r\n")
    fields = text.split(";")
    if len(fields) != FIELD_COUNT:
        raise UnicodeDataParseError(
            f"expected {FIELD_COUNT} fields, got {len(fields)}",
            line_number=line_number,
            line=text,
        )

    cp_field = fields[F_CODEPOINT].strip()
    if not _HEX_RE.match(cp_field):
        raise UnicodeDataParseError(
            f"invalid hex codepoint {cp_field!r}", line_number=line_number, line=text,
        )
    codepoint = int(cp_field, 16)
    if codepoint > MAX_CODEPOINT:
        raise UnicodeDataParseError(
            f"codepoint {cp_field} exceeds U+10FFFF", line_number=line_number, line=text,
        )

    name = fields[F_NAME].strip()
    digit_field = fields[F_DECIMAL_DIGIT].strip()
    digit: int | None = None
    if digit_field:
        if not digit_field.isascii() or not digit_field.isdigit():
            raise UnicodeDataParseError(
                f"invalid decimal digit value {digit_field!r}",
                line_number=line_number,
                line=text,
            )
        digit = int(digit_field)

    tag, _ = position_tag_for_name(name)
    try:
        return Record(
            codepoint=codepoint,
            category=fields[F_CATEGORY].strip(),
            decimal_digit_value=digit,
            position_tag=tag,
            name=name,
        )
    except ValueError as exc:
        raise UnicodeDataParseError(str(exc), line_number=line_number, line=text) from exc


def parse_unicode_data(lines: Iterable[str]) -> list[Record]:
    """Parse UnicodeData.txt rows, check range pairing, and sort by codepoint."""
    records: list[Record] = []
    open_ranges: dict[str, int] = {}
    for line_number, line in enumerate(lines, start=1):
        if _SKIP_RE.match(line):
            continue
        record = parse_unicode_data_line(line, line_number=line_number)
        tag, range_name = position_tag_for_name(record.name)
        if range_name is None:
            records.append(record)
            continue
        if tag is PositionTag.FIRST:
            if range_name in open_ranges:
                raise UnicodeDataParseError(
                    f"range start for {range_name!r} while that range is already open",
                    line_number=line_number,
                    line=line.rstrip("\r\n"),
                )
            open_ranges[range_name] = record.codepoint
        else:
            first = open_ranges.pop(range_name, None)
            if first is None:
                raise UnicodeDataParseError(
                    f"range end for {range_name!r} without a prior range start",
                    line_number=line_number,
                    line=line.rstrip("\r\n"),
                )
            if first >= record.codepoint:
                raise UnicodeDataParseError(
                    f"range {range_name!r} ends at or before its start",
                    line_number=line_number,
                    line=line.rstrip("\r\n"),
                )
        records.append(record)

    if open_ranges:
        names = ", ".join(sorted(open_ranges))
        raise UnicodeDataParseError(f"unterminated range start(s): {names}")

    records.sort(key=lambda r: r.codepoint)
    for prev, cur in zip(records, records[1:]):
        if prev.codepoint == cur.codepoint:
            raise UnicodeDataParseError(f"duplicate record for U+{cur.codepoint:04X}")
    return records


def read_unicode_data(path: Path) -> list[Record]:
    """Read and parse a UnicodeData.txt file."""
    with open(path, encoding="utf-8") as f:
        records = parse_unicode_data(f)
    log.debug("Parsed %d records from %s", len(records), path)
    return records


def file_sha256(path: Path) -> str:
    """Hex digest of a source file, recorded in build manifests."""
    return hashlib.sha256(path.read_bytes()).hexdigest()
