"""Shared fixtures: a UnicodeData.txt excerpt and a full-range record set.

The full-range records come from the interpreter's own ``unicodedata``
module, so exhaustive tests compare compiled lookups against an independent
reference for every codepoint.
"""
from __future__ import annotations

from pathlib import Path

import pytest

from unicode_reference import reference_category, reference_digit
from uniprops.builder import compile_tables
from uniprops.tables import CompiledTables
from uniprops.types import CODEPOINT_LIMIT, Record
from uniprops.unicode_data import read_unicode_data

FIXTURES = Path(__file__).resolve().parent / "fixtures"
EXCERPT_PATH = FIXTURES / "UnicodeData_excerpt.txt"


@pytest.fixture(scope="session")
def excerpt_path() -> Path:
    return EXCERPT_PATH


@pytest.fixture(scope="session")
def excerpt_records() -> list[Record]:
    return read_unicode_data(EXCERPT_PATH)


@pytest.fixture(scope="session")
def excerpt_tables(excerpt_records: list[Record]) -> CompiledTables:
    return compile_tables(excerpt_records)


@pytest.fixture(scope="session")
def reference_records() -> list[Record]:
    records: list[Record] = []
    for cp in range(CODEPOINT_LIMIT):
        cat = reference_category(cp)
        if cat is None:
            continue
        records.append(Record(codepoint=cp, category=cat, decimal_digit_value=reference_digit(cp)))
    return records


@pytest.fixture(scope="session")
def reference_tables(reference_records: list[Record]) -> CompiledTables:
    return compile_tables(reference_records)
