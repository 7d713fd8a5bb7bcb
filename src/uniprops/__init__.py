"""Compact Unicode general-category and decimal-digit lookup tables."""

from uniprops.artifact import load_tables, save_tables
from uniprops.builder import BuildConfig, BuildResult, build, compile_tables, filter_records
from uniprops.category_table import CategoryTable, compile_category_table
from uniprops.classifier import CharacterClassifier
from uniprops.consistency import find_inconsistencies, verify_consistency
from uniprops.digit_table import DigitTable, compile_digit_ranges, compile_digit_table
from uniprops.errors import (
    ArtifactFormatError,
    ConsistencyError,
    TableNotBuiltError,
    UnicodeDataParseError,
    UnipropsError,
)
from uniprops.runs import build_category_runs
from uniprops.tables import CompiledTables
from uniprops.types import CategoryRun, DigitRange, PositionTag, Record
from uniprops.unicode_data import parse_unicode_data, parse_unicode_data_line, read_unicode_data

__all__ = [
    "ArtifactFormatError",
    "BuildConfig",
    "BuildResult",
    "CategoryRun",
    "CategoryTable",
    "CharacterClassifier",
    "CompiledTables",
    "ConsistencyError",
    "DigitRange",
    "DigitTable",
    "PositionTag",
    "Record",
    "TableNotBuiltError",
    "UnicodeDataParseError",
    "UnipropsError",
    "build",
    "build_category_runs",
    "compile_category_table",
    "compile_digit_ranges",
    "compile_digit_table",
    "compile_tables",
    "filter_records",
    "find_inconsistencies",
    "load_tables",
    "parse_unicode_data",
    "parse_unicode_data_line",
    "read_unicode_data",
    "save_tables",
    "verify_consistency",
]
