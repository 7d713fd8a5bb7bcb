"""Compiler facade: record filtering, table selection, artifact output.

A build is configured by one immutable ``BuildConfig`` record and runs in a
single pass:

    records -> filter -> category runs -> CategoryTable
                      -> digit ranges  -> DigitTable
                      -> custom artifacts

``compile_tables`` is the pure part; ``build`` adds reading the source file,
writing the artifact and its manifest.
"""
from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from collections.abc import Callable, Collection, Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from pathlib import Path
from time import perf_counter
from typing import Any, TypeAlias

from uniprops.artifact import save_tables
from uniprops.build_manifest import build_manifest, checkout_revision, generate_run_id, write_manifest
from uniprops.category_table import compile_category_table
from uniprops.consistency import verify_consistency
from uniprops.digit_table import compile_digit_table
from uniprops.runs import build_category_runs
from uniprops.tables import CompiledTables
from uniprops.types import PositionTag, Record
from uniprops.unicode_data import file_sha256, read_unicode_data

log = logging.getLogger(__name__)

RecordFilter: TypeAlias = Callable[[Record], bool]
CustomArtifact: TypeAlias = Callable[[Sequence[Record]], Any]


def accept_all(record: Record) -> bool:
    return True


@dataclass(frozen=True, slots=True)
class BuildConfig:
    """What to compile and where to put it.

    filter:          records rejected here are unassigned in every table
    exclude:         codepoints left unassigned, including ones inside a
                     First/Last range
    with_categories: build the category table
    with_digits:     build the digit table
    with_custom:     name -> function of the filtered records; results must be
                     JSON-serializable and are stored in the artifact
    out_file:        artifact destination; None keeps the build in memory
    verify:          check Nd <-> digit agreement when both tables are built
    """

    filter: RecordFilter = accept_all
    exclude: frozenset[int] = frozenset()
    with_categories: bool = True
    with_digits: bool = True
    with_custom: Mapping[str, CustomArtifact] = field(default_factory=dict)
    out_file: Path | None = None
    verify: bool = True


@dataclass(frozen=True, slots=True)
class BuildResult:
    tables: CompiledTables
    manifest: dict[str, Any]
    artifact_path: Path | None = None
    manifest_path: Path | None = None


def _split_range(first: Record, last: Record, cuts: Sequence[int]) -> list[Record]:
    """Rebuild a First/Last pair as the pieces left after removing ``cuts``.

    ``cuts`` is sorted. Each piece longer than one codepoint becomes its own
    First/Last pair; a single codepoint becomes an ordinary record.
    """

    lo, hi = first.codepoint, last.codepoint
    pieces: list[tuple[int, int]] = []
    start = lo
    for cp in cuts[bisect_left(cuts, lo):bisect_right(cuts, hi)]:
        if cp > start:
            pieces.append((start, cp - 1))
        start = cp + 1
    if start <= hi:
        pieces.append((start, hi))

    out: list[Record] = []
    for start, end in pieces:
        if start == end:
            out.append(replace(first, codepoint=start, position_tag=PositionTag.NONE))
        else:
            out.append(replace(first, codepoint=start))
            out.append(replace(last, codepoint=end))
    return out


def filter_records(
    records: Iterable[Record],
    predicate: RecordFilter,
    exclude: Collection[int] = frozenset(),
) -> list[Record]:
    """Apply ``predicate`` and ``exclude``, keeping bracketed ranges consistent.

    The predicate sees explicit rows only. The interior of a First/Last
    range stays assigned only when both boundary rows pass it. A surviving
    Last row whose First row was rejected is demoted to an ordinary record
    so it cannot stretch an unrelated run.

    ``exclude`` names codepoints to leave unassigned. A kept range that
    contains one is split around it.
    """

    cuts = sorted(exclude)
    included: list[Record] = []
    pending: Record | None = None

    def _emit(record: Record) -> None:
        if record.codepoint not in exclude:
            included.append(record)

    for record in records:
        keep = predicate(record)
        if pending is not None:
            if record.position_tag is PositionTag.LAST:
                if keep:
                    included.extend(_split_range(pending, record, cuts))
                else:
                    _emit(pending)
                pending = None
                continue
            _emit(pending)
            pending = None
        if not keep:
            continue
        if record.position_tag is PositionTag.FIRST:
            pending = record
        elif record.position_tag is PositionTag.LAST:
            _emit(replace(record, position_tag=PositionTag.NONE))
        else:
            _emit(record)
    if pending is not None:
        _emit(pending)
    return included


def compile_tables(records: Iterable[Record], config: BuildConfig | None = None) -> CompiledTables:
    """Compile codepoint-ascending records into the enabled tables."""
    config = config or BuildConfig()
    included = filter_records(records, config.filter, config.exclude)

    category_table = None
    if config.with_categories:
        category_table = compile_category_table(build_category_runs(included))

    digit_table = None
    if config.with_digits:
        digit_table = compile_digit_table(included)

    custom = {name: fn(included) for name, fn in config.with_custom.items()}

    if config.verify and category_table is not None and digit_table is not None:
        verify_consistency(category_table, digit_table)

    return CompiledTables(category_table=category_table, digit_table=digit_table, custom=custom)


def build(source: Path | Iterable[Record], config: BuildConfig | None = None) -> BuildResult:
    """Read ``source`` (a UnicodeData.txt path or records), compile, and write outputs."""
    config = config or BuildConfig()
    timings: dict[str, float] = {}
    started = datetime.now(UTC)

    t0 = perf_counter()
    if isinstance(source, Path):
        records = read_unicode_data(source)
        input_source: dict[str, Any] = {"path": str(source), "sha256": file_sha256(source)}
    else:
        records = list(source)
        input_source = {"path": None, "sha256": None}
    timings["read"] = round(perf_counter() - t0, 4)

    t0 = perf_counter()
    included = filter_records(records, config.filter, config.exclude)
    tables = compile_tables(included, replace(config, filter=accept_all, exclude=frozenset()))
    timings["compile"] = round(perf_counter() - t0, 4)

    input_source["records_total"] = len(records)
    input_source["records_included"] = len(included)
    log.info(
        "Compiled %d of %d records (categories=%s, digits=%s)",
        len(included),
        len(records),
        config.with_categories,
        config.with_digits,
    )

    manifest = build_manifest(
        run_id=generate_run_id(input_source["sha256"], started=started),
        artifact_path=config.out_file,
        input_source=input_source,
        table_stats=tables.stats(),
        timings_sec=timings,
        revision=checkout_revision(),
        created_at=started,
        notes={
            "verified": config.verify and config.with_categories and config.with_digits,
            "excluded_codepoints": len(config.exclude),
        },
    )

    if config.out_file is None:
        return BuildResult(tables=tables, manifest=manifest)

    artifact_path = save_tables(tables, config.out_file)
    manifest_path = write_manifest(artifact_path, manifest)
    return BuildResult(
        tables=tables,
        manifest=manifest,
        artifact_path=artifact_path,
        manifest_path=manifest_path,
    )
