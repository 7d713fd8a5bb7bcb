"""Tests for uniprops.runs: grouping records into category runs."""
from __future__ import annotations

from uniprops.runs import build_category_runs
from uniprops.types import CategoryRun, PositionTag, Record


def _rec(cp: int, cat: str, tag: PositionTag = PositionTag.NONE) -> Record:
    return Record(codepoint=cp, category=cat, position_tag=tag)


class TestBuildCategoryRuns:
    def test_empty(self) -> None:
        assert build_category_runs([]) == []

    def test_single_record(self) -> None:
        assert build_category_runs([_rec(0x41, "Lu")]) == [CategoryRun("Lu", 0x41, 0x41)]

    def test_contiguous_same_category_merges(self) -> None:
        records = [_rec(cp, "Nd") for cp in range(0x30, 0x3A)]
        assert build_category_runs(records) == [CategoryRun("Nd", 0x30, 0x39)]

    def test_category_change_splits(self) -> None:
        records = [_rec(0x39, "Nd"), _rec(0x3A, "Po"), _rec(0x3B, "Po")]
        assert build_category_runs(records) == [
            CategoryRun("Nd", 0x39, 0x39),
            CategoryRun("Po", 0x3A, 0x3B),
        ]

    def test_gap_splits(self) -> None:
        records = [_rec(0x20, "Zs"), _rec(0xA0, "Zs")]
        assert build_category_runs(records) == [
            CategoryRun("Zs", 0x20, 0x20),
            CategoryRun("Zs", 0xA0, 0xA0),
        ]

    def test_first_last_pair_covers_gap(self) -> None:
        records = [
            _rec(0x4E00, "Lo", PositionTag.FIRST),
            _rec(0x9FFF, "Lo", PositionTag.LAST),
        ]
        assert build_category_runs(records) == [CategoryRun("Lo", 0x4E00, 0x9FFF)]

    def test_last_tag_wins_over_category_mismatch(self) -> None:
        records = [
            _rec(0x100, "Lu"),
            _rec(0x200, "Ll", PositionTag.LAST),
        ]
        assert build_category_runs(records) == [CategoryRun("Lu", 0x100, 0x200)]

    def test_adjacent_ranges_same_category_merge(self) -> None:
        records = [
            _rec(0xD800, "Cs", PositionTag.FIRST),
            _rec(0xDB7F, "Cs", PositionTag.LAST),
            _rec(0xDB80, "Cs", PositionTag.FIRST),
            _rec(0xDBFF, "Cs", PositionTag.LAST),
        ]
        assert build_category_runs(records) == [CategoryRun("Cs", 0xD800, 0xDBFF)]

    def test_runs_are_ascending_and_disjoint(self, excerpt_records: list[Record]) -> None:
        runs = build_category_runs(excerpt_records)
        for prev, cur in zip(runs, runs[1:]):
            assert prev.end < cur.start
            # maximality: adjacent runs never share a category
            if prev.end + 1 == cur.start:
                assert prev.category != cur.category

    def test_excerpt_ranges(self, excerpt_records: list[Record]) -> None:
        runs = build_category_runs(excerpt_records)
        assert CategoryRun("Lo", 0x4E00, 0x9FFF) in runs
        assert CategoryRun("Lo", 0xAC00, 0xD7A3) in runs
        assert CategoryRun("Cs", 0xD800, 0xDFFF) in runs
        assert CategoryRun("Co", 0x100000, 0x10FFFD) in runs

    def test_every_record_covered(self, excerpt_records: list[Record]) -> None:
        runs = build_category_runs(excerpt_records)
        for rec in excerpt_records:
            owner = [run for run in runs if rec.codepoint in run]
            assert len(owner) == 1
            assert owner[0].category == rec.category
