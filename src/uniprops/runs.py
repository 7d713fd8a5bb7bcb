"""Group ascending records into maximal same-category runs."""

from __future__ import annotations

from collections.abc import Iterable

from uniprops.types import CategoryRun, PositionTag, Record


def build_category_runs(records: Iterable[Record]) -> list[CategoryRun]:
    """Collapse codepoint-ascending records into maximal category runs.

    A record extends the open run when it is the next codepoint with the
    same category, or when it is the ``Last`` row of a bracketed range pair.
    In the latter case the whole gap since the ``First`` row is covered,
    whatever its size, and the tag wins over a category mismatch.
    """

    runs: list[CategoryRun] = []
    category: str | None = None
    start = end = 0

    for record in records:
        cp = record.codepoint
        if category is not None and (
            record.position_tag is PositionTag.LAST
            or (cp == end + 1 and record.category == category)
        ):
            end = cp
            continue
        if category is not None:
            runs.append(CategoryRun(category=category, start=start, end=end))
        category = record.category
        start = end = cp

    if category is not None:
        runs.append(CategoryRun(category=category, start=start, end=end))
    return runs
