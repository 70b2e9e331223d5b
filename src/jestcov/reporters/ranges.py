"""Compress a file's missed lines into ``3-5,9`` style range lists."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from jestcov.adapters.base import FileCoverageLike, LineRecord


def miss_ranges(lines: Iterable[LineRecord]) -> list[tuple[int, int]]:
    """Group consecutive misses into closed ``(start, end)`` intervals.

    Skipped lines neither extend nor break a run of misses. Any hit closes
    the current run, and so does a gap in line numbers: lines absent from
    the records were never executable.
    """
    ranges: list[tuple[int, int]] = []
    open_run = False
    previous: int | None = None
    for line in lines:
        contiguous = previous is not None and line.line_number == previous + 1
        previous = line.line_number
        if line.is_skipped:
            open_run = open_run and contiguous
            continue
        if line.is_hit:
            open_run = False
        elif open_run and contiguous:
            ranges[-1] = (ranges[-1][0], line.line_number)
        else:
            ranges.append((line.line_number, line.line_number))
            open_run = True
    return ranges


def compress_ranges(lines: Iterable[LineRecord]) -> str:
    """Return the comma-joined range list, or ``""`` when nothing was missed."""
    return ",".join(
        str(start) if start == end else f"{start}-{end}" for start, end in miss_ranges(lines)
    )


def uncovered_lines(file: FileCoverageLike) -> str:
    """Return the uncovered line list for one file record."""
    return compress_ranges(file.line_states())
