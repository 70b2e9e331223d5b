"""Column widths for the coverage table."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from jestcov.reporters.ranges import uncovered_lines
from jestcov.reporters.tree import max_name_width

if TYPE_CHECKING:
    from collections.abc import Sequence

    from jestcov.adapters.base import FileCoverageLike
    from jestcov.reporters.tree import Directory

logger = logging.getLogger(__name__)

NAME_COL = 4
PCT_COLS = 7
MISSING_COL = 17
DELIM = " | "

# Four percentage columns with their delimiters, the extra branch column
# character and the trailing space.
PCT_BLOCK = len(DELIM) + 4 * (PCT_COLS + len(DELIM)) + 2

MIN_MAX_COLS = PCT_BLOCK + MISSING_COL + NAME_COL
"""Narrowest positive ``max_cols`` that still leaves room for every column."""


@dataclass(frozen=True)
class ColumnLayout:
    """Widths of the six table columns."""

    name_width: int
    missing_width: int
    pct_width: int = PCT_COLS

    @property
    def branch_width(self) -> int:
        return self.pct_width + 1

    @property
    def funcs_width(self) -> int:
        return self.pct_width

    @property
    def lines_width(self) -> int:
        return self.pct_width

    @property
    def widths(self) -> tuple[int, int, int, int, int, int]:
        """All column widths, left to right."""
        return (
            self.name_width,
            self.pct_width,
            self.branch_width,
            self.funcs_width,
            self.lines_width,
            self.missing_width,
        )


def negotiate_layout(
    tree: Directory,
    files: Sequence[FileCoverageLike],
    max_cols: int,
) -> ColumnLayout:
    """Fit the name and uncovered-lines columns into *max_cols* characters.

    The name column is squeezed first; the uncovered-lines column then takes
    whatever is left, never more than it needs. ``max_cols <= 0`` keeps the
    natural widths.
    """
    name_width = max(NAME_COL, max_name_width(tree))
    missing_width = max([MISSING_COL, *(len(uncovered_lines(f)) for f in files)])

    if max_cols > 0:
        max_remaining = max_cols - (PCT_BLOCK + MISSING_COL)
        if name_width > max_remaining:
            logger.debug("Squeezing name column from %d to %d", name_width, max_remaining)
            name_width = max_remaining
            missing_width = MISSING_COL
        elif name_width < max_remaining:
            max_remaining = max_cols - (name_width + PCT_BLOCK)
            missing_width = min(missing_width, max_remaining)

    return ColumnLayout(name_width=name_width, missing_width=missing_width)
