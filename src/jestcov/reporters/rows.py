"""Row rendering for the coverage table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from jestcov.adapters.base import count_lines
from jestcov.reporters.cells import colorize_by_coverage, colorize_uncovered, fill, format_pct
from jestcov.reporters.layout import DELIM
from jestcov.reporters.ranges import uncovered_lines
from jestcov.reporters.tree import Directory, FileLeaf

if TYPE_CHECKING:
    from collections.abc import Iterator

    from jestcov.adapters.base import FileCoverageLike
    from jestcov.config import ReportConfig
    from jestcov.reporters.layout import ColumnLayout

HEADERS = ("File", "% Stmts", "% Branch", "% Funcs", "% Lines", "Uncovered Line #s")
SUMMARY_LABEL = "All files"

# Branch and function coverage are not measured; those columns always
# read 100.
_UNMEASURED_PCT = 100.0
_UNMEASURED_TEXT = "100"
_FULL_PCT = 100.0


@dataclass(frozen=True)
class RowRenderer:
    """Render header, separator, file, directory and summary rows."""

    layout: ColumnLayout
    config: ReportConfig

    def _paint(self, text: str, pct: float) -> str:
        if not self.config.color:
            return text
        return colorize_by_coverage(text, pct)

    def _paint_uncovered(self, text: str, pct: float) -> str:
        if not self.config.color:
            return text
        return colorize_uncovered(text, pct)

    def _row(self, name_cell: str, pct_text: str, pct: float, missing_cell: str) -> str:
        layout = self.layout
        cells = [
            name_cell,
            self._paint(fill(pct_text, layout.pct_width, right=True), pct),
            self._paint(fill(_UNMEASURED_TEXT, layout.branch_width, right=True), _UNMEASURED_PCT),
            self._paint(fill(_UNMEASURED_TEXT, layout.funcs_width, right=True), _UNMEASURED_PCT),
            self._paint(fill(pct_text, layout.lines_width, right=True), pct),
            missing_cell,
        ]
        return f"{DELIM.join(cells)} "

    # ── Fixed rows ───────────────────────────────────────────────────

    def separator(self) -> str:
        """Return a dashed rule exactly as wide as every other row."""
        joint = DELIM.replace(" ", "-")
        return joint.join("-" * width for width in self.layout.widths) + "-"

    def header(self) -> str:
        cells = [
            fill(text, width, right=0 < index < len(HEADERS) - 1)
            for index, (text, width) in enumerate(zip(HEADERS, self.layout.widths, strict=True))
        ]
        return f"{DELIM.join(cells)} "

    def summary_row(self, total_pct: float) -> str:
        """Return the ``All files`` row; it is never skipped."""
        name_cell = self._paint(fill(SUMMARY_LABEL, self.layout.name_width), total_pct)
        missing_cell = fill("", self.layout.missing_width)
        return self._row(name_cell, format_pct(total_pct), total_pct, missing_cell)

    # ── Tree rows ────────────────────────────────────────────────────

    def file_row(self, file: FileCoverageLike, name: str, depth: int) -> str | None:
        """Return the row for one file, or None when a filter hides it."""
        if self.config.skip_empty and count_lines(file)[1] == 0:
            return None

        pct = round(file.coverage_percent(), 2)
        if self.config.skip_full and pct == _FULL_PCT:
            return None

        name_cell = self._paint(fill(name, self.layout.name_width, tabs=depth), pct)
        missing_cell = self._paint_uncovered(
            fill(uncovered_lines(file), self.layout.missing_width), pct
        )
        return self._row(name_cell, format_pct(pct), pct, missing_cell)

    def dir_row(self, directory: Directory, name: str, depth: int) -> str | None:
        """Return the aggregate row for a directory, or None when a filter hides it."""
        covered = 0
        eligible = 0
        for file in directory.files():
            file_covered, file_eligible = count_lines(file)
            covered += file_covered
            eligible += file_eligible

        if self.config.skip_empty and eligible == 0:
            return None

        pct = round(covered / eligible * 100, 2) if eligible > 0 else 0.0
        if self.config.skip_full and pct == _FULL_PCT:
            return None

        name_cell = self._paint(fill(name, self.layout.name_width, tabs=depth), pct)
        return self._row(name_cell, format_pct(pct), pct, fill("", self.layout.missing_width))

    def tree_rows(self, tree: Directory, depth: int = 0) -> Iterator[str]:
        """Yield rows depth-first, files and directories sorted together by name."""
        for name, node in tree.sorted_items():
            if isinstance(node, FileLeaf):
                row = self.file_row(node.file, name, depth)
                if row is not None:
                    yield row
            else:
                row = self.dir_row(node, name, depth)
                if row is not None:
                    yield row
                yield from self.tree_rows(node, depth + 1)
