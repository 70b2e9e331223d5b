"""Coverage.py adapter for Python projects.

Coverage.py is the de facto standard coverage tool for Python. It leaves
either a ``.coverage`` SQLite data file (the default, also what pytest-cov
writes) or, after ``coverage json``, a JSON report. Both are translated
into the unified CoverageResult.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import coverage
from coverage.exceptions import CoverageException

from jestcov.adapters.base import (
    CoverageAdapter,
    CoverageResult,
    FileCoverage,
    LineRecord,
    LineState,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# ── Constants ────────────────────────────────────────────────────

JSON_REPORT_NAMES = ("coverage.json", "htmlcov/coverage.json")
DATA_FILE_NAME = ".coverage"


def _build_lines(
    executed: Iterable[int],
    missing: Iterable[int],
    excluded: Iterable[int],
) -> list[LineRecord]:
    """Merge coverage.py's line-number sets into ordered line records.

    A line reported both as excluded and as a statement keeps its
    statement state.
    """
    states: dict[int, LineState] = {}
    for line_num in excluded:
        states[line_num] = LineState.SKIPPED
    for line_num in executed:
        states[line_num] = LineState.COVERED
    for line_num in missing:
        states[line_num] = LineState.UNCOVERED
    return [LineRecord(line_number=n, state=states[n]) for n in sorted(states)]


# ── Adapter ──────────────────────────────────────────────────────


class CoveragePyAdapter(CoverageAdapter):
    """Coverage.py adapter.

    Reads:
    - JSON reports written by ``coverage json`` / ``--cov-report=json``
    - ``.coverage`` data files, through the coverage.py API
    - live ``coverage.Coverage`` objects
    """

    # ── Identity ─────────────────────────────────────────────────

    @property
    def name(self) -> str:
        return "coverage.py"

    # ── Detection ────────────────────────────────────────────────

    def detect(self, project_path: Path) -> bool:
        """Return True if coverage.py output exists in *project_path*."""
        return self.find_coverage_file(project_path) is not None

    def find_coverage_file(self, project_path: Path) -> Path | None:
        """Return the first coverage.py output file found, JSON reports first."""
        for name in (*JSON_REPORT_NAMES, DATA_FILE_NAME):
            candidate = project_path / name
            if candidate.is_file():
                return candidate
        return None

    def load(self, coverage_file: Path, *, root: str = "") -> CoverageResult | None:
        """Load *coverage_file*, choosing the reader by file type."""
        if coverage_file.suffix == ".json":
            result = self.parse_coverage_file(coverage_file)
        else:
            result = self.load_data_file(coverage_file)
        if result is not None and root:
            result.root = root
        return result

    # ── JSON report parsing ──────────────────────────────────────

    def parse_coverage_file(self, coverage_file: Path) -> CoverageResult | None:
        """Parse coverage.py JSON format into a unified result.

        Coverage.py JSON format:
        {
          "meta": {"version": "7.x.x", "branch_coverage": false, ...},
          "files": {
            "src/example.py": {
              "executed_lines": [1, 2, 5, 6],
              "missing_lines": [3, 4],
              "excluded_lines": [],
              "summary": {"covered_lines": 4, "num_statements": 6, ...}
            }
          },
          "totals": {"covered_lines": 4, "num_statements": 6, ...}
        }
        """
        try:
            with coverage_file.open(encoding="utf-8") as f:
                coverage_data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to parse coverage file %s: %s", coverage_file, e)
            return None

        if not isinstance(coverage_data, dict):
            logger.error("Unexpected coverage JSON layout in %s", coverage_file)
            return None

        files_data = coverage_data.get("files", {})
        if not isinstance(files_data, dict):
            files_data = {}

        files = [
            self._parse_file_coverage(file_path, file_data)
            for file_path, file_data in files_data.items()
            if isinstance(file_data, dict)
        ]
        logger.debug("Parsed %d files from %s", len(files), coverage_file)

        return CoverageResult(
            files=files,
            root=str(coverage_file.parent.resolve()),
            percent=self._parse_totals(coverage_data.get("totals")),
        )

    def _parse_file_coverage(self, file_path: str, data: dict[str, Any]) -> FileCoverage:
        """Parse coverage data for a single file."""
        lines = _build_lines(
            data.get("executed_lines", []),
            data.get("missing_lines", []),
            data.get("excluded_lines", []),
        )
        return FileCoverage(filename=file_path, lines=lines)

    def _parse_totals(self, totals: Any) -> float | None:
        """Return the line-only aggregate percentage from the totals block.

        ``percent_covered`` mixes in branches when branch coverage is on,
        so the percentage is recomputed from the line counters instead.
        """
        if not isinstance(totals, dict):
            return None
        try:
            statements = int(totals["num_statements"])
            covered = int(totals["covered_lines"])
        except (KeyError, TypeError, ValueError):
            return None
        if statements == 0:
            return 100.0
        return covered / statements * 100.0

    # ── Data file / API ──────────────────────────────────────────

    def load_data_file(self, data_file: Path) -> CoverageResult | None:
        """Load a ``.coverage`` data file through the coverage.py API."""
        if not data_file.is_file():
            logger.debug("No coverage data file at %s", data_file)
            return None

        cov = coverage.Coverage(data_file=str(data_file))
        try:
            cov.load()
            result = self.from_coverage(cov)
        except CoverageException as e:
            logger.error("Failed to load coverage data %s: %s", data_file, e)
            return None

        result.root = str(data_file.parent.resolve())
        return result

    def from_coverage(self, cov: coverage.Coverage) -> CoverageResult:
        """Translate the data held by a ``coverage.Coverage`` object."""
        files: list[FileCoverage] = []
        for filename in sorted(cov.get_data().measured_files()):
            try:
                _, statements, excluded, missing, _ = cov.analysis2(filename)
            except CoverageException as e:
                # Source vanished since measurement; nothing to show for it.
                logger.warning("Skipping %s: %s", filename, e)
                continue
            missing_set = set(missing)
            executed = [n for n in statements if n not in missing_set]
            files.append(
                FileCoverage(
                    filename=filename,
                    lines=_build_lines(executed, missing, excluded),
                )
            )

        return CoverageResult(files=files, root=str(Path.cwd()))
