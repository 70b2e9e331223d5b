"""Base classes and data models for coverage adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pathlib import Path


class LineState(Enum):
    """Classification of a single source line by the coverage tool."""

    COVERED = "covered"
    UNCOVERED = "uncovered"
    SKIPPED = "skipped"
    NEVER = "never"
    """Non-executable line (comment, blank); counts as a hit."""


@dataclass(frozen=True)
class LineRecord:
    """Coverage state of one line of code."""

    line_number: int
    state: LineState

    @property
    def is_skipped(self) -> bool:
        """Return True if the tool excluded this line from measurement."""
        return self.state is LineState.SKIPPED

    @property
    def is_hit(self) -> bool:
        """Return True if this line does not count as a miss."""
        return self.state in (LineState.COVERED, LineState.NEVER)


@runtime_checkable
class FileCoverageLike(Protocol):
    """Capabilities a per-file coverage record must expose to be rendered."""

    @property
    def filename(self) -> str: ...

    def line_states(self) -> Sequence[LineRecord]: ...

    def coverage_percent(self) -> float: ...


@runtime_checkable
class CoverageResultLike(Protocol):
    """Capabilities a whole-run coverage result must expose to be rendered."""

    @property
    def files(self) -> Sequence[FileCoverageLike]: ...

    @property
    def covered_percent(self) -> float: ...

    @property
    def root(self) -> str: ...


CoverageSource = Callable[[], "CoverageResultLike | None"]
"""A zero-argument callable returning the result to render, or None."""


@dataclass
class FileCoverage:
    """Coverage data for a single source file."""

    filename: str
    """Absolute path of the measured file."""

    lines: list[LineRecord] = field(default_factory=list)
    """Line records ordered by line number."""

    def line_states(self) -> Sequence[LineRecord]:
        return self.lines

    @property
    def covered_lines(self) -> int:
        """Number of lines executed at least once."""
        return sum(1 for line in self.lines if line.state is LineState.COVERED)

    @property
    def eligible_lines(self) -> int:
        """Number of lines not skipped by the tool."""
        return sum(1 for line in self.lines if not line.is_skipped)

    def coverage_percent(self) -> float:
        """Return line coverage percentage (0.0-100.0)."""
        eligible = self.eligible_lines
        if eligible == 0:
            return 100.0
        return (self.covered_lines / eligible) * 100.0


@dataclass
class CoverageResult:
    """Unified coverage result across all files of one run.

    This is the format every adapter translates its native data into, and
    the only shape the table reporter reads.
    """

    files: list[FileCoverage] = field(default_factory=list)
    root: str = ""
    """Project root used to shorten displayed file names."""

    percent: float | None = None
    """Aggregate percentage reported by the tool, if it supplied one."""

    @property
    def covered_percent(self) -> float:
        """Return overall line coverage percentage across all files."""
        if self.percent is not None:
            return self.percent
        return aggregate_percent(self.files)


def count_lines(file: FileCoverageLike) -> tuple[int, int]:
    """Return ``(covered, eligible)`` line counts for any file record."""
    covered = 0
    eligible = 0
    for line in file.line_states():
        if line.is_skipped:
            continue
        eligible += 1
        if line.state is LineState.COVERED:
            covered += 1
    return covered, eligible


def aggregate_percent(files: Sequence[FileCoverageLike]) -> float:
    """Return covered/eligible over *files*, or 100.0 when nothing is eligible."""
    covered = 0
    eligible = 0
    for file in files:
        file_covered, file_eligible = count_lines(file)
        covered += file_covered
        eligible += file_eligible
    if eligible == 0:
        return 100.0
    return (covered / eligible) * 100.0


class CoverageAdapter(ABC):
    """Abstract base class for coverage tool adapters.

    Each concrete adapter knows how to read one tool's native output and
    translate it into the unified CoverageResult format.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Coverage tool identifier (e.g. 'coverage.py')."""

    @abstractmethod
    def detect(self, project_path: Path) -> bool:
        """Return True if this tool has left coverage output in project_path."""

    @abstractmethod
    def parse_coverage_file(self, coverage_file: Path) -> CoverageResult | None:
        """Parse a native coverage file into unified format.

        Returns:
            The parsed result, or None when there is nothing to report.
        """
