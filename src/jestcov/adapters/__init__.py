"""Coverage adapters for unified coverage reporting."""

from jestcov.adapters.base import (
    CoverageAdapter,
    CoverageResult,
    CoverageResultLike,
    CoverageSource,
    FileCoverage,
    FileCoverageLike,
    LineRecord,
    LineState,
)
from jestcov.adapters.coverage_py_adapter import CoveragePyAdapter

__all__ = [
    "CoverageAdapter",
    "CoveragePyAdapter",
    "CoverageResult",
    "CoverageResultLike",
    "CoverageSource",
    "FileCoverage",
    "FileCoverageLike",
    "LineRecord",
    "LineState",
]
