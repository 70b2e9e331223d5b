"""jestcov — Jest-style coverage tables for coverage.py results."""

from __future__ import annotations

__version__ = "0.1.0"
