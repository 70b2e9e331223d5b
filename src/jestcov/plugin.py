"""pytest plugin: print a Jest-style coverage table at the end of the session.

Enable with ``--jestcov`` (or ``jestcov = true`` in the ini file). The table
is built from the coverage.py data file left by pytest-cov or
``coverage run``; when there is none the plugin stays silent.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from jestcov.adapters.coverage_py_adapter import DATA_FILE_NAME, CoveragePyAdapter
from jestcov.config import load_config, validate_config
from jestcov.reporters.table import CoverageTableReporter

if TYPE_CHECKING:
    from jestcov.config import ReportConfig

logger = logging.getLogger(__name__)


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("jestcov", "Jest-style coverage table")
    group.addoption(
        "--jestcov",
        action="store_true",
        default=None,
        help="Print a Jest-style coverage table after the test run.",
    )
    group.addoption(
        "--jestcov-max-cols",
        type=int,
        default=None,
        help="Row width budget for the table; 0 disables it.",
    )
    group.addoption(
        "--jestcov-skip-empty",
        action="store_true",
        default=None,
        help="Hide files and directories without eligible lines.",
    )
    group.addoption(
        "--jestcov-skip-full",
        action="store_true",
        default=None,
        help="Hide files and directories at 100% coverage.",
    )
    group.addoption(
        "--jestcov-data-file",
        default=None,
        help="coverage.py data file to read (default: $COVERAGE_FILE or .coverage).",
    )
    parser.addini("jestcov", "Print a Jest-style coverage table.", type="bool", default=False)
    parser.addini("jestcov_max_cols", "Row width budget for the table.", default="")
    parser.addini("jestcov_skip_empty", "Hide rows without eligible lines.", type="bool")
    parser.addini("jestcov_skip_full", "Hide rows at 100% coverage.", type="bool")


def _option(config: pytest.Config, name: str) -> object:
    """Return the command line value of *name*, falling back to the ini key."""
    value = config.getoption(name)
    if value is None:
        value = config.getini(name)
    return value


def _parse_max_cols(value: object) -> object:
    """Return *value* as an int, or unchanged for validation to reject."""
    try:
        return int(str(value).strip())
    except ValueError:
        return value


def _report_config(config: pytest.Config) -> ReportConfig:
    """Merge ``.jestcov.yml`` with ini keys and command line options.

    Raises pytest.UsageError when the merged configuration is invalid.
    """
    base = load_config(config.rootpath)
    changes: dict[str, object] = {}

    max_cols = _option(config, "jestcov_max_cols")
    if max_cols not in (None, ""):
        changes["max_cols"] = _parse_max_cols(max_cols)
    if _option(config, "jestcov_skip_empty"):
        changes["skip_empty"] = True
    if _option(config, "jestcov_skip_full"):
        changes["skip_full"] = True

    resolved = dataclasses.replace(base, **changes)
    errors = validate_config(resolved)
    if errors:
        raise pytest.UsageError(f"jestcov: {'; '.join(errors)}")
    return resolved


def _data_file(config: pytest.Config) -> Path:
    name = config.getoption("jestcov_data_file") or os.environ.get(
        "COVERAGE_FILE", DATA_FILE_NAME
    )
    path = Path(name)
    if not path.is_absolute():
        path = config.invocation_params.dir / path
    return path


def pytest_configure(config: pytest.Config) -> None:
    # Reject bad settings before any test runs.
    if _option(config, "jestcov"):
        _report_config(config)


# Run after pytest-cov has combined and saved its data.
@pytest.hookimpl(trylast=True)
def pytest_terminal_summary(
    terminalreporter: pytest.TerminalReporter,
    exitstatus: int,
    config: pytest.Config,
) -> None:
    if not _option(config, "jestcov"):
        return

    report_config = _report_config(config)
    if not config.get_terminal_writer().hasmarkup:
        report_config = dataclasses.replace(report_config, color=False)

    data_file = _data_file(config)
    adapter = CoveragePyAdapter()
    reporter = CoverageTableReporter(
        source=lambda: adapter.load_data_file(data_file),
        config=report_config,
        write=terminalreporter.write_line,
    )
    lines = reporter.report()
    logger.debug("Wrote %d coverage table lines (exit status %s)", len(lines), exitstatus)
