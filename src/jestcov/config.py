"""Configuration parsing from ``.jestcov.yml``."""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from jestcov.reporters.layout import MIN_MAX_COLS

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = ".jestcov.yml"

_ENV_VAR_RE = re.compile(r"\$\{(\w+)\}")
_MAX_COLS_ENV = "JESTCOV_MAX_COLS"


class JestcovError(Exception):
    """Base class for jestcov errors."""


class ConfigError(JestcovError):
    """Raised when a configuration cannot be used."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


def _resolve_env_vars(value: str) -> str:
    """Replace ``${VAR_NAME}`` placeholders with environment variable values."""

    def _replace(match: re.Match[str]) -> str:
        var = match.group(1)
        resolved = os.environ.get(var)
        if resolved is None:
            logger.warning("Environment variable %s is not set (referenced in config)", var)
            return ""
        return resolved

    return _ENV_VAR_RE.sub(_replace, value)


def _resolve_dict(data: dict[str, Any]) -> dict[str, Any]:
    """Recursively resolve environment variables in a dictionary."""
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            result[key] = _resolve_env_vars(value)
        elif isinstance(value, dict):
            result[key] = _resolve_dict(value)
        else:
            result[key] = value
    return result


@dataclass(frozen=True)
class ReportConfig:
    """Options for one coverage table."""

    max_cols: int = 80
    """Total width budget for a row; 0 or less disables width negotiation."""

    skip_empty: bool = False
    """Hide files and directories without any eligible lines."""

    skip_full: bool = False
    """Hide files and directories at exactly 100% line coverage."""

    color: bool = True
    """Wrap cells in ANSI color codes."""

    root: str = ""
    """Path prefix stripped from file names (empty = use the result's root)."""


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_int(value: Any, default: int, key: str) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring non-integer %s: %r", key, value)
        return default


def _parse_report_config(raw: dict[str, Any]) -> ReportConfig:
    """Parse the ``report`` section from raw YAML."""
    report_raw = raw.get("report", {})
    if not isinstance(report_raw, dict):
        report_raw = {}

    default = ReportConfig()
    max_cols = _as_int(report_raw.get("max_cols"), default.max_cols, "report.max_cols")
    max_cols = _as_int(os.environ.get(_MAX_COLS_ENV), max_cols, _MAX_COLS_ENV)

    return ReportConfig(
        max_cols=max_cols,
        skip_empty=_as_bool(report_raw.get("skip_empty"), default.skip_empty),
        skip_full=_as_bool(report_raw.get("skip_full"), default.skip_full),
        color=_as_bool(report_raw.get("color"), default.color),
        root=str(report_raw.get("root", default.root) or ""),
    )


def load_config(root: str | Path) -> ReportConfig:
    """Load ``.jestcov.yml`` from *root*.

    Falls back to defaults when the file is missing or not a mapping.
    ``JESTCOV_MAX_COLS`` overrides the file's ``max_cols``.
    """
    config_path = Path(root).resolve() / CONFIG_FILE_NAME

    raw: dict[str, Any] = {}
    if config_path.is_file():
        parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        if isinstance(parsed, dict):
            raw = _resolve_dict(parsed)
        elif parsed is not None:
            logger.warning("Ignoring %s: top level is not a mapping", config_path)

    return _parse_report_config(raw)


def validate_config(config: ReportConfig) -> list[str]:
    """Validate the configuration and return a list of error messages.

    Returns an empty list if the configuration is valid.
    """
    errors: list[str] = []

    if isinstance(config.max_cols, bool) or not isinstance(config.max_cols, int):
        errors.append(f"report.max_cols must be an integer (got: {config.max_cols!r})")
    elif 0 < config.max_cols < MIN_MAX_COLS:
        errors.append(
            f"report.max_cols must be 0 (unlimited) or at least {MIN_MAX_COLS} "
            f"(got: {config.max_cols})"
        )

    return errors
