"""Tests for config.py — .jestcov.yml parsing and validation."""

from __future__ import annotations

import dataclasses
from typing import TYPE_CHECKING, Any

import pytest
import yaml

from jestcov.config import (
    ConfigError,
    ReportConfig,
    _resolve_dict,
    _resolve_env_vars,
    load_config,
    validate_config,
)

if TYPE_CHECKING:
    from pathlib import Path


def _write_jestcov_yml(root: Path, data: Any) -> None:
    """Write .jestcov.yml with given data."""
    (root / ".jestcov.yml").write_text(yaml.dump(data), encoding="utf-8")


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("JESTCOV_MAX_COLS", raising=False)


# ── _resolve_env_vars / _resolve_dict ─────────────────────────────


class TestResolveEnvVars:
    def test_resolves_existing_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MY_VAR", "hello")
        assert _resolve_env_vars("${MY_VAR}") == "hello"

    def test_missing_var_returns_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MISSING_VAR", raising=False)
        assert _resolve_env_vars("${MISSING_VAR}") == ""

    def test_no_vars_unchanged(self) -> None:
        assert _resolve_env_vars("plain text") == "plain text"

    def test_nested_dict(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROOT_DIR", "/srv/app")
        data = {"report": {"root": "${ROOT_DIR}", "max_cols": 100}}
        assert _resolve_dict(data) == {"report": {"root": "/srv/app", "max_cols": 100}}


# ── load_config ──────────────────────────────────────────────────


class TestLoadConfig:
    def test_defaults_without_file(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config == ReportConfig()
        assert config.max_cols == 80
        assert config.skip_empty is False
        assert config.skip_full is False
        assert config.color is True

    def test_reads_report_section(self, tmp_path: Path) -> None:
        _write_jestcov_yml(
            tmp_path,
            {"report": {"max_cols": 120, "skip_empty": True, "skip_full": True, "color": False}},
        )
        config = load_config(tmp_path)
        assert config == ReportConfig(max_cols=120, skip_empty=True, skip_full=True, color=False)

    def test_expands_env_vars(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PROJECT_ROOT", "/srv/app")
        _write_jestcov_yml(tmp_path, {"report": {"root": "${PROJECT_ROOT}"}})
        assert load_config(tmp_path).root == "/srv/app"

    def test_string_booleans(self, tmp_path: Path) -> None:
        _write_jestcov_yml(tmp_path, {"report": {"skip_full": "yes", "skip_empty": "no"}})
        config = load_config(tmp_path)
        assert config.skip_full is True
        assert config.skip_empty is False

    def test_env_overrides_max_cols(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write_jestcov_yml(tmp_path, {"report": {"max_cols": 120}})
        monkeypatch.setenv("JESTCOV_MAX_COLS", "0")
        assert load_config(tmp_path).max_cols == 0

    def test_non_integer_max_cols_falls_back(self, tmp_path: Path) -> None:
        _write_jestcov_yml(tmp_path, {"report": {"max_cols": "wide"}})
        assert load_config(tmp_path).max_cols == 80

    def test_non_mapping_document(self, tmp_path: Path) -> None:
        _write_jestcov_yml(tmp_path, ["not", "a", "mapping"])
        assert load_config(tmp_path) == ReportConfig()

    def test_non_mapping_section(self, tmp_path: Path) -> None:
        _write_jestcov_yml(tmp_path, {"report": "nope"})
        assert load_config(tmp_path) == ReportConfig()

    def test_empty_file(self, tmp_path: Path) -> None:
        (tmp_path / ".jestcov.yml").write_text("", encoding="utf-8")
        assert load_config(tmp_path) == ReportConfig()

    def test_config_is_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            ReportConfig().max_cols = 10  # type: ignore[misc]


# ── validate_config ──────────────────────────────────────────────


class TestValidateConfig:
    def test_defaults_are_valid(self) -> None:
        assert validate_config(ReportConfig()) == []

    @pytest.mark.parametrize("max_cols", [0, -1, 66, 200])
    def test_accepted_widths(self, max_cols: int) -> None:
        assert validate_config(ReportConfig(max_cols=max_cols)) == []

    def test_too_narrow(self) -> None:
        errors = validate_config(ReportConfig(max_cols=40))
        assert len(errors) == 1
        assert "max_cols" in errors[0]
        assert "66" in errors[0]

    def test_not_an_integer(self) -> None:
        errors = validate_config(ReportConfig(max_cols="80"))  # type: ignore[arg-type]
        assert errors == ["report.max_cols must be an integer (got: '80')"]


def test_config_error_joins_messages() -> None:
    error = ConfigError(["first", "second"])
    assert str(error) == "first; second"
    assert error.errors == ["first", "second"]
