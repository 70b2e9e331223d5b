"""jestcov CLI — top-level command group."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from jestcov import __version__
from jestcov.adapters.coverage_py_adapter import CoveragePyAdapter
from jestcov.config import (
    CONFIG_FILE_NAME,
    ConfigError,
    ReportConfig,
    load_config,
    validate_config,
)
from jestcov.reporters.table import CoverageTableReporter, console_writer

logger = logging.getLogger(__name__)
console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def _setup_logging(*, verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def _load_config_or_abort(path: str) -> ReportConfig:
    try:
        return load_config(path)
    except (OSError, yaml.YAMLError) as e:
        err_console.print(f"[red]✗[/red] Failed to load configuration: {escape(str(e))}")
        raise click.Abort from e


def _resolve_config(config: ReportConfig, **overrides: object) -> ReportConfig:
    """Apply command line overrides and validate the result."""
    changes = {key: value for key, value in overrides.items() if value is not None}
    resolved = dataclasses.replace(config, **changes)
    errors = validate_config(resolved)
    if errors:
        raise ConfigError(errors)
    return resolved


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="jestcov")
def cli(*, verbose: bool) -> None:
    """jestcov — Jest-style coverage tables for coverage.py data."""
    _setup_logging(verbose=verbose)


@cli.command()
@click.argument(
    "coverage_file",
    required=False,
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory (config lookup and coverage autodetection).",
)
@click.option("--max-cols", type=int, default=None, help="Row width budget; 0 disables it.")
@click.option(
    "--skip-empty/--no-skip-empty",
    default=None,
    help="Hide files and directories without eligible lines.",
)
@click.option(
    "--skip-full/--no-skip-full",
    default=None,
    help="Hide files and directories at 100% coverage.",
)
@click.option("--no-color", is_flag=True, help="Render the table without ANSI colors.")
@click.option("--root", default=None, help="Path prefix stripped from displayed file names.")
def report(
    coverage_file: Path | None,
    path: str,
    max_cols: int | None,
    skip_empty: bool | None,
    skip_full: bool | None,
    *,
    no_color: bool,
    root: str | None,
) -> None:
    """Print a Jest-style coverage table.

    COVERAGE_FILE is a coverage.py JSON report or `.coverage` data file.
    Without it, coverage.json and then .coverage are looked up in --path.

    Example:
      jestcov report
      jestcov report coverage.json --max-cols 120 --skip-full
    """
    try:
        config = _resolve_config(
            _load_config_or_abort(path),
            max_cols=max_cols,
            skip_empty=skip_empty,
            skip_full=skip_full,
            color=False if no_color else None,
            root=root,
        )
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    adapter = CoveragePyAdapter()
    source_file = coverage_file or adapter.find_coverage_file(Path(path))
    if source_file is None:
        err_console.print(f"[dim]No coverage data found in {escape(path)}[/dim]")
        return

    logger.debug("Reading coverage from %s", source_file)
    reporter = CoverageTableReporter(
        source=lambda: adapter.load(source_file, root=config.root),
        config=config,
        write=console_writer(console),
    )
    if not reporter.report():
        err_console.print("[dim]Nothing to report.[/dim]")


@cli.group("config")
def config_group() -> None:
    """Inspect `.jestcov.yml` configuration."""


@config_group.command("show")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
def config_show(path: str) -> None:
    """Display the resolved configuration as YAML."""
    config = _load_config_or_abort(path)
    click.echo(
        yaml.safe_dump(
            {"report": dataclasses.asdict(config)}, sort_keys=False, default_flow_style=False
        )
    )


@config_group.command("validate")
@click.option(
    "--path",
    default=".",
    type=click.Path(exists=True, file_okay=False, resolve_path=True),
    help="Project root directory.",
)
def config_validate(path: str) -> None:
    """Validate `.jestcov.yml`.

    Example:
      jestcov config validate
    """
    errors = validate_config(_load_config_or_abort(path))

    if not errors:
        console.print("[green]✓[/green] Configuration is valid!")
        return

    console.print(f"[red]✗[/red] Found {len(errors)} configuration error(s):")
    console.print()
    for idx, error in enumerate(errors, start=1):
        console.print(f"  {idx}. [red]{escape(error)}[/red]")
    console.print()
    console.print(f"[dim]Fix these errors in {CONFIG_FILE_NAME} and run again.[/dim]")
    raise click.Abort
