"""Jest-style coverage table: assembles the rows and writes them out."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

from jestcov.config import ReportConfig
from jestcov.reporters.layout import negotiate_layout
from jestcov.reporters.rows import RowRenderer
from jestcov.reporters.tree import build_tree

if TYPE_CHECKING:
    from collections.abc import Callable

    from jestcov.adapters.base import CoverageResultLike, CoverageSource

logger = logging.getLogger(__name__)


def console_writer(console: Console | None = None) -> Callable[[str], None]:
    """Return a line sink that prints ANSI-colored text through Rich.

    Rich re-encodes the colors for the terminal, and drops them when the
    output is not a terminal.
    """
    target = console or Console(highlight=False)

    def _write(line: str) -> None:
        target.print(Text.from_ansi(line), soft_wrap=True)

    return _write


class CoverageTableReporter:
    """Render a coverage result as a Jest-style table.

    The coverage source is injected: a zero-argument callable returning the
    result to render. Without a source, or when it yields nothing,
    :meth:`report` writes nothing.
    """

    def __init__(
        self,
        source: CoverageSource | None = None,
        config: ReportConfig | None = None,
        write: Callable[[str], None] | None = None,
    ) -> None:
        self.source = source
        self.config = config or ReportConfig()
        self.write = write or console_writer()

    def render(self, result: CoverageResultLike) -> list[str]:
        """Return every line of the table for *result*; empty when it has no files."""
        files = sorted(result.files, key=lambda f: f.filename)
        if not files:
            logger.debug("Coverage result has no files; nothing to report")
            return []

        root = self.config.root or result.root
        tree = build_tree(files, root)
        layout = negotiate_layout(tree, files, self.config.max_cols)
        logger.debug(
            "Rendering %d files (name width %d, missing width %d)",
            len(files),
            layout.name_width,
            layout.missing_width,
        )

        rows = RowRenderer(layout=layout, config=self.config)
        separator = rows.separator()
        total_pct = result.covered_percent

        return [
            "",
            separator,
            rows.header(),
            separator,
            *rows.tree_rows(tree),
            separator,
            rows.summary_row(total_pct),
            separator,
        ]

    def report(self) -> list[str]:
        """Generate the table from the injected source and write it out.

        Returns the lines written, so callers can inspect what was emitted.
        """
        if self.source is None:
            return []

        result = self.source()
        if result is None:
            logger.debug("Coverage source returned no result")
            return []

        lines = self.render(result)
        for line in lines:
            self.write(line)
        return lines
