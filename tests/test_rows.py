"""Tests for reporters/rows.py — file, directory and summary rows."""

from __future__ import annotations

from jestcov.adapters.base import FileCoverage, LineRecord, LineState
from jestcov.config import ReportConfig
from jestcov.reporters.layout import ColumnLayout
from jestcov.reporters.rows import RowRenderer
from jestcov.reporters.tree import Directory, build_tree

# ── Helpers ──────────────────────────────────────────────────────


def _file(
    filename: str,
    covered: int = 0,
    missed: int = 0,
    skipped: int = 0,
) -> FileCoverage:
    """Build a file with *covered* hits, then *missed* misses, then *skipped* lines."""
    states = [LineState.COVERED] * covered + [LineState.UNCOVERED] * missed
    states += [LineState.SKIPPED] * skipped
    return FileCoverage(
        filename=filename,
        lines=[LineRecord(n, state) for n, state in enumerate(states, start=1)],
    )


def _half_file() -> FileCoverage:
    lines = [
        LineRecord(1, LineState.COVERED),
        LineRecord(2, LineState.UNCOVERED),
        LineRecord(3, LineState.UNCOVERED),
        LineRecord(4, LineState.COVERED),
    ]
    return FileCoverage(filename="a.py", lines=lines)


def _renderer(**config: bool) -> RowRenderer:
    config.setdefault("color", False)
    return RowRenderer(
        layout=ColumnLayout(name_width=10, missing_width=17),
        config=ReportConfig(**config),
    )


def _subdir(tree: Directory, name: str) -> Directory:
    node = tree.children[name]
    assert isinstance(node, Directory)
    return node


# ── Fixed rows ───────────────────────────────────────────────────


def test_separator() -> None:
    renderer = RowRenderer(
        layout=ColumnLayout(name_width=10, missing_width=5), config=ReportConfig()
    )
    expected = "-|-".join(["-" * 10, "-" * 7, "-" * 8, "-" * 7, "-" * 7, "-" * 5]) + "-"
    assert renderer.separator() == expected


def test_header() -> None:
    header = _renderer().header()
    assert header == (
        "File       | % Stmts | % Branch | % Funcs | % Lines | Uncovered Line #s "
    )


def test_header_matches_separator_width() -> None:
    renderer = _renderer()
    assert len(renderer.header()) == len(renderer.separator())


def test_header_squeezed_below_zero() -> None:
    renderer = RowRenderer(
        layout=ColumnLayout(name_width=-3, missing_width=17), config=ReportConfig()
    )
    assert len(renderer.header()) == len(renderer.separator())


# ── File rows ────────────────────────────────────────────────────


class TestFileRow:
    def test_plain_row(self) -> None:
        row = _renderer().file_row(_half_file(), "a.py", 0)
        assert row == (
            "a.py      "
            " |    50.0"
            " |      100"
            " |     100"
            " |    50.0"
            " | 2-3              "
            " "
        )

    def test_indented_by_depth(self) -> None:
        row = _renderer().file_row(_half_file(), "a.py", 2)
        assert row is not None
        assert row.startswith("  a.py    |")

    def test_colored_row(self) -> None:
        row = _renderer(color=True).file_row(_half_file(), "a.py", 0)
        assert row is not None
        assert row.startswith("\x1b[33ma.py      \x1b[0m")
        assert "\x1b[33m   50.0\x1b[0m" in row
        assert "\x1b[32m     100\x1b[0m" in row
        assert "\x1b[32m    100\x1b[0m" in row
        assert "\x1b[31m2-3              \x1b[0m" in row

    def test_full_coverage_leaves_missing_cell_plain(self) -> None:
        row = _renderer(color=True).file_row(_file("b.py", covered=3), "b.py", 0)
        assert row is not None
        assert row.endswith(" | " + " " * 17 + " ")
        assert "\x1b[32m  100.0\x1b[0m" in row

    def test_skip_full(self) -> None:
        renderer = _renderer(skip_full=True)
        assert renderer.file_row(_file("b.py", covered=3), "b.py", 0) is None
        assert renderer.file_row(_half_file(), "a.py", 0) is not None

    def test_skip_empty(self) -> None:
        empty = _file("empty.py", skipped=2)
        assert _renderer(skip_empty=True).file_row(empty, "empty.py", 0) is None

    def test_empty_file_shown_by_default(self) -> None:
        row = _renderer().file_row(_file("empty.py", skipped=2), "empty.py", 0)
        assert row is not None
        assert "  100.0" in row


# ── Directory rows ───────────────────────────────────────────────


class TestDirRow:
    def test_aggregates_descendants(self) -> None:
        tree = build_tree(
            [_file("lib/a.py", covered=8, missed=2), _file("lib/b.py", covered=2, missed=8)]
        )
        row = _renderer().dir_row(_subdir(tree, "lib"), "lib", 0)
        assert row == (
            "lib       "
            " |    50.0"
            " |      100"
            " |     100"
            " |    50.0"
            " |                  "
            " "
        )

    def test_skipped_lines_leave_the_denominator(self) -> None:
        tree = build_tree([_file("lib/a.py", covered=3, missed=1, skipped=6)])
        row = _renderer().dir_row(_subdir(tree, "lib"), "lib", 0)
        assert row is not None
        assert "   75.0" in row

    def test_nothing_eligible_is_zero(self) -> None:
        tree = build_tree([_file("lib/a.py", skipped=3)])
        row = _renderer().dir_row(_subdir(tree, "lib"), "lib", 0)
        assert row is not None
        assert "    0.0" in row

    def test_skip_empty(self) -> None:
        tree = build_tree([_file("lib/a.py", skipped=3), _file("lib/b.py")])
        assert _renderer(skip_empty=True).dir_row(_subdir(tree, "lib"), "lib", 0) is None

    def test_skip_full(self) -> None:
        tree = build_tree([_file("lib/a.py", covered=3)])
        assert _renderer(skip_full=True).dir_row(_subdir(tree, "lib"), "lib", 0) is None


# ── Tree walk ────────────────────────────────────────────────────


class TestTreeRows:
    def test_depth_first_sorted_order(self) -> None:
        tree = build_tree(
            [
                _file("zed.py", covered=1),
                _file("lib/x.py", covered=1),
                _file("app.py", covered=1),
            ]
        )
        names = [row.split(" | ")[0].rstrip() for row in _renderer().tree_rows(tree)]
        assert names == ["app.py", "lib", " x.py", "zed.py"]

    def test_filtered_rows_are_dropped(self) -> None:
        tree = build_tree([_file("lib/full.py", covered=2), _file("lib/half.py", 1, 1)])
        names = [
            row.split(" | ")[0].rstrip() for row in _renderer(skip_full=True).tree_rows(tree)
        ]
        assert names == ["lib", " half.py"]


# ── Summary row ──────────────────────────────────────────────────


class TestSummaryRow:
    def test_plain(self) -> None:
        row = _renderer().summary_row(66.666666)
        assert row.startswith("All files  |   66.67 |      100 |     100 |   66.67 | ")
        assert row.endswith(" " * 17 + " ")

    def test_colored_by_unrounded_value(self) -> None:
        row = _renderer(color=True).summary_row(79.999)
        assert row.startswith("\x1b[33mAll files \x1b[0m")
        assert "\x1b[33m   80.0\x1b[0m" in row

    def test_never_skipped(self) -> None:
        row = _renderer(skip_full=True, skip_empty=True).summary_row(100.0)
        assert row.startswith("All files ")
