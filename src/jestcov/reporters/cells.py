"""Cell formatting and ANSI coloring for the coverage table."""

from __future__ import annotations

TAB_SIZE = 1
ELLIPSIS = "..."

_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

_GOOD_PCT = 80.0
_FAIR_PCT = 50.0
_FULL_PCT = 100.0


def fill(text: str, width: int, *, right: bool = False, tabs: int = 0) -> str:
    """Pad or truncate *text* to exactly *width* characters.

    Each tab level consumes ``TAB_SIZE`` columns of leading indent. Text
    that does not fit keeps its rightmost characters behind an ellipsis,
    so the deepest path segment stays visible.
    """
    leader = " " * (tabs * TAB_SIZE)
    remaining = width - len(leader)

    if remaining <= 0:
        return leader[: max(width, 0)]

    if len(text) <= remaining:
        padding = " " * (remaining - len(text))
        return leader + (padding + text if right else text + padding)

    keep = remaining - len(ELLIPSIS)
    if keep <= 0:
        return leader + ELLIPSIS[:remaining]
    return leader + ELLIPSIS + text[-keep:]


def format_pct(pct: float) -> str:
    """Render a percentage the way the table shows it, e.g. ``95.5``."""
    return str(round(float(pct), 2))


def coverage_color(pct: float) -> str:
    """Return the bucket name for *pct*: green, yellow or red."""
    if pct >= _GOOD_PCT:
        return "green"
    if pct >= _FAIR_PCT:
        return "yellow"
    return "red"


def green(text: str) -> str:
    return f"{_GREEN}{text}{_RESET}"


def yellow(text: str) -> str:
    return f"{_YELLOW}{text}{_RESET}"


def red(text: str) -> str:
    return f"{_RED}{text}{_RESET}"


_PAINTERS = {"green": green, "yellow": yellow, "red": red}


def colorize_by_coverage(text: str, pct: float) -> str:
    """Wrap *text* in the ANSI color of the coverage bucket of *pct*."""
    return _PAINTERS[coverage_color(pct)](text)


def colorize_uncovered(text: str, pct: float) -> str:
    """Paint an uncovered-lines cell red unless the file is fully covered."""
    if pct == _FULL_PCT:
        return text
    return red(text)
