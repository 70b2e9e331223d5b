"""Directory tree built from flat per-file coverage records."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from jestcov.reporters.cells import TAB_SIZE

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from jestcov.adapters.base import FileCoverageLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileLeaf:
    """Tree node wrapping exactly one file record."""

    file: FileCoverageLike


@dataclass
class Directory:
    """Tree node mapping path segments to child nodes."""

    children: dict[str, TreeNode] = field(default_factory=dict)

    def sorted_items(self) -> list[tuple[str, TreeNode]]:
        """Return ``(name, node)`` pairs in ascending name order."""
        return sorted(self.children.items())

    def files(self) -> Iterator[FileCoverageLike]:
        """Yield every file record below this directory."""
        for node in self.children.values():
            if isinstance(node, FileLeaf):
                yield node.file
            else:
                yield from node.files()


TreeNode = FileLeaf | Directory


def relative_path(filename: str, root: str) -> str:
    """Return *filename* with the ``root/`` prefix removed, using ``/`` separators."""
    if os.sep != "/":
        filename = filename.replace(os.sep, "/")
        root = root.replace(os.sep, "/")
    prefix = root.rstrip("/") + "/"
    if root and filename.startswith(prefix):
        return filename[len(prefix) :]
    return filename


def build_tree(files: Iterable[FileCoverageLike], root: str = "") -> Directory:
    """Nest *files* into directories keyed by path segment."""
    tree = Directory()
    for file in files:
        parts = [part for part in relative_path(file.filename, root).split("/") if part]
        if not parts:
            logger.debug("Ignoring record with empty path: %r", file.filename)
            continue

        current = tree
        for part in parts[:-1]:
            node = current.children.get(part)
            if not isinstance(node, Directory):
                node = Directory()
                current.children[part] = node
            current = node
        current.children[parts[-1]] = FileLeaf(file)
    return tree


def max_name_width(tree: Directory, depth: int = 0) -> int:
    """Return the widest indented entry name anywhere in *tree*."""
    widest = 0
    for name, node in tree.children.items():
        widest = max(widest, TAB_SIZE * depth + len(name))
        if isinstance(node, Directory):
            widest = max(widest, max_name_width(node, depth + 1))
    return widest
