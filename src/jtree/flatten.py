"""Flatten a node tree plus an expansion set into numbered display lines."""

from __future__ import annotations

from collections.abc import Container
from dataclasses import dataclass
from enum import Enum, auto

from jtree._path import CLOSING_SUFFIX, ROOT, child_path
from jtree.node import Node


class LineKind(Enum):
    OPENING = auto()
    VALUE = auto()
    CLOSING = auto()


@dataclass(frozen=True, slots=True)
class DisplayLine:
    """One row of the outline.

    ``id`` equals ``path`` except for closing lines, which use
    ``<path>_closing``.  ``line_number`` is the 1-based row the line
    occupies when every container is expanded.
    """

    id: str
    path: str
    depth: int
    line_number: int
    kind: LineKind
    node: Node
    key: str | None = None
    is_last: bool = True
    expanded: bool = False

    @property
    def bracket(self) -> str:
        if self.kind is LineKind.CLOSING:
            return self.node.close_bracket
        return self.node.open_bracket


def flatten(
    node: Node, expanded: Container[str], *, path: str = ROOT
) -> list[DisplayLine]:
    """Return the visible lines of *node* given the set of *expanded* paths.

    Subtrees of collapsed containers are not visited, so the cost follows
    the number of visible lines.
    """
    lines: list[DisplayLine] = []
    _flatten_into(lines, node, expanded, None, path, 0, 1, True)
    return lines


def _flatten_into(
    lines: list[DisplayLine],
    node: Node,
    expanded: Container[str],
    key: str | None,
    path: str,
    depth: int,
    line_number: int,
    is_last: bool,
) -> None:
    if not node.is_container:
        lines.append(
            DisplayLine(path, path, depth, line_number, LineKind.VALUE, node, key, is_last)
        )
        return

    is_open = path in expanded
    lines.append(
        DisplayLine(
            path, path, depth, line_number, LineKind.OPENING, node, key, is_last, is_open
        )
    )
    if not is_open:
        return

    child_line = line_number + 1
    last = node.child_count - 1
    for i, (child_key, child) in enumerate(node.children):
        _flatten_into(
            lines,
            child,
            expanded,
            child_key if isinstance(child_key, str) else None,
            child_path(path, child_key),
            depth + 1,
            child_line,
            i == last,
        )
        child_line += child.total_lines
    lines.append(
        DisplayLine(
            path + CLOSING_SUFFIX,
            path,
            depth,
            line_number + node.total_lines - 1,
            LineKind.CLOSING,
            node,
            None,
            is_last,
            True,
        )
    )
