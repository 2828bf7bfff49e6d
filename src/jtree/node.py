"""Immutable JSON node model with precomputed line counts."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any

logger = logging.getLogger(__name__)


class NodeKind(Enum):
    STRING = auto()
    NUMBER = auto()
    BOOL = auto()
    NULL = auto()
    ARRAY = auto()
    OBJECT = auto()


_CONTAINERS = frozenset({NodeKind.ARRAY, NodeKind.OBJECT})


@dataclass(frozen=True, slots=True)
class Node:
    """One JSON value.

    Attributes:
        kind:        Which variant this node is.
        value:       The scalar value for STRING/NUMBER/BOOL; None otherwise.
        children:    ``(key, child)`` pairs.  Keys are member names for
                     objects and indices for arrays; empty for leaves.
        total_lines: Lines the fully expanded subtree occupies.  1 for a
                     leaf, ``2 + sum(child.total_lines)`` for a container.
    """

    kind: NodeKind
    value: Any = None
    children: tuple[tuple[str | int, Node], ...] = ()
    total_lines: int = field(default=1, compare=False)

    @property
    def is_container(self) -> bool:
        return self.kind in _CONTAINERS

    @property
    def child_count(self) -> int:
        return len(self.children)

    @property
    def open_bracket(self) -> str:
        return "{" if self.kind is NodeKind.OBJECT else "["

    @property
    def close_bracket(self) -> str:
        return "}" if self.kind is NodeKind.OBJECT else "]"


NULL = Node(NodeKind.NULL)


def _container(kind: NodeKind, children: tuple[tuple[str | int, Node], ...]) -> Node:
    total = 2
    for _, child in children:
        total += child.total_lines
    return Node(kind, children=children, total_lines=total)


def parse_value(value: object) -> Node:
    """Convert a decoded JSON value (``json.loads`` output) into a Node.

    The checks run in a fixed order: ``bool`` is tested before numbers
    because it is an ``int`` subclass.  Values of any other type become
    ``Null``.
    """
    if isinstance(value, str):
        return Node(NodeKind.STRING, value)
    if isinstance(value, bool):
        return Node(NodeKind.BOOL, value)
    if isinstance(value, (int, float)):
        return Node(NodeKind.NUMBER, value)
    if value is None:
        return NULL
    if isinstance(value, (list, tuple)):
        return _container(
            NodeKind.ARRAY,
            tuple((i, parse_value(v)) for i, v in enumerate(value)),
        )
    if isinstance(value, Mapping):
        return _container(
            NodeKind.OBJECT,
            tuple((str(k), parse_value(v)) for k, v in value.items()),
        )
    logger.debug("unsupported value type %s mapped to null", type(value).__name__)
    return NULL


def number_text(value: int | float) -> str:
    """Decimal form of a number as it appears in JSON text."""
    return json.dumps(value)


def count_nodes(node: Node) -> int:
    """Number of nodes in the subtree, *node* included."""
    return 1 + sum(count_nodes(child) for _, child in node.children)
