"""Path addressing for nodes in a JSON tree.

A path is ``root`` followed by ``.key`` for object members and ``[i]`` for
array elements, e.g. ``root.users[2].name``.
"""

from __future__ import annotations

from collections.abc import Iterator

from jtree.node import Node

ROOT = "root"
CLOSING_SUFFIX = "_closing"


def child_path(parent: str, key: str | int) -> str:
    if isinstance(key, int):
        return f"{parent}[{key}]"
    return f"{parent}.{key}"


def iter_paths(node: Node, path: str = ROOT) -> Iterator[tuple[str, Node]]:
    """Yield ``(path, node)`` for every node in document order."""
    yield path, node
    for key, child in node.children:
        yield from iter_paths(child, child_path(path, key))


def collect_all_paths(node: Node, start_path: str = ROOT) -> set[str]:
    return {path for path, _ in iter_paths(node, start_path)}


def path_chain(node: Node, path: str, start_path: str = ROOT) -> list[str]:
    """Return the paths from *start_path* down to *path*, both included.

    The chain is resolved against the tree rather than by splitting the
    string, so member names containing ``.`` or ``[`` still resolve.
    Raises KeyError when *path* does not address a node of the tree.
    """
    chain = _resolve(node, start_path, path)
    if chain is None:
        raise KeyError(path)
    return chain


def _resolve(node: Node, current: str, target: str) -> list[str] | None:
    if current == target:
        return [current]
    for key, child in node.children:
        candidate = child_path(current, key)
        if candidate != target and not (
            target.startswith(candidate) and target[len(candidate)] in ".["
        ):
            continue
        rest = _resolve(child, candidate, target)
        if rest is not None:
            return [current, *rest]
    return None
