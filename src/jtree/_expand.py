"""Expansion-set mixin for ViewerSession."""

from __future__ import annotations

from jtree._path import ROOT, collect_all_paths, path_chain


class ExpansionMixin:
    """Expand/collapse operations over the session's expansion set."""

    @property
    def expanded(self) -> frozenset[str]:
        return frozenset(self._expanded)

    def is_expanded(self, path: str) -> bool:
        return path in self._expanded

    def expand(self, path: str) -> None:
        self._expanded.add(path)

    def collapse(self, path: str) -> None:
        self._expanded.discard(path)

    def toggle(self, path: str) -> bool:
        """Flip *path* and return whether it is now expanded."""
        if path in self._expanded:
            self._expanded.remove(path)
            return False
        self._expanded.add(path)
        return True

    def expand_all(self) -> None:
        if self._root is None:
            return
        self._expanded = collect_all_paths(self._root)

    def collapse_all(self) -> None:
        self._expanded = {ROOT}

    def expand_to_path(self, path: str) -> None:
        """Expand every container from the root down to *path* itself.

        Raises KeyError when *path* is not part of the current tree.
        """
        if self._root is None:
            raise KeyError(path)
        self._expanded.update(path_chain(self._root, path))

    def parent_path(self, path: str) -> str | None:
        """Path of the container holding *path*; None for the root."""
        if self._root is None or path == ROOT:
            return None
        return path_chain(self._root, path)[-2]
