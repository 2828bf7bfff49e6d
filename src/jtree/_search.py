"""Search over a node tree, plus the search mixin for ViewerSession."""

from __future__ import annotations

import re

from jtree._path import ROOT, child_path
from jtree.highlight import query_pattern
from jtree.node import Node, NodeKind, number_text


def search(node: Node, query: str, path: str = ROOT) -> list[str]:
    """Return the paths matching *query*, in document order.

    Object members match on their key (without descending into the value)
    or else through their value.  Strings match on their content, numbers on
    their JSON literal.  Booleans and null never match.
    """
    pattern = query_pattern(query)
    if pattern is None:
        return []
    matches: list[str] = []
    _collect(node, path, pattern, matches)
    return matches


def _collect(node: Node, path: str, pattern: re.Pattern[str], matches: list[str]) -> None:
    kind = node.kind
    if kind is NodeKind.STRING:
        if pattern.search(node.value):
            matches.append(path)
    elif kind is NodeKind.NUMBER:
        if pattern.search(number_text(node.value)):
            matches.append(path)
    elif kind is NodeKind.ARRAY:
        for index, child in node.children:
            _collect(child, child_path(path, index), pattern, matches)
    elif kind is NodeKind.OBJECT:
        for key, child in node.children:
            member = child_path(path, key)
            if pattern.search(key):
                matches.append(member)
            else:
                _collect(child, member, pattern, matches)


class SearchMixin:
    """Query, match list and match cursor for ViewerSession."""

    @property
    def query(self) -> str:
        return self._query

    @property
    def matches(self) -> list[str]:
        return self._matches

    @property
    def current_index(self) -> int:
        """Index of the current match, -1 when there are no matches."""
        return self._current_match

    @property
    def current_match(self) -> str | None:
        if self._current_match < 0:
            return None
        return self._matches[self._current_match]

    @property
    def match_label(self) -> str:
        """``"i/N"`` for a status line; empty when there is no query."""
        if not self._query:
            return ""
        if not self._matches:
            return "0/0"
        return f"{self._current_match + 1}/{len(self._matches)}"

    def set_query(self, query: str) -> list[str]:
        """Run a new search and select its first match.

        An empty query clears the matches and leaves expansion alone.
        """
        self._query = query
        if not query or self._root is None:
            self._clear_matches()
            return self._matches
        self._matches = search(self._root, query)
        if not self._matches:
            self._current_match = -1
            return self._matches
        self._current_match = 0
        self.expand_to_path(self._matches[0])
        return self._matches

    def clear_search(self) -> None:
        self._query = ""
        self._clear_matches()

    def _clear_matches(self) -> None:
        self._matches = []
        self._current_match = -1

    def next_match(self) -> str | None:
        return self._step_match(1)

    def previous_match(self) -> str | None:
        return self._step_match(-1)

    def _step_match(self, delta: int) -> str | None:
        if not self._matches:
            return None
        self._current_match = (self._current_match + delta) % len(self._matches)
        path = self._matches[self._current_match]
        self.expand_to_path(path)
        return path
