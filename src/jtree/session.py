"""Per-document viewer state: tree, expansion set and search."""

from __future__ import annotations

import logging

from jtree._expand import ExpansionMixin
from jtree._path import ROOT, collect_all_paths
from jtree._search import SearchMixin
from jtree.config import ExpandMode, ViewerConfig
from jtree.document import Document, DocumentStatus, load_document
from jtree.flatten import DisplayLine, flatten
from jtree.node import Node

logger = logging.getLogger(__name__)


class ViewerSession(ExpansionMixin, SearchMixin):
    """State for one open document.

    Create one per displayed document.  Every mutation is synchronous;
    call :meth:`lines` afterwards to get the current outline.
    """

    def __init__(self, text: bytes | str = "", *, config: ViewerConfig | None = None) -> None:
        self.config: ViewerConfig = config or ViewerConfig()
        self._document: Document = Document(text="", status=DocumentStatus.INVALID)
        self._root: Node | None = None
        self._expanded: set[str] = {ROOT}
        self._query: str = ""
        self._matches: list[str] = []
        self._current_match: int = -1
        if text:
            self.load(text)

    # -- Document ----------------------------------------------------------

    def load(self, data: bytes | str) -> Document:
        """Replace the document and reset expansion and search state."""
        self._document = load_document(data, self.config)
        self._root = self._document.root
        self._query = ""
        self._matches = []
        self._current_match = -1
        if self._root is not None and self.config.expand_on_load is ExpandMode.ALL:
            self._expanded = collect_all_paths(self._root)
        else:
            self._expanded = {ROOT}
        logger.debug("session loaded document: %s", self._document.status.name)
        return self._document

    @property
    def document(self) -> Document:
        return self._document

    @property
    def root(self) -> Node | None:
        return self._root

    @property
    def error(self) -> str:
        return self._document.error

    @property
    def raw_text(self) -> str:
        return self._document.raw_text

    # -- Outline -----------------------------------------------------------

    def lines(self) -> list[DisplayLine]:
        if self._root is None:
            return []
        return flatten(self._root, self._expanded)

    @staticmethod
    def line_index(lines: list[DisplayLine], line_id: str) -> int:
        """Index of the line whose id is *line_id*, or -1."""
        for i, line in enumerate(lines):
            if line.id == line_id:
                return i
        return -1
