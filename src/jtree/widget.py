"""Read-only JSON outline widget."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from jtree._path import ROOT, iter_paths
from jtree.config import ViewerConfig
from jtree.flatten import DisplayLine, LineKind
from jtree.render import render_line
from jtree.session import ViewerSession


class ViewMode(Enum):
    NORMAL = auto()
    SEARCH = auto()


class JsonTreeView(Widget, can_focus=True):
    """A collapsible JSON outline Textual widget.

    Supported keys:
      NORMAL: j k  up down  g G  PgUp/PgDn  Enter/Space  l h  zo zc za zR zM
              / n N  r (raw view)  s (history)  1-9  q
      SEARCH: typing updates matches live; Enter commits; Up/Down and
              Shift+Enter move between matches; Escape clears
    """

    DEFAULT_CSS = """
    JsonTreeView {
        height: 1fr;
        background: $surface;
        padding: 0 1;
    }
    """

    _MODE_STYLE = {
        ViewMode.NORMAL: "bold white on dark_green",
        ViewMode.SEARCH: "bold white on dark_magenta",
    }

    # -- Messages ----------------------------------------------------------

    @dataclass
    class DocumentLoaded(Message):
        ok: bool
        error: str = ""

    @dataclass
    class Quit(Message):
        pass

    @dataclass
    class HistoryToggleRequested(Message):
        pass

    @dataclass
    class HistorySelected(Message):
        index: int  # 0-based position in the history list

    # -- Init --------------------------------------------------------------

    def __init__(
        self,
        initial_content: bytes | str = "",
        *,
        config: ViewerConfig | None = None,
        name: str | None = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(name=name, id=id, classes=classes)
        self.session = ViewerSession(config=config)
        self.lines: list[DisplayLine] = []
        self.cursor_row: int = 0
        self._scroll_top: int = 0
        self._mode: ViewMode = ViewMode.NORMAL
        self.pending: str = ""
        self.status_msg: str = ""
        self.raw_view: bool = False
        self._search_buffer: str = ""
        if initial_content:
            self._load_content(initial_content)

    # -- Public API --------------------------------------------------------

    def set_content(self, content: bytes | str) -> None:
        self._load_content(content)
        self.post_message(
            self.DocumentLoaded(ok=self.session.document.ok, error=self.session.error)
        )
        self.refresh()

    def _load_content(self, content: bytes | str) -> None:
        document = self.session.load(content)
        self.cursor_row = 0
        self._scroll_top = 0
        self._search_buffer = ""
        self._mode = ViewMode.NORMAL
        self.raw_view = not document.ok
        self.status_msg = document.error
        self._reflatten()

    def _reflatten(self) -> None:
        """Re-flatten after any state change and keep the cursor in range."""
        self.lines = self.session.lines()
        self._clamp_cursor()

    # -- Helpers -----------------------------------------------------------

    def _row_count(self) -> int:
        if self.raw_view:
            return len(self.session.document.raw_lines)
        return len(self.lines)

    def _clamp_cursor(self) -> None:
        self.cursor_row = max(0, min(self.cursor_row, self._row_count() - 1))

    def _visible_height(self) -> int:
        return max(1, self.content_region.height - 1)

    def _ensure_cursor_visible(self) -> None:
        vh = self._visible_height()
        if self.cursor_row < self._scroll_top:
            self._scroll_top = self.cursor_row
        elif self.cursor_row >= self._scroll_top + vh:
            self._scroll_top = self.cursor_row - vh + 1

    def _scroll_cursor_to_center(self, ratio: float = 0.33) -> None:
        """Position viewport so cursor is at given ratio from top (default 1/3)."""
        vh = self._visible_height()
        offset = int(vh * ratio)
        self._scroll_top = max(0, self.cursor_row - offset)

    def _cursor_line(self) -> DisplayLine | None:
        if self.raw_view or not self.lines:
            return None
        return self.lines[self.cursor_row]

    def _move_cursor_to(self, line_id: str) -> None:
        idx = ViewerSession.line_index(self.lines, line_id)
        if idx >= 0:
            self.cursor_row = idx

    # =====================================================================
    # Rendering
    # =====================================================================

    def _gutter_width(self) -> int:
        if self.raw_view:
            total = len(self.session.document.raw_lines)
        else:
            root = self.session.root
            total = root.total_lines if root is not None else 1
        return max(3, len(str(total)))

    def render(self) -> Text:
        width = self.content_region.width
        height = self.content_region.height
        if height < 2 or width < 10:
            return Text("(too small)")

        content_height = height - 1
        self._ensure_cursor_visible()
        ln_width = self._gutter_width()

        result = Text()
        result_append = Text.append
        rows_used = 0
        row = self._scroll_top
        if self.raw_view:
            raw_lines = self.session.document.raw_lines
            while rows_used < content_height and row < len(raw_lines):
                style = "reverse" if row == self.cursor_row else ""
                result_append(result, f"{row + 1:>{ln_width}} ", style="dim cyan")
                result_append(result, raw_lines[row], style=style)
                result_append(result, "\n")
                rows_used += 1
                row += 1
        else:
            session = self.session
            query = session.query
            current = session.current_match
            indent = session.config.indent
            while rows_used < content_height and row < len(self.lines):
                line = self.lines[row]
                result_append(result, f"{line.line_number:>{ln_width}} ", style="dim cyan")
                if line.kind is LineKind.OPENING:
                    marker = "▾ " if line.expanded else "▸ "
                else:
                    marker = "  "
                result_append(result, marker, style="dim")
                body = render_line(
                    line,
                    query,
                    current=line.kind is not LineKind.CLOSING and line.path == current,
                    indent=indent,
                )
                if row == self.cursor_row:
                    body.stylize("reverse")
                result.append_text(body)
                result_append(result, "\n")
                rows_used += 1
                row += 1

        while rows_used < content_height:
            result_append(result, f"{'~':>{ln_width}} \n", style="dim blue")
            rows_used += 1

        # status bar
        mode_label = " RAW " if self.raw_view else f" {self._mode.name} "
        result_append(result, mode_label, style=self._MODE_STYLE[self._mode])
        if self.pending:
            result_append(result, f"  {self.pending}", style="bold yellow")
        if self._mode is ViewMode.SEARCH:
            result_append(result, f"  /{self._search_buffer}", style="bold magenta")
            result_append(result, " ", style="reverse")
        else:
            result_append(result, f"  {self.status_msg}")
        label = self.session.match_label
        if label:
            result_append(result, f"  [{label}]", style="bold")
        return result

    # =====================================================================
    # Key handling
    # =====================================================================

    def on_key(self, event: events.Key) -> None:
        event.prevent_default()
        event.stop()

        if self._mode is ViewMode.NORMAL:
            self._handle_normal(event)
        elif self._mode is ViewMode.SEARCH:
            self._handle_search(event)

        self._clamp_cursor()
        self.refresh()

    # -- NORMAL ------------------------------------------------------------

    def _handle_normal(self, event) -> None:
        key = event.key
        char = event.character or ""

        if self.pending:
            pending = self.pending
            self.pending = ""
            if pending == "z":
                self._handle_fold_command(char)
            return

        if char == "z":
            self.pending = "z"
            return

        if key in ("j", "down"):
            self.cursor_row += 1
        elif key in ("k", "up"):
            self.cursor_row -= 1
        elif char == "g" or key == "home":
            self.cursor_row = 0
        elif char == "G" or key == "end":
            self.cursor_row = self._row_count() - 1
        elif key == "pagedown":
            self.cursor_row += self._visible_height()
        elif key == "pageup":
            self.cursor_row -= self._visible_height()
        elif key in ("enter", "space"):
            self._toggle_at_cursor()
        elif key in ("l", "right"):
            self._expand_at_cursor()
        elif key in ("h", "left"):
            self._collapse_at_cursor()
        elif char == "/" or key == "ctrl+f":
            if self.raw_view:
                self.status_msg = "search is not available in raw view"
                return
            self._mode = ViewMode.SEARCH
            self._search_buffer = ""
        elif char in ("n", "N"):
            if self.raw_view:
                return
            if char == "n":
                self._goto_next_match()
            else:
                self._goto_prev_match()
        elif key == "escape":
            self.session.clear_search()
            self.status_msg = ""
        elif char == "r":
            self._toggle_raw_view()
        elif char == "s":
            self.post_message(self.HistoryToggleRequested())
        elif char and char in "123456789":
            self.post_message(self.HistorySelected(index=int(char) - 1))
        elif char == "q":
            self.post_message(self.Quit())

    def _handle_fold_command(self, char: str) -> None:
        if char == "o":
            self._expand_at_cursor()
        elif char == "c":
            self._collapse_at_cursor()
        elif char == "a":
            self._toggle_at_cursor()
        elif char == "R":
            self.session.expand_all()
            self._reflatten()
        elif char == "M":
            line = self._cursor_line()
            self.session.collapse_all()
            self._reflatten()
            self.cursor_row = 0 if line is None else self._top_level_row(line.path)

    def _top_level_row(self, path: str) -> int:
        """Row of the top-level line that contains *path* after collapsing."""
        chain_top = path
        session = self.session
        while True:
            parent = session.parent_path(chain_top)
            if parent is None or parent == ROOT:
                break
            chain_top = parent
        idx = ViewerSession.line_index(self.lines, chain_top)
        return max(0, idx)

    def _toggle_at_cursor(self) -> None:
        line = self._cursor_line()
        if line is None or not line.node.is_container:
            return
        self.session.toggle(line.path)
        self._reflatten()
        self._move_cursor_to(line.path)

    def _expand_at_cursor(self) -> None:
        line = self._cursor_line()
        if line is None or not line.node.is_container:
            return
        self.session.expand(line.path)
        self._reflatten()

    def _collapse_at_cursor(self) -> None:
        """Collapse the container under the cursor, or else its parent."""
        line = self._cursor_line()
        if line is None:
            return
        target = line.path
        if not (line.node.is_container and self.session.is_expanded(target)):
            parent = self.session.parent_path(target)
            if parent is None:
                return
            target = parent
        self.session.collapse(target)
        self._reflatten()
        self._move_cursor_to(target)

    def _toggle_raw_view(self) -> None:
        if not self.session.document.ok:
            self.status_msg = self.session.error
            return
        current = self._cursor_line()
        self.raw_view = not self.raw_view
        self.cursor_row = 0
        if self.raw_view and current is not None and self._raw_rows_match_outline():
            self.cursor_row = current.line_number - 1
        self._clamp_cursor()
        self._scroll_cursor_to_center()

    def _raw_rows_match_outline(self) -> bool:
        """True when raw row i is outline line number i + 1."""
        if self.session.config.sort_keys_in_raw_view:
            return False
        return not any(
            node.is_container and not node.child_count
            for _, node in iter_paths(self.session.root)
        )

    # -- SEARCH ------------------------------------------------------------

    def _handle_search(self, event) -> None:
        key = event.key
        char = event.character

        if key == "escape":
            self._mode = ViewMode.NORMAL
            self._search_buffer = ""
            self.session.clear_search()
            self.status_msg = ""
            return

        if key == "enter":
            self._mode = ViewMode.NORMAL
            self._goto_current_match()
            return

        if key in ("down", "tab"):
            self._goto_next_match()
            return
        if key in ("up", "shift+tab", "shift+enter"):
            self._goto_prev_match()
            return

        if key == "backspace":
            if not self._search_buffer:
                self._mode = ViewMode.NORMAL
                return
            self._search_buffer = self._search_buffer[:-1]
            self._execute_search()
            return

        if char and char.isprintable():
            self._search_buffer += char
            self._execute_search()

    def _execute_search(self) -> None:
        """Re-run the search for the current buffer and show the first match."""
        self.session.set_query(self._search_buffer)
        self._reflatten()
        self._goto_current_match()

    def _goto_current_match(self) -> None:
        """Move cursor to the current match and update status."""
        session = self.session
        path = session.current_match
        if path is None:
            if session.query:
                self.status_msg = f"Pattern not found: {session.query}"
            else:
                self.status_msg = ""
            return
        self._move_cursor_to(path)
        self._scroll_cursor_to_center()
        self.status_msg = f"/{session.query}  [{session.match_label}]"

    def _goto_next_match(self) -> None:
        if not self.session.matches:
            self._report_no_matches()
            return
        self.session.next_match()
        self._reflatten()
        self._goto_current_match()

    def _goto_prev_match(self) -> None:
        if not self.session.matches:
            self._report_no_matches()
            return
        self.session.previous_match()
        self._reflatten()
        self._goto_current_match()

    def _report_no_matches(self) -> None:
        if self.session.query:
            self.status_msg = f"Pattern not found: {self.session.query}"
        else:
            self.status_msg = "No previous search"
