"""Terminal JSON viewer application."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from textual.app import App, ComposeResult
from textual.containers import Horizontal
from textual.widgets import Header, Static

from jtree.config import ExpandMode, ViewerConfig
from jtree.history import InputHistory
from jtree.widget import JsonTreeView

SAMPLE_JSON = """\
{
    "name": "jtree",
    "description": "A collapsible JSON outline with live search",
    "features": ["expand", "collapse", "search", "raw view"],
    "config": {
        "indent": 4,
        "sort_keys_in_raw_view": true,
        "nested": {
            "deep": {
                "value": null
            }
        }
    },
    "scores": [100, 200.5, 300]
}"""


class JsonViewerApp(App):
    """TUI app that wraps the JsonTreeView widget."""

    CSS = """
    Screen {
        layout: vertical;
    }
    #body {
        height: 1fr;
    }
    #history {
        width: 36;
        display: none;
        padding: 0 1;
        color: $text-muted;
        background: $surface;
        border-right: solid $accent 50%;
    }
    #history.visible {
        display: block;
    }
    #viewer {
        height: 1fr;
        border: solid $accent;
    }
    """

    TITLE = "JSON Viewer"
    BINDINGS = []
    ENABLE_COMMAND_PALETTE = False

    def __init__(
        self,
        file_path: str = "",
        initial_content: bytes | str = "",
        config: ViewerConfig | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.file_path = file_path
        self.initial_content = initial_content
        self.config = config or ViewerConfig()
        self.history = InputHistory(
            max_items=self.config.history_max_items,
            max_age=self.config.history_max_age,
        )

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Horizontal(id="body"):
            yield Static("", id="history")
            yield JsonTreeView(self.initial_content, config=self.config, id="viewer")

    def on_mount(self) -> None:
        self.sub_title = self.file_path or "[sample]"
        viewer = self.query_one("#viewer", JsonTreeView)
        self._remember(viewer)
        if not viewer.session.document.ok:
            self.notify(viewer.session.error, severity="error", timeout=6)
        viewer.focus()

    def _remember(self, viewer: JsonTreeView) -> None:
        if viewer.session.document.ok:
            self.history.add(viewer.session.document.text)
        self.history.cleanup()
        self._update_history_panel()

    def _update_history_panel(self) -> None:
        rows = ["[b]HISTORY (24H)[/b]", ""]
        for i, entry in enumerate(self.history.items[:9], start=1):
            stamp = entry.timestamp.strftime("%H:%M")
            rows.append(f"[dim]{i} {stamp}[/dim] {entry.preview}")
        self.query_one("#history", Static).update("\n".join(rows))

    # -- Event handlers ----------------------------------------------------

    def on_json_tree_view_quit(self, event: JsonTreeView.Quit) -> None:
        self.exit()

    def on_json_tree_view_document_loaded(
        self, event: JsonTreeView.DocumentLoaded
    ) -> None:
        if event.ok:
            self.notify("Document loaded", severity="information")
        else:
            self.notify(event.error, severity="error", timeout=6)

    def on_json_tree_view_history_toggle_requested(self) -> None:
        self.query_one("#history").toggle_class("visible")

    def on_json_tree_view_history_selected(
        self, event: JsonTreeView.HistorySelected
    ) -> None:
        panel = self.query_one("#history")
        if not panel.has_class("visible"):
            return
        if event.index >= len(self.history.items):
            return
        entry = self.history.items[event.index]
        viewer = self.query_one("#viewer", JsonTreeView)
        viewer.set_content(entry.content)
        self._remember(viewer)


def build_config(args: argparse.Namespace) -> ViewerConfig:
    return ViewerConfig(
        indent=args.indent,
        sort_keys_in_raw_view=not args.keep_key_order,
        expand_on_load=ExpandMode.ROOT if args.collapsed else ExpandMode.ALL,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jtree",
        description="Collapsible JSON viewer with live search",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default="",
        help="JSON file to view",
    )
    parser.add_argument(
        "--indent",
        type=int,
        default=4,
        help="spaces per nesting level (default: 4)",
    )
    parser.add_argument(
        "--collapsed",
        action="store_true",
        default=False,
        help="start with only the root expanded",
    )
    parser.add_argument(
        "--keep-key-order",
        action="store_true",
        default=False,
        help="do not sort keys in the raw view",
    )
    return parser


def main() -> None:
    args = build_parser().parse_args()

    try:
        config = build_config(args)
    except ValueError as exc:
        print(f"jtree: {exc}", file=sys.stderr)
        sys.exit(2)

    file_path: str = args.file
    content: bytes | str = SAMPLE_JSON
    if file_path:
        try:
            content = Path(file_path).read_bytes()
        except OSError as exc:
            print(f"jtree: {exc}", file=sys.stderr)
            sys.exit(1)

    app = JsonViewerApp(file_path=file_path, initial_content=content, config=config)
    app.run()


if __name__ == "__main__":
    main()
