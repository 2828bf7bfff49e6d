"""Viewer configuration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum, auto


class ExpandMode(Enum):
    """Which containers are expanded right after a document loads."""

    ALL = auto()
    ROOT = auto()


@dataclass(frozen=True, slots=True)
class ViewerConfig:
    """Immutable settings for a viewer session.

    Attributes:
        indent: Spaces per nesting level in the outline and the raw view.
        sort_keys_in_raw_view: Sort object keys in the pretty-printed raw
            view.  The outline always keeps document key order.
        expand_on_load: Initial expansion after a document is loaded.
        history_max_items: Entries kept in the input history.
        history_max_age: Age after which history entries are dropped.
    """

    indent: int = 4
    sort_keys_in_raw_view: bool = True
    expand_on_load: ExpandMode = ExpandMode.ALL
    history_max_items: int = 50
    history_max_age: timedelta = timedelta(hours=24)

    def __post_init__(self) -> None:
        if self.indent < 0:
            msg = f"indent must be >= 0, got {self.indent}"
            raise ValueError(msg)
        if self.history_max_items < 1:
            msg = f"history_max_items must be >= 1, got {self.history_max_items}"
            raise ValueError(msg)
        if self.history_max_age <= timedelta(0):
            msg = f"history_max_age must be positive, got {self.history_max_age}"
            raise ValueError(msg)
