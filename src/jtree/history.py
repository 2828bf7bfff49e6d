"""Recently viewed inputs, most recent first."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

PREVIEW_LENGTH = 30


def make_preview(content: str) -> str:
    return content.replace("\n", " ").strip()[:PREVIEW_LENGTH]


@dataclass(frozen=True)
class HistoryEntry:
    content: str
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def preview(self) -> str:
        return make_preview(self.content)


class InputHistory:
    """In-memory history of viewed documents."""

    def __init__(
        self, max_items: int = 50, max_age: timedelta = timedelta(hours=24)
    ) -> None:
        self.max_items = max_items
        self.max_age = max_age
        self.items: list[HistoryEntry] = []

    def __len__(self) -> int:
        return len(self.items)

    def add(self, content: str, now: datetime | None = None) -> HistoryEntry:
        """Record *content* as the most recent entry, dropping any duplicate."""
        self.items = [e for e in self.items if e.content != content]
        entry = HistoryEntry(content, now or datetime.now())
        self.items.insert(0, entry)
        if len(self.items) > self.max_items:
            del self.items[self.max_items :]
        return entry

    def cleanup(self, now: datetime | None = None) -> None:
        """Drop entries older than ``max_age``."""
        now = now or datetime.now()
        self.items = [e for e in self.items if now - e.timestamp <= self.max_age]
