"""Split display text into highlighted and plain runs for a search query."""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Segment:
    text: str
    is_match: bool


def query_pattern(query: str) -> re.Pattern[str] | None:
    """Compile *query* as a literal, case-insensitive pattern.

    Returns None for an empty query.  Search and highlighting share this so
    that both agree on what matches.
    """
    if not query:
        return None
    return re.compile(re.escape(query), re.IGNORECASE)


def find_matches(text: str, query: str) -> list[tuple[int, int]]:
    """Non-overlapping ``(start, end)`` ranges of *query* in *text*."""
    pattern = query_pattern(query)
    if pattern is None:
        return []
    return [m.span() for m in pattern.finditer(text)]


def highlight_segments(display: str, searchable: str, query: str) -> list[Segment]:
    """Map matches found in *searchable* onto *display*.

    *display* may be *searchable* wrapped in double quotes; offsets are
    shifted past the opening quote and clamped to the display length.  The
    returned segments always concatenate back to *display*.
    """
    matches = find_matches(searchable, query)
    if not matches:
        return [Segment(display, False)]

    prefix = 1 if display.startswith('"') else 0
    size = len(display)
    segments: list[Segment] = []
    pos = 0
    for start, end in matches:
        d_start = min(prefix + start, size)
        d_end = min(prefix + end, size)
        if pos < d_start:
            segments.append(Segment(display[pos:d_start], False))
        if d_start < d_end:
            segments.append(Segment(display[d_start:d_end], True))
        pos = max(pos, d_end)
    if pos < size:
        segments.append(Segment(display[pos:], False))
    return segments or [Segment(display, False)]
