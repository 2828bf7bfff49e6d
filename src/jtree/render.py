"""Turn display lines into plain text or styled Rich text."""

from __future__ import annotations

from rich.text import Text

from jtree.flatten import DisplayLine, LineKind
from jtree.highlight import highlight_segments
from jtree.node import Node, NodeKind, number_text

KEY_STYLE = "cyan"
STRING_STYLE = "green"
NUMBER_STYLE = "yellow"
KEYWORD_STYLE = "magenta"
BRACKET_STYLE = "bold white"
PUNCT_STYLE = "white"
SUMMARY_STYLE = "dim italic"
MATCH_STYLE = "black on dark_goldenrod"
CURRENT_MATCH_STYLE = "black on yellow"

Part = tuple[str, str]

# C0 controls and DEL drawn as their Unicode control pictures, one cell each
_CONTROL_PICTURES = {code: chr(0x2400 + code) for code in range(0x20)}
_CONTROL_PICTURES[0x7F] = "\u2421"


def printable(text: str) -> str:
    """Replace control characters in *text* with same-length stand-ins."""
    return text.translate(_CONTROL_PICTURES)


def collapsed_summary(node: Node) -> str:
    n = node.child_count
    noun = "key" if node.kind is NodeKind.OBJECT else "item"
    return f" // {n} {noun}{'' if n == 1 else 's'}"


def _highlighted(
    display: str, searchable: str, query: str, style: str, current: bool
) -> list[Part]:
    if not query:
        return [(display, style)]
    match_style = CURRENT_MATCH_STYLE if current else MATCH_STYLE
    return [
        (seg.text, match_style if seg.is_match else style)
        for seg in highlight_segments(display, searchable, query)
    ]


def _value_parts(node: Node, query: str, current: bool) -> list[Part]:
    kind = node.kind
    if kind is NodeKind.STRING:
        display = f'"{printable(node.value)}"'
        return _highlighted(display, node.value, query, STRING_STYLE, current)
    if kind is NodeKind.NUMBER:
        text = number_text(node.value)
        return _highlighted(text, text, query, NUMBER_STYLE, current)
    if kind is NodeKind.BOOL:
        return [("true" if node.value else "false", KEYWORD_STYLE)]
    return [("null", KEYWORD_STYLE)]


def line_parts(line: DisplayLine, query: str = "", *, current: bool = False) -> list[Part]:
    """Content of *line* (without indentation) as ``(text, style)`` parts.

    *current* marks the line holding the selected search match.
    """
    parts: list[Part] = []
    comma = [] if line.is_last else [(",", PUNCT_STYLE)]

    if line.kind is LineKind.CLOSING:
        parts.append((line.bracket, BRACKET_STYLE))
        return parts + comma

    if line.key is not None:
        parts += _highlighted(f'"{printable(line.key)}"', line.key, query, KEY_STYLE, current)
        parts.append((": ", PUNCT_STYLE))

    if line.kind is LineKind.VALUE:
        return parts + _value_parts(line.node, query, current) + comma

    if line.expanded:
        parts.append((line.bracket, BRACKET_STYLE))
        return parts

    parts.append((f"{line.bracket}...{line.node.close_bracket}", BRACKET_STYLE))
    parts += comma
    parts.append((collapsed_summary(line.node), SUMMARY_STYLE))
    return parts


def line_text(line: DisplayLine, indent: int = 4) -> str:
    """Plain text of *line*, indented by depth."""
    body = "".join(text for text, _ in line_parts(line))
    return " " * (indent * line.depth) + body


def render_line(
    line: DisplayLine, query: str = "", *, current: bool = False, indent: int = 4
) -> Text:
    text = Text(" " * (indent * line.depth))
    for chunk, style in line_parts(line, query, current=current):
        text.append(chunk, style=style)
    return text
