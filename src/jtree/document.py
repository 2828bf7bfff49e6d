"""Decode, parse and pretty-print input documents."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum, auto

from jtree.config import ViewerConfig
from jtree.node import Node, parse_value

logger = logging.getLogger(__name__)


class DocumentStatus(Enum):
    OK = auto()
    UNREADABLE = auto()  # input is not valid UTF-8 text
    INVALID = auto()  # text is not well-formed JSON


class DocumentError(Exception):
    """Base class for input that cannot be turned into a tree."""

    status = DocumentStatus.INVALID


class UnreadableInputError(DocumentError):
    status = DocumentStatus.UNREADABLE


class InvalidDocumentError(DocumentError):
    status = DocumentStatus.INVALID


@dataclass
class Document:
    """Outcome of loading one input.

    ``raw_text`` is what the raw view shows: the pretty-printed value for a
    valid document, or the original text unmodified when it failed to parse.
    """

    text: str
    status: DocumentStatus
    root: Node | None = None
    value: object = None
    error: str = ""
    raw_text: str = ""

    @property
    def ok(self) -> bool:
        return self.status is DocumentStatus.OK

    @property
    def raw_lines(self) -> list[str]:
        return self.raw_text.split("\n")


def decode_text(data: bytes | str) -> str:
    if isinstance(data, str):
        try:
            data.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise UnreadableInputError(f"Cannot read input: {exc.reason}") from exc
        return data
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise UnreadableInputError(f"Cannot read input: {exc.reason}") from exc


def parse_text(text: str) -> object:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidDocumentError(f"Invalid JSON: {e.msg} (line {e.lineno})") from e


def format_json(value: object, *, indent: int = 4, sort_keys: bool = True) -> str:
    """Pretty-print *value* for the raw view."""
    return json.dumps(value, indent=indent, ensure_ascii=False, sort_keys=sort_keys)


def load_document(data: bytes | str, config: ViewerConfig | None = None) -> Document:
    """Decode and parse *data*.  Failures are reported through the status."""
    config = config or ViewerConfig()
    text = ""
    try:
        text = decode_text(data)
        value = parse_text(text)
    except DocumentError as exc:
        logger.debug("document rejected: %s", exc)
        raw = text if exc.status is DocumentStatus.INVALID else ""
        return Document(text=text, status=exc.status, error=str(exc), raw_text=raw)

    root = parse_value(value)
    logger.debug("document loaded: %d lines", root.total_lines)
    return Document(
        text=text,
        status=DocumentStatus.OK,
        root=root,
        value=value,
        raw_text=format_json(
            value, indent=config.indent, sort_keys=config.sort_keys_in_raw_view
        ),
    )
