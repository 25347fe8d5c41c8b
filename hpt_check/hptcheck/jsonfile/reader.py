"""Incremental JSON reader built on ``ijson``.

The document is never materialised: top-level metadata values are built one
at a time, and each ``standard_charge_information`` item is yielded as soon
as its closing bracket is parsed, so a caller that stops early stops reading.
"""

from __future__ import annotations

import io
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, NamedTuple, Union

import ijson
from ijson.common import ObjectBuilder

CHARGES_KEY = "standard_charge_information"
BOM = "\ufeff"
BOM_BYTES = BOM.encode("utf-8")

JsonSource = Union[Path, bytes, str, IO[str], IO[bytes]]

# parser failures that mean the input is not well-formed JSON
JSON_ERRORS = (ijson.JSONError, UnicodeDecodeError)


class JsonValue(NamedTuple):
    """One top-level entry of a document.

    The key is a string for metadata values, the item index for charge items,
    and None when the document root is not an object.
    """

    key: str | int | None
    value: Any

    @property
    def is_charge(self) -> bool:
        return isinstance(self.key, int)

    @property
    def is_root(self) -> bool:
        return self.key is None


class _ByteReader:
    """Byte view of a stream for the parser: text is encoded, a BOM dropped."""

    def __init__(self, stream: IO[Any]) -> None:
        self._stream = stream
        self._started = False

    def read(self, size: int = -1) -> bytes:
        if size == 0:
            return b""
        chunk = self._stream.read(size)
        if isinstance(chunk, str):
            chunk = chunk.encode("utf-8")
        if not self._started:
            self._started = True
            if chunk.startswith(BOM_BYTES):
                chunk = chunk[len(BOM_BYTES):] or self.read(size)
        return chunk


@contextmanager
def open_json(source: JsonSource) -> Iterator[_ByteReader]:
    """Open *source* for parsing; only files opened here are closed here."""
    if isinstance(source, Path):
        with source.open("rb") as f:
            yield _ByteReader(f)
    elif isinstance(source, bytes):
        yield _ByteReader(io.BytesIO(source))
    elif isinstance(source, str):
        yield _ByteReader(io.StringIO(source))
    else:
        yield _ByteReader(source)


def _next_event(events: Iterator[tuple[str, str, Any]]) -> tuple[str, str, Any]:
    found = next(events, None)
    if found is None:
        raise ijson.IncompleteJSONError("Incomplete JSON content")
    return found


def _build(events: Iterator[tuple[str, str, Any]], event: str, value: Any) -> Any:
    """Build one complete value starting at (*event*, *value*)."""
    builder = ObjectBuilder()
    builder.event(event, value)
    depth = 1 if event in ("start_map", "start_array") else 0
    while depth:
        _, event, value = _next_event(events)
        builder.event(event, value)
        if event in ("start_map", "start_array"):
            depth += 1
        elif event in ("end_map", "end_array"):
            depth -= 1
    return builder.value


def _array_items(events: Iterator[tuple[str, str, Any]]) -> Iterator[Any]:
    for _, event, value in events:
        if event == "end_array":
            return
        yield _build(events, event, value)


def iter_json_values(stream: IO[Any]) -> Iterator[JsonValue]:
    """Yield metadata values and charge items in document order.

    An empty charges array is yielded as a metadata value so the schema can
    report it.
    """
    events = iter(ijson.parse(stream, use_float=True))
    _, event, value = _next_event(events)
    if event != "start_map":
        yield JsonValue(None, _build(events, event, value))
    else:
        yield from _root_values(events)

    # anything after the root value is a syntax error
    for _ in events:
        pass


def _root_values(events: Iterator[tuple[str, str, Any]]) -> Iterator[JsonValue]:
    key: str | None = None
    for prefix, event, value in events:
        if prefix == "" and event == "map_key":
            key = value
        elif prefix == "" and event == "end_map":
            return
        elif key == CHARGES_KEY and event == "start_array":
            count = 0
            for count, item in enumerate(_array_items(events), start=1):
                yield JsonValue(count - 1, item)
            if not count:
                yield JsonValue(key, [])
        else:
            yield JsonValue(key, _build(events, event, value))
