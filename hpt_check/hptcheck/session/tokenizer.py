"""Row source for CSV sessions, built on the stdlib ``csv`` reader."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO, Union

BOM = "\ufeff"

CsvSource = Union[Path, bytes, str, IO[str], IO[bytes], Iterable[str], Iterable[bytes]]


def _lines(source: CsvSource) -> Iterator[str]:
    if isinstance(source, Path):
        with source.open(newline="", encoding="utf-8") as f:
            yield from f
    elif isinstance(source, bytes):
        yield from io.StringIO(source.decode("utf-8"), newline="")
    elif isinstance(source, str):
        yield from io.StringIO(source, newline="")
    elif isinstance(source, io.TextIOBase):
        yield from source
    elif hasattr(source, "read"):
        text = io.TextIOWrapper(source, encoding="utf-8", newline="")
        try:
            yield from text
        finally:
            # the caller owns the binary stream
            text.detach()
    else:
        for line in source:
            yield line.decode("utf-8") if isinstance(line, bytes) else line


def _strip_bom(lines: Iterator[str]) -> Iterator[str]:
    first = next(lines, None)
    if first is None:
        return
    yield first[1:] if first.startswith(BOM) else first
    yield from lines


def iter_csv_rows(source: CsvSource) -> Iterator[list[str]]:
    """Yield the rows of *source* as lists of cell strings.

    Text sources are the CSV content itself; pass a :class:`Path` to read a
    file. A leading byte-order mark is dropped. Rows are produced lazily so
    the caller can stop reading at any point; closing the iterator closes any
    file opened here. Streams passed in are left open.
    """
    lines = _lines(source)
    try:
        yield from csv.reader(_strip_bom(lines))
    finally:
        lines.close()
