# tefisher/utils/textio.py
from __future__ import annotations

import gzip
import io
import os
from typing import Iterator, Sequence, TextIO, Union

__all__ = ["Source", "Sink", "lines_maybe_text", "iter_lines", "write_text"]

Source = Union[str, "os.PathLike[str]", TextIO, Sequence[str]]   # path | text blob | file-like | lines
Sink = Union[None, str, "os.PathLike[str]", TextIO]              # path | file-like | None (return string)

_GZ_SUFFIXES = (".gz", ".bgz")


def lines_maybe_text(path: Union[str, "os.PathLike[str]"]) -> Iterator[str]:
    """Yield text lines from a plain or gzip-compressed file. Raises OSError if unreadable."""
    p = os.fspath(path)
    if p.endswith(_GZ_SUFFIXES):
        with gzip.open(p, "rt", encoding="utf-8", errors="replace") as fh:
            yield from fh
    else:
        with open(p, "rt", encoding="utf-8", errors="replace") as fh:
            yield from fh


def iter_lines(source: Source) -> Iterator[str]:
    """
    Yield lines from:
      - a path (str or PathLike naming an existing file),
      - a text block (str with newlines),
      - a file-like (TextIO),
      - or a sequence of lines.
    """
    if isinstance(source, os.PathLike):
        yield from lines_maybe_text(source)
    elif isinstance(source, str):
        if "\n" not in source and os.path.isfile(source):
            yield from lines_maybe_text(source)
        else:
            yield from io.StringIO(source)
    elif hasattr(source, "read"):
        yield from source  # type: ignore[misc]
    else:
        yield from source


def write_text(text: str, sink: Sink) -> str:
    if sink is None:
        return text
    if isinstance(sink, (str, os.PathLike)):
        with open(sink, "w", encoding="utf-8") as fp:
            fp.write(text)
        return text
    if not hasattr(sink, "write"):
        raise TypeError("sink must be a path, a file-like with .write, or None")
    sink.write(text)
    return text
