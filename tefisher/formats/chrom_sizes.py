# tefisher/formats/chrom_sizes.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Union

from ..utils.textio import Sink, Source, iter_lines, lines_maybe_text, write_text

__all__ = ["ChromSize", "chromosome_set", "build_chromosome_set", "read_chrom_sizes", "decode", "encode"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChromSize:
    name: str
    size: Optional[str] = None   # kept as text; never interpreted here


def _parse_line(ln: str) -> Optional[ChromSize]:
    s = ln.strip()
    if not s or s.startswith("#"):
        return None
    parts = s.split()
    return ChromSize(name=parts[0], size=parts[1] if len(parts) > 1 else None)


def decode(source: Source) -> Iterator[ChromSize]:
    """Decode a chromosome-size listing (name [size] ...) from any Source."""
    for ln in iter_lines(source):
        rec = _parse_line(ln)
        if rec is not None:
            yield rec


def read_chrom_sizes(path: Union[str, "os.PathLike[str]"]) -> List[ChromSize]:
    """
    Read a size file in file order; a repeated chromosome keeps its first row.
    Raises OSError if the file cannot be opened.
    """
    seen = set()
    out: List[ChromSize] = []
    for ln in lines_maybe_text(path):
        rec = _parse_line(ln)
        if rec is None or rec.name in seen:
            continue
        seen.add(rec.name)
        out.append(rec)
    return out


def chromosome_set(sizes: Iterable[ChromSize]) -> frozenset:
    return frozenset(c.name for c in sizes)


def build_chromosome_set(path: Union[str, "os.PathLike[str]"]) -> frozenset:
    chroms = chromosome_set(read_chrom_sizes(path))
    logger.debug("chromosome set from %s: %d names", path, len(chroms))
    return chroms


def encode(items: Iterable[ChromSize], *, sink: Sink = None, sort: bool = True) -> str:
    """
    Write a genome file for the overlap primitive. Rows are sorted by name so
    the genome order agrees with sorted BED input.
    """
    rows = sorted(items, key=lambda c: c.name) if sort else list(items)
    text = "".join(
        f"{c.name}\t{c.size}\n" if c.size is not None else f"{c.name}\n" for c in rows
    )
    return write_text(text, sink)
