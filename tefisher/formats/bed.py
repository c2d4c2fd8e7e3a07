# tefisher/formats/bed.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import AbstractSet, Iterable, Iterator, List, Optional, Tuple, Union

from ..utils.textio import Sink, Source, iter_lines, lines_maybe_text, write_text

__all__ = ["IntervalRecord", "decode", "encode", "sort_records", "filter_to_chromosomes"]

logger = logging.getLogger(__name__)

# =====================================
# Public record structure
# =====================================

@dataclass(frozen=True)
class IntervalRecord:
    """
    One BED-like row. `fields` holds every whitespace-delimited token verbatim;
    chrom/start/end are the parsed views of the first three. Coordinates are
    whatever the file says (0-based half-open for real BED); start <= end is
    not checked.
    """
    chrom: str
    start: int
    end: Optional[int]
    fields: Tuple[str, ...]

    @property
    def name(self) -> Optional[str]:
        return self.fields[3] if len(self.fields) > 3 else None

    def to_line(self) -> str:
        return "\t".join(self.fields)


# =====================================
# Row parser
# =====================================

def _parse_line(ln: str) -> Optional[IntervalRecord]:
    """
    Rows with fewer than two fields, comment lines and header lines whose start
    is not an integer (track/browser) are skipped, not errors.
    """
    s = ln.strip()
    if not s or s.startswith("#"):
        return None
    parts = tuple(s.split())
    if len(parts) < 2:
        return None
    try:
        start = int(parts[1])
    except ValueError:
        return None
    end: Optional[int] = None
    if len(parts) > 2:
        try:
            end = int(parts[2])
        except ValueError:
            end = None
    return IntervalRecord(chrom=parts[0], start=start, end=end, fields=parts)


def _records_from_lines(lines: Iterable[str]) -> Iterator[IntervalRecord]:
    skipped = 0
    for ln in lines:
        rec = _parse_line(ln)
        if rec is None:
            if ln.strip():
                skipped += 1
            continue
        yield rec
    if skipped:
        logger.debug("skipped %d malformed/comment BED line(s)", skipped)


def decode(source: Source) -> Iterator[IntervalRecord]:
    """Decode BED-like rows from a path, text blob, file-like or sequence of lines."""
    return _records_from_lines(iter_lines(source))


def sort_records(records: Iterable[IntervalRecord]) -> List[IntervalRecord]:
    # chromosome as a plain string, start numerically; ties keep file order
    return sorted(records, key=lambda r: (r.chrom, r.start))


def filter_to_chromosomes(
    path: Union[str, "os.PathLike[str]"],
    chrom_set: AbstractSet[str],
) -> List[IntervalRecord]:
    """
    Read every row of `path`, sort by (chromosome, start) and keep the rows
    whose chromosome is in `chrom_set`. Raises OSError if `path` is unreadable.
    """
    rows = sort_records(_records_from_lines(lines_maybe_text(path)))
    kept = [r for r in rows if r.chrom in chrom_set]
    logger.info("[FILTER] %s: kept %d of %d row(s)", path, len(kept), len(rows))
    return kept


def encode(items: Iterable[IntervalRecord], *, sink: Sink = None) -> str:
    text = "".join(r.to_line() + "\n" for r in items)
    return write_text(text, sink)
