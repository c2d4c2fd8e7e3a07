# tefisher/formats/fisher_report.py
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..errors import FisherReportError
from ..utils.textio import Source, iter_lines

__all__ = ["FisherTable", "MIN_REPORT_LINES", "classify_line", "decode"]

# `bedtools fisher` output looks like:
#
#   # Number of query intervals: 150
#   # Number of db intervals: 10
#   # Number of overlaps: 12
#   # Number of possible intervals (estimated): 2904
#   # phyper(12 - 1, 150, 2904 - 150, 10, lower.tail=F)
#   # Contingency Table Of Counts
#   #_________________________________________
#   #           |  in -b       | not in -b    |
#   #     in -a | 12           | 138          |
#   # not in -a | 0            | 2754         |
#   #_________________________________________
#   # p-values for fisher's exact test
#   left    right   two-tail    ratio
#   1       4.3e-16 4.3e-16     inf
#
# Anything shorter than that is a truncated run.
MIN_REPORT_LINES = 14

_IN_A = re.compile(r"^#?\s*in -a\s*\|\s*(\d+)\s*\|\s*(\d+)")
_NOT_IN_A = re.compile(r"^#?\s*not in -a\s*\|\s*(\d+)\s*\|\s*(\d+)")


@dataclass(frozen=True)
class FisherTable:
    """Counts and p-values exactly as the primitive printed them (no correction)."""
    a1_b1: int
    a1_b0: int
    a0_b1: int
    a0_b0: int
    p_left: float
    p_right: float
    p_both: float
    ratio: float


def _numeric_row(s: str) -> Optional[Tuple[float, float, float, float]]:
    parts = s.split()
    if len(parts) != 4:
        return None
    try:
        vals = tuple(float(x) for x in parts)
    except ValueError:
        return None
    # "nan nan nan nan" would also pass float(); a data row needs real p-values
    if any(math.isnan(v) for v in vals[:3]):
        return None
    return vals  # type: ignore[return-value]


def classify_line(ln: str) -> Tuple[str, Optional[tuple]]:
    """
    Return (kind, payload) for one report line. kind is one of
    "in_a", "not_in_a", "data" or "other".
    """
    s = ln.strip()
    m = _NOT_IN_A.match(s)
    if m:
        return "not_in_a", (int(m.group(1)), int(m.group(2)))
    m = _IN_A.match(s)
    if m:
        return "in_a", (int(m.group(1)), int(m.group(2)))
    if not s.startswith("#"):
        vals = _numeric_row(s)
        if vals is not None:
            return "data", vals
    return "other", None


def decode(source: Source) -> FisherTable:
    """
    Parse one report. The two contingency lines and the data line may come in
    any order but all three must be present.
    """
    lines: List[str] = [ln.rstrip("\n") for ln in iter_lines(source)]
    if len(lines) < MIN_REPORT_LINES:
        raise FisherReportError(
            f"report has {len(lines)} line(s); expected at least {MIN_REPORT_LINES}"
        )

    found = {}
    for ln in lines:
        kind, payload = classify_line(ln)
        if kind != "other":
            found[kind] = payload

    missing = [k for k in ("in_a", "not_in_a", "data") if k not in found]
    if missing:
        raise FisherReportError(f"report is missing: {', '.join(missing)}")

    a1_b1, a1_b0 = found["in_a"]
    a0_b1, a0_b0 = found["not_in_a"]
    p_left, p_right, p_both, ratio = found["data"]
    return FisherTable(
        a1_b1=a1_b1, a1_b0=a1_b0, a0_b1=a0_b1, a0_b0=a0_b0,
        p_left=p_left, p_right=p_right, p_both=p_both, ratio=ratio,
    )
