# tefisher/report.py
from __future__ import annotations

from typing import Iterable, TextIO, Tuple

from .models.result import REPORT_COLUMNS, AnyResult, ErrorResult

__all__ = ["HEADER", "write_report"]

HEADER = "\t".join(REPORT_COLUMNS)


def write_report(results: Iterable[AnyResult], sink: TextIO, errors: TextIO) -> Tuple[int, int]:
    """
    Write the header and one row per FamilyResult to `sink`, in the order
    given. ErrorResults go to `errors` only. Returns (rows, failures).
    """
    sink.write(HEADER + "\n")
    rows = failures = 0
    for r in results:
        if isinstance(r, ErrorResult):
            errors.write(r.to_row() + "\n")
            failures += 1
            continue
        sink.write(r.to_row() + "\n")
        rows += 1
    return rows, failures
