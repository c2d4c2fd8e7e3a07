# tefisher/models/result.py
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import List, Tuple, Union

from ..errors import FisherReportError
from ..formats import fisher_report
from ..formats.fisher_report import FisherTable
from ..utils.textio import Source

__all__ = [
    "FamilyResult",
    "ErrorResult",
    "AnyResult",
    "REPORT_COLUMNS",
    "correct_pvalue_swap",
    "overlap_fraction",
    "from_table",
    "parse",
]

logger = logging.getLogger(__name__)

REPORT_COLUMNS = (
    "File", "a1_b1", "a1_b0", "a0_b1", "a0_b0",
    "p_left", "p_right", "p_both", "FoldEnrich", "Overlap_fraction",
)


def _fmt(x: Union[int, float]) -> str:
    # shortest round-trip form: 0.2, 1e-05, nan, inf
    return repr(x) if isinstance(x, float) else str(x)


@dataclass(frozen=True)
class FamilyResult:
    identifier: str
    a1_b1: int
    a1_b0: int
    a0_b1: int
    a0_b0: int
    p_left: float
    p_right: float
    p_both: float
    fold_enrichment: float
    overlap_fraction: float   # nan when a1_b1 + a1_b0 == 0

    def fields(self) -> List[str]:
        return [self.identifier] + [
            _fmt(v) for v in (
                self.a1_b1, self.a1_b0, self.a0_b1, self.a0_b0,
                self.p_left, self.p_right, self.p_both,
                self.fold_enrichment, self.overlap_fraction,
            )
        ]

    def to_row(self) -> str:
        return "\t".join(self.fields())


@dataclass(frozen=True)
class ErrorResult:
    identifier: str
    reason: str = ""
    marker: str = "ERROR"

    def to_row(self) -> str:
        return "\t".join(x for x in (self.identifier, self.marker, self.reason) if x)


AnyResult = Union[FamilyResult, ErrorResult]


def correct_pvalue_swap(p_left: float, p_right: float, fold: float) -> Tuple[float, float]:
    """
    Undo the primitive's left/right tail swap. The defect shows up when the
    two-tailed p-value underflows; the only observed signature is an enriched
    family (fold > 1) whose right tail is the larger one. Nothing is touched
    when fold <= 1 or fold is nan.
    """
    if fold > 1 and p_right > p_left:
        return p_right, p_left
    return p_left, p_right


def overlap_fraction(a1_b1: int, a1_b0: int) -> float:
    denom = a1_b1 + a1_b0
    if denom == 0:
        return float("nan")
    return a1_b1 / denom


def from_table(identifier: str, table: FisherTable) -> FamilyResult:
    p_left, p_right = correct_pvalue_swap(table.p_left, table.p_right, table.ratio)
    if (p_left, p_right) != (table.p_left, table.p_right):
        logger.debug("%s: swapped p_left/p_right (fold=%r)", identifier, table.ratio)
    return FamilyResult(
        identifier=identifier,
        a1_b1=table.a1_b1,
        a1_b0=table.a1_b0,
        a0_b1=table.a0_b1,
        a0_b0=table.a0_b0,
        p_left=p_left,
        p_right=p_right,
        p_both=table.p_both,
        fold_enrichment=table.ratio,
        overlap_fraction=overlap_fraction(table.a1_b1, table.a1_b0),
    )


def parse(raw: Source, identifier: str) -> AnyResult:
    """Parse one primitive report; malformed output becomes an ErrorResult."""
    if isinstance(raw, str):
        # report text, never a path
        raw = io.StringIO(raw)
    try:
        table = fisher_report.decode(raw)
    except FisherReportError as e:
        return ErrorResult(identifier=identifier, reason=str(e))
    return from_table(identifier, table)
