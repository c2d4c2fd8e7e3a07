# tefisher/models/family.py
from __future__ import annotations

import logging
import warnings
from typing import Dict, Iterable, List

from ..errors import DataQualityWarning
from ..formats.bed import IntervalRecord

__all__ = ["MIN_FAMILY_SIZE", "FAMILY_FIELD", "sanitize_family_name", "partition_by_family"]

logger = logging.getLogger(__name__)

# Fisher p-values from the primitive are not trustworthy below this many copies.
MIN_FAMILY_SIZE = 100

FAMILY_FIELD = 3   # 0-based BED column holding the TE family name

_UNSAFE = str.maketrans({":": "_", "/": "_"})


def sanitize_family_name(name: str) -> str:
    return name.translate(_UNSAFE)


def partition_by_family(
    records: Iterable[IntervalRecord],
    min_size: int = MIN_FAMILY_SIZE,
) -> Dict[str, List[IntervalRecord]]:
    """
    Group records on the family column in one pass, keeping input order inside
    each family, then drop families with fewer than `min_size` members.
    """
    families: Dict[str, List[IntervalRecord]] = {}
    unnamed = 0
    for rec in records:
        if len(rec.fields) <= FAMILY_FIELD:
            unnamed += 1
            continue
        families.setdefault(rec.fields[FAMILY_FIELD], []).append(rec)
    if unnamed:
        logger.debug("%d TE record(s) without a family column ignored", unnamed)

    kept: Dict[str, List[IntervalRecord]] = {}
    for name in sorted(families):
        members = families[name]
        if len(members) < min_size:
            warnings.warn(
                f"family {name} has {len(members)} record(s) (< {min_size}); skipped",
                DataQualityWarning,
                stacklevel=2,
            )
            continue
        kept[name] = members
    return kept
