# tefisher/enrichment.py
"""
Per-family enrichment driver.

  1) Reconcile chromosome names from the size file.
  2) Filter + sort the TE and region BEDs to those chromosomes; write the
     filtered genome and region files into a run-scoped temporary directory.
  3) Partition TE rows by family (minimum-size filter).
  4) For each family (alphabetical): write its rows to a scoped working file,
     run the overlap primitive, delete the file, parse + correct the report.

The run directory and everything in it is gone when run_enrichment returns or
raises.
"""
from __future__ import annotations

import logging
import os
import tempfile
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

from .errors import ConfigurationError, FamilyProcessingError
from .formats import bed as fmt_bed
from .formats import chrom_sizes as fmt_chrom_sizes
from .formats.bed import IntervalRecord
from .models.family import MIN_FAMILY_SIZE, partition_by_family, sanitize_family_name
from .models.result import AnyResult, ErrorResult, parse
from .runners.bedtools import OverlapRunner, run_overlap_test

__all__ = [
    "EnrichmentOptions",
    "PreparedInputs",
    "NameFactory",
    "default_name_factory",
    "prepare_inputs",
    "evaluate_family",
    "run_enrichment",
]

logger = logging.getLogger(__name__)

NameFactory = Callable[[int, str], str]


def default_name_factory(index: int, identifier: str) -> str:
    return f"{index:06d}_{identifier}.bed"


@dataclass
class EnrichmentOptions:
    min_family_size: int = MIN_FAMILY_SIZE
    threads: int = 1
    tmpdir: Optional[str] = None       # parent of the run directory; None = system default


@dataclass
class PreparedInputs:
    workdir: str
    chroms: frozenset
    genome_file: str
    regions_file: str
    te_records: List[IntervalRecord]


def prepare_inputs(chrom_size_file: str, te_bed_file: str, region_bed_file: str, workdir: str) -> PreparedInputs:
    """Reconcile chromosomes and write the filtered genome/region files into `workdir`."""
    sizes = fmt_chrom_sizes.read_chrom_sizes(chrom_size_file)
    chroms = fmt_chrom_sizes.chromosome_set(sizes)
    if not chroms:
        raise ConfigurationError(f"no chromosome names found in {chrom_size_file!r}")
    logger.info("[FISHER] %d chromosome(s) in %s", len(chroms), chrom_size_file)

    genome_file = os.path.join(workdir, "genome.txt")
    fmt_chrom_sizes.encode(sizes, sink=genome_file)

    regions = fmt_bed.filter_to_chromosomes(region_bed_file, chroms)
    regions_file = os.path.join(workdir, "regions.bed")
    fmt_bed.encode(regions, sink=regions_file)

    te_records = fmt_bed.filter_to_chromosomes(te_bed_file, chroms)
    return PreparedInputs(
        workdir=workdir,
        chroms=chroms,
        genome_file=genome_file,
        regions_file=regions_file,
        te_records=te_records,
    )


def evaluate_family(
    runner: OverlapRunner,
    prepared: PreparedInputs,
    identifier: str,
    records: Sequence[IntervalRecord],
    workfile: str,
) -> AnyResult:
    """Run one family. Any FamilyProcessingError becomes an ErrorResult."""
    try:
        raw = run_overlap_test(runner, prepared.genome_file, prepared.regions_file, records, workfile)
    except FamilyProcessingError as e:
        return ErrorResult(identifier=identifier, reason=str(e).splitlines()[0])
    return parse(raw.stdout, identifier)


def _run_families(
    runner: OverlapRunner,
    prepared: PreparedInputs,
    families: Dict[str, List[IntervalRecord]],
    threads: int,
    name_factory: NameFactory,
) -> List[AnyResult]:
    names = sorted(families)
    jobs = []
    for i, name in enumerate(names):
        identifier = sanitize_family_name(name)
        workfile = os.path.join(prepared.workdir, name_factory(i, identifier))
        jobs.append((name, identifier, workfile))

    results: Dict[str, AnyResult] = {}
    if threads <= 1:
        for name, identifier, workfile in jobs:
            logger.info("[FISHER] %s (%d record(s))", name, len(families[name]))
            results[name] = evaluate_family(runner, prepared, identifier, families[name], workfile)
    else:
        with ThreadPoolExecutor(max_workers=threads) as pool:
            futures = {
                name: pool.submit(evaluate_family, runner, prepared, identifier, families[name], workfile)
                for name, identifier, workfile in jobs
            }
            for name in names:
                results[name] = futures[name].result()
                logger.info("[FISHER] %s done", name)

    return [results[name] for name in names]


def _bounded_threads(requested: int) -> int:
    return max(1, min(requested, os.cpu_count() or 1))


def run_enrichment(
    chrom_size_file: str,
    te_bed_file: str,
    region_bed_file: str,
    runner: OverlapRunner,
    options: Optional[EnrichmentOptions] = None,
    name_factory: NameFactory = default_name_factory,
) -> List[AnyResult]:
    """
    Test every retained TE family against the region file. Results come back
    sorted by family name; failed families are ErrorResults.
    """
    opts = options or EnrichmentOptions()
    with tempfile.TemporaryDirectory(prefix="tefisher_", dir=opts.tmpdir) as workdir:
        prepared = prepare_inputs(chrom_size_file, te_bed_file, region_bed_file, workdir)
        families = partition_by_family(prepared.te_records, min_size=opts.min_family_size)
        logger.info(
            "[FISHER] %d famil%s at or above %d record(s)",
            len(families), "y" if len(families) == 1 else "ies", opts.min_family_size,
        )
        return _run_families(runner, prepared, families, _bounded_threads(opts.threads), name_factory)
