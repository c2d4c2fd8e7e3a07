#!/usr/bin/env python3
"""
Test each TE family in a BED annotation for enrichment inside a set of regions
with `bedtools fisher`, and print one tab-delimited row per family.

Example:
  ./te_fisher.py --verbose hg38.chrom.sizes rmsk.bed peaks.bed > enrichment.tsv

Families with fewer than --min-family-size copies are skipped. Families whose
test fails are reported on stderr, never in the table.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional, TextIO

from tefisher.enrichment import EnrichmentOptions, run_enrichment
from tefisher.errors import ConfigurationError
from tefisher.models.family import MIN_FAMILY_SIZE
from tefisher.report import write_report
from tefisher.runners.bedtools import BedtoolsFisher, BedtoolsFisherOptions

logger = logging.getLogger("te_fisher")


def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Fisher's exact test of TE family enrichment in genomic regions (bedtools fisher)."
    )
    p.add_argument("chrom_sizes", help="Chromosome size file; first column is the chromosome name.")
    p.add_argument("te_bed", help="TE annotation BED; column 4 is the family name.")
    p.add_argument("region_bed", help="Query region BED.")
    p.add_argument("-v", "--verbose", action="store_true", help="Progress messages on stderr.")
    p.add_argument(
        "--min-family-size", type=int, default=MIN_FAMILY_SIZE,
        help=f"Skip families with fewer copies (default {MIN_FAMILY_SIZE}).",
    )
    p.add_argument("--threads", type=int, default=1, help="Families tested in parallel (capped at CPU count).")
    p.add_argument("--timeout", type=float, default=None, help="Seconds allowed per bedtools call.")
    p.add_argument("--bedtools", default="bedtools", help="bedtools executable.")
    p.add_argument("--tmpdir", default=None, help="Directory for temporary files.")
    p.add_argument("--output", default=None, help="Write the report here instead of stdout.")
    return p.parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    ns = parse_args(sys.argv[1:] if argv is None else argv)
    _configure_logging(ns.verbose)

    for p in (ns.chrom_sizes, ns.te_bed, ns.region_bed):
        if not os.path.isfile(p):
            print(f"error: file not found: {p}", file=sys.stderr)
            return 2

    try:
        runner = BedtoolsFisher(BedtoolsFisherOptions(exe=ns.bedtools, timeout=ns.timeout))
        results = run_enrichment(
            ns.chrom_sizes, ns.te_bed, ns.region_bed,
            runner=runner,
            options=EnrichmentOptions(
                min_family_size=ns.min_family_size,
                threads=ns.threads,
                tmpdir=ns.tmpdir,
            ),
        )
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    except OSError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    sink: Optional[TextIO] = None
    try:
        if ns.output:
            out_dir = os.path.dirname(os.path.abspath(ns.output))
            os.makedirs(out_dir, exist_ok=True)
            sink = open(ns.output, "wt", encoding="utf-8")
            out = sink
        else:
            out = sys.stdout
        rows, failures = write_report(results, out, sys.stderr)
    finally:
        if sink is not None:
            sink.close()

    logger.info("[FISHER] wrote %d row(s); %d famil%s failed", rows, failures, "y" if failures == 1 else "ies")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
