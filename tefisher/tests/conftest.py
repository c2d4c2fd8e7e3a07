from pathlib import Path
from typing import List, Optional

import pytest

from tefisher.runners.bedtools import RawReport

# Fixture to initialize the location of test data
# files for use in tests.  E.g.
#
#   def test_something(test_data_dir):
#       foo = test_data_dir / "fisher_enriched.txt"
#
@pytest.fixture(scope="session")
def test_data_dir() -> Path:
    # tests/data
    return Path(__file__).resolve().parent / "data"


def _fisher_text(a1_b1: int, a1_b0: int, a0_b1: int, a0_b0: int,
                left: str = "0.5", right: str = "0.5", both: str = "1", ratio: str = "1") -> str:
    """A `bedtools fisher` report with the given table and p-value row."""
    return (
        f"# Number of query intervals: {a1_b1 + a1_b0}\n"
        f"# Number of db intervals: {a1_b1 + a0_b1}\n"
        f"# Number of overlaps: {a1_b1}\n"
        f"# Number of possible intervals (estimated): {a1_b1 + a1_b0 + a0_b1 + a0_b0}\n"
        "# phyper(...)\n"
        "# Contingency Table Of Counts\n"
        "#_________________________________________\n"
        "#           |  in -b       | not in -b    |\n"
        f"#     in -a | {a1_b1:<12} | {a1_b0:<12} |\n"
        f"# not in -a | {a0_b1:<12} | {a0_b0:<12} |\n"
        "#_________________________________________\n"
        "# p-values for fisher's exact test\n"
        "left\tright\ttwo-tail\tratio\n"
        f"{left}\t{right}\t{both}\t{ratio}\n"
    )


class FakeFisher:
    """
    Stands in for BedtoolsFisher. Counts the family file's rows and reports
    them all as overlapping; families named in `broken` get a truncated report.
    Records every working file it saw and whether it existed at call time.
    """

    def __init__(self, broken: Optional[List[str]] = None):
        self.broken = set(broken or [])
        self.calls: List[str] = []
        self.existed: List[bool] = []

    def run(self, genome_file: str, regions_file: str, family_file: str) -> RawReport:
        path = Path(family_file)
        self.calls.append(family_file)
        self.existed.append(path.is_file())
        rows = path.read_text().splitlines()
        family = rows[0].split("\t")[3] if rows else ""
        if family in self.broken:
            return RawReport(stdout="# Number of query intervals: 1\n", stderr="truncated\n")
        n = len(rows)
        return RawReport(stdout=_fisher_text(n, 0, 0, 1000, left="1", right="1e-10", both="1e-10", ratio="3.5"))


@pytest.fixture
def fake_fisher() -> FakeFisher:
    return FakeFisher()


def _write_bed(path: Path, rows) -> Path:
    path.write_text("".join("\t".join(str(x) for x in r) + "\n" for r in rows))
    return path


@pytest.fixture
def fisher_text():
    return _fisher_text


@pytest.fixture
def write_bed():
    return _write_bed


@pytest.fixture
def fisher_factory():
    return FakeFisher
