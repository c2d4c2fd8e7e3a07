import math
import pytest
from tefisher.formats.fisher_report import FisherTable
from tefisher.models.result import (
    ErrorResult, FamilyResult, correct_pvalue_swap, from_table, overlap_fraction, parse,
)

def _table(**kw):
    base = dict(a1_b1=10, a1_b0=40, a0_b1=5, a0_b0=945,
                p_left=0.0001, p_right=0.9, p_both=0.0002, ratio=2.5)
    base.update(kw)
    return FisherTable(**base)

def test_swap_when_enriched():
    assert correct_pvalue_swap(0.0001, 0.9, 2.5) == (0.9, 0.0001)

def test_no_swap_when_depleted():
    assert correct_pvalue_swap(0.0001, 0.9, 0.5) == (0.0001, 0.9)

@pytest.mark.parametrize("fold", [1.0, float("nan")])
def test_no_swap_at_boundary(fold):
    assert correct_pvalue_swap(0.0001, 0.9, fold) == (0.0001, 0.9)

def test_no_swap_when_already_ordered():
    assert correct_pvalue_swap(0.9, 0.0001, 2.5) == (0.9, 0.0001)

def test_overlap_fraction_exact():
    assert overlap_fraction(10, 40) == 0.2

def test_overlap_fraction_zero_denominator_is_nan():
    assert math.isnan(overlap_fraction(0, 0))

def test_from_table_applies_correction():
    r = from_table("AluY", _table())
    assert (r.p_left, r.p_right) == (0.9, 0.0001)
    assert r.p_both == 0.0002
    assert r.fold_enrichment == 2.5
    assert r.overlap_fraction == 0.2

def test_from_table_depleted_untouched():
    r = from_table("AluY", _table(ratio=0.5))
    assert (r.p_left, r.p_right) == (0.0001, 0.9)

def test_row_format():
    r = from_table("AluY", _table())
    assert r.to_row() == "AluY\t10\t40\t5\t945\t0.9\t0.0001\t0.0002\t2.5\t0.2"

def test_row_keeps_nan_overlap_fraction():
    r = from_table("Empty", _table(a1_b1=0, a1_b0=0, ratio=float("nan")))
    assert r.fields()[-1] == "nan"
    assert r.fields()[-2] == "nan"

def test_parse_swapped_report(test_data_dir):
    r = parse((test_data_dir / "fisher_swapped.txt").read_text(), "AluY")
    assert isinstance(r, FamilyResult)
    assert (r.p_left, r.p_right) == (0.9, 0.0001)
    assert (r.a1_b1, r.a1_b0, r.a0_b1, r.a0_b0) == (35, 465, 5, 39495)

def test_parse_short_output_is_error():
    r = parse("# Number of query intervals: 1\nleft\tright\ttwo-tail\tratio\n", "L1")
    assert isinstance(r, ErrorResult)
    assert r.identifier == "L1" and r.marker == "ERROR"
    assert r.to_row().startswith("L1\tERROR")

def test_parse_never_reads_report_text_as_a_path(tmp_path, monkeypatch, test_data_dir):
    # a file whose name equals the (single-line) stdout must not be opened
    (tmp_path / "oops").write_text((test_data_dir / "fisher_enriched.txt").read_text())
    monkeypatch.chdir(tmp_path)
    r = parse("oops", "AluY")
    assert isinstance(r, ErrorResult)
    assert "1 line" in r.reason
