import io
import pytest
from tefisher.formats.bed import IntervalRecord, decode, encode, filter_to_chromosomes

def _bed(tmp_path, text):
    p = tmp_path / "in.bed"
    p.write_text(text)
    return p

def test_decode_keeps_fields_verbatim():
    recs = list(decode("chr1\t10\t20\tAluY\t0\t+\n"))
    assert len(recs) == 1
    r = recs[0]
    assert r.chrom == "chr1" and r.start == 10 and r.end == 20
    assert r.name == "AluY"
    assert r.to_line() == "chr1\t10\t20\tAluY\t0\t+"

def test_decode_skips_malformed_rows():
    text = "track name=x\n# comment\nchr1\n\nchr1\t5\nchr2\tabc\t9\n"
    recs = list(decode(text))
    assert [(r.chrom, r.start, r.end) for r in recs] == [("chr1", 5, None)]

def test_filter_drops_unknown_chromosomes(tmp_path):
    p = _bed(tmp_path, "chr3\t1\t2\tX\nchr1\t1\t2\tX\nchrUn\t5\t6\tX\nchr2\t1\t2\tX\n")
    kept = filter_to_chromosomes(str(p), {"chr1", "chr2"})
    assert {r.chrom for r in kept} <= {"chr1", "chr2"}
    assert len(kept) == 2

def test_filter_sorts_by_chrom_then_numeric_start(tmp_path):
    p = _bed(tmp_path,
             "chr2\t5\t6\ta\n"
             "chr10\t1\t2\tb\n"
             "chr1\t100\t200\tc\n"
             "chr1\t20\t30\td\n"
             "chr1\t20\t25\te\n")
    kept = filter_to_chromosomes(p, {"chr1", "chr2", "chr10"})
    assert [(r.chrom, r.start) for r in kept] == [
        ("chr1", 20), ("chr1", 20), ("chr1", 100), ("chr10", 1), ("chr2", 5),
    ]
    # ties keep file order
    assert [r.name for r in kept[:2]] == ["d", "e"]

def test_filter_empty_input(tmp_path):
    p = _bed(tmp_path, "")
    assert filter_to_chromosomes(p, {"chr1"}) == []

def test_filter_missing_file(tmp_path):
    with pytest.raises(OSError):
        filter_to_chromosomes(str(tmp_path / "missing.bed"), {"chr1"})

def test_encode_to_filelike_and_path(tmp_path):
    recs = [IntervalRecord("chr1", 1, 2, ("chr1", "1", "2", "L1"))]
    buf = io.StringIO()
    encode(recs, sink=buf)
    assert buf.getvalue() == "chr1\t1\t2\tL1\n"
    p = tmp_path / "out.bed"
    encode(recs, sink=str(p))
    assert p.read_text() == "chr1\t1\t2\tL1\n"
