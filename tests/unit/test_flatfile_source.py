"""Tests for the flatfile record source."""

import gzip

import pytest

from sgearray.adapters.flatfile import FlatFileSource, detect_format
from sgearray.errors import SourceError
from sgearray.models import FlatFileFormat

FASTA = b""">sp|P69905|HBA_HUMAN Hemoglobin subunit alpha
MVLSPADKTNVKAAWGKVGAHAGEYGAEALERMFLSFPTTKTYFPHF
DLSHGSAQVKGHGKKVADALTNAVAHVDDMPNALSALSDLHAHKL
>sp|P68871|HBB_HUMAN Hemoglobin subunit beta
MVHLTPEEKSAVTALWGKVNVDEVGGEALGRLLVVYPWTQRFFESFGDL
"""

GENBANK = b"""LOCUS       NM_000518                626 bp    mRNA    linear   PRI 09-MAY-2024
DEFINITION  Homo sapiens hemoglobin subunit beta (HBB), mRNA.
ORIGIN
        1 acatttgctt ctgacacaac tgtgttcact agcaacctca aacagacacc
//
LOCUS       NM_000558                576 bp    mRNA    linear   PRI 09-MAY-2024
DEFINITION  Homo sapiens hemoglobin subunit alpha 1 (HBA1), mRNA.
//
"""

EMBL = b"""ID   HBA_HUMAN               Reviewed;         142 AA.
AC   P69905; P01922;
//
ID   HBB_HUMAN               Reviewed;         147 AA.
//
"""


def _records(tmp_path, content, name="query.txt", **kwargs):
    path = tmp_path / name
    path.write_bytes(content)
    return list(FlatFileSource(path, **kwargs).records())


def test_detect_format():
    assert detect_format(b">seq1\n") == FlatFileFormat.FASTA
    assert detect_format(b"LOCUS       X\n") == FlatFileFormat.ENTRY


class TestFasta:
    def test_records(self, tmp_path):
        records = _records(tmp_path, FASTA)
        assert [r.identifier for r in records] == ["sp|P69905|HBA_HUMAN", "sp|P68871|HBB_HUMAN"]
        assert records[0].raw.startswith(b">sp|P69905|HBA_HUMAN Hemoglobin")
        assert records[0].raw.endswith(b"HAHKL\n")
        assert b"".join(r.raw for r in records) == FASTA

    def test_leading_blank_lines(self, tmp_path):
        records = _records(tmp_path, b"\n\n>a\nAC\n>b\nGT\n")
        assert [r.identifier for r in records] == ["a", "b"]

    def test_sequence_before_header(self, tmp_path):
        with pytest.raises(SourceError, match="without '>' header"):
            _records(tmp_path, b"ACGT\n>a\nAC\n", fmt=FlatFileFormat.FASTA)

    def test_gzip(self, tmp_path):
        records = _records(tmp_path, gzip.compress(FASTA), name="query.fa.gz")
        assert len(records) == 2
        assert records[1].identifier == "sp|P68871|HBB_HUMAN"


class TestEntries:
    def test_genbank(self, tmp_path):
        records = _records(tmp_path, GENBANK)
        assert [r.identifier for r in records] == ["NM_000518", "NM_000558"]
        assert records[0].raw.endswith(b"//\n")
        assert b"".join(r.raw for r in records) == GENBANK

    def test_embl_identifier_strips_semicolon(self, tmp_path):
        records = _records(tmp_path, EMBL)
        assert [r.identifier for r in records] == ["HBA_HUMAN", "HBB_HUMAN"]

    def test_unterminated_entry(self, tmp_path):
        with pytest.raises(SourceError, match="not terminated"):
            _records(tmp_path, GENBANK + b"LOCUS       NM_1\n")


class TestErrors:
    def test_missing_file(self, tmp_path):
        source = FlatFileSource(tmp_path / "nope.fa")
        with pytest.raises(SourceError, match="Cannot open"):
            list(source.records())

    def test_corrupt_gzip(self, tmp_path):
        with pytest.raises(SourceError, match="Cannot read"):
            _records(tmp_path, b"this is not gzip", name="query.fa.gz")

    def test_empty_file(self, tmp_path):
        assert _records(tmp_path, b"") == []
