from fusionscan.annotate.genomic import GeneIdentifier
from fusionscan.breakpoint import GenomicPosition, exon_boundary, resolve_breakpoint
from fusionscan.constants import ORIENTATION, SPLICE_SIDE

from .mock import mock_index

POS_GENE = ('chr1', '+', 'G1', 'POS', {'T1': [(100, 200), (400, 500)]})
NEG_GENE = ('chr1', '-', 'G2', 'NEG', {'T2': [(100, 200), (400, 500)]})


class TestGenomicPosition:
    def test_str(self):
        assert str(GenomicPosition('chr1', 1000, '+')) == 'chr1:1000:+'
        assert str(GenomicPosition('7', 12, '-')) == '7:12:-'


class TestExonBoundary:
    def setup_method(self):
        self.pos_exon = mock_index(POS_GENE).genes()[0].transcripts[0].exons[0]
        self.neg_exon = mock_index(NEG_GENE).genes()[0].transcripts[0].exons[0]

    def test_sense_donor(self):
        assert exon_boundary(self.pos_exon, ORIENTATION.SENSE, SPLICE_SIDE.DONOR) == 200
        assert exon_boundary(self.neg_exon, ORIENTATION.SENSE, SPLICE_SIDE.DONOR) == 100

    def test_sense_acceptor(self):
        assert exon_boundary(self.pos_exon, ORIENTATION.SENSE, SPLICE_SIDE.ACCEPTOR) == 100
        assert exon_boundary(self.neg_exon, ORIENTATION.SENSE, SPLICE_SIDE.ACCEPTOR) == 200

    def test_antisense_is_mirrored(self):
        assert exon_boundary(self.pos_exon, ORIENTATION.ANTISENSE, SPLICE_SIDE.DONOR) == 100
        assert exon_boundary(self.pos_exon, ORIENTATION.ANTISENSE, SPLICE_SIDE.ACCEPTOR) == 200


class TestResolveBreakpoint:
    def test_on_boundary(self):
        index = mock_index(POS_GENE)
        matches = resolve_breakpoint(index, 'chr1', 200, '+', SPLICE_SIDE.DONOR)
        assert len(matches) == 1
        match = matches[0]
        assert match.delta == 0
        assert match.gene == GeneIdentifier('G1', 'POS')
        assert match.is_sense
        assert match.boundary == 200
        assert match.position == GenomicPosition('chr1', 200, '+')
        assert str(match.exon) == 'T1:exon1/2'

    def test_inside_exon(self):
        index = mock_index(POS_GENE)
        match = resolve_breakpoint(index, 'chr1', 450, '+', SPLICE_SIDE.DONOR)[0]
        assert match.delta == 50
        assert match.boundary == 500
        match = resolve_breakpoint(index, 'chr1', 450, '+', SPLICE_SIDE.ACCEPTOR)[0]
        assert match.delta == 50
        assert match.boundary == 400

    def test_strand_symmetry(self):
        pos = resolve_breakpoint(mock_index(POS_GENE), 'chr1', 200, '+', SPLICE_SIDE.DONOR)[0]
        neg = resolve_breakpoint(mock_index(NEG_GENE), 'chr1', 100, '-', SPLICE_SIDE.DONOR)[0]
        assert pos.delta == neg.delta == 0
        assert pos.orientation == neg.orientation == ORIENTATION.SENSE

    def test_query_strand_flip_is_antisense(self):
        match = resolve_breakpoint(mock_index(POS_GENE), 'chr1', 100, '-', SPLICE_SIDE.DONOR)[0]
        assert match.orientation == ORIENTATION.ANTISENSE
        assert not match.is_sense
        assert match.boundary == 100
        assert match.delta == 0

    def test_intron_has_no_match(self):
        index = mock_index(POS_GENE)
        assert resolve_breakpoint(index, 'chr1', 300, '+', SPLICE_SIDE.DONOR) == []

    def test_outside_genes(self):
        index = mock_index(POS_GENE)
        assert resolve_breakpoint(index, 'chr1', 1000, '+', SPLICE_SIDE.DONOR) == []
        assert resolve_breakpoint(index, 'chr5', 150, '+', SPLICE_SIDE.DONOR) == []

    def test_minimum_delta_over_transcripts(self):
        index = mock_index(
            (
                'chr1',
                '+',
                'G1',
                'POS',
                {'T1': [(100, 200), (400, 500)], 'T2': [(100, 180), (400, 500)]},
            )
        )
        matches = resolve_breakpoint(index, 'chr1', 178, '+', SPLICE_SIDE.DONOR)
        assert len(matches) == 1
        assert matches[0].delta == 2
        assert matches[0].exon.transcript == 'T2'

    def test_transcript_not_spanning_coordinate_is_skipped(self):
        index = mock_index(
            ('chr1', '+', 'G1', 'POS', {'T1': [(100, 200), (400, 500)], 'T2': [(450, 460)]})
        )
        matches = resolve_breakpoint(index, 'chr1', 200, '+', SPLICE_SIDE.DONOR)
        assert [m.exon.transcript for m in matches] == ['T1']

    def test_one_match_per_gene(self):
        index = mock_index(POS_GENE, NEG_GENE)
        matches = resolve_breakpoint(index, 'chr1', 150, '+', SPLICE_SIDE.DONOR)
        assert sorted([(str(m.gene), m.orientation) for m in matches]) == [
            ('NEG^G2', ORIENTATION.ANTISENSE),
            ('POS^G1', ORIENTATION.SENSE),
        ]
