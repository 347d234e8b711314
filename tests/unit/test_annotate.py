import gzip

import pandas as pd
import pytest
from fusionscan.annotate.file_io import extract_gtf_attribute, load_annotations, parse_gtf_exons
from fusionscan.annotate.genomic import GeneIdentifier, GeneModelBuilder
from fusionscan.annotate.index import AnnotationIndex, chromosome_key
from fusionscan.error import AnnotationParseError

from ..util import get_data
from .mock import mock_index

GENE_A = GeneIdentifier('ENSG_A', 'GeneA')
GENE_B = GeneIdentifier('ENSG_B', 'GeneB')


class TestGeneIdentifier:
    def test_named(self):
        assert str(GENE_A) == 'GeneA^ENSG_A'
        assert GENE_A.display_name == 'GeneA'

    def test_unnamed(self):
        gene = GeneIdentifier('ENSG_D')
        assert str(gene) == 'ENSG_D'
        assert gene.display_name == 'ENSG_D'

    def test_create_rejects_separator(self):
        with pytest.raises(AnnotationParseError):
            GeneIdentifier.create('ENSG^1', 'A')
        with pytest.raises(AnnotationParseError):
            GeneIdentifier.create('ENSG1', 'A^B')

    def test_create_rejects_empty_id(self):
        with pytest.raises(AnnotationParseError):
            GeneIdentifier.create('', 'A')


class TestGeneModelBuilder:
    def test_exon_ranks(self):
        builder = GeneModelBuilder()
        for start, end in [(800, 1000), (100, 200), (400, 500)]:
            builder.add_exon('1', start, end, '+', GENE_A, 'T1')
        gene = builder.build()['1'][0]
        exons = gene.transcripts[0].exons
        assert [(e.start, e.end) for e in exons] == [(100, 200), (400, 500), (800, 1000)]
        assert [e.rank for e in exons] == [1, 2, 3]
        assert all([e.total == 3 for e in exons])
        assert [e.is_terminal for e in exons] == [True, False, True]

    def test_gene_span_over_transcripts(self):
        builder = GeneModelBuilder()
        builder.add_exon('1', 500, 600, '+', GENE_A, 'T1')
        builder.add_exon('1', 800, 1000, '+', GENE_A, 'T1')
        builder.add_exon('1', 450, 600, '+', GENE_A, 'T2')
        builder.add_exon('1', 1050, 1100, '+', GENE_A, 'T2')
        gene = builder.build()['1'][0]
        assert len(gene.transcripts) == 2
        assert gene.start == 450
        assert gene.end == 1100
        assert gene.start == min([e.start for t in gene.transcripts for e in t.exons])
        assert gene.end == max([e.end for t in gene.transcripts for e in t.exons])

    def test_bad_strand(self):
        builder = GeneModelBuilder()
        with pytest.raises(AnnotationParseError):
            builder.add_exon('1', 500, 600, '.', GENE_A, 'T1')

    def test_start_after_end(self):
        builder = GeneModelBuilder()
        with pytest.raises(AnnotationParseError):
            builder.add_exon('1', 600, 500, '+', GENE_A, 'T1')

    def test_exon_strand_relative_ends(self):
        builder = GeneModelBuilder()
        builder.add_exon('1', 100, 200, '-', GENE_A, 'T1')
        exon = builder.build()['1'][0].transcripts[0].exons[0]
        assert exon.five_prime == 200
        assert exon.three_prime == 100


class TestAnnotationIndex:
    def setup_method(self):
        self.index = mock_index(
            ('chr1', '+', 'ENSG_A', 'GeneA', {'T1': [(100, 200), (400, 500)]}),
            ('chr1', '-', 'ENSG_B', 'GeneB', {'T2': [(450, 600)]}),
            ('chr2', '+', 'ENSG_C', 'GeneC', {'T3': [(100, 200)]}),
        )

    def test_overlapping_genes(self):
        assert [g.identifier for g in self.index.overlapping_genes('chr1', 300)] == [GENE_A]
        genes = self.index.overlapping_genes('chr1', 450, 460)
        assert [g.identifier for g in genes] == [GENE_A, GENE_B]
        assert self.index.overlapping_genes('chr1', 601) == []

    def test_inclusive_ends(self):
        assert [g.identifier for g in self.index.overlapping_genes('chr1', 100)] == [GENE_A]
        assert [g.identifier for g in self.index.overlapping_genes('chr1', 600)] == [GENE_B]
        assert self.index.overlapping_genes('chr1', 99) == []

    def test_unannotated_chromosome(self):
        assert self.index.overlapping_genes('chrX', 100, 200) == []
        assert 'chrX' not in self.index

    def test_chr_prefix_is_optional(self):
        assert chromosome_key('chr1') == chromosome_key('1')
        assert '1' in self.index
        genes = self.index.overlapping_genes('2', 150)
        assert [g.identifier for g in genes] == [GeneIdentifier('ENSG_C', 'GeneC')]

    def test_genes(self):
        assert len(self.index.genes()) == 3
        assert len(self.index.genes('chr1')) == 2
        assert [g.start for g in self.index.genes('chr1') if g.identifier == GENE_B] == [450]

    def test_empty(self):
        index = AnnotationIndex({})
        assert index.overlapping_genes('chr1', 1) == []


class TestExtractGtfAttribute:
    def test_missing_attribute(self):
        attrs = pd.Series(['gene_id "G1"; transcript_id "T1";', 'gene_id "G2";'])
        assert extract_gtf_attribute(attrs, 'transcript_id').tolist() == ['T1', '']

    def test_does_not_match_suffix(self):
        attrs = pd.Series(['havana_gene_id "H1"; gene_id "G1";'])
        assert extract_gtf_attribute(attrs, 'gene_id').tolist() == ['G1']


class TestLoadAnnotations:
    def test_load_gtf(self):
        genes_by_chr = parse_gtf_exons(get_data('annotations.gtf'))
        assert sorted(genes_by_chr) == ['chr1', 'chr2']
        names = sorted([str(g.identifier) for g in genes_by_chr['chr1']])
        assert names == ['GeneA^ENSG_A', 'GeneBALIAS1^ENSG_B2', 'GeneB^ENSG_B']
        gene_a = [g for g in genes_by_chr['chr1'] if g.identifier == GENE_A][0]
        assert (gene_a.start, gene_a.end) == (450, 1100)
        assert sorted([t.name for t in gene_a.transcripts]) == ['TA1', 'TA2']

    def test_unnamed_gene(self):
        genes_by_chr = parse_gtf_exons(get_data('annotations.gtf'))
        assert GeneIdentifier('ENSG_D') in [g.identifier for g in genes_by_chr['chr2']]

    def test_index(self):
        index = load_annotations(get_data('annotations.gtf'))
        assert [str(g.identifier) for g in index.overlapping_genes('chr1', 2100)] == [
            'GeneBALIAS1^ENSG_B2',
            'GeneB^ENSG_B',
        ]

    def test_missing_transcript_id(self):
        with pytest.raises(AnnotationParseError):
            load_annotations(get_data('annotations_missing_transcript.gtf'))


GTF_LINES = [
    '#!genome-build test\n',
    'chr1\tsrc\texon\t100\t200\t.\t+\t.\t'
    'gene_id "G1"; gene_name "ABC#1"; transcript_id "T1";\n',
    'chr1\tsrc\texon\t300\t400\t.\t+\t.\t'
    'gene_id "G1"; gene_name "ABC#1"; transcript_id "T1"; # note\n',
]


class TestGtfFileFormat:
    def test_hash_inside_attribute(self, tmp_path):
        filename = str(tmp_path / 'annotations.gtf')
        with open(filename, 'w') as fh:
            fh.writelines(GTF_LINES)
        (gene,) = parse_gtf_exons(filename)['chr1']
        assert gene.identifier == GeneIdentifier('G1', 'ABC#1')
        assert [t.name for t in gene.transcripts] == ['T1']
        assert (gene.start, gene.end) == (100, 400)

    def test_gzipped_without_suffix(self, tmp_path):
        filename = str(tmp_path / 'annotations')
        with gzip.open(filename, 'wt') as fh:
            fh.writelines(GTF_LINES)
        index = load_annotations(filename)
        assert [str(g.identifier) for g in index.overlapping_genes('chr1', 150)] == ['ABC#1^G1']

    def test_comments_only(self, tmp_path):
        filename = str(tmp_path / 'annotations.gtf')
        with open(filename, 'w') as fh:
            fh.write('#!genome-build test\n')
        assert parse_gtf_exons(filename) == {}

    def test_invalid_coordinate(self, tmp_path):
        filename = str(tmp_path / 'annotations.gtf')
        with open(filename, 'w') as fh:
            fh.write('chr1\tsrc\texon\tx\t200\t.\t+\t.\tgene_id "G1"; transcript_id "T1";\n')
        with pytest.raises(AnnotationParseError):
            load_annotations(filename)
