from typing import List, Tuple

from fusionscan.annotate.genomic import GeneIdentifier, GeneModelBuilder
from fusionscan.annotate.index import AnnotationIndex


class Mock:
    def __init__(self, **kwargs):
        for attr, val in kwargs.items():
            setattr(self, attr, val)


class MockRead(Mock):
    """
    alignment record with the parts of the pysam.AlignedSegment interface used for read pairing
    """

    def __init__(self, query_name: str, reference_name: str, blocks: List[Tuple[int, int]]):
        Mock.__init__(self, query_name=query_name, reference_name=reference_name, blocks=blocks)

    def get_blocks(self):
        return self.blocks


def mock_index(*genes) -> AnnotationIndex:
    """
    build an annotation index from tuples of
    (chr, strand, gene_id, gene_name, {transcript: [(start, end), ...]})
    """
    builder = GeneModelBuilder()
    for chr, strand, gene_id, gene_name, transcripts in genes:
        gene = GeneIdentifier(gene_id, gene_name)
        for transcript, exons in transcripts.items():
            for start, end in exons:
                builder.add_exon(chr, start, end, strand, gene, transcript)
    return AnnotationIndex(builder.build())
