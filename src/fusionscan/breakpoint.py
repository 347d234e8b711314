"""
resolves genomic breakpoint coordinates to the nearest annotated exon boundary of the genes they
fall in
"""
from dataclasses import dataclass
from typing import Dict, List, NamedTuple

from .annotate.genomic import Exon, GeneIdentifier
from .annotate.index import AnnotationIndex
from .constants import ORIENTATION, SPLICE_SIDE, STRAND


class GenomicPosition(NamedTuple):
    """
    a stranded genomic coordinate

    Example:
        >>> str(GenomicPosition('chr1', 1000, '+'))
        'chr1:1000:+'
    """

    chr: str
    coord: int
    strand: str

    def __str__(self):
        return f'{self.chr}:{self.coord}:{self.strand}'


@dataclass(frozen=True)
class ExonJunctionMatch:
    """
    the closest exon boundary of a single gene to a queried breakpoint

    Attributes:
        delta: distance between the query coordinate and the matched exon boundary
        exon: the exon the query fell in
        orientation: sense if the query strand is the strand of the exon, antisense otherwise
        position: the queried position
        boundary: the genomic coordinate of the matched exon boundary
    """

    delta: int
    exon: Exon
    orientation: str
    position: GenomicPosition
    boundary: int

    @property
    def gene(self) -> GeneIdentifier:
        return self.exon.gene

    @property
    def is_sense(self) -> bool:
        return self.orientation == ORIENTATION.SENSE


def exon_boundary(exon: Exon, orientation: str, side: str) -> int:
    """
    Donor breakpoints in the sense orientation are compared with the 3' end of the exon and
    acceptor breakpoints with the 5' end. Antisense breakpoints are the mirror image
    """
    if (side == SPLICE_SIDE.DONOR) == (orientation == ORIENTATION.SENSE):
        return exon.three_prime
    return exon.five_prime


def resolve_breakpoint(
    index: AnnotationIndex, chr: str, coord: int, strand: str, side: str
) -> List[ExonJunctionMatch]:
    """
    find the closest exon boundary for each gene overlapping a breakpoint

    Args:
        index: the annotation index
        chr: chromosome of the breakpoint
        coord: the breakpoint coordinate
        strand: the strand of the read at the breakpoint
        side: if the breakpoint is the donor or the acceptor side of the junction

    Returns:
        at most one match per gene, the one with the smallest delta
    """
    STRAND.enforce(strand)
    SPLICE_SIDE.enforce(side)
    position = GenomicPosition(chr, coord, strand)
    best_by_gene: Dict[GeneIdentifier, ExonJunctionMatch] = {}

    # neighbourhood of 1 for off-by-one differences in breakpoint conventions
    for gene in index.overlapping_genes(chr, coord - 1, coord + 1):
        for transcript in gene.transcripts:
            if coord not in transcript:
                continue
            for exon in transcript.exons:
                if coord not in exon:
                    continue
                orientation = ORIENTATION.SENSE if exon.strand == strand else ORIENTATION.ANTISENSE
                boundary = exon_boundary(exon, orientation, side)
                match = ExonJunctionMatch(
                    delta=abs(coord - boundary),
                    exon=exon,
                    orientation=orientation,
                    position=position,
                    boundary=boundary,
                )
                current = best_by_gene.get(gene.identifier)
                if current is None or match.delta < current.delta:
                    best_by_gene[gene.identifier] = match
    return list(best_by_gene.values())
