from dataclasses import dataclass
from typing import Dict, Iterable, List, NamedTuple, Tuple

from ..constants import GENE_ID_DELIM, STRAND
from ..error import AnnotationParseError


class GeneIdentifier(NamedTuple):
    """
    identifies a gene by its annotation id and (optional) human readable name

    Example:
        >>> str(GeneIdentifier('ENSG0001', 'KRAS'))
        'KRAS^ENSG0001'
        >>> str(GeneIdentifier('ENSG0001'))
        'ENSG0001'
    """

    gene_id: str
    name: str = ''

    def __str__(self):
        if self.name:
            return f'{self.name}{GENE_ID_DELIM}{self.gene_id}'
        return self.gene_id

    @property
    def display_name(self) -> str:
        """the name used in simple fusion names, the gene id if the gene is unnamed"""
        return self.name if self.name else self.gene_id

    @classmethod
    def create(cls, gene_id: str, name: str = '') -> 'GeneIdentifier':
        """
        Raises:
            AnnotationParseError: the id is empty or either field contains the separator
        """
        if not gene_id:
            raise AnnotationParseError('gene id cannot be empty')
        for field in (gene_id, name):
            if GENE_ID_DELIM in field:
                raise AnnotationParseError(
                    f'gene id/name ({field}) cannot contain the separator character '
                    f'({GENE_ID_DELIM})'
                )
        return cls(gene_id, name)


@dataclass(frozen=True)
class Exon:
    """
    an exon of a single transcript. Coordinates are 1-based inclusive and start <= end regardless of
    strand

    Attributes:
        rank: position of the exon within its transcript counting from the lowest genomic coordinate
        total: number of exons in the transcript
    """

    chr: str
    start: int
    end: int
    strand: str
    gene: GeneIdentifier
    transcript: str
    rank: int
    total: int

    @property
    def is_terminal(self) -> bool:
        """True for the first and last exon of the transcript"""
        return self.rank == 1 or self.rank == self.total

    @property
    def five_prime(self) -> int:
        return self.start if self.strand == STRAND.POS else self.end

    @property
    def three_prime(self) -> int:
        return self.end if self.strand == STRAND.POS else self.start

    def __contains__(self, coord: int) -> bool:
        return self.start <= coord <= self.end

    def __str__(self):
        return f'{self.transcript}:exon{self.rank}/{self.total}'


class Transcript:
    def __init__(
        self,
        name: str,
        gene: GeneIdentifier,
        chr: str,
        strand: str,
        exons: Iterable[Tuple[int, int]],
    ):
        """
        Args:
            name: the transcript id
            gene: the gene the transcript belongs to
            chr: the chromosome
            strand: the genomic strand '+' or '-'
            exons: (start, end) pairs of the exons
        """
        self.name = name
        self.gene = gene
        spans = sorted(exons)
        self.exons: Tuple[Exon, ...] = tuple(
            Exon(
                chr=chr,
                start=start,
                end=end,
                strand=strand,
                gene=gene,
                transcript=name,
                rank=rank,
                total=len(spans),
            )
            for rank, (start, end) in enumerate(spans, start=1)
        )

    @property
    def start(self) -> int:
        return self.exons[0].start

    @property
    def end(self) -> int:
        return max([exon.end for exon in self.exons])

    def __contains__(self, coord: int) -> bool:
        return self.start <= coord <= self.end

    def __repr__(self):
        return f'Transcript({self.name}, {self.start}-{self.end}, exons={len(self.exons)})'


class Gene:
    def __init__(self, identifier: GeneIdentifier, chr: str, transcripts: List[Transcript]):
        self.identifier = identifier
        self.chr = chr
        self.transcripts = sorted(transcripts, key=lambda t: (t.start, t.end, t.name))

    @property
    def start(self) -> int:
        return min([t.start for t in self.transcripts])

    @property
    def end(self) -> int:
        return max([t.end for t in self.transcripts])

    def __repr__(self):
        return f'Gene({self.identifier}, {self.chr}:{self.start}-{self.end})'


class GeneModelBuilder:
    """
    collects exon records by chromosome, gene and transcript before the immutable gene models are
    built
    """

    def __init__(self):
        self.exons: Dict[str, Dict[GeneIdentifier, Dict[str, List[Tuple[int, int]]]]] = {}
        self.strands: Dict[Tuple[str, GeneIdentifier, str], str] = {}

    def add_exon(
        self, chr: str, start: int, end: int, strand: str, gene: GeneIdentifier, transcript: str
    ):
        if start > end:
            raise AnnotationParseError(
                f'exon start ({start}) > end ({end}) on transcript {transcript}'
            )
        if strand not in STRAND.values():
            raise AnnotationParseError(f'invalid strand ({strand}) on transcript {transcript}')
        self.exons.setdefault(chr, {}).setdefault(gene, {}).setdefault(transcript, []).append(
            (start, end)
        )
        self.strands.setdefault((chr, gene, transcript), strand)

    def build(self) -> Dict[str, List[Gene]]:
        """
        Returns:
            lists of genes keyed by chromosome name
        """
        genes_by_chr: Dict[str, List[Gene]] = {}
        for chr, genes in self.exons.items():
            for gene_identifier, transcripts in genes.items():
                gene = Gene(
                    gene_identifier,
                    chr,
                    [
                        Transcript(
                            name,
                            gene_identifier,
                            chr,
                            self.strands[(chr, gene_identifier, name)],
                            exons,
                        )
                        for name, exons in transcripts.items()
                    ],
                )
                genes_by_chr.setdefault(chr, []).append(gene)
        return genes_by_chr
