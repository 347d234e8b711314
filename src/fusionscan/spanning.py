"""
maps discordant read pairs to the genes overlapped by each mate
"""
import itertools
import re
from typing import IO, Dict, Iterable, Iterator, List, Optional, Set, Tuple

import pysam

from .annotate.genomic import GeneIdentifier
from .annotate.index import AnnotationIndex
from .constants import FUSION_DELIM
from .error import ReadPairingError
from .junction import gene_pair_token
from .util import ReadSupport, logger

MATE_PATTERN = re.compile(r'^(.+)/([12])$')

GenePair = Tuple[GeneIdentifier, GeneIdentifier]


def parse_mate(read_name: str) -> Tuple[str, int]:
    """
    split a read name into the name of the pair and the mate number

    Example:
        >>> parse_mate('read1/2')
        ('read1', 2)

    Raises:
        ReadPairingError: the read name does not end with a /1 or /2 mate marker
    """
    match = MATE_PATTERN.match(read_name)
    if not match:
        raise ReadPairingError(
            f'cannot determine the mate of read ({read_name}). Expected a trailing /1 or /2'
        )
    return match.group(1), int(match.group(2))


def aligned_blocks(read) -> List[Tuple[int, int]]:
    """
    Returns:
        the aligned blocks of the read as 1-based inclusive genomic ranges. Zero-width blocks are
        dropped
    """
    blocks = []
    for start, end in read.get_blocks():
        if end > start:
            blocks.append((start + 1, end))
    return blocks


def format_gene_pair(gene_pair: GenePair) -> str:
    return FUSION_DELIM.join([str(g) for g in gene_pair])


class ReadPairGenes:
    """
    the genes overlapped by each mate of a read pair
    """

    def __init__(self, name: str):
        self.name = name
        self.mates: Dict[int, Set[GeneIdentifier]] = {1: set(), 2: set()}

    def add(self, mate: int, genes: Iterable[GeneIdentifier]):
        self.mates[mate].update(genes)

    def gene_pairs(self) -> List[GenePair]:
        """
        the distinct gene pair tokens linked by the two mates. Empty unless both mates overlap genes
        """
        pairs = {
            gene_pair_token(first, second)
            for first, second in itertools.product(self.mates[1], self.mates[2])
        }
        return sorted(pairs, key=lambda p: [str(g) for g in p])


class SpanSupport:
    """
    supporting read pairs grouped by gene pair token
    """

    def __init__(self):
        self.reads_by_gene_pair: Dict[GenePair, ReadSupport] = {}

    def add(self, gene_pair: GenePair, pair_name: str):
        self.reads_by_gene_pair.setdefault(gene_pair, ReadSupport()).add(pair_name)

    def get(self, gene_pair: GenePair) -> ReadSupport:
        return self.reads_by_gene_pair.get(gene_pair, ReadSupport())

    def __len__(self):
        return len(self.reads_by_gene_pair)


def map_spanning_fragments(
    reads: Iterable, index: AnnotationIndex, output_fh: Optional[IO[str]] = None
) -> SpanSupport:
    """
    Assign each read pair to the gene pairs linked by its mates

    Args:
        reads: alignment records (pysam.AlignedSegment or similar) where all the records of a pair
            are consecutive
        index: the annotation index
        output_fh: if given, each (read pair, gene pair) association is written here

    Raises:
        ReadPairingError: a read name does not carry a mate marker
    """
    support = SpanSupport()
    current: Optional[ReadPairGenes] = None
    pair_count = 0

    def flush(pair: ReadPairGenes):
        for gene_pair in pair.gene_pairs():
            support.add(gene_pair, pair.name)
            if output_fh is not None:
                output_fh.write(f'{pair.name}\t{format_gene_pair(gene_pair)}\n')

    for read in reads:
        pair_name, mate = parse_mate(read.query_name)
        if current is None or current.name != pair_name:
            if current is not None:
                flush(current)
            current = ReadPairGenes(pair_name)
            pair_count += 1
        if read.reference_name is None or read.reference_name not in index:
            continue
        for start, end in aligned_blocks(read):
            genes = index.overlapping_genes(read.reference_name, start, end)
            current.add(mate, [gene.identifier for gene in genes])
    if current is not None:
        flush(current)
    logger.info(f'mapped {pair_count} read pairs to {len(support)} gene pairs')
    return support


def read_alignments(filename: str) -> Iterator[pysam.AlignedSegment]:
    """
    iterate over all records of a SAM/BAM file in file order
    """
    with pysam.AlignmentFile(filename, 'r') as fh:
        for read in fh:
            yield read


def load_spanning_fragments(
    filename: str, index: AnnotationIndex, output_filename: Optional[str] = None
) -> SpanSupport:
    logger.info(f'loading: {filename}')
    try:
        if output_filename is None:
            return map_spanning_fragments(read_alignments(filename), index)
        logger.info(f'writing: {output_filename}')
        with open(output_filename, 'w') as output_fh:
            return map_spanning_fragments(read_alignments(filename), index, output_fh)
    except ReadPairingError as err:
        raise ReadPairingError(f'Error in loading file: {filename}. {err}')
