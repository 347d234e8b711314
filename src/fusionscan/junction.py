"""
maps chimeric (split read) junctions to the genes on either side of the junction and collects the
supporting reads for each fusion breakpoint
"""
import itertools
from dataclasses import dataclass
from typing import IO, Dict, Iterable, List, NamedTuple, Optional, Tuple

from .annotate.genomic import GeneIdentifier
from .annotate.index import AnnotationIndex
from .breakpoint import ExonJunctionMatch, GenomicPosition, resolve_breakpoint
from .constants import FUSION_DELIM, SPLICE_SIDE, STRAND
from .error import ChimericJunctionParseError
from .util import ReadSupport, logger, open_text

READ_NAME_FIELD = 9
JUNCTION_HEADER_PREFIX = 'chr_donorA'


class FusionPair(NamedTuple):
    """
    an ordered (5' gene, 3' gene) pair of genes
    """

    left: GeneIdentifier
    right: GeneIdentifier

    @property
    def complex_name(self) -> str:
        """
        Example:
            >>> FusionPair(GeneIdentifier('G1', 'A'), GeneIdentifier('G2', 'B')).complex_name
            'A^G1--B^G2'
        """
        return f'{self.left}{FUSION_DELIM}{self.right}'

    @property
    def simple_name(self) -> str:
        return f'{self.left.display_name}{FUSION_DELIM}{self.right.display_name}'

    @property
    def gene_pair(self) -> Tuple[GeneIdentifier, GeneIdentifier]:
        return gene_pair_token(self.left, self.right)


def gene_pair_token(
    first: GeneIdentifier, second: GeneIdentifier
) -> Tuple[GeneIdentifier, GeneIdentifier]:
    """
    orientation independent key for a pair of genes. Genes are sorted by their text form
    """
    first, second = sorted((first, second), key=str)
    return first, second


@dataclass(frozen=True, order=True)
class BreakpointKey:
    """
    a single directional fusion breakpoint
    """

    left_gene: GeneIdentifier
    left_position: GenomicPosition
    left_delta: int
    right_gene: GeneIdentifier
    right_position: GenomicPosition
    right_delta: int

    @property
    def fusion(self) -> FusionPair:
        return FusionPair(self.left_gene, self.right_gene)

    @property
    def complex_name(self) -> str:
        return self.fusion.complex_name

    @property
    def simple_name(self) -> str:
        return self.fusion.simple_name

    @property
    def is_reference_splice(self) -> bool:
        """True when both ends fall exactly on annotated exon boundaries"""
        return self.left_delta == 0 and self.right_delta == 0

    @classmethod
    def from_matches(cls, left: ExonJunctionMatch, right: ExonJunctionMatch) -> 'BreakpointKey':
        return cls(
            left_gene=left.gene,
            left_position=left.position,
            left_delta=left.delta,
            right_gene=right.gene,
            right_position=right.position,
            right_delta=right.delta,
        )

    def __str__(self):
        return '|'.join(
            [
                str(self.left_gene),
                str(self.left_position),
                str(self.left_delta),
                str(self.right_gene),
                str(self.right_position),
                str(self.right_delta),
                self.complex_name,
                self.simple_name,
            ]
        )


class ChimericJunction(NamedTuple):
    """
    a single record of the chimeric junction file

    Attributes:
        donor: the chromosome, coordinate and strand of the first (donor) segment
        acceptor: the chromosome, coordinate and strand of the second (acceptor) segment
        read_name: name of the supporting read
        fields: the original fields of the record
    """

    donor: GenomicPosition
    acceptor: GenomicPosition
    read_name: str
    fields: Tuple[str, ...]

    @property
    def donor_splice_position(self) -> GenomicPosition:
        """the last exonic base before the junction"""
        chr, coord, strand = self.donor
        return GenomicPosition(chr, coord - 1 if strand == STRAND.POS else coord + 1, strand)

    @property
    def acceptor_splice_position(self) -> GenomicPosition:
        """the first exonic base after the junction"""
        chr, coord, strand = self.acceptor
        return GenomicPosition(chr, coord + 1 if strand == STRAND.POS else coord - 1, strand)


def parse_chimeric_junction(line: str) -> Optional[ChimericJunction]:
    """
    Returns:
        the parsed record or None for blank, comment and header lines

    Raises:
        ChimericJunctionParseError: the record is malformed
    """
    line = line.rstrip('\r\n')
    if not line.strip() or line.startswith('#') or line.startswith(JUNCTION_HEADER_PREFIX):
        return None
    fields = tuple(line.split('\t'))
    if len(fields) <= READ_NAME_FIELD:
        raise ChimericJunctionParseError(
            f'expected at least {READ_NAME_FIELD + 1} fields but found {len(fields)}: {line}'
        )
    positions = []
    for chr, coord, strand in [fields[0:3], fields[3:6]]:
        if strand not in STRAND.values():
            raise ChimericJunctionParseError(f'invalid strand ({strand}): {line}')
        try:
            positions.append(GenomicPosition(chr, int(coord), strand))
        except ValueError:
            raise ChimericJunctionParseError(f'invalid coordinate ({coord}): {line}')
    return ChimericJunction(positions[0], positions[1], fields[READ_NAME_FIELD], fields)


def pair_breakpoint_matches(
    donor_matches: List[ExonJunctionMatch], acceptor_matches: List[ExonJunctionMatch]
) -> List[BreakpointKey]:
    """
    combine the gene matches of both ends of a junction into fusion breakpoints. Combinations with
    mixed sense/antisense orientations and self-fusions are dropped. Antisense combinations are
    swapped so that the left gene is always upstream wrt the gene strand
    """
    keys = []
    for donor, acceptor in itertools.product(donor_matches, acceptor_matches):
        if donor.orientation != acceptor.orientation:
            continue
        if donor.gene == acceptor.gene:
            continue
        if donor.is_sense:
            keys.append(BreakpointKey.from_matches(donor, acceptor))
        else:
            keys.append(BreakpointKey.from_matches(acceptor, donor))
    return keys


def map_junction(index: AnnotationIndex, junction: ChimericJunction) -> List[BreakpointKey]:
    donor = junction.donor_splice_position
    acceptor = junction.acceptor_splice_position
    return pair_breakpoint_matches(
        resolve_breakpoint(index, donor.chr, donor.coord, donor.strand, SPLICE_SIDE.DONOR),
        resolve_breakpoint(
            index, acceptor.chr, acceptor.coord, acceptor.strand, SPLICE_SIDE.ACCEPTOR
        ),
    )


class JunctionSupport:
    """
    supporting reads of each breakpoint grouped by fusion
    """

    def __init__(self):
        self.reads_by_fusion: Dict[FusionPair, Dict[BreakpointKey, ReadSupport]] = {}

    def add(self, key: BreakpointKey, read_name: str):
        breakpoints = self.reads_by_fusion.setdefault(key.fusion, {})
        breakpoints.setdefault(key, ReadSupport()).add(read_name)

    def fusions(self) -> List[FusionPair]:
        return sorted(self.reads_by_fusion, key=lambda f: (f.complex_name, f))

    def ranked_breakpoints(self, fusion: FusionPair) -> List[Tuple[BreakpointKey, ReadSupport]]:
        """
        the breakpoints of a fusion from most to least supported
        """
        breakpoints = self.reads_by_fusion.get(fusion, {})
        return sorted(breakpoints.items(), key=lambda item: (-len(item[1]), item[0]))

    def __len__(self):
        return sum([len(breakpoints) for breakpoints in self.reads_by_fusion.values()])


def map_chimeric_junctions(
    lines: Iterable[str], index: AnnotationIndex, output_fh: Optional[IO[str]] = None
) -> JunctionSupport:
    """
    map each chimeric junction record to fusion breakpoints

    Args:
        lines: the lines of the chimeric junction file
        index: the annotation index
        output_fh: if given, each record is written here with its breakpoint annotations appended
    """
    support = JunctionSupport()
    records = 0
    mapped = 0
    for line in lines:
        junction = parse_chimeric_junction(line)
        if junction is None:
            continue
        records += 1
        keys = map_junction(index, junction)
        if keys:
            mapped += 1
        for key in keys:
            support.add(key, junction.read_name)
        if output_fh is not None:
            output_fh.write('\t'.join(list(junction.fields) + [str(k) for k in keys]) + '\n')
    logger.info(
        f'mapped {mapped} of {records} chimeric junctions to {len(support)} fusion breakpoints'
    )
    return support


def load_chimeric_junctions(
    filename: str, index: AnnotationIndex, output_filename: Optional[str] = None
) -> JunctionSupport:
    logger.info(f'loading: {filename}')
    try:
        with open_text(filename) as fh:
            if output_filename is None:
                return map_chimeric_junctions(fh, index)
            logger.info(f'writing: {output_filename}')
            with open(output_filename, 'w') as output_fh:
                return map_chimeric_junctions(fh, index, output_fh)
    except ChimericJunctionParseError as err:
        raise ChimericJunctionParseError(f'Error in loading file: {filename}. {err}')
