"""
module responsible for small utility functions and constants used throughout the fusionscan package
"""
from mavis_config.constants import MavisNamespace

PROGNAME: str = 'fusionscan'

GENE_ID_DELIM: str = '^'
"""separator between the gene name and the gene id in a composite gene identifier"""

FUSION_DELIM: str = '--'
"""separator between the left and right gene of a fusion name"""

COMPLETE_STAMP: str = 'COMPLETE'


class STRAND(MavisNamespace):
    """
    holds controlled vocabulary for allowed strand values

    Attributes:
        POS: the positive/forward strand
        NEG: the negative/reverse strand
    """

    POS: str = '+'
    NEG: str = '-'


class SPLICE_SIDE(MavisNamespace):
    """
    which side of a splice event a breakpoint is on

    Attributes:
        DONOR: upstream side of the junction, matched against the 3' end of an exon
        ACCEPTOR: downstream side of the junction, matched against the 5' end of an exon
    """

    DONOR: str = 'donor'
    ACCEPTOR: str = 'acceptor'


class ORIENTATION(MavisNamespace):
    """
    orientation of a query strand relative to the strand of the annotated exon it landed in
    """

    SENSE: str = 'sense'
    ANTISENSE: str = 'antisense'


class TIE_BREAK(MavisNamespace):
    """
    policy for choosing between fusion candidates with the same breakpoints and spanning support

    Attributes:
        SHORTEST_NAME: prefer the candidate with the shorter simple fusion name (primary gene
            symbols over aliases)
        LEXICAL: prefer the candidate whose simple fusion name sorts first
    """

    SHORTEST_NAME: str = 'shortest_name'
    LEXICAL: str = 'lexical'


class OUTPUT_SUFFIX(MavisNamespace):
    """
    file name suffixes appended to the output prefix
    """

    JUNCTION_GENES: str = 'junction_breakpts_to_genes.txt'
    SPANNING_GENES: str = 'discordant_spans_to_genes.txt'
    JUNCTION_READS: str = 'junction_read_names'
    SPANNING_READS: str = 'spanning_read_names'
    CANDIDATES: str = 'fusion_candidates.txt'


CANDIDATE_HEADER = [
    '#fusion_name',
    'JunctionReads',
    'SpanningFrags',
    'LeftGene',
    'LeftBreakpoint',
    'LeftDistFromRefExonSplice',
    'RightGene',
    'RightBreakpoint',
    'RightDistFromRefExonSplice',
]
"""column names of the fusion candidates output file"""
