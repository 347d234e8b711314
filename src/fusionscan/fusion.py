"""
combines junction and spanning evidence into a single fusion prediction per breakpoint
"""
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, List, Tuple

from .annotate.genomic import GeneIdentifier
from .constants import CANDIDATE_HEADER, TIE_BREAK
from .junction import BreakpointKey, JunctionSupport
from .spanning import SpanSupport
from .util import ReadSupport, logger, output_tabbed_rows


@dataclass(frozen=True)
class FusionCandidate:
    simple_name: str
    complex_name: str
    junction_count: int
    spanning_count: int
    left_gene: GeneIdentifier
    left_breakpoint: str
    left_delta: int
    right_gene: GeneIdentifier
    right_breakpoint: str
    right_delta: int
    breakpoint: BreakpointKey
    junction_reads: FrozenSet[str] = frozenset()
    spanning_reads: FrozenSet[str] = frozenset()

    @property
    def breakpoint_token(self) -> Tuple[str, str]:
        """naming variants of the same physical breakpoint share this token"""
        return self.left_breakpoint, self.right_breakpoint

    def to_row(self) -> List:
        return [
            self.simple_name,
            self.junction_count,
            self.spanning_count,
            self.left_gene,
            self.left_breakpoint,
            self.left_delta,
            self.right_gene,
            self.right_breakpoint,
            self.right_delta,
        ]

    @classmethod
    def create(cls, key: BreakpointKey, junction_reads: ReadSupport, spanning_reads: ReadSupport):
        return cls(
            simple_name=key.simple_name,
            complex_name=key.complex_name,
            junction_count=len(junction_reads),
            spanning_count=len(spanning_reads),
            left_gene=key.left_gene,
            left_breakpoint=str(key.left_position),
            left_delta=key.left_delta,
            right_gene=key.right_gene,
            right_breakpoint=str(key.right_position),
            right_delta=key.right_delta,
            breakpoint=key,
            junction_reads=frozenset(junction_reads.names),
            spanning_reads=frozenset(spanning_reads.names),
        )


def filter_breakpoints(
    ranked_breakpoints: List[Tuple[BreakpointKey, ReadSupport]],
    min_novel_junction_support: int,
    min_alt_pct_junction: float,
) -> List[Tuple[BreakpointKey, ReadSupport]]:
    """
    Drop weakly supported breakpoints of a single fusion. Novel breakpoints (not on reference exon
    boundaries) require a minimum number of reads and every breakpoint after the first accepted
    (dominant) breakpoint must have at least some percentage of its support

    Args:
        ranked_breakpoints: the breakpoints of the fusion from most to least supported
        min_novel_junction_support: minimum reads for a breakpoint not on reference splice sites
        min_alt_pct_junction: minimum support as a percentage of the dominant breakpoint
    """
    retained = []
    top_support = None
    for key, reads in ranked_breakpoints:
        count = len(reads)
        if not key.is_reference_splice and count < min_novel_junction_support:
            continue
        if top_support is None:
            top_support = count
        elif count / top_support * 100 < min_alt_pct_junction:
            continue
        retained.append((key, reads))
    return retained


def build_candidates(
    junction_support: JunctionSupport,
    span_support: SpanSupport,
    min_novel_junction_support: int,
    min_alt_pct_junction: float,
) -> Dict[Tuple[str, str], List[FusionCandidate]]:
    """
    Returns:
        fusion candidates grouped by their breakpoint coordinates
    """
    candidates_by_breakpoint: Dict[Tuple[str, str], List[FusionCandidate]] = {}
    for fusion in junction_support.fusions():
        spanning_reads = span_support.get(fusion.gene_pair)
        for key, junction_reads in filter_breakpoints(
            junction_support.ranked_breakpoints(fusion),
            min_novel_junction_support,
            min_alt_pct_junction,
        ):
            # reads counted as junction reads are not credited as spanning fragments
            candidate = FusionCandidate.create(key, junction_reads, spanning_reads - junction_reads)
            candidates_by_breakpoint.setdefault(candidate.breakpoint_token, []).append(candidate)
    return candidates_by_breakpoint


def shortest_name_priority(candidate: FusionCandidate):
    return (
        -candidate.spanning_count,
        len(candidate.simple_name),
        candidate.simple_name,
        candidate.complex_name,
    )


def lexical_priority(candidate: FusionCandidate):
    return (-candidate.spanning_count, candidate.simple_name, candidate.complex_name)


TIE_BREAK_PRIORITY: Dict[str, Callable] = {
    TIE_BREAK.SHORTEST_NAME: shortest_name_priority,
    TIE_BREAK.LEXICAL: lexical_priority,
}


def choose_candidate(
    candidates: List[FusionCandidate], tie_break: str = TIE_BREAK.SHORTEST_NAME
) -> FusionCandidate:
    """
    pick the candidate with the most spanning support from naming variants of the same breakpoint.
    Ties are resolved by the tie_break policy
    """
    if not candidates:
        raise ValueError('cannot choose from an empty list of candidates')
    return sorted(candidates, key=TIE_BREAK_PRIORITY[TIE_BREAK.enforce(tie_break)])[0]


def output_order(candidate: FusionCandidate):
    return (
        -candidate.junction_count,
        -candidate.spanning_count,
        candidate.simple_name,
        candidate.complex_name,
        candidate.breakpoint_token,
    )


def resolve_fusions(
    junction_support: JunctionSupport,
    span_support: SpanSupport,
    min_novel_junction_support: int = 10,
    min_alt_pct_junction: float = 10.0,
    tie_break: str = TIE_BREAK.SHORTEST_NAME,
) -> Tuple[List[FusionCandidate], List[FusionCandidate]]:
    """
    Returns:
        one fusion candidate per distinct breakpoint and every candidate retained by the breakpoint
        filters (naming variants included). Both lists are ordered by decreasing support
    """
    groups = build_candidates(
        junction_support, span_support, min_novel_junction_support, min_alt_pct_junction
    )
    retained = sorted([c for candidates in groups.values() for c in candidates], key=output_order)
    result = [choose_candidate(candidates, tie_break) for candidates in groups.values()]
    logger.info(
        f'resolved {len(result)} fusion candidates from {len(retained)} retained breakpoints'
    )
    return sorted(result, key=output_order), retained


def write_candidates(filename: str, candidates: List[FusionCandidate]):
    output_tabbed_rows(filename, [c.to_row() for c in candidates], header=CANDIDATE_HEADER)


def write_junction_read_names(filename: str, candidates: List[FusionCandidate]):
    rows = []
    for candidate in candidates:
        for read_name in sorted(candidate.junction_reads):
            rows.append([candidate.complex_name, candidate.breakpoint, read_name])
    output_tabbed_rows(filename, rows)


def write_spanning_read_names(filename: str, candidates: List[FusionCandidate]):
    """
    breakpoints of the same fusion share their spanning reads so each (fusion, read) row is
    written once
    """
    rows = []
    seen = set()
    for candidate in candidates:
        for read_name in sorted(candidate.spanning_reads):
            if (candidate.complex_name, read_name) not in seen:
                seen.add((candidate.complex_name, read_name))
                rows.append([candidate.complex_name, read_name])
    output_tabbed_rows(filename, rows)
