"""
per-chromosome interval indices of gene spans
"""
import re
from typing import Dict, Iterable, List, Optional

from intervaltree import IntervalTree

from ..util import logger
from .genomic import Gene, GeneIdentifier


def chromosome_key(name: str) -> str:
    """
    Ensures that hg19/hg38 style chromosome names match

    Example:
        >>> chromosome_key('chr1') == chromosome_key('1')
        True
    """
    return re.sub('^chr', '', str(name))


class AnnotationIndex:
    """
    genes grouped by chromosome with an interval tree of gene spans for each chromosome. Read-only
    once constructed
    """

    def __init__(self, genes_by_chr: Dict[str, List[Gene]]):
        self.genes_by_chr: Dict[str, Dict[GeneIdentifier, Gene]] = {}
        self.trees: Dict[str, IntervalTree] = {}

        for chr, genes in genes_by_chr.items():
            key = chromosome_key(chr)
            tree = self.trees.setdefault(key, IntervalTree())
            chr_genes = self.genes_by_chr.setdefault(key, {})
            for gene in genes:
                chr_genes[gene.identifier] = gene
                # intervaltree intervals are half-open
                tree.addi(gene.start, gene.end + 1, gene.identifier)
        logger.info(f'indexed {len(self.genes())} genes on {len(self.trees)} chromosomes')

    def __contains__(self, chr: str) -> bool:
        return chromosome_key(chr) in self.trees

    def genes(self, chr: Optional[str] = None) -> Iterable[Gene]:
        if chr is not None:
            return list(self.genes_by_chr.get(chromosome_key(chr), {}).values())
        return [gene for genes in self.genes_by_chr.values() for gene in genes.values()]

    def overlapping_genes(self, chr: str, start: int, end: Optional[int] = None) -> List[Gene]:
        """
        find all genes whose span overlaps the 1-based inclusive range start-end

        Returns:
            the overlapping genes sorted by their identifiers. Empty if the chromosome is not
            annotated
        """
        end = start if end is None else end
        key = chromosome_key(chr)
        tree = self.trees.get(key)
        if tree is None:
            return []
        identifiers = sorted({interval.data for interval in tree.overlap(start, end + 1)}, key=str)
        return [self.genes_by_chr[key][identifier] for identifier in identifiers]
