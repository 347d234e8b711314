"""
module which holds all functions relating to loading the gene model reference file
"""
from typing import Dict, List

import pandas as pd

from ..error import AnnotationParseError
from ..util import logger, open_text
from .genomic import Gene, GeneIdentifier, GeneModelBuilder
from .index import AnnotationIndex

GTF_COLUMNS = [
    'seqname',
    'source',
    'feature',
    'start',
    'end',
    'score',
    'strand',
    'frame',
    'attribute',
]

GTF_ATTRIBUTE_PATTERN = r'(?:^|;)\s*{}\s+"?([^";]*)"?'


def extract_gtf_attribute(attributes: pd.Series, name: str) -> pd.Series:
    """
    pull a single named attribute out of the GTF attribute column. Missing attributes become empty
    strings

    Example:
        >>> attributes = pd.Series(['gene_id "G1"; transcript_id "T1";'])
        >>> extract_gtf_attribute(attributes, 'transcript_id').tolist()
        ['T1']
    """
    return attributes.str.extract(GTF_ATTRIBUTE_PATTERN.format(name), expand=False).fillna('')


def parse_gtf_exons(filename: str) -> Dict[str, List[Gene]]:
    """
    reads the exon features from a gff2/gtf file into gene models

    Args:
        filename: path to the (optionally gzipped) GTF file

    Returns:
        lists of genes keyed by chromosome name

    Raises:
        AnnotationParseError: an exon is missing its gene_id or transcript_id
    """
    logger.info(f'reading: {filename}')
    builder = GeneModelBuilder()
    try:
        with open_text(filename) as fh:
            df = pd.read_csv(
                fh,
                sep='\t',
                dtype={col: str for col in GTF_COLUMNS},
                index_col=False,
                header=None,
                names=GTF_COLUMNS,
                keep_default_na=False,
            )
    except pd.errors.EmptyDataError:
        logger.warning(f'no gene models found in: {filename}')
        return builder.build()
    df['row_index'] = df.index
    # a # inside an attribute value is not a comment
    df = df[~df.seqname.str.startswith('#', na=False)]

    feature_count = df.shape[0]
    df = df[df.feature == 'exon'].copy()
    if feature_count > df.shape[0]:
        logger.info(f'skipped {feature_count - df.shape[0]} non-exon features')

    df['gene_id'] = extract_gtf_attribute(df.attribute, 'gene_id')
    df['gene_name'] = extract_gtf_attribute(df.attribute, 'gene_name')
    df['transcript_id'] = extract_gtf_attribute(df.attribute, 'transcript_id')

    for col in ['gene_id', 'transcript_id']:
        missing = df[df[col] == '']
        if missing.shape[0]:
            row = missing.iloc[0]
            raise AnnotationParseError(
                f'exon record is missing a {col} ({missing.shape[0]} records). '
                f'first on data row {row.row_index}: {row.attribute}'
            )

    for row in df.itertuples(index=False):
        try:
            start, end = int(row.start), int(row.end)
        except ValueError:
            raise AnnotationParseError(
                f'invalid exon coordinates ({row.start}, {row.end}) on data row {row.row_index}'
            )
        builder.add_exon(
            row.seqname,
            start,
            end,
            row.strand,
            GeneIdentifier.create(row.gene_id, row.gene_name),
            row.transcript_id,
        )
    logger.info(f'loaded {df.shape[0]} exons')
    return builder.build()


def load_annotations(filename: str) -> AnnotationIndex:
    """
    loads gene models from a GTF file and indexes the gene spans by chromosome
    """
    try:
        genes_by_chr = parse_gtf_exons(filename)
    except AnnotationParseError as err:
        raise AnnotationParseError(f'Error in loading file: {filename}. {err}')
    return AnnotationIndex(genes_by_chr)
