from .file_io import load_annotations
from .genomic import Exon, Gene, GeneIdentifier, Transcript
from .index import AnnotationIndex
