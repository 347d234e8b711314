#!python
import argparse
import logging
import os
import platform
import sys
import time
from typing import Dict, List, Optional

from . import __version__
from . import config as _config
from . import util as _util
from .annotate.file_io import load_annotations
from .constants import OUTPUT_SUFFIX, PROGNAME, TIE_BREAK
from .fusion import (
    FusionCandidate,
    resolve_fusions,
    write_candidates,
    write_junction_read_names,
    write_spanning_read_names,
)
from .junction import load_chimeric_junctions
from .schemas import DEFAULTS
from .spanning import load_spanning_fragments
from .util import filepath


def output_filename(output_prefix: str, suffix: str) -> str:
    return f'{output_prefix}.{suffix}'


def predict_fusions(
    annotations: str,
    junctions: str,
    alignments: str,
    output_prefix: str,
    config: Dict,
    start_time: Optional[int] = None,
) -> List[FusionCandidate]:
    """
    Run all the steps of fusion prediction and write the output files

    Args:
        annotations: path to the GTF gene models
        junctions: path to the chimeric junctions file
        alignments: path to the name-sorted SAM/BAM file of read pair alignments
        output_prefix: prefix for all output files
        config: validated config values

    Raises:
        FileNotFoundError: one of the input files does not exist
    """
    for filename in [annotations, junctions, alignments]:
        if not os.path.isfile(filename):
            raise FileNotFoundError('Missing file', filename)
    if os.path.dirname(output_prefix):
        _util.mkdirp(os.path.dirname(output_prefix))

    index = load_annotations(annotations)
    junction_support = load_chimeric_junctions(
        junctions, index, output_filename(output_prefix, OUTPUT_SUFFIX.JUNCTION_GENES)
    )
    span_support = load_spanning_fragments(
        alignments, index, output_filename(output_prefix, OUTPUT_SUFFIX.SPANNING_GENES)
    )
    candidates, retained = resolve_fusions(
        junction_support,
        span_support,
        min_novel_junction_support=config['min_novel_junction_support'],
        min_alt_pct_junction=config['min_alt_pct_junction'],
        tie_break=config['candidate_tie_break'],
    )
    write_junction_read_names(
        output_filename(output_prefix, OUTPUT_SUFFIX.JUNCTION_READS), retained
    )
    write_spanning_read_names(
        output_filename(output_prefix, OUTPUT_SUFFIX.SPANNING_READS), retained
    )
    write_candidates(output_filename(output_prefix, OUTPUT_SUFFIX.CANDIDATES), candidates)
    _util.generate_complete_stamp(output_prefix, start_time=start_time)
    return candidates


def create_parser(argv):
    parser = argparse.ArgumentParser(
        prog=PROGNAME, formatter_class=_config.CustomHelpFormatter, add_help=False
    )
    required = parser.add_argument_group('required arguments')
    optional = parser.add_argument_group('optional arguments')
    optional.add_argument('-h', '--help', action='help', help='show this help message and exit')
    optional.add_argument(
        '-v',
        '--version',
        action='version',
        version='%(prog)s version ' + __version__,
        help='Outputs the version number',
    )
    optional.add_argument('--log', help='redirect stdout to a log file', default=None)
    optional.add_argument(
        '--log_level',
        help='level of logging to output',
        choices=['INFO', 'DEBUG'],
        default='INFO',
    )
    optional.add_argument('--config', '-c', help='path to the JSON config file', type=filepath)

    required.add_argument(
        '--annotations', '-a', help='path to the GTF gene models', type=filepath, required=True
    )
    required.add_argument(
        '--junctions',
        '-j',
        help='path to the chimeric junctions file',
        type=filepath,
        required=True,
    )
    required.add_argument(
        '--alignments',
        '-b',
        help='path to the SAM/BAM alignments sorted so that the mates of a pair are adjacent',
        type=filepath,
        required=True,
    )
    required.add_argument(
        '--output_prefix', '-o', help='prefix for all output files', required=True
    )

    optional.add_argument(
        '--min_novel_junction_support',
        type=_config.non_negative_int,
        help='minimum junction reads for breakpoints not on reference exon boundaries '
        f"(default: {DEFAULTS['min_novel_junction_support']})",
    )
    optional.add_argument(
        '--min_alt_pct_junction',
        type=_config.non_negative_float,
        help='minimum support of an alternate breakpoint as a percentage of the dominant breakpoint'
        f" (default: {DEFAULTS['min_alt_pct_junction']})",
    )
    optional.add_argument(
        '--candidate_tie_break',
        choices=sorted(TIE_BREAK.values()),
        help='how to choose between naming variants of one breakpoint (default: {})'.format(
            DEFAULTS['candidate_tie_break']
        ),
    )
    return parser, parser.parse_args(argv)


def main(argv: Optional[List[str]] = None):
    """
    sets up the parser and checks the validity of command line args
    then runs the fusion prediction

    Args:
        argv: List of arguments, defaults to command line arguments
    """
    if argv is None:  # need to do at run time or patching will not behave as expected
        argv = sys.argv[1:]
    start_time = int(time.time())
    parser, args = create_parser(argv)

    log_conf = {
        'format': '{asctime} [{levelname}] {message}',
        'style': '{',
        'level': args.log_level,
    }

    original_logging_handlers = logging.root.handlers[:]
    for handler in original_logging_handlers:
        logging.root.removeHandler(handler)
    if args.log:  # redirect stdout AND stderr to a log file
        log_conf['filename'] = args.log
    logging.basicConfig(**log_conf)

    _util.logger.info(f'{PROGNAME}: {__version__}')
    _util.logger.info(f'hostname: {platform.node()}')
    _util.log_arguments(args)

    try:
        config = _config.load_config(
            args.config,
            min_novel_junction_support=args.min_novel_junction_support,
            min_alt_pct_junction=args.min_alt_pct_junction,
            candidate_tie_break=args.candidate_tie_break,
        )
        predict_fusions(
            annotations=args.annotations,
            junctions=args.junctions,
            alignments=args.alignments,
            output_prefix=args.output_prefix,
            config=config,
            start_time=start_time,
        )
        _util.logger.info(_util.format_run_time(start_time))
    finally:
        try:
            for handler in logging.root.handlers[:]:
                logging.root.removeHandler(handler)
            for handler in original_logging_handlers:
                logging.root.addHandler(handler)
        except Exception as err:
            print(err)


if __name__ == '__main__':
    main()
