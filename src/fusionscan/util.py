import errno
import gzip
import logging
import os
import time
from typing import IO, Iterable, Iterator, List, Optional, Sequence

from mavis_config import bash_expands

from .constants import COMPLETE_STAMP

logger = logging.getLogger('fusionscan')


def filepath(path):
    try:
        file_list = bash_expands(path)
    except FileNotFoundError:
        raise TypeError('File does not exist', path)
    else:
        if not file_list:
            raise TypeError('File not found', path)
        elif len(file_list) > 1:
            raise TypeError('File pattern match multiple files and expected only one', path)
    return file_list[0]


def log_arguments(args):
    """
    output the arguments to the console

    Args:
        args (Namespace): the namespace to print arguments for
    """
    logger.info('arguments')

    indent = ' '

    for arg, val in sorted(args.__dict__.items()):
        if isinstance(val, list):
            if len(val) <= 1:
                logger.info(f'{indent}{arg} = {val}')
                continue
            logger.info(f'{indent}{arg} = [')
            for v in val:
                logger.info(f'{indent * 2}{repr(v)}')
            logger.info(f'{indent}]')
        elif any([isinstance(val, typ) for typ in [str, int, float, bool, tuple]]) or val is None:
            logger.info(f'{indent}{arg}= {repr(val)}')
        else:
            logger.info(f'{arg} = {object.__repr__(val)}')


def mkdirp(dirname):
    """
    Make a directory or path of directories. Suppresses the error that is normally raised when the
    directory already exists
    """
    logger.info(f"creating output directory: '{dirname}'")
    try:
        os.makedirs(dirname)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(dirname):
            pass
        else:
            raise exc
    return dirname


def open_text(filename: str) -> IO[str]:
    """
    open a text file for reading, transparently decompressing gzipped files

    Raises:
        FileNotFoundError: the file does not exist
    """
    with open(filename, 'rb') as fh:
        is_gzipped = fh.read(2) == b'\x1f\x8b'
    if is_gzipped:
        return gzip.open(filename, 'rt')
    return open(filename, 'r')


class ReadSupport:
    """
    a set of distinct read names supporting some event. Adding the same read more than once does not
    change the count

    Example:
        >>> support = ReadSupport(['r1', 'r2'])
        >>> support.add('r1')
        >>> len(support)
        2
        >>> len(support - ReadSupport(['r2']))
        1
    """

    def __init__(self, names: Optional[Iterable[str]] = None):
        self.names = set(names) if names is not None else set()

    def add(self, name: str):
        self.names.add(name)

    def __len__(self):
        return len(self.names)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self.names))

    def __contains__(self, name):
        return name in self.names

    def __sub__(self, other):
        return ReadSupport(self.names - other.names)

    def __eq__(self, other):
        return isinstance(other, ReadSupport) and self.names == other.names

    def __repr__(self):
        return f'ReadSupport({sorted(self.names)})'


def output_tabbed_rows(filename: str, rows: Iterable[Sequence], header: Optional[List[str]] = None):
    """
    write rows of values as a tab-delimited file
    """
    logger.info(f'writing: {filename}')
    with open(filename, 'w') as fh:
        if header:
            fh.write('\t'.join(header) + '\n')
        for row in rows:
            fh.write('\t'.join([str(c) for c in row]) + '\n')


def format_run_time(start_time: int) -> str:
    duration = int(time.time()) - start_time
    hours = duration - duration % 3600
    minutes = duration - hours - (duration - hours) % 60
    seconds = duration - hours - minutes
    return 'run time (hh/mm/ss): {}:{:02d}:{:02d}'.format(hours // 3600, minutes // 60, seconds)


def generate_complete_stamp(output_prefix: str, start_time: Optional[int] = None) -> str:
    """
    writes a complete stamp, optionally including the run time if start_time is given

    Args:
        output_prefix: prefix shared by all the output files of the run
        start_time: the start time

    Return:
        str: path to the complete stamp

    Example:
        >>> generate_complete_stamp('output/sample')
        'output/sample.COMPLETE'
    """
    stamp = f'{output_prefix}.{COMPLETE_STAMP}'
    logger.info(f'complete: {stamp}')
    with open(stamp, 'w') as fh:
        if start_time is not None:
            fh.write(format_run_time(start_time) + '\n')
            fh.write('run time (s): {}\n'.format(int(time.time()) - start_time))
    return stamp
