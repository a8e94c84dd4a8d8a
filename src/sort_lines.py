#!/usr/bin/env python3

import argparse
import logging
import math
import os
import sys

from collections import namedtuple

from priority_queue import MinHeapPriorityQueue

logger = logging.getLogger('sort_lines')

def configure_logging(level):
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return

    ch = logging.StreamHandler()
    ch.setLevel(level)

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
    ch.setFormatter(formatter)
    logger.addHandler(ch)

Record = namedtuple('Record', ['key', 'seq', 'raw'])

class LineParser(object):
    '''A parser that extracts the sort key from individual input lines.

       Records order by key, then by `seq', the line number. `seq' is unique,
       so equal keys keep their input order and `raw' is never compared.
    '''

    def __init__(self, field=0, delimiter=None, numeric=False):
        '''Key lines by the `field'-th column split on `delimiter' (whitespace
        when None). With `numeric' the key is converted to a float.
        '''
        self._field = field
        self._delimiter = delimiter
        self._numeric = numeric

    def _parse_key(self, value):
        if self._numeric:
            key = float(value)
            if math.isnan(key):
                raise ValueError('NaN has no order')

            return key

        return value

    def parse_line(self, line, seq):
        '''Parse one line into a `Record' object.
        If the line cannot be keyed, return None.
        '''
        if not line.strip():
            return None

        try:
            value = line.split(self._delimiter)[self._field]
            key = self._parse_key(value.strip())
        except (IndexError, ValueError) as e:
            logger.debug('Exception while parsing \'%s\': %s' % (line, e))
            return None

        return Record(key=key, seq=seq, raw=line)

class FileReader(object):
    '''A reader object that streams the content of a file line by line.
    The file is read incrementally. `-' stands for the standard input.
    '''

    def __init__(self, path):
        '''Initialize a reader object for a file at `path'.'''
        self._path = path

    def stream_lines(self):
        '''Return a generator that goes through all the lines in the file.
        Trailing whitespaces are stripped.
        '''
        if self._path == '-':
            for line in sys.stdin:
                yield line.rstrip()
            return

        with open(self._path, 'r', buffering=1024 * 1024) as f:
            for line in f:
                yield line.rstrip()

class LineSorter(object):
    '''Orders the lines of a source by their key.'''

    def __init__(self, line_source, results_sink, parser, limit=None):
        '''Initialize the sorter. Get the lines from `line_source', key them
        with `parser' and report them in ascending order to `results_sink'.
        At most `limit' lines are reported when it is set.
        '''

        self._line_source = line_source
        self._results_sink = results_sink
        self._parser = parser
        self._limit = limit

    def _fill(self):
        queue = MinHeapPriorityQueue()

        for seq, line in enumerate(self._line_source.stream_lines()):
            record = self._parser.parse_line(line, seq)

            if record is None:
                logger.info('Invalid line skipped: \'%s\'' % line)
                continue

            queue.insert(record)

        logger.debug('Queued %d lines' % queue.size())
        return queue

    def sort(self):
        '''Sort the lines and report them to the sink.
        Return the number of lines reported.
        '''
        queue = self._fill()

        written = 0
        while self._limit is None or written < self._limit:
            record = queue.extract_min()
            if record is None:
                break

            self._results_sink.note_line(record.raw)
            written += 1

        return written

class ResultsSink(object):
    '''Called in by `LineSorter' for every line in the sorted order.
    Stores the lines to a file, or to the standard output for `-'.

    The file is opened on the first line, after the sorter has read all of
    its input. A run that fails before that leaves the file untouched.
    '''

    def __init__(self, output_path):
        self._output_path = output_path
        self._out = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if self._out is None:
            if exc_type is not None:
                return
            # no lines, still leave an empty result behind
            self._open()

        if self._out is not sys.stdout:
            self._out.close()

        self._out = None

    def _open(self):
        if self._output_path == '-':
            self._out = sys.stdout
        else:
            self._out = open(self._output_path, 'w')

    def note_line(self, line):
        '''Store one line. Should be called repeatedly until the sorter is
        done.
        '''
        if self._out is None:
            self._open()

        self._out.write(line)
        self._out.write('\n')

def _non_negative_int(value):
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError('%s is negative' % value)

    return number

def main(argv=None):
    parser = argparse.ArgumentParser(description='Sort lines by a key field')
    parser.add_argument('--input', dest='input',
                        default='-',
                        help='path to the input file, - for stdin')
    parser.add_argument('--output', dest='output',
                        default='-',
                        help='path to the output file, - for stdout')
    parser.add_argument('--field', dest='field',
                        type=_non_negative_int, default=0,
                        help='zero-based index of the key field')
    parser.add_argument('--delimiter', dest='delimiter',
                        default=None,
                        help='field separator, whitespace by default')
    parser.add_argument('--numeric', dest='numeric', action='store_true',
                        default=False,
                        help='compare keys as numbers')
    parser.add_argument('--limit', dest='limit',
                        type=_non_negative_int, default=None,
                        help='only output this many smallest lines')
    parser.add_argument('--debug', dest='debug', action='store_true',
                        default=False,
                        help='enable debug mode')
    args = parser.parse_args(argv)

    if '-' not in (args.input, args.output) and \
            os.path.realpath(args.input) == os.path.realpath(args.output):
        parser.error('--input and --output must be different files')

    loglevel = logging.DEBUG if args.debug else logging.ERROR
    configure_logging(loglevel)

    source = FileReader(args.input)
    line_parser = LineParser(field=args.field, delimiter=args.delimiter,
                             numeric=args.numeric)

    with ResultsSink(args.output) as sink:
        sorter = LineSorter(source, sink, line_parser, limit=args.limit)
        sorter.sort()

    return 0

if __name__ == '__main__':
    sys.exit(main())
