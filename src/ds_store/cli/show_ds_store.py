#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Show the contents of a .DS_Store file.

Usage:
    show_ds_store.py                         # ./.DS_Store, human readable
    show_ds_store.py /path/to/.DS_Store
    show_ds_store.py --output jsonl /path/to/.DS_Store
"""

import argparse
import sys
from pathlib import Path

from logging_service import LoggingService

from common.utils import timed
from ds_store import config
from ds_store.ds_store_parser import parse
from ds_store.exceptions import DSStoreError
from ds_store.record_formatter import RecordFormatter


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Decode a macOS .DS_Store file'
    )
    parser.add_argument(
        'ds_store_path',
        type=str,
        nargs='?',
        default=config.DEFAULT_DS_STORE_FILE,
        help=f'Path to the .DS_Store file (default: {config.DEFAULT_DS_STORE_FILE})'
    )
    parser.add_argument(
        '-o', '--output',
        choices=config.OUTPUT_FORMATS,
        default='human',
        help="Output format: 'human' for readable text, 'jsonl' for JSON Lines"
    )
    parser.add_argument(
        '-q', '--quiet',
        action='store_true',
        help='Do not log timing and summary information'
    )

    args = parser.parse_args(argv)
    log = LoggingService()

    ds_store_path = Path(args.ds_store_path)
    try:
        data = ds_store_path.read_bytes()
    except OSError as e:
        print(f"Error reading file '{ds_store_path}': {e}", file=sys.stderr)
        return 1

    try:
        if args.quiet:
            result = parse(data, log=log)
        else:
            with timed(f"parsing {ds_store_path}", log=log):
                result = parse(data, log=log)
    except DSStoreError as e:
        log.err(f"Error parsing file: {e}")
        print(f"Error parsing file: {e}", file=sys.stderr)
        return 1

    if not args.quiet:
        log.info(f"{len(result.records)} file(s) with records; "
                 f"{result.skipped_entries} record(s) skipped")

    formatter = RecordFormatter(result.records)
    lines = formatter.jsonl() if args.output == 'jsonl' else formatter.human_readable()
    for line in lines:
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
