#!/usr/bin/env python3
# filename: huffman_cli.py

import argparse
import logging
import os
import sys

from huffman_errors import HuffmanError
from huffman_service import HuffmanService

LOG_LEVEL_ENV = "HUFFPACK_LOG_LEVEL"


def build_parser():
    parser = argparse.ArgumentParser(prog="huffpack", description="Static Huffman file compressor")
    parser.add_argument("mode", choices=["compress", "decompress"], help="operation to run")
    parser.add_argument("input", help="file to read")
    parser.add_argument("output", help="file to write")
    parser.add_argument(
        "--legacy",
        action="store_true",
        help="use the original container layout (no magic, no symbol count)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug details to stderr")
    parser.add_argument("-q", "--quiet", action="store_true", help="only print errors")
    return parser


def configure_logging(verbose=False, environ=None):
    environ = os.environ if environ is None else environ
    if verbose:
        level = logging.DEBUG
    else:
        name = environ.get(LOG_LEVEL_ENV, "WARNING").upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    return level


def print_stats(original_size, compressed_size):
    ratio = compressed_size / original_size
    bpb = (compressed_size * 8) / original_size

    print(f"Original size   : {original_size} bytes")
    print(f"Compressed size : {compressed_size} bytes")
    print(f"Ratio           : {ratio:.3f} (1.0 = no compression)")
    print(f"Bits per byte   : {bpb:.3f} (8.0 = no compression)")


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    service = HuffmanService(container="legacy" if args.legacy else "native")

    if args.mode == "compress":
        try:
            original_size, compressed_size = service.compress_file(args.input, args.output)
        except HuffmanError as e:
            print(f"Error compressing file: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            print("File compressed successfully.")
            print_stats(original_size, compressed_size)
    else:
        try:
            service.decompress_file(args.input, args.output)
        except HuffmanError as e:
            print(f"Error decompressing file: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            print("File decompressed successfully.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
