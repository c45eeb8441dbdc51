#!/usr/bin/env python3

# Command line front-end for the LZSS codec.
# Encodes or decodes one file (or stdin) into another file (or stdout).
#
# Usage:
#  lzss -c -i input.txt -o input.lzss
#  lzss -d -i input.lzss -o input.txt
#  lzss --help

import argparse
import contextlib
import sys
from typing import List, Optional

from lzss_codec.config import LZSSConfig, LENGTH_BITS, MAX_UNCODED, OFFSET_BITS
from lzss_codec.errors import LZSSError
from lzss_codec.lzss import LZSS
from lzss_codec.lzss_utils.match_finder import MATCH_FINDERS

STD_IO = "-"

parser = argparse.ArgumentParser(
    prog="lzss", description="Encode or decode a file with the LZSS algorithm")
mode_group = parser.add_mutually_exclusive_group()
mode_group.add_argument(
    "-c", "--compress", action="store_const", dest="mode", const="encode",
    help="Encode input file to output file (default)")
mode_group.add_argument(
    "-d", "--decompress", action="store_const", dest="mode", const="decode",
    help="Decode input file to output file")
parser.add_argument(
    "-i", "--input", action="store", type=str, dest="input", default=STD_IO,
    help="Name of input file (default is stdin)")
parser.add_argument(
    "-o", "--output", action="store", type=str, dest="output", default=STD_IO,
    help="Name of output file (default is stdout)")
parser.add_argument(
    "--offset-bits", action="store", type=int, dest="offset_bits", default=OFFSET_BITS,
    help=f"Offset field width, window size is 2**bits (default is {OFFSET_BITS})")
parser.add_argument(
    "--length-bits", action="store", type=int, dest="length_bits", default=LENGTH_BITS,
    help=f"Length field width (default is {LENGTH_BITS})")
parser.add_argument(
    "--max-uncoded", action="store", type=int, dest="max_uncoded", default=MAX_UNCODED,
    help=f"Longest match still written as literals (default is {MAX_UNCODED})")
parser.add_argument(
    "--finder", action="store", type=str, dest="finder", default="brute",
    choices=list(MATCH_FINDERS),
    help="Match finding strategy, output is identical for all (default is brute)")
parser.add_argument(
    "-v", "--verbose", action="store_true", dest="verbose",
    help="Print every token and a summary")


def main(argv: Optional[List[str]] = None) -> int:
    args = parser.parse_args(argv)
    mode = args.mode or "encode"

    try:
        config = LZSSConfig(args.offset_bits, args.length_bits, args.max_uncoded)
    except LZSSError as e:
        print(f"Invalid parameters: {e}", file=sys.stderr)
        return 1

    lzss = LZSS(config, args.finder, verbose=args.verbose)

    with contextlib.ExitStack() as stack:
        try:
            if args.input == STD_IO:
                in_file = sys.stdin.buffer
            else:
                in_file = stack.enter_context(open(args.input, "rb"))
            if args.output == STD_IO:
                out_file = sys.stdout.buffer
                # keep the trace out of the data stream
                stack.enter_context(contextlib.redirect_stdout(sys.stderr))
            else:
                out_file = stack.enter_context(open(args.output, "wb"))
        except OSError as e:
            print(f"Opening file failed: {e}", file=sys.stderr)
            return 1

        try:
            if mode == "encode":
                lzss.compress(in_file, out_file)
            else:
                lzss.decompress(in_file, out_file)
            out_file.flush()
        except (LZSSError, OSError) as e:
            print(f"LZSS {mode} failed: {e}", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
