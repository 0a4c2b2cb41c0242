#!/usr/bin/env python3
"""tinyrb CLI - run programs written in the tinyrb Ruby subset.

Usage:
    tinyrb <file.rb>                # Run the program
    tinyrb <file.rb> --ast          # Show the parsed AST
    tinyrb --text 'puts "hi"'       # Run source given on the command line
"""

import argparse
import logging
import pathlib
import pprint
import sys

import tinyrb


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="tinyrb",
        description="Evaluate programs in a small Ruby subset")
    parser.add_argument("source",
        help="Program file to run")
    parser.add_argument("--text", action="store_true",
        help="Treat source as program text instead of a path")
    parser.add_argument("--ast", action="store_true",
        help="Show the parsed AST instead of running it")
    parser.add_argument("-v", "--verbose", action="store_true",
        help="Log class, method and frame activity to stderr")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.text:
        source = args.source
    else:
        filepath = pathlib.Path(args.source)
        try:
            source = filepath.read_text(encoding="utf-8")
        except FileNotFoundError:
            print(f"error: file not found: {filepath}", file=sys.stderr)
            return 1

    try:
        node = tinyrb.parse(source)
        if args.ast:
            pprint.pprint(node)
            return 0
        interp = tinyrb.Interp(sys.stdout)
        interp.evaluate(node)
    except (tinyrb.ParseError, tinyrb.EvalError, RecursionError) as e:
        sys.stdout.flush()
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
