"""Command-line entry point: run a program file, or start the console."""

import argparse
import logging
import sys

from .console import Session
from .interpreter import DEFAULT_MAX_STEPS


def _step_count(text):
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError("must be 0 (unlimited) or a positive number")
    return value


def main(argv=None):
    ap = argparse.ArgumentParser(
        prog='minibasic',
        description="A line-numbered BASIC interpreter.")
    ap.add_argument('file', nargs='?',
                    help="program file to run (one `N statement` per line); "
                         "starts the interactive console when omitted")
    ap.add_argument('--max-steps', type=_step_count, default=DEFAULT_MAX_STEPS,
                    help="statements one RUN may execute before it is aborted "
                         "(default: %(default)s, 0 = unlimited)")
    ap.add_argument('-v', '--verbose', action='store_true',
                    help="log interpreter activity to stderr")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s')

    session = Session(sys.stdin, sys.stdout, max_steps=args.max_steps)
    if args.file is None:
        session.repl()
        return 0
    if not session.load(args.file, announce=False):
        return 1
    return 0 if session.run() else 1


if __name__ == "__main__":
    sys.exit(main())
