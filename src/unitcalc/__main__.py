#!/usr/bin/env python3
"""
Command line interface for unitcalc.

Usage:
    unitcalc EXPRESSION...          evaluate once and print the result
    unitcalc                        start an interactive session
    unitcalc --version

Examples:
    unitcalc '1/2 + 1/3'            # 5/6
    unitcalc '3 kg + 500 g'         # 3.5 kg
    unitcalc '255 to hex'           # ff
    unitcalc 'sin(pi/4) -> 5 dp'    # approx. 0.70711

In an interactive session, Ctrl-C interrupts a long computation and
'quit' or 'exit' (or end of input) leaves the session. 'help' or '?'
prints the version and a short usage summary.
"""

import argparse
import logging
import signal
import sys
from contextlib import contextmanager

from .config import CalcConfig, default_config_path, load_config
from .errors import CalcError
from .interrupt import InterruptFlag
from .runtime import Context, EvaluationResult, get_version

logger = logging.getLogger(__name__)

PROMPT = "> "
QUIT_WORDS = {
    "exit", "exit()", ".exit", ":exit", "quit", "quit()", ":quit",
    ":q", ":q!", ":wq", ":wq!", ":qa", ":qa!", ":wqa", ":wqa!",
}
HELP_WORDS = {"help", "?"}

SESSION_HELP = """\
Type an expression and press Enter, for example:
    1/2 + 1/3
    3 kg + 500 g
    100 km/h to m/s
    f = x: x^2
    255 to hex
    pi -> 5 dp
Ctrl-C interrupts a long computation; quit, exit or Ctrl-D leaves."""


@contextmanager
def interrupt_on_sigint(flag: InterruptFlag):
    """Set ``flag`` instead of raising KeyboardInterrupt while active."""
    def _handler(signum, frame):
        flag.set()

    previous = signal.signal(signal.SIGINT, _handler)
    try:
        yield flag
    finally:
        signal.signal(signal.SIGINT, previous)


def print_result(result: EvaluationResult, config: CalcConfig) -> int:
    """Print an evaluation result; return the process exit status for it."""
    if result.interrupted:
        print("Interrupted", file=sys.stderr)
        return 1
    if not result.success:
        print(f"Error: {result.error_message}", file=sys.stderr)
        return 1
    if result.main_result:
        print(result.main_result)
    if config.show_other_info:
        for info in result.other_info:
            print(f"  = {info}")
    return 0


def print_help() -> None:
    print(f"unitcalc {get_version()}")
    print(SESSION_HELP)


def run_once(context: Context, source: str) -> int:
    flag = InterruptFlag()
    with interrupt_on_sigint(flag):
        result = context.evaluate(source, flag)
    return print_result(result, context.config)


def repl(context: Context) -> int:
    """Read-evaluate-print loop on standard input."""
    flag = InterruptFlag()
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            return 0
        except KeyboardInterrupt:
            print()
            continue
        command = line.strip()
        if command in QUIT_WORDS:
            return 0
        if command in HELP_WORDS:
            print_help()
            continue
        flag.reset()
        with interrupt_on_sigint(flag):
            result = context.evaluate(line, flag)
        print_result(result, context.config)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog='unitcalc',
        description='Arbitrary-precision calculator with units',
    )
    parser.add_argument('expression', nargs='*',
                        help='Expression to evaluate (starts a session if omitted)')
    parser.add_argument('-V', '--version', action='store_true',
                        help='Print the version and exit')
    parser.add_argument('-c', '--config', metavar='FILE',
                        help=f'Configuration file (default: {default_config_path()})')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    if args.version:
        print(get_version())
        return 0

    try:
        config = load_config(args.config)
        context = Context(config)
    except CalcError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    if args.expression:
        return run_once(context, " ".join(args.expression))
    logger.debug("starting session")
    return repl(context)


if __name__ == '__main__':
    sys.exit(main())
