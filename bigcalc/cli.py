# cli.py

"""
Command-line entry point.

    bigcalc                     start the interactive calculator
    bigcalc -e "2 ^ 100"        evaluate one expression and exit
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from .config import configure_logging, lift_int_digit_limit, load_settings
from .errors import EvalError
from .evaluator import Calculator
from .repl import REPL, format_error

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bigcalc", description="Arbitrary-precision integer calculator.")
    parser.add_argument(
        "-e", "--expression",
        type=str,
        help="Evaluate this expression, print the result and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Log tokens and compiled code for every expression.",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_false",
        default=None,
        help="Print errors without colour.",
    )
    parser.add_argument(
        "--history-file",
        type=str,
        help="File used for the line history (default: ~/.bigcalc_history).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        help="Logging level (default: WARNING).",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(
            debug=args.debug,
            color=args.color,
            history_file=args.history_file,
            log_level=args.log_level,
        )
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return 2

    configure_logging(settings.effective_log_level)
    lift_int_digit_limit()
    logger.debug(f"Settings: {settings.model_dump()}")

    if args.expression is not None:
        try:
            print(Calculator(settings).evaluate(args.expression))
        except EvalError as e:
            print(format_error(e), file=sys.stderr)
            return 1
        return 0

    REPL(settings).repl_loop()
    return 0
