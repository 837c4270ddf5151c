"""Command line interface for computor."""

from __future__ import annotations

import argparse
import sys
from typing import Iterable

from .core.config import get_settings
from .core.errors import ComputorError
from .core.logging import setup_logging
from .evaluator import Evaluator


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="computor",
        description=(
            "Evaluate algebraic expressions over exact rationals, complex numbers, "
            "matrices and polynomials. Each argument (or each line of standard "
            "input when none is given) is evaluated in the same session."
        ),
    )
    parser.add_argument(
        "expressions",
        nargs="*",
        help="Expressions such as 'x = 2', 'f(x) = 2*x + 1', 'f(x) = 5 ?' or 'f(3) = ?'.",
    )
    parser.add_argument(
        "--exact",
        action="store_true",
        help="Always print rationals as fractions instead of decimals.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the COMPUTOR_LOG_LEVEL setting (e.g. DEBUG).",
    )
    return parser


def _lines(args: argparse.Namespace) -> Iterable[str]:
    if args.expressions:
        return args.expressions
    return sys.stdin


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.exact:
        settings = settings.model_copy(update={"DISPLAY_DECIMALS": False})
    setup_logging(settings, level=args.log_level)

    evaluator = Evaluator(settings=settings)
    status = 0
    for line in _lines(args):
        line = line.strip()
        if not line:
            continue
        try:
            if evaluator.is_assignment(line):
                result = evaluator.assign(line)
            else:
                result = evaluator.compute(line)
        except ComputorError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            status = 1
            continue
        print(result)

    return status


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
