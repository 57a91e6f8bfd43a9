"""
smtlisp-solve: evaluate an SMT-Lisp formula file line by line.

With no FILE, DEFAULT_FUZZ_COUNT generated formulas are written to the fuzz
file first and that file is evaluated instead. Results go to stdout, one per
non-blank line; diagnostics, traces and tables go to stderr.
"""

import argparse
import logging
import sys

from rich.console import Console
from rich.logging import RichHandler

from smtlisp_tool.files import DEFAULT_FUZZ_COUNT, DEFAULT_FUZZ_FILE, read_formula_file, write_fuzz_file
from smtlisp_tool.generator import ExpressionGenerator
from smtlisp_tool.reporting import TABLE_STYLES, print_trace, render_summary
from smtlisp_tool.targets.errors import SmtLispError
from smtlisp_tool.targets.smt_calc import evaluate_with_trace, format_result

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_LINE_FAILED = 1
EXIT_IO_ERROR = 2


def solve_lines(lines, out=None, trace: int = 0, style: str = "rich", console: Console = None):
    """Evaluate every line, printing one result per non-blank line to ``out``.

    Returns the counters used by the summary table.
    """
    if out is None:
        out = sys.stdout
    stats = {"lines": 0, "evaluated": 0, "blank": 0, "failed": 0}
    for lineno, line in enumerate(lines, 1):
        stats["lines"] += 1
        try:
            result, steps = evaluate_with_trace(line)
        except SmtLispError as e:
            stats["failed"] += 1
            logger.error("line %d: %s: %s (input %r)", lineno, type(e).__name__, e, line)
            if trace > 0:
                print_trace(line, e.trace_steps, f"ERROR: {type(e).__name__}", style=style, console=console)
                trace -= 1
            continue

        if result is None:
            stats["blank"] += 1
            continue
        stats["evaluated"] += 1
        out.write(format_result(result) + "\n")
        if trace > 0:
            print_trace(line, steps, f"OK (result {result})", style=style, console=console)
            trace -= 1
    return stats


def _setup_logging(level: str, console: Console):
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def build_parser():
    parser = argparse.ArgumentParser(
        prog="smtlisp-solve",
        description="Evaluate SMT-Lisp integer formulas, one per line.",
    )
    parser.add_argument("file", nargs="?", default=None,
                        help="Formula file. Omit to generate --count formulas and evaluate those.")
    parser.add_argument("--count", type=int, default=DEFAULT_FUZZ_COUNT,
                        help="How many formulas to generate when no FILE is given.")
    parser.add_argument("--fuzz-file", default=DEFAULT_FUZZ_FILE,
                        help="Where generated formulas are written.")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the formula generator.")
    parser.add_argument("--trace", type=int, default=0,
                        help="Print up to N step-by-step evaluation traces.")
    parser.add_argument("--summary", action="store_true",
                        help="Print a summary table after evaluating.")
    parser.add_argument("--table-style", choices=TABLE_STYLES, default="rich")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    console = Console(stderr=True)
    _setup_logging(args.log_level, console)

    filename = args.file
    try:
        if filename is None:
            filename = write_fuzz_file(args.count, args.fuzz_file, ExpressionGenerator(seed=args.seed))
        lines = read_formula_file(filename)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("cannot use %s: %s", filename or args.fuzz_file, e)
        return EXIT_IO_ERROR

    stats = solve_lines(lines, trace=args.trace, style=args.table_style, console=console)

    if args.summary:
        rows = [
            ["File", filename],
            ["Lines", stats["lines"]],
            ["Evaluated", stats["evaluated"]],
            ["Blank", stats["blank"]],
            ["Failed", stats["failed"]],
        ]
        render_summary(rows, style=args.table_style, console=console, title="Solver Summary")

    return EXIT_LINE_FAILED if stats["failed"] else EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
