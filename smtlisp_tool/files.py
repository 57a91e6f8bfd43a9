"""Formula files: read one formula per line, write generated batches."""

import logging
import os

from smtlisp_tool.generator import ExpressionGenerator

DEFAULT_FUZZ_COUNT = 10
DEFAULT_FUZZ_FILE = "fuzz.txt"

logger = logging.getLogger(__name__)


def read_formula_file(path: str):
    # universal newlines: only LF, CRLF and CR end a line, form feeds stay inside it
    with open(path, "r", encoding="utf-8") as f:
        lines = [line.rstrip("\n") for line in f]
    logger.debug("read %d lines from %s", len(lines), path)
    return lines


def write_fuzz_file(count: int, path: str, generator: ExpressionGenerator = None) -> str:
    generator = generator or ExpressionGenerator()
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(generator.fuzz_many(count) + "\n")
    logger.info("wrote %d generated formulas to %s", count, path)
    return path
