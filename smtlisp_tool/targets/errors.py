"""
Exceptions raised by the SMT-Lisp pipeline.

Every failure that aborts a single formula derives from SmtLispError, which in
turn is a ValueError: harnesses treat these as *expected* rejections of bad
input, anything else is a crash.

Unrecognised characters are never an error (the tokenizer drops them).
"""


class SmtLispError(ValueError):
    """Base class for per-line failures."""

    def __init__(self, message: str, line: str = None):
        super().__init__(message)
        self.line = line
        self.trace_steps = []


class StructuralParseError(SmtLispError):
    """Token sequence ran out, or a token kind showed up where no node can start."""


class UnsupportedOperator(SmtLispError):
    """Operator or keyword text outside {+, -, *} / {simplify}."""


class NumericFormatError(SmtLispError):
    """Number token that is not a valid signed 64-bit literal."""
