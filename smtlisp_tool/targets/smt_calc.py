"""
SMT-Lisp calculator "service": one formula per line in, one result per line out.

Public API:
- solve_line(line: str) -> str | None
- evaluate_line(line: str) -> int | None
- evaluate_with_trace(line: str) -> (int | None, [steps...])
- format_result(value: int) -> str

Blank lines have nothing to evaluate and give None. Bad formulas raise an
SmtLispError subclass; evaluate_with_trace attaches the steps recorded so far
as `e.trace_steps` before re-raising, so callers can show what was attempted.
"""

from smtlisp_tool.targets.errors import SmtLispError
from smtlisp_tool.targets.evaluator import Recorder, evaluate, evaluate_traced
from smtlisp_tool.targets.tokens import tokenize
from smtlisp_tool.targets.tree import build_tree


def format_result(value: int) -> str:
    """Render like z3 does: negatives as "(- N)"."""
    if value < 0:
        return f"(- {-value})"
    return str(value)


def evaluate_line(line: str):
    try:
        root = build_tree(tokenize(line))
        if root is None:
            return None
        return evaluate(root)
    except SmtLispError as e:
        e.line = line
        raise


def _raise_with_trace(exc: SmtLispError, rec: Recorder, line: str):
    exc.trace_steps = list(rec.steps)
    exc.line = line
    raise exc


def evaluate_with_trace(line: str):
    """Return (result, steps). On failure, attach `trace_steps` and re-raise."""
    rec = Recorder()
    tokens = tokenize(line)
    if not tokens:
        return None, rec.steps
    rec.log("TOKENS " + " ".join(t.text for t in tokens))

    try:
        root = build_tree(tokens)
    except SmtLispError as e:
        rec.log(f"ERROR {type(e).__name__} while building tree")
        return _raise_with_trace(e, rec, line)

    try:
        result = evaluate_traced(root, rec)
    except SmtLispError as e:
        rec.log(f"ERROR {type(e).__name__}: {e}")
        return _raise_with_trace(e, rec, line)

    rec.log(f"RESULT = {format_result(result)}")
    return result, rec.steps


def solve_line(line: str):
    """Evaluate one formula and format it; None for a blank line."""
    value = evaluate_line(line)
    if value is None:
        return None
    return format_result(value)
