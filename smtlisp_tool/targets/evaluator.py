"""
Post-order evaluator over the syntax tree.

Integers follow signed 64-bit two's-complement semantics: literals must fit
in 64 bits and +, -, * wrap around instead of growing.
"""

from smtlisp_tool.targets.errors import NumericFormatError, UnsupportedOperator
from smtlisp_tool.targets.tree import BinaryNode, NumberNode, UnaryNode

INT_BITS = 64
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1
_MASK = (1 << INT_BITS) - 1

KEYWORD_SIMPLIFY = "simplify"


def wrap(value: int) -> int:
    """Reduce ``value`` into the signed 64-bit range."""
    value &= _MASK
    return value - (1 << INT_BITS) if value > INT_MAX else value


def parse_literal(text: str) -> int:
    # int() would also take "+5", "1_000" and non-ASCII digits
    digits = text[1:] if text.startswith("-") else text
    if not digits or not all("0" <= ch <= "9" for ch in digits):
        raise NumericFormatError(f"not an integer literal: {text!r}")
    value = int(text)
    if not INT_MIN <= value <= INT_MAX:
        raise NumericFormatError(f"literal out of 64-bit range: {text}")
    return value


class Recorder:
    def __init__(self):
        self.steps = []

    def log(self, msg: str):
        self.steps.append(msg)


class _NullRecorder:
    def log(self, msg: str):
        pass


_ARITHMETIC = {
    "+": ("ADD", lambda a, b: a + b),
    "-": ("SUB", lambda a, b: a - b),
    "*": ("MUL", lambda a, b: a * b),
}


def _eval(node, rec) -> int:
    if isinstance(node, NumberNode):
        value = parse_literal(node.token.text)
        rec.log(f"CONST {value}")
        return value

    if isinstance(node, UnaryNode):
        if node.token.text != KEYWORD_SIMPLIFY:
            raise UnsupportedOperator(f"unsupported keyword: {node.token.text!r}")
        value = _eval(node.operand, rec)
        rec.log(f"SIMPLIFY {value}")
        return value

    if isinstance(node, BinaryNode):
        if node.token.text not in _ARITHMETIC:
            raise UnsupportedOperator(f"unsupported operator: {node.token.text!r}")
        name, op = _ARITHMETIC[node.token.text]
        left = _eval(node.lhs, rec)
        right = _eval(node.rhs, rec)
        res = wrap(op(left, right))
        rec.log(f"{name}  {left} {node.token.text} {right} = {res}")
        return res

    raise TypeError(f"not a syntax node: {type(node).__name__}")


def evaluate(root) -> int:
    return _eval(root, _NullRecorder())


def evaluate_traced(root, rec: Recorder) -> int:
    """Evaluate while appending one step per node to ``rec``."""
    return _eval(root, rec)
