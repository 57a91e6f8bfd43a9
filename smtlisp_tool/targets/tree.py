"""
Tree builder: token list -> syntax tree.

Parentheses are structurally transparent. The builder skips every PAREN token
it meets (open or close, balanced or not) and lets operator arity decide how
many operands are consumed: OPERATOR takes two, KEYWORD takes one, NUMBER is a
leaf. Tokens left over once the root is complete are ignored.
"""

from dataclasses import dataclass
from typing import List, Optional, Union

from smtlisp_tool.targets.errors import StructuralParseError
from smtlisp_tool.targets.tokens import Token, TokenKind

MAX_DEPTH = 500


@dataclass(frozen=True)
class NumberNode:
    token: Token

    @property
    def left(self):
        return None

    @property
    def right(self):
        return None


@dataclass(frozen=True)
class UnaryNode:
    token: Token
    operand: "SyntaxNode"

    @property
    def left(self):
        return self.operand

    @property
    def right(self):
        return None


@dataclass(frozen=True)
class BinaryNode:
    token: Token
    lhs: "SyntaxNode"
    rhs: "SyntaxNode"

    @property
    def left(self):
        return self.lhs

    @property
    def right(self):
        return self.rhs


SyntaxNode = Union[NumberNode, UnaryNode, BinaryNode]


class _Cursor:
    """Single forward cursor over the token list, starting before token 0."""

    def __init__(self, tokens: List[Token], max_depth: int):
        self.tokens = tokens
        self.pos = -1
        self.max_depth = max_depth

    def next_significant(self) -> Token:
        self.pos += 1
        while self.pos < len(self.tokens) and self.tokens[self.pos].kind is TokenKind.PAREN:
            self.pos += 1
        if self.pos >= len(self.tokens):
            raise StructuralParseError(
                f"unexpected end of input after {len(self.tokens)} tokens"
            )
        return self.tokens[self.pos]


def _build(cursor: _Cursor, depth: int) -> SyntaxNode:
    if depth > cursor.max_depth:
        raise StructuralParseError(f"expression nested deeper than {cursor.max_depth}")
    token = cursor.next_significant()
    if token.kind is TokenKind.OPERATOR:
        lhs = _build(cursor, depth + 1)
        rhs = _build(cursor, depth + 1)
        return BinaryNode(token, lhs, rhs)
    if token.kind is TokenKind.KEYWORD:
        return UnaryNode(token, _build(cursor, depth + 1))
    if token.kind is TokenKind.NUMBER:
        return NumberNode(token)
    raise StructuralParseError(f"unexpected token at position {cursor.pos}: {token}")


def build_tree(tokens: List[Token], max_depth: int = MAX_DEPTH) -> Optional[SyntaxNode]:
    """Build the tree for one line. An empty token list has nothing to build."""
    if not tokens:
        return None
    return _build(_Cursor(tokens, max_depth), 0)
