"""
Tokenizer for one line of SMT-Lisp arithmetic.

Rules (left to right, longest match):
- '(' and ')' -> PAREN
- '+' and '*' -> OPERATOR
- '-' -> OPERATOR if it is the first character of the line or the raw character
  before it is '(', otherwise the start of a NUMBER ("-5")
- digit run -> NUMBER
- letter run -> KEYWORD
- everything else (blanks, tabs, newlines, junk) is dropped
"""

from dataclasses import dataclass
from enum import Enum
from typing import List


class TokenKind(Enum):
    KEYWORD = "keyword"
    NUMBER = "number"
    OPERATOR = "operator"
    PAREN = "paren"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str

    def __str__(self):
        return f"{self.kind.name}: {self.text}"


PARENS = "()"
OPERATORS = "+*"
MINUS = "-"


def _is_digit(ch: str) -> bool:
    # str.isdigit() also accepts superscripts and other scripts' digits
    return "0" <= ch <= "9"


def _scan(line: str, start: int, accept) -> int:
    end = start
    while end < len(line) and accept(line[end]):
        end += 1
    return end


def tokenize(line: str) -> List[Token]:
    """Split ``line`` into tokens. Blank input gives an empty list."""
    tokens = []
    i, n = 0, len(line)
    while i < n:
        ch = line[i]
        if ch in PARENS:
            tokens.append(Token(TokenKind.PAREN, ch))
            i += 1
        elif ch in OPERATORS:
            tokens.append(Token(TokenKind.OPERATOR, ch))
            i += 1
        elif ch == MINUS:
            if i == 0 or line[i - 1] == "(":
                tokens.append(Token(TokenKind.OPERATOR, ch))
                i += 1
            else:
                end = _scan(line, i + 1, _is_digit)
                tokens.append(Token(TokenKind.NUMBER, line[i:end]))
                i = end
        elif _is_digit(ch):
            end = _scan(line, i + 1, _is_digit)
            tokens.append(Token(TokenKind.NUMBER, line[i:end]))
            i = end
        elif ch.isalpha():
            end = _scan(line, i + 1, str.isalpha)
            tokens.append(Token(TokenKind.KEYWORD, line[i:end]))
            i = end
        else:
            i += 1
    return tokens
