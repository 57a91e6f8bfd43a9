"""
Tests for the SMT-Lisp tokenizer.

Covers the lexical rules, in particular the '-' lookback rule that decides
between binary subtraction and a negative literal.
"""

import dataclasses

import pytest

from smtlisp_tool.targets.tokens import Token, TokenKind, tokenize


def kinds_and_texts(line):
    return [(t.kind, t.text) for t in tokenize(line)]


class TestTokenize:
    """Lexical rules applied left to right."""

    def test_full_formula(self):
        assert [t.text for t in tokenize("(simplify (+ 1 (* 2 3)))")] == [
            "(", "simplify", "(", "+", "1", "(", "*", "2", "3", ")", ")", ")",
        ]

    def test_kinds(self):
        assert kinds_and_texts("(simplify (* 12 3))") == [
            (TokenKind.PAREN, "("),
            (TokenKind.KEYWORD, "simplify"),
            (TokenKind.PAREN, "("),
            (TokenKind.OPERATOR, "*"),
            (TokenKind.NUMBER, "12"),
            (TokenKind.NUMBER, "3"),
            (TokenKind.PAREN, ")"),
            (TokenKind.PAREN, ")"),
        ]

    def test_blank_lines_give_no_tokens(self):
        assert tokenize("") == []
        assert tokenize("  \t  ") == []
        assert tokenize("\n") == []

    def test_unknown_characters_are_dropped(self):
        assert [t.text for t in tokenize("(+ 1 $ 2)#")] == ["(", "+", "1", "2", ")"]

    def test_runs_are_greedy(self):
        assert kinds_and_texts("12ab34") == [
            (TokenKind.NUMBER, "12"),
            (TokenKind.KEYWORD, "ab"),
            (TokenKind.NUMBER, "34"),
        ]

    def test_keywords_are_case_sensitive_letter_runs(self):
        assert kinds_and_texts("Simplify") == [(TokenKind.KEYWORD, "Simplify")]


class TestMinusLookback:
    """'-' is an operator only at line start or right after '('."""

    def test_minus_after_open_paren_is_operator(self):
        assert kinds_and_texts("(- 3 4)")[1] == (TokenKind.OPERATOR, "-")

    def test_minus_after_space_is_negative_literal(self):
        assert kinds_and_texts("(simplify -5)")[2] == (TokenKind.NUMBER, "-5")

    def test_minus_at_line_start_is_operator(self):
        assert kinds_and_texts("-5") == [(TokenKind.OPERATOR, "-"), (TokenKind.NUMBER, "5")]

    def test_spaced_minus_becomes_lone_number(self):
        assert kinds_and_texts("( - 5 3)")[1] == (TokenKind.NUMBER, "-")

    def test_lookback_uses_raw_previous_character(self):
        # a tab before '-' is not '(' even though tabs are skipped
        assert kinds_and_texts("(\t-7)")[1] == (TokenKind.NUMBER, "-7")


class TestToken:
    def test_tokens_are_immutable(self):
        token = Token(TokenKind.NUMBER, "1")
        with pytest.raises(dataclasses.FrozenInstanceError):
            token.text = "2"

    def test_str(self):
        assert str(Token(TokenKind.OPERATOR, "+")) == "OPERATOR: +"
