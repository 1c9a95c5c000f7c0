# File: wthr/tokens.py
# -----------------------------------------------------------------------------
# This module defines the token structures shared by the lexer and parser.
#
# - A "token" is a classified chunk of source text (an identifier, a number,
#   an operator, a keyword, ...).
# - The lexer converts raw source text into a stream of tokens.
# - The parser consumes those tokens to build the AST.
#
# Token types are deliberately coarse: every operator is an OPERATOR and every
# keyword is a KEYWORD, and the lexeme tells them apart. The parser matches on
# (type, lexeme) pairs.
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from enum import Enum, auto


class TokenType(Enum):
    # Identifiers (user-defined names like temp, dew_point, q0).
    IDENT = auto()

    # Numeric literals.
    # INT is a run of digits; RATIONAL is a decimal literal such as 3.14 or .5,
    # which the parser turns into an exact Fraction (never a binary float).
    INT = auto()
    RATIONAL = auto()

    # Double-quoted string literal. The lexeme holds the decoded text.
    STRING = auto()

    # + - * / % ** = == != < > <= >=
    OPERATOR = auto()

    # if else print function call and or not true false
    KEYWORD = auto()

    # ( ) { } ,
    PUNCT = auto()

    # NEWLINE separates statements. EOF is the end-of-input sentinel.
    NEWLINE = auto()
    EOF = auto()


@dataclass(frozen=True)
class Span:
    # Span tracks the exact source location of a token or AST node.
    # All positions are 1-based (first line is 1, first column is 1).
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def merge(self, other: "Span") -> "Span":
        """
        Create a span that covers from the start of this span to the end of another one.

        Because the dataclass is frozen (immutable), we return a new instance instead of mutating.
        """
        if (other.start_line < self.start_line) or (
            other.start_line == self.start_line and other.start_col < self.start_col
        ):
            start_line, start_col = other.start_line, other.start_col
        else:
            start_line, start_col = self.start_line, self.start_col

        if (other.end_line > self.end_line) or (
            other.end_line == self.end_line and other.end_col > self.end_col
        ):
            end_line, end_col = other.end_line, other.end_col
        else:
            end_line, end_col = self.end_line, self.end_col

        return Span(start_line, start_col, end_line, end_col)


@dataclass(frozen=True)
class Token:
    # A token has:
    # - type: what kind of thing it is (identifier, keyword, operator, ...).
    # - lexeme: the text of the token ("if", "temp", "**", "3.14").
    # - span: where it appeared (for errors and tooling).
    type: TokenType
    lexeme: str
    span: Span

    def is_(self, ttype: TokenType, lexeme: str) -> bool:
        """True if this token has the given type and exact lexeme."""
        return self.type == ttype and self.lexeme == lexeme

    def __repr__(self) -> str:
        return (
            f"Token(type={self.type.name}, lexeme={self.lexeme!r}, "
            f"span=({self.span.start_line}:{self.span.start_col}-"
            f"{self.span.end_line}:{self.span.end_col}))"
        )


__all__ = ["TokenType", "Span", "Token"]
