# File: wthr/lexer.py
# -----------------------------------------------------------------------------
# The lexer (tokenizer) converts raw source text into tokens.
# Each token has:
#   - a type (from TokenType, e.g., IDENT, INT, OPERATOR),
#   - a lexeme (the text of the token),
#   - a span (start/end line/column for error reporting).
#
# The language uses:
#   - Spaces, tabs and comments (# ... end-of-line) are ignored, except that
#     newlines produce NEWLINE tokens to separate statements.
#   - Identifiers are [A-Za-z_][A-Za-z0-9_]*. Reserved words become KEYWORD.
#   - Numbers: INT (digits) and RATIONAL (digits '.' digits, or '.' digits).
#     The lexeme is kept verbatim so the parser can build an exact value.
#   - Strings: "..." on a single line, with \" \\ \n \t escapes.
#   - Operators: + - * / % ** = == != < > <= >=
#   - Punctuation: ( ) { } ,
#   - Anything else raises LexError at the offending position.
#
# End-of-input: we always finish with a final EOF token.
# -----------------------------------------------------------------------------

import string
from typing import Iterator, List

from .errors import LexError
from .tokens import TokenType, Token, Span


KEYWORDS = frozenset({
    "if",
    "else",
    "print",
    "function",
    "call",
    "and",
    "or",
    "not",
    "true",
    "false",
})

# Two-character operators are tried before single-character ones so that
# "**" is never read as two "*" and "<=" never as "<" followed by "=".
_TWO_CHAR_OPERATORS = ("**", "==", "!=", "<=", ">=")
_ONE_CHAR_OPERATORS = "+-*/%=<>"
_PUNCTUATION = "(){},"

# Only ASCII letters and digits count; str.isdigit() would also accept "²".
_DIGITS = frozenset(string.digits)
_IDENT_START = frozenset(string.ascii_letters + "_")
_IDENT_CHARS = _IDENT_START | _DIGITS

_ESCAPES = {'"': '"', "\\": "\\", "n": "\n", "t": "\t"}


def _single_char_span(line: int, col: int) -> Span:
    """
    Convenience helper: create a Span that covers a single character
    at the given 1-based line/column.
    """
    return Span(line, col, line, col)


def iter_tokens(source: str) -> Iterator[Token]:
    """
    Lazily scan the source string, yielding tokens as they are recognized.

    The generator can only be restarted by calling iter_tokens again; it keeps
    no state outside its own cursor.

    Notes on newline handling:
    - Unix '\\n', Windows '\\r\\n' and a bare '\\r' all produce a single
      NEWLINE token whose lexeme is "\\n".

    Raises:
        LexError: on an unrecognized character or an unterminated string literal.
    """
    # Current 1-based line/column for diagnostics.
    line = 1
    col = 1

    i = 0
    n = len(source)

    while i < n:
        ch = source[i]

        # 1) Skip spaces and tabs (but not newlines, they are significant).
        if ch == ' ' or ch == '\t':
            i += 1
            col += 1
            continue

        # 2) Line comments start with '#' and run to the end of the line.
        if ch == '#':
            j = i + 1
            while j < n and source[j] not in '\r\n':
                j += 1
            col += (j - i)
            i = j
            continue

        # 3) Newlines: '\n', '\r\n' or a bare '\r'.
        if ch == '\n' or ch == '\r':
            yield Token(TokenType.NEWLINE, "\n", _single_char_span(line, col))
            i += 1
            if ch == '\r' and i < n and source[i] == '\n':
                i += 1
            line += 1
            col = 1
            continue

        # 4) Punctuation.
        if ch in _PUNCTUATION:
            yield Token(TokenType.PUNCT, ch, _single_char_span(line, col))
            i += 1
            col += 1
            continue

        # 5) Operators, longest match first.
        pair = source[i:i + 2]
        if pair in _TWO_CHAR_OPERATORS:
            yield Token(TokenType.OPERATOR, pair, Span(line, col, line, col + 1))
            i += 2
            col += 2
            continue
        if ch in _ONE_CHAR_OPERATORS:
            yield Token(TokenType.OPERATOR, ch, _single_char_span(line, col))
            i += 1
            col += 1
            continue

        # 6) Identifiers and keywords: [A-Za-z_][A-Za-z0-9_]*
        if ch in _IDENT_START:
            j = i
            while j < n and source[j] in _IDENT_CHARS:
                j += 1
            lexeme = source[i:j]
            ttype = TokenType.KEYWORD if lexeme in KEYWORDS else TokenType.IDENT
            width = j - i
            yield Token(ttype, lexeme, Span(line, col, line, col + width - 1))
            i = j
            col += width
            continue

        # 7) Numbers: INT or RATIONAL
        #    - INT: digits+
        #    - RATIONAL: digits+ '.' digits+  |  '.' digits+
        if ch in _DIGITS or (ch == '.' and i + 1 < n and source[i + 1] in _DIGITS):
            j = i
            while j < n and source[j] in _DIGITS:
                j += 1

            ttype = TokenType.INT
            if j < n and source[j] == '.' and (j + 1) < n and source[j + 1] in _DIGITS:
                ttype = TokenType.RATIONAL
                j += 1  # consume '.'
                while j < n and source[j] in _DIGITS:
                    j += 1

            lexeme = source[i:j]
            width = j - i
            yield Token(ttype, lexeme, Span(line, col, line, col + width - 1))
            i = j
            col += width
            continue

        # 8) Strings: "..." on one line.
        if ch == '"':
            start_col = col
            j = i + 1
            chars: List[str] = []
            while True:
                if j >= n or source[j] in '\r\n':
                    raise LexError("Unterminated string literal", _single_char_span(line, start_col))
                c = source[j]
                if c == '"':
                    j += 1
                    break
                if c == '\\':
                    if j + 1 >= n or source[j + 1] not in _ESCAPES:
                        raise LexError(
                            "Invalid escape sequence in string literal",
                            _single_char_span(line, start_col + (j - i)),
                        )
                    chars.append(_ESCAPES[source[j + 1]])
                    j += 2
                    continue
                chars.append(c)
                j += 1
            width = j - i
            yield Token(TokenType.STRING, "".join(chars), Span(line, start_col, line, start_col + width - 1))
            i = j
            col += width
            continue

        # 9) Anything else is a lexical error.
        raise LexError(f"Unexpected character {ch!r}", _single_char_span(line, col))

    # End-of-input sentinel so the parser knows it's done.
    yield Token(TokenType.EOF, "", Span(line, col, line, col))


def tokenize(source: str) -> List[Token]:
    """
    Convert the entire source string into a flat list of tokens.

    Returns:
        List[Token]: The tokens representing the source, ending with an EOF token.
    """
    return list(iter_tokens(source))


__all__ = ["KEYWORDS", "iter_tokens", "tokenize"]
