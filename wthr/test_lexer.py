import pytest

from wthr.errors import LexError
from wthr.lexer import iter_tokens, tokenize
from wthr.tokens import TokenType


def _kinds(source):
    return [(t.type, t.lexeme) for t in tokenize(source)]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("x", [(TokenType.IDENT, "x")]),
        ("_pi_", [(TokenType.IDENT, "_pi_")]),
        ("42", [(TokenType.INT, "42")]),
        ("3.14", [(TokenType.RATIONAL, "3.14")]),
        (".5", [(TokenType.RATIONAL, ".5")]),
        ('"hi"', [(TokenType.STRING, "hi")]),
        ("if else print", [(TokenType.KEYWORD, "if"), (TokenType.KEYWORD, "else"), (TokenType.KEYWORD, "print")]),
        ("If", [(TokenType.IDENT, "If")]),
        ("**", [(TokenType.OPERATOR, "**")]),
        ("* *", [(TokenType.OPERATOR, "*"), (TokenType.OPERATOR, "*")]),
        ("<= >= == != = < >", [
            (TokenType.OPERATOR, "<="), (TokenType.OPERATOR, ">="), (TokenType.OPERATOR, "=="),
            (TokenType.OPERATOR, "!="), (TokenType.OPERATOR, "="), (TokenType.OPERATOR, "<"),
            (TokenType.OPERATOR, ">"),
        ]),
        ("f(a, b)", [
            (TokenType.IDENT, "f"), (TokenType.PUNCT, "("), (TokenType.IDENT, "a"),
            (TokenType.PUNCT, ","), (TokenType.IDENT, "b"), (TokenType.PUNCT, ")"),
        ]),
        ("x # comment ( \" unbalanced", [(TokenType.IDENT, "x")]),
    ],
)
def test_lexer_basic(source, expected):
    assert _kinds(source) == expected + [(TokenType.EOF, "")]


def test_newline_variants_collapse_to_one_token():
    kinds = [t.type for t in tokenize("a\nb\r\nc\rd")]
    assert kinds.count(TokenType.NEWLINE) == 3
    assert kinds[-1] == TokenType.EOF


def test_string_escapes():
    (tok, _eof) = tokenize(r'"say \"hi\"\n\t\\"')
    assert tok.type == TokenType.STRING
    assert tok.lexeme == 'say "hi"\n\t\\'


def test_spans_track_line_and_column():
    toks = tokenize("x = 1\n  yy")
    x, eq, one, nl, yy, eof = toks
    assert (x.span.start_line, x.span.start_col) == (1, 1)
    assert (eq.span.start_line, eq.span.start_col) == (1, 3)
    assert (one.span.start_line, one.span.start_col) == (1, 5)
    assert nl.type == TokenType.NEWLINE
    assert (yy.span.start_line, yy.span.start_col, yy.span.end_col) == (2, 3, 4)
    assert eof.type == TokenType.EOF


def test_iter_tokens_is_lazy():
    gen = iter_tokens("a $")
    first = next(gen)
    assert first.lexeme == "a"
    with pytest.raises(LexError):
        next(gen)


@pytest.mark.parametrize(
    "source,line,col",
    [
        ("x = $", 1, 5),
        ("x = 2\u00b2", 1, 6),
        ("\u00e9t\u00e9 = 1", 1, 1),
        ('"never closed', 1, 1),
        ('x\n"broken\n"', 2, 1),
        ('"bad \\q escape"', 1, 6),
    ],
)
def test_lex_errors_carry_position(source, line, col):
    with pytest.raises(LexError) as excinfo:
        tokenize(source)
    err = excinfo.value
    assert (err.span.start_line, err.span.start_col) == (line, col)
    assert f"(at {line}:{col})" in str(err)


def test_unterminated_string_message():
    with pytest.raises(LexError, match="Unterminated string literal"):
        tokenize('print("abc')
