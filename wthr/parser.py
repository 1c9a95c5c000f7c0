# File: wthr/parser.py
# -----------------------------------------------------------------------------
# The parser consumes a token stream (produced by the lexer) and builds an AST.
#
# Design goals:
# - Small, predictable, single-pass recursive-descent parser.
# - Operator-precedence climbing for binary expressions.
# - Clear error messages with precise source spans.
# - Explicit newline handling to keep statement boundaries unambiguous.
#
# Grammar:
#   program     := NEWLINE* [stmt (NEWLINE+ stmt)*] NEWLINE* EOF
#
#   stmt        := "print" "(" expr ")"
#                | "if" expr block ["else" (block | if_stmt)]
#                | "function" IDENT "(" [params] ")" block
#                | "call" postfix
#                | block
#                | IDENT "=" expr
#                | expr
#
#   block       := "{" NEWLINE* [stmt (NEWLINE+ stmt)*] NEWLINE* "}"
#
#   expr        := binary expression, lowest to highest precedence:
#                    or  <  and  <  == != < > <= >=  <  + -  <  * / %
#   unary       := ("-" | "not") unary | power
#   power       := postfix ["**" unary]            (right associative)
#   postfix     := primary ("(" [expr ("," expr)*] ")")*
#   primary     := INT | RATIONAL | STRING | "true" | "false" | IDENT
#                | "(" expr ")"
#                | "function" "(" [params] ")" block
#
# Whitespace/newlines:
# - NEWLINE tokens delimit statements at top level and inside blocks.
# - NEWLINE tokens are ignored inside parentheses, so argument lists and
#   parenthesized expressions may span several lines.
# - "else" may start the line after the closing brace of the then-block.
#
# Error handling:
# - On the first syntax error, a ParseError is raised with a human-readable
#   message naming what was expected and the offending token's span.
# -----------------------------------------------------------------------------

from fractions import Fraction
from typing import Iterable, List, Optional

from .errors import ParseError
from .lexer import tokenize
from .tokens import TokenType, Token
from .wthr_ast import (
    Assignment,
    BinaryOp,
    Block,
    Call,
    Expr,
    ExprStmt,
    FunctionLiteral,
    Identifier,
    If,
    Literal,
    Print,
    Program,
    Stmt,
    UnaryOp,
)


# Binding power of each binary operator. Higher binds tighter.
# "**" is not listed: it is parsed in _parse_power so that it binds tighter
# than unary minus on its left and is right associative.
_BINARY_PRECEDENCE = {
    "or": 1,
    "and": 2,
    "==": 3,
    "!=": 3,
    "<": 3,
    ">": 3,
    "<=": 3,
    ">=": 3,
    "+": 4,
    "-": 4,
    "*": 5,
    "/": 5,
    "%": 5,
}


class Parser:
    """
    A hand-written recursive-descent parser with single-token lookahead
    (two tokens when telling an assignment from an expression statement).

    Cursor mechanics:
    - self.tokens: the full token list from the lexer (must end with EOF)
    - self.i: index of the current token; _at() peeks without consuming,
      _advance() consumes and moves the cursor forward.
    - self._depth: how many parentheses we are inside; newlines are
      insignificant while it is non-zero.
    """

    def __init__(self, tokens: Iterable[Token]):
        self.tokens = list(tokens)
        self.i = 0
        self._depth = 0

    # ------------- Core cursor utilities -------------

    def _at(self) -> Token:
        """
        Return the current token without consuming it (peek).
        Inside parentheses, newlines are skipped first.
        """
        if self._depth > 0:
            self._skip_newlines()
        return self.tokens[self.i]

    def _peek(self, offset: int = 1) -> Token:
        """Look past the current token without consuming anything."""
        idx = min(self.i + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def _advance(self) -> Token:
        """
        Consume and return the current token. At EOF, stays at EOF.
        """
        tok = self._at()
        if tok.type != TokenType.EOF:
            self.i += 1
        return tok

    def _check(self, ttype: TokenType, lexeme: Optional[str] = None) -> bool:
        tok = self._at()
        if tok.type != ttype:
            return False
        return lexeme is None or tok.lexeme == lexeme

    def _match(self, ttype: TokenType, lexeme: Optional[str] = None) -> Optional[Token]:
        """
        If the current token matches, consume and return it.
        Otherwise, return None and do not advance.
        """
        if self._check(ttype, lexeme):
            return self._advance()
        return None

    def _expect(self, ttype: TokenType, lexeme: Optional[str], what: str) -> Token:
        """
        Require the current token to match, consuming and returning it.
        If not, raise a ParseError naming what was expected and what was found.
        """
        tok = self._at()
        if not self._check(ttype, lexeme):
            raise ParseError(f"Expected {what}, found {_describe(tok)}", tok.span)
        return self._advance()

    def _skip_newlines(self) -> None:
        """Consume zero or more NEWLINE tokens."""
        while self.tokens[self.i].type == TokenType.NEWLINE:
            self.i += 1

    def _open_paren(self, what: str) -> Token:
        tok = self._expect(TokenType.PUNCT, "(", what)
        self._depth += 1
        return tok

    def _close_paren(self, what: str) -> Token:
        tok = self._expect(TokenType.PUNCT, ")", what)
        self._depth -= 1
        return tok

    # ------------- High-level parse entry points -------------

    def parse_program(self) -> Program:
        """
        program := NEWLINE* [stmt (NEWLINE+ stmt)*] NEWLINE* EOF
        """
        start_span = self._at().span
        stmts = self._parse_stmt_list(terminator=None)
        end_span = self._at().span  # EOF
        return Program(span=start_span.merge(end_span), stmts=stmts)

    def _parse_stmt_list(self, terminator: Optional[str]) -> List[Stmt]:
        """
        Parse newline-separated statements until EOF (terminator None) or
        until the given closing punctuation, which is left unconsumed.
        """
        stmts: List[Stmt] = []
        self._skip_newlines()
        while True:
            tok = self._at()
            if terminator is None and tok.type == TokenType.EOF:
                break
            if terminator is not None and tok.is_(TokenType.PUNCT, terminator):
                break
            if tok.type == TokenType.EOF:
                raise ParseError(f"Expected '{terminator}' before end of input", tok.span)

            stmts.append(self._parse_stmt())

            tok = self._at()
            if tok.type == TokenType.EOF:
                continue
            if terminator is not None and tok.is_(TokenType.PUNCT, terminator):
                continue
            # Require at least one NEWLINE after a statement.
            if tok.type != TokenType.NEWLINE:
                raise ParseError(f"Expected newline after statement, found {_describe(tok)}", tok.span)
            self._skip_newlines()
        return stmts

    # ------------- Statements -------------

    def _parse_stmt(self) -> Stmt:
        """
        Dispatch on the first token of the statement.
        """
        tok = self._at()

        if tok.type == TokenType.KEYWORD:
            if tok.lexeme == "print":
                return self._parse_print()
            if tok.lexeme == "if":
                return self._parse_if()
            if tok.lexeme == "function" and self._peek().type == TokenType.IDENT:
                return self._parse_function_def()
            if tok.lexeme == "call":
                return self._parse_call_stmt()

        if tok.is_(TokenType.PUNCT, "{"):
            return self._parse_block()

        if tok.type == TokenType.IDENT and self._peek().is_(TokenType.OPERATOR, "="):
            return self._parse_assignment()

        expr = self._parse_expression()
        return ExprStmt(span=expr.span, expr=expr)

    def _parse_print(self) -> Print:
        kw = self._expect(TokenType.KEYWORD, "print", "'print'")
        self._open_paren("'(' after 'print'")
        expr = self._parse_expression()
        rpar = self._close_paren("')' to close print(...)")
        return Print(span=kw.span.merge(rpar.span), expr=expr)

    def _parse_if(self) -> If:
        """
        if_stmt := "if" expr block ["else" (block | if_stmt)]
        """
        kw = self._expect(TokenType.KEYWORD, "if", "'if'")
        cond = self._parse_expression()
        then_block = self._parse_block()
        span = kw.span.merge(then_block.span)

        # Allow "else" on the following line: look past newlines without consuming them.
        j = self.i
        while self.tokens[j].type == TokenType.NEWLINE:
            j += 1
        if not self.tokens[j].is_(TokenType.KEYWORD, "else"):
            return If(span=span, cond=cond, then_block=then_block, else_block=None)

        self.i = j
        self._advance()  # 'else'
        if self._check(TokenType.KEYWORD, "if"):
            nested = self._parse_if()
            else_block = Block(span=nested.span, stmts=[nested])
        else:
            else_block = self._parse_block()
        return If(span=span.merge(else_block.span), cond=cond, then_block=then_block, else_block=else_block)

    def _parse_block(self) -> Block:
        """
        block := "{" NEWLINE* [stmt (NEWLINE+ stmt)*] NEWLINE* "}"
        """
        # Braces reset paren depth: newlines are significant again inside a block
        # even when the block itself sits inside parentheses.
        saved_depth = self._depth
        self._skip_newlines()
        lbrace = self._expect(TokenType.PUNCT, "{", "'{' to open a block")
        self._depth = 0
        stmts = self._parse_stmt_list(terminator="}")
        rbrace = self._expect(TokenType.PUNCT, "}", "'}' to close a block")
        self._depth = saved_depth
        return Block(span=lbrace.span.merge(rbrace.span), stmts=stmts)

    def _parse_function_def(self) -> Assignment:
        """
        function_def := "function" IDENT "(" [params] ")" block

        Desugars to an assignment of a named function literal, so the name is
        bound in the scope the function captures and recursion can see it.
        """
        kw = self._expect(TokenType.KEYWORD, "function", "'function'")
        name = self._expect(TokenType.IDENT, None, "function name")
        params = self._parse_params()
        body = self._parse_block()
        span = kw.span.merge(body.span)
        literal = FunctionLiteral(span=span, params=params, body=body, name=name.lexeme)
        return Assignment(span=span, target=name.lexeme, expr=literal)

    def _parse_params(self) -> List[str]:
        self._open_paren("'(' before parameter list")
        params: List[str] = []
        if not self._check(TokenType.PUNCT, ")"):
            while True:
                ident = self._expect(TokenType.IDENT, None, "parameter name")
                if ident.lexeme in params:
                    raise ParseError(f"Duplicate parameter {ident.lexeme!r}", ident.span)
                params.append(ident.lexeme)
                if not self._match(TokenType.PUNCT, ","):
                    break
        self._close_paren("')' after parameter list")
        return params

    def _parse_call_stmt(self) -> ExprStmt:
        kw = self._expect(TokenType.KEYWORD, "call", "'call'")
        expr = self._parse_postfix()
        if not isinstance(expr, Call):
            raise ParseError("Expected a function call after 'call'", expr.span)
        return ExprStmt(span=kw.span.merge(expr.span), expr=expr)

    def _parse_assignment(self) -> Assignment:
        name = self._expect(TokenType.IDENT, None, "identifier")
        self._expect(TokenType.OPERATOR, "=", "'='")
        expr = self._parse_expression()
        return Assignment(span=name.span.merge(expr.span), target=name.lexeme, expr=expr)

    # ------------- Expressions -------------

    def _parse_expression(self, min_prec: int = 1) -> Expr:
        """
        Precedence climbing: parse a unary operand, then keep folding binary
        operators whose precedence is at least `min_prec`. All listed
        operators are left associative.
        """
        left = self._parse_unary()
        while True:
            tok = self._at()
            prec = _binary_precedence(tok)
            if prec is None or prec < min_prec:
                return left
            self._advance()
            right = self._parse_expression(prec + 1)
            left = BinaryOp(span=left.span.merge(right.span), op=tok.lexeme, left=left, right=right)

    def _parse_unary(self) -> Expr:
        tok = self._at()
        if tok.is_(TokenType.OPERATOR, "-") or tok.is_(TokenType.KEYWORD, "not"):
            self._advance()
            operand = self._parse_unary()
            return UnaryOp(span=tok.span.merge(operand.span), op=tok.lexeme, operand=operand)
        return self._parse_power()

    def _parse_power(self) -> Expr:
        base = self._parse_postfix()
        if self._match(TokenType.OPERATOR, "**"):
            # The exponent is a unary expression, which makes ** right associative
            # and lets 2 ** -1 parse.
            exponent = self._parse_unary()
            return BinaryOp(span=base.span.merge(exponent.span), op="**", left=base, right=exponent)
        return base

    def _parse_postfix(self) -> Expr:
        expr = self._parse_primary()
        while self._check(TokenType.PUNCT, "("):
            self._open_paren("'('")
            args: List[Expr] = []
            if not self._check(TokenType.PUNCT, ")"):
                while True:
                    args.append(self._parse_expression())
                    if not self._match(TokenType.PUNCT, ","):
                        break
            rpar = self._close_paren("')' or ',' in argument list")
            expr = Call(span=expr.span.merge(rpar.span), callee=expr, args=args)
        return expr

    def _parse_primary(self) -> Expr:
        tok = self._at()
        t = tok.type

        if t == TokenType.INT:
            self._advance()
            return Literal(span=tok.span, value=int(tok.lexeme))
        if t == TokenType.RATIONAL:
            self._advance()
            # Fraction parses the decimal text exactly: "0.1" is 1/10, not a binary float.
            return Literal(span=tok.span, value=Fraction(tok.lexeme))
        if t == TokenType.STRING:
            self._advance()
            return Literal(span=tok.span, value=tok.lexeme)
        if t == TokenType.IDENT:
            self._advance()
            return Identifier(span=tok.span, name=tok.lexeme)
        if tok.is_(TokenType.KEYWORD, "true") or tok.is_(TokenType.KEYWORD, "false"):
            self._advance()
            return Literal(span=tok.span, value=(tok.lexeme == "true"))
        if tok.is_(TokenType.KEYWORD, "function"):
            self._advance()
            params = self._parse_params()
            body = self._parse_block()
            return FunctionLiteral(span=tok.span.merge(body.span), params=params, body=body)
        if tok.is_(TokenType.PUNCT, "("):
            self._open_paren("'('")
            expr = self._parse_expression()
            self._close_paren("')' to close parenthesized expression")
            return expr

        if t == TokenType.EOF:
            raise ParseError("Expected expression, found end of input", tok.span)
        raise ParseError(f"Expected expression, found {_describe(tok)}", tok.span)


def _binary_precedence(tok: Token) -> Optional[int]:
    if tok.type == TokenType.OPERATOR or (tok.type == TokenType.KEYWORD and tok.lexeme in ("and", "or")):
        return _BINARY_PRECEDENCE.get(tok.lexeme)
    return None


def _describe(tok: Token) -> str:
    if tok.type == TokenType.EOF:
        return "end of input"
    if tok.type == TokenType.NEWLINE:
        return "newline"
    if tok.type == TokenType.STRING:
        return f"string {tok.lexeme!r}"
    return f"{tok.lexeme!r}"


# ------------- Public convenience APIs -------------

def parse_tokens(tokens: Iterable[Token]) -> Program:
    """
    Parse a pre-tokenized input into an AST Program.
    May raise ParseError on invalid syntax, including input nested deeper
    than the Python stack allows.
    """
    parser = Parser(tokens)
    try:
        return parser.parse_program()
    except RecursionError:
        tok = parser.tokens[min(parser.i, len(parser.tokens) - 1)]
        raise ParseError("Expression nested too deeply", tok.span) from None


def parse(source: str) -> Program:
    """
    Convenience function: tokenize the given source and parse it into an AST Program.
    May raise LexError or ParseError.
    """
    return parse_tokens(tokenize(source))


__all__ = ["ParseError", "Parser", "parse_tokens", "parse"]
