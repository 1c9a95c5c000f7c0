# File: wthr/wthr_ast.py
# -----------------------------------------------------------------------------
# Abstract Syntax Tree (AST) node definitions for the wthr language.
# The parser constructs instances of these nodes from the token stream, and
# the interpreter walks them. Nodes are frozen: the tree is never mutated
# after parsing.
# -----------------------------------------------------------------------------

from dataclasses import dataclass, field
from fractions import Fraction
from typing import List, Optional, Union

from .tokens import Span


@dataclass(frozen=True)
class Node:
    # Every AST node carries a source span for diagnostics.
    span: Span


@dataclass(frozen=True)
class Expr(Node):
    # Base class for everything that produces a value.
    pass


@dataclass(frozen=True)
class Stmt(Node):
    # Base class for statements.
    pass


# ------------- Expressions -------------

@dataclass(frozen=True)
class Literal(Expr):
    # int, Fraction, str or bool, already converted from the lexeme.
    value: Union[int, Fraction, str, bool]


@dataclass(frozen=True)
class Identifier(Expr):
    name: str


@dataclass(frozen=True)
class BinaryOp(Expr):
    op: str       # operator lexeme or keyword ("+", "**", "and", ...)
    left: Expr
    right: Expr


@dataclass(frozen=True)
class UnaryOp(Expr):
    op: str       # "-" or "not"
    operand: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    args: List[Expr] = field(default_factory=list)


# ------------- Statements -------------

@dataclass(frozen=True)
class Block(Stmt):
    # An ordered list of statements. Blocks do not open a new scope.
    stmts: List[Stmt] = field(default_factory=list)


@dataclass(frozen=True)
class FunctionLiteral(Expr):
    # function(a, b) { ... }. `name` is set for the `function name(...)` form
    # and only used when printing the resulting value.
    params: List[str]
    body: Block
    name: Optional[str] = None


@dataclass(frozen=True)
class ExprStmt(Stmt):
    expr: Expr


@dataclass(frozen=True)
class Assignment(Stmt):
    target: str
    expr: Expr


@dataclass(frozen=True)
class If(Stmt):
    cond: Expr
    then_block: Block
    # None when there is no else branch; `else if` chains nest an If in a Block.
    else_block: Optional[Block] = None


@dataclass(frozen=True)
class Print(Stmt):
    expr: Expr


@dataclass(frozen=True)
class Program(Node):
    # A program is a list of top-level statements.
    stmts: List[Stmt] = field(default_factory=list)


__all__ = [
    "Node",
    "Expr",
    "Stmt",
    "Literal",
    "Identifier",
    "BinaryOp",
    "UnaryOp",
    "Call",
    "Block",
    "FunctionLiteral",
    "ExprStmt",
    "Assignment",
    "If",
    "Print",
    "Program",
]
