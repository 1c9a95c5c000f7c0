# File: wthr/interpreter.py
# -----------------------------------------------------------------------------
# Tree-walking evaluator for wthr programs.
#
# - Statements and expressions are executed by a synchronous depth-first walk
#   with the current Environment passed down explicitly.
# - Assignment always binds in the innermost scope (it never updates an outer
#   binding in place), so a function body can shadow but never clobber a
#   variable of its caller or of its defining scope.
# - A call creates a child of the function's *captured* environment, not of
#   the caller's. Function names are bound before the body runs, which makes
#   recursion work.
# - Names resolve through the scope chain, then the constant table. Called
#   names resolve through the scope chain, then the built-in table.
# - print is the only externally visible effect.
# -----------------------------------------------------------------------------

import logging
import sys
from contextlib import contextmanager
from typing import List, Optional, TextIO

from . import numeric
from .builtins import BUILTINS, Builtin
from .config import get_max_qubits, get_precision, get_seed
from .constants import CONSTANTS
from .environment import Environment
from .errors import (
    ArgumentError,
    UndefinedFunction,
    UndefinedVariable,
    WthrError,
    WthrRuntimeError,
    WthrTypeError,
)
from .parser import parse
from .quantum import QuantumSimulator
from .values import Function, Unit, format_value, type_name, values_equal
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
    Node,
    Print,
    Program,
    Stmt,
    UnaryOp,
)

logger = logging.getLogger(__name__)

_ARITHMETIC = {
    "+": numeric.add,
    "-": numeric.sub,
    "*": numeric.mul,
    "/": numeric.div,
    "%": numeric.mod,
    "**": numeric.power,
}

_ORDERING = {
    "<": lambda c: c < 0,
    ">": lambda c: c > 0,
    "<=": lambda c: c <= 0,
    ">=": lambda c: c >= 0,
}


class Interpreter:
    """
    Executes wthr programs against a persistent global scope.

    Args:
        out: Stream print writes to. None means sys.stdout at the time of printing.
        seed: Seed for measurement randomness (default: WTHR_SEED, else unseeded).
        precision: Significant digits for non-terminating rationals (default: WTHR_PRECISION).
        max_qubits: Register size limit of the simulator (default: WTHR_MAX_QUBITS).
    """

    def __init__(
        self,
        out: Optional[TextIO] = None,
        seed: Optional[int] = None,
        precision: Optional[int] = None,
        max_qubits: Optional[int] = None,
    ):
        self.out = out
        self.precision = precision if precision is not None else get_precision()
        self.simulator = QuantumSimulator(
            seed=seed if seed is not None else get_seed(),
            max_qubits=max_qubits if max_qubits is not None else get_max_qubits(),
        )
        self.globals = Environment()
        self.builtins = BUILTINS
        self.constants = CONSTANTS

    # ------------- Entry points -------------

    def run(self, source: str):
        """
        Lex, parse and execute `source` in the global scope.

        Returns:
            The value of the last top-level statement (Unit if there is none).

        Raises:
            WthrError: the first lexical, syntax or runtime error. Output already
            printed and bindings already made are kept.
        """
        program = parse(source)
        return self.execute(program)

    def execute(self, program: Program):
        result = Unit
        try:
            for stmt in program.stmts:
                result = self.exec_stmt(stmt, self.globals)
        except RecursionError:
            raise WthrRuntimeError("maximum recursion depth exceeded") from None
        return result

    # ------------- Statements -------------

    def exec_stmt(self, stmt: Stmt, env: Environment):
        """Execute one statement and return its value (Unit for most statements)."""
        if isinstance(stmt, ExprStmt):
            return self.eval_expr(stmt.expr, env)
        if isinstance(stmt, Assignment):
            value = self.eval_expr(stmt.expr, env)
            env.define(stmt.target, value)
            return Unit
        if isinstance(stmt, Print):
            value = self.eval_expr(stmt.expr, env)
            stream = self.out if self.out is not None else sys.stdout
            stream.write(format_value(value, self.precision) + "\n")
            return Unit
        if isinstance(stmt, If):
            cond = self.eval_expr(stmt.cond, env)
            if not isinstance(cond, bool):
                raise WthrTypeError(f"if condition must be a boolean, got {type_name(cond)}", stmt.cond.span)
            if cond:
                return self.exec_block(stmt.then_block, env)
            if stmt.else_block is not None:
                return self.exec_block(stmt.else_block, env)
            return Unit
        if isinstance(stmt, Block):
            return self.exec_block(stmt, env)
        raise WthrRuntimeError(f"Unknown statement type: {type(stmt).__name__}", stmt.span)

    def exec_block(self, block: Block, env: Environment):
        """Run the statements of a block in `env`; the last one's value is the block's value."""
        result = Unit
        for stmt in block.stmts:
            result = self.exec_stmt(stmt, env)
        return result

    # ------------- Expressions -------------

    def eval_expr(self, expr: Expr, env: Environment):
        if isinstance(expr, Literal):
            return expr.value
        if isinstance(expr, Identifier):
            return self._lookup(expr, env)
        if isinstance(expr, BinaryOp):
            return self._eval_binary(expr, env)
        if isinstance(expr, UnaryOp):
            return self._eval_unary(expr, env)
        if isinstance(expr, Call):
            return self._eval_call(expr, env)
        if isinstance(expr, FunctionLiteral):
            return Function(params=list(expr.params), body=expr.body, env=env, name=expr.name)
        raise WthrRuntimeError(f"Unknown expression type: {type(expr).__name__}", expr.span)

    def _lookup(self, expr: Identifier, env: Environment):
        scope = env.find(expr.name)
        if scope is not None:
            return scope.vars[expr.name]
        if expr.name in self.constants:
            return self.constants[expr.name]
        raise UndefinedVariable(f"Undefined variable '{expr.name}'", expr.span)

    def _eval_binary(self, expr: BinaryOp, env: Environment):
        op = expr.op

        # Short-circuit boolean operators evaluate the right side only when needed.
        if op in ("and", "or"):
            left = self._require_bool(op, self.eval_expr(expr.left, env), expr.left)
            if (op == "and" and not left) or (op == "or" and left):
                return left
            return self._require_bool(op, self.eval_expr(expr.right, env), expr.right)

        left = self.eval_expr(expr.left, env)
        right = self.eval_expr(expr.right, env)

        with _span_of(expr):
            if op == "==":
                return values_equal(left, right)
            if op == "!=":
                return not values_equal(left, right)
            if op in _ORDERING:
                return _ORDERING[op](numeric.compare(left, right, op))
            if op == "+" and isinstance(left, str) and isinstance(right, str):
                return left + right
            if op in _ARITHMETIC:
                return _ARITHMETIC[op](left, right)
        raise WthrRuntimeError(f"Unknown operator {op!r}", expr.span)

    def _eval_unary(self, expr: UnaryOp, env: Environment):
        operand = self.eval_expr(expr.operand, env)
        if expr.op == "not":
            return not self._require_bool("not", operand, expr.operand)
        with _span_of(expr):
            return numeric.negate(operand)

    def _require_bool(self, op: str, value, node: Node) -> bool:
        if not isinstance(value, bool):
            raise WthrTypeError(f"Operator '{op}' expects booleans, got {type_name(value)}", node.span)
        return value

    # ------------- Calls -------------

    def _eval_call(self, expr: Call, env: Environment):
        callee = self._resolve_callee(expr.callee, env)
        args = [self.eval_expr(arg, env) for arg in expr.args]

        with _span_of(expr):
            if isinstance(callee, Builtin):
                return callee(self, args)
            return self.call_function(callee, args)

    def _resolve_callee(self, callee: Expr, env: Environment):
        if isinstance(callee, Identifier):
            scope = env.find(callee.name)
            if scope is not None:
                value = scope.vars[callee.name]
            elif callee.name in self.builtins:
                return self.builtins[callee.name]
            else:
                raise UndefinedFunction(f"Undefined function '{callee.name}'", callee.span)
        else:
            value = self.eval_expr(callee, env)

        if not isinstance(value, Function):
            raise WthrTypeError(f"{type_name(value)} value is not callable", callee.span)
        return value

    def call_function(self, fn: Function, args: List):
        """
        Call a user-defined function: bind the arguments in a fresh child of the
        captured environment and run the body there.
        """
        if len(args) != len(fn.params):
            raise ArgumentError(
                f"{fn.name or 'function'}() takes {len(fn.params)} argument(s), got {len(args)} "
                f"({', '.join(type_name(a) for a in args)})"
            )
        scope = fn.env.child()
        for name, value in zip(fn.params, args):
            scope.define(name, value)
        logger.debug("call %s depth=%d", fn, scope.depth())
        return self.exec_block(fn.body, scope)


@contextmanager
def _span_of(node: Node):
    """
    Stamp the node's span onto runtime errors raised without one
    (from the numeric tower, built-ins or the simulator).
    """
    try:
        yield
    except WthrError as err:
        if err.span is None:
            err.span = node.span
        raise


# ------------- Public convenience APIs -------------

def run_source(source: str, **kwargs):
    """
    Convenience function: run a whole program in a fresh Interpreter.
    Keyword arguments are passed to Interpreter.
    """
    return Interpreter(**kwargs).run(source)


__all__ = ["Interpreter", "run_source"]
