# File: wthr/errors.py
# -----------------------------------------------------------------------------
# Error taxonomy for the wthr language.
#
# Syntax errors (LexError, ParseError) are raised before anything executes.
# Runtime errors derive from WthrRuntimeError and abort the statement that
# raised them; output and bindings produced before the failure stay intact.
# -----------------------------------------------------------------------------

from typing import Optional

from .tokens import Span


class WthrError(Exception):
    """Base class for all wthr errors. Carries a message and an optional source span."""

    def __init__(self, message: str, span: Optional[Span] = None):
        super().__init__(message)
        self.message = message
        self.span = span

    def __str__(self):
        if self.span is None:
            return self.message
        return f"{self.message} (at {self.span.start_line}:{self.span.start_col})"


class LexError(WthrError):
    """Raised for a malformed token: an unknown character or an unterminated string."""


class ParseError(WthrError):
    """Raised when the token stream violates the grammar."""


class WthrRuntimeError(WthrError):
    """Base class for errors raised while executing a program."""


class UndefinedVariable(WthrRuntimeError):
    """Raised when a name is not bound in any enclosing scope nor in the constant table."""


class UndefinedFunction(WthrRuntimeError):
    """Raised when a called name is neither a bound function nor a built-in."""


class WthrTypeError(WthrRuntimeError):
    """Raised when a value is used with an incompatible operation."""


class ArgumentError(WthrRuntimeError):
    """Raised when a function is called with the wrong number of arguments or a bad argument value."""


class DivisionByZero(WthrRuntimeError):
    """Raised on division or modulo by zero."""


class InvalidQubitHandle(WthrRuntimeError):
    """Raised when a gate or measurement refers to a discarded or unknown qubit."""


__all__ = [
    "WthrError",
    "LexError",
    "ParseError",
    "WthrRuntimeError",
    "UndefinedVariable",
    "UndefinedFunction",
    "WthrTypeError",
    "ArgumentError",
    "DivisionByZero",
    "InvalidQubitHandle",
]
