# File: wthr/values.py
# -----------------------------------------------------------------------------
# Runtime values of the wthr language.
#
# The value space is closed:
#   Integer   -> int
#   Rational  -> fractions.Fraction
#   String    -> str
#   Boolean   -> bool
#   Qubit     -> QubitHandle (an id into the QuantumSimulator, never amplitudes)
#   Function  -> Function (parameters, body, captured Environment)
#   Unit      -> the Unit singleton
#
# All of them are immutable; rebinding a variable never changes a value in place.
# -----------------------------------------------------------------------------

from dataclasses import dataclass, field
from fractions import Fraction
from typing import List, Optional

from .environment import Environment
from .numeric import DEFAULT_PRECISION, format_number, is_number
from .wthr_ast import Block


class UnitType:
    """The value of statements that produce nothing (print, assignment, an empty block)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "Unit"

    def __bool__(self):
        return False


Unit = UnitType()


@dataclass(frozen=True)
class QubitHandle:
    # Non-owning reference to one qubit held by the QuantumSimulator.
    qid: int

    def __str__(self) -> str:
        return f"<qubit {self.qid}>"


@dataclass(frozen=True, eq=False)
class Function:
    """A user-defined function closed over the environment it was created in."""

    params: List[str]
    body: Block
    env: Environment = field(repr=False)
    name: Optional[str] = None

    def __str__(self) -> str:
        return f"<function {self.name or 'anonymous'}({', '.join(self.params)})>"


def type_name(value) -> str:
    """Name of the value's kind, as used in error messages."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, Fraction):
        return "rational"
    if isinstance(value, str):
        return "string"
    if isinstance(value, QubitHandle):
        return "qubit"
    if isinstance(value, Function):
        return "function"
    if value is Unit:
        return "unit"
    return type(value).__name__


def format_value(value, precision: int = DEFAULT_PRECISION) -> str:
    """Text written by print for a value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return format_number(value, precision)
    if isinstance(value, str):
        return value
    if value is Unit:
        return "none"
    return str(value)


def values_equal(a, b) -> bool:
    """
    Equality used by == and !=. Numbers compare exactly across Integer and
    Rational; values of different kinds are never equal.
    """
    if is_number(a) and is_number(b):
        return a == b
    if type(a) is not type(b):
        return False
    if isinstance(a, Function):
        return a is b
    return a == b


__all__ = [
    "UnitType",
    "Unit",
    "QubitHandle",
    "Function",
    "type_name",
    "format_value",
    "values_equal",
]
