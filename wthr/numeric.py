# File: wthr/numeric.py
# -----------------------------------------------------------------------------
# The numeric tower: exact arbitrary-precision Integer (int) and Rational
# (fractions.Fraction) arithmetic.
#
# Promotion rules:
#   - Integer op Integer stays Integer, except "/" which always yields an exact
#     Rational in lowest terms.
#   - Integer op Rational promotes the Integer to n/1 first.
#   - Booleans are not numbers, even though bool subclasses int in Python.
#
# Formatting renders Integers and terminating Rationals exactly. Any other
# Rational is approximated to a fixed number of significant digits with sympy
# and marked with a "~<digits>" suffix.
# -----------------------------------------------------------------------------

from fractions import Fraction
from typing import Union

import sympy

from .config import DEFAULT_PRECISION
from .errors import DivisionByZero, WthrTypeError

Number = Union[int, Fraction]


def is_number(value) -> bool:
    return isinstance(value, (int, Fraction)) and not isinstance(value, bool)


def is_integer(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _require_numbers(op: str, a, b) -> None:
    if not (is_number(a) and is_number(b)):
        from .values import type_name
        raise WthrTypeError(
            f"Operator '{op}' expects numbers, got ({type_name(a)}, {type_name(b)})"
        )


def add(a: Number, b: Number) -> Number:
    _require_numbers("+", a, b)
    return a + b


def sub(a: Number, b: Number) -> Number:
    _require_numbers("-", a, b)
    return a - b


def mul(a: Number, b: Number) -> Number:
    _require_numbers("*", a, b)
    return a * b


def div(a: Number, b: Number) -> Fraction:
    """
    Exact division. Always returns a Rational, even for Integer operands.

    Raises:
        DivisionByZero: if b is zero.
    """
    _require_numbers("/", a, b)
    if b == 0:
        raise DivisionByZero("Division by zero")
    return Fraction(a) / Fraction(b)


def mod(a: Number, b: Number) -> Number:
    """
    Truncated remainder: the result has the sign of the dividend,
    a - b * trunc(a / b). Integer operands give an Integer.
    """
    _require_numbers("%", a, b)
    if b == 0:
        raise DivisionByZero("Modulo by zero")
    quotient = Fraction(a) / Fraction(b)
    truncated = int(quotient)  # int() truncates toward zero for Fraction
    result = a - b * truncated
    if is_integer(a) and is_integer(b):
        return int(result)
    return Fraction(result)


def power(base: Number, exponent: Number) -> Number:
    """
    Exact exponentiation with an Integer exponent.

    Raises:
        WthrTypeError: if the exponent is not an Integer (no exact result exists).
        DivisionByZero: for zero raised to a negative power.
    """
    _require_numbers("**", base, exponent)
    if not is_integer(exponent):
        raise WthrTypeError("Operator '**' expects an integer exponent, got rational")
    if exponent < 0:
        if base == 0:
            raise DivisionByZero("Zero raised to a negative power")
        return Fraction(base) ** exponent
    return base ** exponent


def negate(a: Number) -> Number:
    if not is_number(a):
        from .values import type_name
        raise WthrTypeError(f"Unary '-' expects a number, got {type_name(a)}")
    return -a


def compare(a: Number, b: Number, op: str = "<") -> int:
    """
    Three-way exact comparison: -1, 0 or 1. `op` only names the operator in errors.
    """
    _require_numbers(op, a, b)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def _terminating_exponent(denominator: int):
    """
    If the denominator divides a power of ten, return the smallest such
    exponent; otherwise return None.
    """
    twos = fives = 0
    d = denominator
    while d % 2 == 0:
        d //= 2
        twos += 1
    while d % 5 == 0:
        d //= 5
        fives += 1
    if d != 1:
        return None
    return max(twos, fives)


def format_number(value: Number, precision: int = DEFAULT_PRECISION) -> str:
    """
    Render a number as decimal text.

    - Integers (and Rationals with denominator 1) as their exact digits.
    - Rationals whose denominator divides a power of ten as exact decimal digits.
    - Other Rationals as `precision` significant digits followed by "~<precision>".
    """
    if is_integer(value):
        return str(value)

    value = Fraction(value)
    if value.denominator == 1:
        return str(value.numerator)

    k = _terminating_exponent(value.denominator)
    if k is not None:
        sign = "-" if value < 0 else ""
        scaled = abs(value.numerator) * (10 ** k) // value.denominator
        digits = str(scaled).rjust(k + 1, "0")
        whole, frac = digits[:-k], digits[-k:]
        return f"{sign}{whole}.{frac}"

    approx = sympy.Rational(value.numerator, value.denominator).evalf(precision)
    return f"{approx}~{precision}"


__all__ = [
    "Number",
    "DEFAULT_PRECISION",
    "is_number",
    "is_integer",
    "add",
    "sub",
    "mul",
    "div",
    "mod",
    "power",
    "negate",
    "compare",
    "format_number",
]
