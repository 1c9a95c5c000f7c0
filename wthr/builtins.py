# File: wthr/builtins.py
# -----------------------------------------------------------------------------
# Built-in function table.
#
# Every built-in has a fixed signature of type tags, checked before the
# native implementation runs:
#   "number"  Integer or Rational
#   "integer" Integer only
#   "qubit"   QubitHandle
#   "any"     any value
# Trailing parameters may be optional. A wrong argument count raises
# ArgumentError; a wrong argument type raises WthrTypeError. Both name the
# built-in and the received types.
#
# Implementations take the running interpreter first (for its simulator and
# print precision), then the checked arguments.
# -----------------------------------------------------------------------------

from dataclasses import dataclass
from fractions import Fraction
from types import MappingProxyType
from typing import Callable, Sequence, Tuple

from . import numeric
from .constants import CONSTANTS
from .errors import ArgumentError, WthrTypeError
from .values import QubitHandle, Unit, format_value, type_name


_TYPE_CHECKS = {
    "number": numeric.is_number,
    "integer": numeric.is_integer,
    "qubit": lambda v: isinstance(v, QubitHandle),
    "any": lambda v: True,
}


@dataclass(frozen=True)
class Builtin:
    name: str
    impl: Callable
    signature: Tuple[str, ...]
    optional: int = 0  # how many trailing parameters may be omitted

    @property
    def min_args(self) -> int:
        return len(self.signature) - self.optional

    @property
    def max_args(self) -> int:
        return len(self.signature)

    def describe(self) -> str:
        required = self.signature[:self.min_args]
        extra = [f"[{tag}]" for tag in self.signature[self.min_args:]]
        return f"{self.name}({', '.join(list(required) + extra)})"

    def check(self, args: Sequence) -> None:
        """
        Raises:
            ArgumentError: on a wrong argument count.
            WthrTypeError: when an argument does not match its type tag.
        """
        received = ", ".join(type_name(a) for a in args)
        if not (self.min_args <= len(args) <= self.max_args):
            if self.min_args == self.max_args:
                expected = f"{self.max_args}"
            else:
                expected = f"{self.min_args} to {self.max_args}"
            raise ArgumentError(
                f"{self.name}() takes {expected} argument(s), got {len(args)} ({received})"
            )
        for tag, arg in zip(self.signature, args):
            if not _TYPE_CHECKS[tag](arg):
                raise WthrTypeError(
                    f"{self.name}() expected {self.describe()}, got ({received})"
                )

    def __call__(self, rt, args: Sequence):
        self.check(args)
        return self.impl(rt, *args)


# ------------- Weather -------------

_KELVIN = CONSTANTS["_kelvin_"]


def _ftoc(rt, f):
    return numeric.div(numeric.mul(numeric.sub(f, 32), 5), 9)


def _ctof(rt, c):
    return numeric.add(numeric.div(numeric.mul(c, 9), 5), 32)


def _ctok(rt, c):
    return numeric.add(c, _KELVIN)


def _ktoc(rt, k):
    return numeric.sub(k, _KELVIN)


def _ftok(rt, f):
    return _ctok(rt, _ftoc(rt, f))


def _ktof(rt, k):
    return _ctof(rt, _ktoc(rt, k))


def _dewpoint(rt, temp, humidity):
    # Rough approximation kept as documented: temp - (100 - humidity) / 5.
    return numeric.sub(temp, numeric.div(numeric.sub(100, humidity), 5))


# ------------- Utility -------------

def _str(rt, value):
    return format_value(value, rt.precision)


# ------------- Quantum -------------

def _qubit(rt, basis_index=0, size=1):
    return rt.simulator.allocate(basis_index, size)[0]


def _qubit_at(rt, handle, k):
    return rt.simulator.qubit_at(handle, k)


def _gate(name: str) -> Callable:
    def apply(rt, *handles):
        rt.simulator.apply_gate(name, *handles)
        return handles[-1]
    return apply


_TWO_PI = 2 * CONSTANTS["_pi_"]


def _phase(rt, handle, angle):
    # Reduce modulo 2*_pi_ in exact arithmetic first; float() overflows on huge angles.
    rt.simulator.apply_phase(handle, float(Fraction(angle) % _TWO_PI))
    return handle


def _measure(rt, handle):
    return rt.simulator.measure(handle)


def _reset(rt, handle):
    rt.simulator.reset(handle)
    return handle


def _discard(rt, handle):
    rt.simulator.discard(handle)
    return Unit


def _table(*entries: Builtin):
    return MappingProxyType({b.name: b for b in entries})


BUILTINS = _table(
    Builtin("dewpoint", _dewpoint, ("number", "number")),
    Builtin("ftoc", _ftoc, ("number",)),
    Builtin("ctof", _ctof, ("number",)),
    Builtin("ctok", _ctok, ("number",)),
    Builtin("ktoc", _ktoc, ("number",)),
    Builtin("ftok", _ftok, ("number",)),
    Builtin("ktof", _ktof, ("number",)),
    Builtin("str", _str, ("any",)),
    Builtin("qubit", _qubit, ("integer", "integer"), optional=2),
    Builtin("qubit_at", _qubit_at, ("qubit", "integer")),
    Builtin("hadamard", _gate("hadamard"), ("qubit",)),
    Builtin("pauli_x", _gate("pauli_x"), ("qubit",)),
    Builtin("pauli_y", _gate("pauli_y"), ("qubit",)),
    Builtin("pauli_z", _gate("pauli_z"), ("qubit",)),
    Builtin("s_gate", _gate("s_gate"), ("qubit",)),
    Builtin("t_gate", _gate("t_gate"), ("qubit",)),
    Builtin("phase", _phase, ("qubit", "number")),
    Builtin("cnot", _gate("cnot"), ("qubit", "qubit")),
    Builtin("swap", _gate("swap"), ("qubit", "qubit")),
    Builtin("toffoli", _gate("toffoli"), ("qubit", "qubit", "qubit")),
    Builtin("fredkin", _gate("fredkin"), ("qubit", "qubit", "qubit")),
    Builtin("measure", _measure, ("qubit",)),
    Builtin("reset", _reset, ("qubit",)),
    Builtin("discard", _discard, ("qubit",)),
)


__all__ = ["Builtin", "BUILTINS"]
