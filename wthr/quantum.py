# File: wthr/quantum.py
# -----------------------------------------------------------------------------
# State-vector quantum simulator behind the quantum built-ins.
#
# - A register of n qubits is a complex128 vector of 2**n amplitudes.
# - Qubit 0 of a register is the most significant bit of the basis index,
#   the same wire convention PennyLane's default.qubit uses.
# - Gate matrices come from PennyLane operation classes and are applied by
#   viewing the vector as a rank-n tensor and contracting the gate with the
#   target axes.
# - The evaluator only ever holds QubitHandle values. Amplitudes never leave
#   this module except as copies returned by state()/probabilities().
# - Multi-qubit gates on qubits from different registers merge the registers
#   (Kronecker product) first. Handles stay valid across merges.
# -----------------------------------------------------------------------------

import itertools
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pennylane as qml

from .config import DEFAULT_MAX_QUBITS
from .errors import ArgumentError, InvalidQubitHandle
from .values import QubitHandle

logger = logging.getLogger(__name__)

# Probabilities closer than this to 0 or 1 are treated as exact, so that
# measuring a basis state never depends on floating-point residue.
_PROB_TOLERANCE = 1e-12


def _matrix(op_class, *params) -> np.ndarray:
    return np.asarray(op_class.compute_matrix(*params), dtype=np.complex128)


# Fixed (parameter-free) gates by built-in name.
GATES = MappingProxyType({
    "hadamard": _matrix(qml.Hadamard),
    "pauli_x": _matrix(qml.PauliX),
    "pauli_y": _matrix(qml.PauliY),
    "pauli_z": _matrix(qml.PauliZ),
    "s_gate": _matrix(qml.S),
    "t_gate": _matrix(qml.T),
    "cnot": _matrix(qml.CNOT),
    "swap": _matrix(qml.SWAP),
    "toffoli": _matrix(qml.Toffoli),
    "fredkin": _matrix(qml.CSWAP),
})


def phase_matrix(phi: float) -> np.ndarray:
    """diag(1, e^{i*phi})."""
    return _matrix(qml.PhaseShift, phi)


@dataclass
class Register:
    rid: int
    # Qubit ids in wire order: qubits[k] is wire k.
    qubits: List[int]
    state: np.ndarray = field(repr=False)

    @property
    def num_qubits(self) -> int:
        return len(self.qubits)

    def wire_of(self, qid: int) -> int:
        return self.qubits.index(qid)


class QuantumSimulator:
    """
    Arena of qubit registers addressed through QubitHandle values.

    Args:
        seed: Seed for the measurement random generator. None draws fresh entropy.
        max_qubits: Largest register (after merges) the simulator will build.
    """

    def __init__(self, seed: Optional[int] = None, max_qubits: int = DEFAULT_MAX_QUBITS):
        self.rng = np.random.default_rng(seed)
        self.max_qubits = max_qubits
        self._registers: Dict[int, Register] = {}
        # qubit id -> id of the register currently holding it
        self._owner: Dict[int, int] = {}
        self._rids = itertools.count()
        self._qids = itertools.count()

    # ------------- Allocation -------------

    def allocate(self, basis_index: int = 0, size: int = 1) -> List[QubitHandle]:
        """
        Allocate a fresh register of `size` qubits in the computational basis
        state |basis_index>.

        Returns:
            List[QubitHandle]: one handle per qubit, in wire order.

        Raises:
            ArgumentError: if size is out of range or basis_index does not fit.
        """
        if size < 1 or size > self.max_qubits:
            raise ArgumentError(f"qubit() register size must be between 1 and {self.max_qubits}, got {size}")
        if basis_index < 0 or basis_index >= 2 ** size:
            raise ArgumentError(
                f"qubit() basis index {basis_index} out of range for {size} qubit(s) "
                f"(0..{2 ** size - 1})"
            )

        state = np.zeros(2 ** size, dtype=np.complex128)
        state[basis_index] = 1.0
        qids = [next(self._qids) for _ in range(size)]
        register = Register(rid=next(self._rids), qubits=qids, state=state)
        self._registers[register.rid] = register
        for qid in qids:
            self._owner[qid] = register.rid

        logger.debug("allocated register %d: %d qubit(s) in |%d>", register.rid, size, basis_index)
        return [QubitHandle(qid) for qid in qids]

    def qubit_at(self, handle: QubitHandle, k: int) -> QubitHandle:
        """Handle of the k-th qubit of the register `handle` belongs to."""
        register, _ = self._locate(handle)
        if k < 0 or k >= register.num_qubits:
            raise ArgumentError(
                f"qubit_at() index {k} out of range for a {register.num_qubits}-qubit register"
            )
        return QubitHandle(register.qubits[k])

    def discard(self, handle: QubitHandle) -> None:
        """Release the register holding `handle`. All of its handles become invalid."""
        register, _ = self._locate(handle)
        del self._registers[register.rid]
        for qid in register.qubits:
            del self._owner[qid]
        logger.debug("discarded register %d (%d qubit(s))", register.rid, register.num_qubits)

    # ------------- Gates -------------

    def apply_gate(self, name: str, *handles: QubitHandle) -> None:
        """Apply one of the fixed GATES by name."""
        self.apply_matrix(GATES[name], handles, label=name)

    def apply_phase(self, handle: QubitHandle, phi: float) -> None:
        self.apply_matrix(phase_matrix(phi), (handle,), label=f"phase({phi})")

    def apply_matrix(self, matrix: np.ndarray, handles: Sequence[QubitHandle], label: str = "unitary") -> None:
        """
        Apply a 2**m x 2**m unitary to the m addressed qubits (in the given order).

        The state is viewed as a tensor with one axis per wire; the gate's
        input axes are contracted with the target wires and its output axes
        are moved back into their places.
        """
        m = len(handles)
        if matrix.shape != (2 ** m, 2 ** m):
            raise ArgumentError(f"{label} expects {int(np.log2(matrix.shape[0]))} qubit(s), got {m}")
        for h in handles:
            self._locate(h)
        if len({h.qid for h in handles}) != m:
            raise ArgumentError(f"{label} requires distinct qubits")

        register = self._join(handles)
        n = register.num_qubits
        wires = [register.wire_of(h.qid) for h in handles]

        psi = register.state.reshape((2,) * n)
        gate = matrix.reshape((2,) * (2 * m))
        psi = np.tensordot(gate, psi, axes=(list(range(m, 2 * m)), wires))
        psi = np.moveaxis(psi, list(range(m)), wires)
        register.state = np.ascontiguousarray(psi).reshape(-1)

        logger.debug("applied %s to register %d wires %s", label, register.rid, wires)

    # ------------- Measurement -------------

    def measure(self, handle: QubitHandle) -> int:
        """
        Measure one qubit in the computational basis.

        The outcome is drawn with the marginal probability of that qubit being 1;
        the register then collapses: amplitudes inconsistent with the outcome are
        zeroed and the survivors renormalized.

        Returns:
            int: 0 or 1.
        """
        register, wire = self._locate(handle)
        n = register.num_qubits

        psi = register.state.reshape((2,) * n)
        p1 = float(np.take(np.abs(psi) ** 2, 1, axis=wire).sum())
        if p1 < _PROB_TOLERANCE:
            outcome = 0
        elif p1 > 1.0 - _PROB_TOLERANCE:
            outcome = 1
        else:
            outcome = int(self.rng.random() < p1)

        index = [slice(None)] * n
        index[wire] = 1 - outcome
        collapsed = psi.copy()
        collapsed[tuple(index)] = 0.0
        collapsed = collapsed.reshape(-1)
        register.state = collapsed / np.linalg.norm(collapsed)

        logger.debug(
            "measured qubit %d (register %d wire %d): p1=%.6f -> %d",
            handle.qid, register.rid, wire, p1, outcome,
        )
        return outcome

    def reset(self, handle: QubitHandle) -> None:
        """Measure the qubit and flip it back to |0> if it read 1."""
        if self.measure(handle) == 1:
            self.apply_gate("pauli_x", handle)

    # ------------- Introspection -------------

    def state(self, handle: QubitHandle) -> np.ndarray:
        """Copy of the amplitude vector of the register holding `handle`."""
        register, _ = self._locate(handle)
        return register.state.copy()

    def probabilities(self, handle: QubitHandle) -> np.ndarray:
        """Basis-state probabilities of the register holding `handle`."""
        return np.abs(self.state(handle)) ** 2

    def register_qubits(self, handle: QubitHandle) -> List[QubitHandle]:
        """Handles of every qubit sharing a register with `handle`, in wire order."""
        register, _ = self._locate(handle)
        return [QubitHandle(qid) for qid in register.qubits]

    def is_valid(self, handle) -> bool:
        return isinstance(handle, QubitHandle) and handle.qid in self._owner

    @property
    def num_registers(self) -> int:
        return len(self._registers)

    # ------------- Internals -------------

    def _locate(self, handle: QubitHandle) -> Tuple[Register, int]:
        if not self.is_valid(handle):
            raise InvalidQubitHandle(f"Invalid or discarded qubit handle {handle}")
        register = self._registers[self._owner[handle.qid]]
        return register, register.wire_of(handle.qid)

    def _join(self, handles: Sequence[QubitHandle]) -> Register:
        """Return the single register holding all `handles`, merging registers if needed."""
        rids: List[int] = []
        for h in handles:
            rid = self._owner[h.qid]
            if rid not in rids:
                rids.append(rid)

        # Check the joint size up front so a failed join leaves every register as it was.
        size = sum(self._registers[rid].num_qubits for rid in rids)
        if size > self.max_qubits:
            raise ArgumentError(
                f"joining registers would need {size} qubits (limit {self.max_qubits})"
            )

        register = self._registers[rids[0]]
        for rid in rids[1:]:
            register = self._merge(register, self._registers[rid])
        return register

    def _merge(self, first: Register, second: Register) -> Register:
        size = first.num_qubits + second.num_qubits
        merged = Register(
            rid=next(self._rids),
            qubits=first.qubits + second.qubits,
            state=np.kron(first.state, second.state),
        )
        del self._registers[first.rid]
        del self._registers[second.rid]
        self._registers[merged.rid] = merged
        for qid in merged.qubits:
            self._owner[qid] = merged.rid

        logger.debug("merged registers %d and %d into %d (%d qubits)", first.rid, second.rid, merged.rid, size)
        return merged


__all__ = ["GATES", "phase_matrix", "Register", "QuantumSimulator"]
