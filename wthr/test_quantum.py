import numpy as np
import pennylane as qml
import pytest

from wthr.errors import ArgumentError, InvalidQubitHandle
from wthr.quantum import GATES, QuantumSimulator
from wthr.values import QubitHandle


@pytest.fixture
def sim():
    return QuantumSimulator(seed=7)


def _basis(n, index):
    state = np.zeros(2 ** n, dtype=np.complex128)
    state[index] = 1.0
    return state


def test_allocate_basis_state(sim):
    q = sim.allocate(basis_index=5, size=3)
    assert len(q) == 3
    assert np.allclose(sim.state(q[0]), _basis(3, 5))
    assert sim.register_qubits(q[1]) == q
    assert sim.num_registers == 1


@pytest.mark.parametrize("basis,size", [(0, 0), (2, 1), (-1, 1), (0, 17)])
def test_allocate_rejects_bad_arguments(sim, basis, size):
    with pytest.raises(ArgumentError):
        sim.allocate(basis, size)


def test_hadamard_is_self_inverse(sim):
    (q,) = sim.allocate()
    sim.apply_gate("hadamard", q)
    assert np.allclose(sim.probabilities(q), [0.5, 0.5])
    sim.apply_gate("hadamard", q)
    assert np.allclose(sim.state(q), _basis(1, 0))


def test_measuring_a_basis_state_is_deterministic():
    for seed in range(25):
        sim = QuantumSimulator(seed=seed)
        zero = sim.allocate(0)[0]
        one = sim.allocate(1)[0]
        assert sim.measure(zero) == 0
        assert sim.measure(one) == 1


def test_cnot_on_10_gives_11(sim):
    (control,) = sim.allocate(1)
    (target,) = sim.allocate(0)
    sim.apply_gate("cnot", control, target)
    assert sim.num_registers == 1
    assert np.allclose(sim.state(control), _basis(2, 0b11))


def test_cnot_target_order_matters(sim):
    a, b = sim.allocate(basis_index=0b01, size=2)
    sim.apply_gate("cnot", b, a)
    assert np.allclose(sim.state(a), _basis(2, 0b11))


def test_merge_keeps_all_handles_valid(sim):
    a0, a1 = sim.allocate(basis_index=0b10, size=2)
    (b,) = sim.allocate(0)
    sim.apply_gate("cnot", a0, b)
    assert sim.num_registers == 1
    assert sim.register_qubits(b) == [a0, a1, b]
    assert [sim.measure(h) for h in (a0, a1, b)] == [1, 0, 1]


def test_bell_state_collapse(sim):
    a, b = sim.allocate(size=2)
    sim.apply_gate("hadamard", a)
    sim.apply_gate("cnot", a, b)
    assert np.allclose(sim.probabilities(a), [0.5, 0, 0, 0.5])

    outcome = sim.measure(a)
    assert sim.measure(b) == outcome
    expected = _basis(2, 0b11 if outcome else 0)
    assert np.allclose(np.abs(sim.state(a)), expected)


def test_measurement_statistics_follow_amplitudes():
    sim = QuantumSimulator(seed=2024)
    ones = 0
    for _ in range(400):
        (q,) = sim.allocate()
        sim.apply_gate("hadamard", q)
        ones += sim.measure(q)
        sim.discard(q)
    assert 140 < ones < 260
    assert sim.num_registers == 0


def test_gates_preserve_normalization(sim):
    a, b, c = sim.allocate(size=3)
    for name, handles in [
        ("hadamard", (a,)),
        ("t_gate", (a,)),
        ("hadamard", (b,)),
        ("pauli_y", (c,)),
        ("toffoli", (a, b, c)),
        ("s_gate", (c,)),
        ("fredkin", (c, a, b)),
        ("swap", (a, c)),
    ]:
        sim.apply_gate(name, *handles)
        assert np.isclose(np.linalg.norm(sim.state(a)), 1.0)
    sim.apply_phase(b, 0.3)
    assert np.isclose(np.linalg.norm(sim.state(a)), 1.0)


def test_reset(sim):
    (q,) = sim.allocate(1)
    sim.reset(q)
    assert np.allclose(sim.state(q), _basis(1, 0))


def test_discard_invalidates_every_handle_of_the_register(sim):
    a, b = sim.allocate(size=2)
    (other,) = sim.allocate()
    sim.discard(b)
    assert not sim.is_valid(a)
    assert sim.is_valid(other)
    for op in (lambda: sim.measure(a), lambda: sim.apply_gate("hadamard", b), lambda: sim.discard(a)):
        with pytest.raises(InvalidQubitHandle):
            op()


def test_unknown_handle(sim):
    with pytest.raises(InvalidQubitHandle):
        sim.measure(QubitHandle(99))


def test_repeated_qubit_in_gate(sim):
    (q,) = sim.allocate()
    with pytest.raises(ArgumentError, match="distinct"):
        sim.apply_gate("swap", q, q)


def test_wrong_gate_width(sim):
    a, b = sim.allocate(size=2)
    with pytest.raises(ArgumentError):
        sim.apply_matrix(GATES["cnot"], (a,), label="cnot")


def test_merge_respects_max_qubits():
    sim = QuantumSimulator(seed=0, max_qubits=3)
    a, _ = sim.allocate(size=2)
    b, _ = sim.allocate(size=2)
    with pytest.raises(ArgumentError, match="limit 3"):
        sim.apply_gate("cnot", a, b)
    # The failed merge leaves both registers untouched.
    assert sim.num_registers == 2


def test_three_register_join_checks_total_size_first():
    sim = QuantumSimulator(seed=0, max_qubits=4)
    a, _ = sim.allocate(size=2)
    (b,) = sim.allocate()
    c, _ = sim.allocate(size=2)
    with pytest.raises(ArgumentError, match="need 5 qubits"):
        sim.apply_gate("toffoli", a, b, c)
    assert sim.num_registers == 3
    assert sim.register_qubits(a) != sim.register_qubits(b)


def test_matches_pennylane_default_qubit(sim):
    """The same circuit on PennyLane's reference simulator gives the same state."""
    dev = qml.device("default.qubit", wires=3)

    @qml.qnode(dev)
    def circuit():
        qml.Hadamard(wires=0)
        qml.CNOT(wires=[0, 1])
        qml.T(wires=1)
        qml.PauliY(wires=2)
        qml.PhaseShift(0.7, wires=2)
        qml.Toffoli(wires=[0, 2, 1])
        qml.SWAP(wires=[1, 2])
        qml.S(wires=0)
        return qml.state()

    q = sim.allocate(size=3)
    sim.apply_gate("hadamard", q[0])
    sim.apply_gate("cnot", q[0], q[1])
    sim.apply_gate("t_gate", q[1])
    sim.apply_gate("pauli_y", q[2])
    sim.apply_phase(q[2], 0.7)
    sim.apply_gate("toffoli", q[0], q[2], q[1])
    sim.apply_gate("swap", q[1], q[2])
    sim.apply_gate("s_gate", q[0])

    assert np.allclose(sim.state(q[0]), np.asarray(circuit()))
