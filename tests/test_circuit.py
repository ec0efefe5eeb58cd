import numpy as np
import pytest

from qnn_framework.exceptions import FrozenStateError, QubitIndexError
from qnn_framework.quantum.circuit import QuantumCircuit
from qnn_framework.quantum.gates import cnot, hadamard, pauli_x, ry


def test_execute_applies_in_insertion_order():
    """X then H differs from H then X"""
    xh = QuantumCircuit(1).add_gate(pauli_x(0)).add_gate(hadamard(0))
    hx = QuantumCircuit(1).add_gate(hadamard(0)).add_gate(pauli_x(0))
    xh.execute()
    hx.execute()
    assert xh.state.amplitudes[1].real == pytest.approx(-np.sqrt(0.5))
    assert hx.state.amplitudes[1].real == pytest.approx(np.sqrt(0.5))


def test_execute_only_runs_pending_gates():
    qc = QuantumCircuit(1).add_gate(pauli_x(0))
    qc.execute()
    assert qc.pending_gates == []
    qc.execute()
    assert qc.probability(0) == pytest.approx(1.0), "gates must not be re-applied"

    qc.add_gate(pauli_x(0))
    assert len(qc.pending_gates) == 1
    assert qc.probability(0) == pytest.approx(0.0)


def test_reset():
    qc = QuantumCircuit(2).add_gate(pauli_x(1))
    qc.execute()
    qc.reset()
    assert len(qc) == 0
    assert qc.state.amplitudes[0] == 1.0


def test_add_gate_out_of_range():
    with pytest.raises(QubitIndexError):
        QuantumCircuit(2).add_gate(cnot(0, 2))


def test_bell_pair_probabilities():
    qc = QuantumCircuit(2).add_gate(hadamard(0)).add_gate(cnot(0, 1))
    assert qc.probability(0) == pytest.approx(0.5)
    assert qc.probability(1) == pytest.approx(0.5)
    assert qc.state.is_normalized()


def test_sample_mean_converges_to_marginal(rng):
    """Measuring many clones of one executed circuit approaches P(1)"""
    theta = 2 * np.pi / 3
    qc = QuantumCircuit(2).add_gate(ry(theta, 0)).add_gate(cnot(0, 1))
    qc.execute()
    expected = np.sin(theta / 2) ** 2

    n = 4000
    mean = sum(qc.clone().measure(1, rng) for _ in range(n)) / n
    assert mean == pytest.approx(expected, abs=0.03)
    assert qc.probability(1) == pytest.approx(expected), "original must stay uncollapsed"


def test_clone_is_independent(rng):
    qc = QuantumCircuit(1).add_gate(hadamard(0))
    qc.execute()
    copy = qc.clone()
    copy.measure(0, rng)
    copy.add_gate(pauli_x(0))
    assert qc.probability(0) == pytest.approx(0.5)
    assert len(qc) == 1


def test_snapshot_is_read_only(rng):
    qc = QuantumCircuit(1).add_gate(hadamard(0))
    snap = qc.snapshot()
    with pytest.raises(FrozenStateError):
        snap.measure(0, rng)
    outcome = snap.copy().measure(0, rng)
    assert outcome in (0, 1)
    assert snap.probability_one(0) == pytest.approx(0.5)


def test_initialize_flushes_pending_gates():
    qc = QuantumCircuit(2).add_gate(pauli_x(0))
    qc.initialize(1, 0.0, 1.0)
    assert abs(qc.state.amplitudes[3]) == pytest.approx(1.0)


def test_get_amplitude():
    qc = QuantumCircuit(2).add_gate(ry(np.pi / 2, 1))
    amp = qc.get_amplitude(1)
    assert amp.real == pytest.approx(np.sqrt(0.5))
    assert qc.get_amplitude(0).real == pytest.approx(1.0)
