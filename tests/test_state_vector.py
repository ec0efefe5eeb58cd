import numpy as np
import pytest

from qnn_framework.exceptions import FrozenStateError, QubitIndexError, ShapeError
from qnn_framework.quantum.gates import (
    HADAMARD_MATRIX, PAULI_X_MATRIX, rx_matrix, ry_matrix, rz_matrix,
)
from qnn_framework.quantum.state_vector import StateVector, basis_state


def test_zero_state():
    """Fresh register is |0...0>"""
    sv = StateVector.zero(3)
    assert sv.dimension == 8
    assert sv.amplitudes[0] == 1.0
    assert np.all(sv.amplitudes[1:] == 0)
    assert sv.is_normalized()


def test_bit_i_is_qubit_i():
    """X on qubit 1 of a 2-qubit register lands on index 0b10"""
    sv = StateVector.zero(2)
    sv.apply_single_qubit(PAULI_X_MATRIX, 1)
    assert abs(sv.amplitudes[2]) == pytest.approx(1.0)
    assert sv.probability_one(1) == pytest.approx(1.0)
    assert sv.probability_one(0) == pytest.approx(0.0)


def test_cnot_swaps_only_when_control_set():
    sv = basis_state(2, [1, 0])  # q0 = 1
    sv.apply_cnot(0, 1)
    assert sv.amplitudes[3] == pytest.approx(1.0)

    sv = basis_state(2, [0, 0])
    sv.apply_cnot(0, 1)
    assert sv.amplitudes[0] == pytest.approx(1.0)


def test_cnot_rejects_same_qubit():
    with pytest.raises(QubitIndexError):
        StateVector.zero(2).apply_cnot(1, 1)


def test_marginal_probability_is_non_collapsing():
    sv = StateVector.zero(2)
    sv.apply_single_qubit(HADAMARD_MATRIX, 0)
    before = sv.amplitudes.copy()
    assert sv.probability_one(0) == pytest.approx(0.5)
    assert np.array_equal(sv.amplitudes, before), "probability read must not alter the state"


def test_collapse_bell_state():
    sv = StateVector.zero(2)
    sv.apply_single_qubit(HADAMARD_MATRIX, 0)
    sv.apply_cnot(0, 1)
    sv.collapse(0, 1)
    assert sv.is_normalized()
    assert sv.probability_one(1) == pytest.approx(1.0), "entangled partner must follow"


def test_collapse_impossible_outcome():
    with pytest.raises(ValueError):
        StateVector.zero(1).collapse(0, 1)


def test_collapse_onto_tiny_probability_outcome():
    """A rare but possible outcome still collapses to a normalised state"""
    eps = 1e-8
    sv = StateVector(1, np.array([np.sqrt(1 - eps ** 2), eps], dtype=complex))
    sv.collapse(0, 1)
    assert sv.is_normalized()
    assert abs(sv.amplitudes[1]) == pytest.approx(1.0)
    assert sv.amplitudes[0] == 0.0


def test_measure_is_deterministic_for_basis_states(rng):
    assert basis_state(2, [1, 0]).measure(0, rng) == 1
    assert basis_state(2, [1, 0]).measure(1, rng) == 0


def test_out_of_range_qubit():
    sv = StateVector.zero(2)
    with pytest.raises(QubitIndexError):
        sv.probability_one(2)
    with pytest.raises(IndexError):
        sv.apply_single_qubit(PAULI_X_MATRIX, -1)


def test_wrong_amplitude_count():
    with pytest.raises(ShapeError):
        StateVector(2, np.ones(3))


def test_unitarity_random_sequence(rng):
    """Norm stays 1 for any sequence of gates"""
    sv = StateVector.zero(3)
    for _ in range(200):
        q = int(rng.integers(3))
        choice = int(rng.integers(5))
        theta = rng.uniform(-np.pi, np.pi)
        if choice == 0:
            sv.apply_single_qubit(rx_matrix(theta), q)
        elif choice == 1:
            sv.apply_single_qubit(ry_matrix(theta), q)
        elif choice == 2:
            sv.apply_single_qubit(rz_matrix(theta), q)
        elif choice == 3:
            sv.apply_single_qubit(HADAMARD_MATRIX, q)
        else:
            sv.apply_cnot(q, (q + 1) % 3)
        assert sv.is_normalized(1e-9)


def test_initialize_qubit_renormalizes():
    sv = StateVector.zero(2)
    sv.initialize_qubit(0, 1.0, 1.0)
    assert sv.is_normalized()
    assert sv.probability_one(0) == pytest.approx(0.5)
    assert sv.probability_one(1) == pytest.approx(0.0)


def test_initialize_preserves_rest_of_register():
    sv = basis_state(2, [0, 1])
    sv.initialize_qubit(0, 0.0, 2.0)
    assert abs(sv.amplitudes[3]) == pytest.approx(1.0)


def test_initialize_degenerate_pair_resets_to_zero():
    sv = StateVector.zero(1)
    sv.apply_single_qubit(PAULI_X_MATRIX, 0)
    sv.initialize_qubit(0, 0.0, 0.0)
    assert sv.probability_one(0) == pytest.approx(0.0)
    assert sv.is_normalized()


def test_qubit_amplitude_after_rotation():
    theta = np.pi / 3
    sv = StateVector.zero(2)
    sv.apply_single_qubit(ry_matrix(theta), 1)
    amp = sv.qubit_amplitude(1)
    assert amp.real == pytest.approx(np.cos(theta / 2))
    assert amp.imag == pytest.approx(0.0)


def test_frozen_snapshot_rejects_mutation(rng):
    sv = StateVector.zero(1).freeze()
    assert sv.is_frozen
    with pytest.raises(FrozenStateError):
        sv.measure(0, rng)
    with pytest.raises(FrozenStateError):
        sv.apply_single_qubit(PAULI_X_MATRIX, 0)

    private = sv.copy()
    assert not private.is_frozen
    private.apply_single_qubit(PAULI_X_MATRIX, 0)
    assert sv.probability_one(0) == 0.0
