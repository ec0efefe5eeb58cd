import dataclasses

import numpy as np
import pytest

from qnn_framework.exceptions import ConfigurationError, QubitIndexError
from qnn_framework.quantum.gates import (
    CNOT_MATRIX, Entanglement, cnot, entangling_pairs, hadamard,
    pauli_x, pauli_y, pauli_z, rx, ry, rz,
)


def _is_unitary(m):
    return np.allclose(m @ m.conj().T, np.eye(m.shape[0]))


@pytest.mark.parametrize("gate", [hadamard(0), pauli_x(0), pauli_y(0), pauli_z(0), cnot(0, 1)])
def test_fixed_gates_are_unitary(gate):
    assert _is_unitary(gate.matrix)
    assert not gate.is_parameterized


@pytest.mark.parametrize("factory", [rx, ry, rz])
@pytest.mark.parametrize("theta", [0.0, 0.3, np.pi / 2, -2.0, np.pi])
def test_rotations_are_unitary(factory, theta):
    gate = factory(theta, 0)
    assert _is_unitary(gate.matrix)
    assert gate.angle == pytest.approx(theta)


def test_rotation_at_pi_matches_pauli():
    """R_P(π) = -i P"""
    assert np.allclose(rx(np.pi, 0).matrix, -1j * pauli_x(0).matrix)
    assert np.allclose(ry(np.pi, 0).matrix, -1j * pauli_y(0).matrix)
    assert np.allclose(rz(np.pi, 0).matrix, -1j * pauli_z(0).matrix)


def test_cnot_descriptor():
    gate = cnot(2, 0)
    assert gate.qubits == (2, 0)
    assert np.array_equal(gate.matrix, CNOT_MATRIX)
    with pytest.raises(QubitIndexError):
        cnot(1, 1)


def test_gates_are_immutable():
    gate = ry(0.5, 1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        gate.qubits = (0,)
    with pytest.raises(ValueError):
        gate.matrix[0, 0] = 0.0


def test_entangling_pairs():
    assert entangling_pairs(4, 'linear') == [(0, 1), (1, 2), (2, 3)]
    assert entangling_pairs(3, Entanglement.CIRCULAR) == [(0, 1), (1, 2), (2, 0)]
    assert entangling_pairs(3, 'all') == [(0, 1), (0, 2), (1, 2)]
    assert len(entangling_pairs(5, 'all')) == 10


def test_single_qubit_has_no_pairs():
    for pattern in Entanglement:
        assert entangling_pairs(1, pattern) == []


def test_unknown_entanglement():
    with pytest.raises(ConfigurationError):
        entangling_pairs(3, 'star')
