import numpy as np
import pytest

from qnn_framework.exceptions import ConfigurationError, ShapeError
from qnn_framework.quantum.circuit import QuantumCircuit
from qnn_framework.quantum.encoding import (
    EncodingMethod, amplitude_encoding, angle_encoding, basis_encoding, encode,
)


def test_angle_encoding():
    qc = angle_encoding(QuantumCircuit(3), [1.0, 0.0, 0.5], [0, 1, 2])
    assert qc.probability(0) == pytest.approx(1.0)
    assert qc.probability(1) == pytest.approx(0.0)
    assert qc.probability(2) == pytest.approx(0.5)


def test_basis_encoding():
    qc = basis_encoding(QuantumCircuit(2), [0.9, 0.2], [0, 1])
    assert qc.probability(0) == pytest.approx(1.0)
    assert qc.probability(1) == pytest.approx(0.0)


def test_amplitude_encoding():
    qc = amplitude_encoding(QuantumCircuit(2), [3.0, 4.0], [0, 1])
    assert qc.probability(0) == pytest.approx(0.36)
    assert qc.probability(1) == pytest.approx(0.64)
    assert qc.state.is_normalized()


def test_amplitude_encoding_zero_input():
    qc = amplitude_encoding(QuantumCircuit(2), [0.0, 0.0], [0, 1])
    assert qc.state.amplitudes[0] == 1.0


def test_encoding_targets_given_qubits():
    qc = encode(QuantumCircuit(3), [1.0], [2], 'angle')
    assert qc.probability(2) == pytest.approx(1.0)
    assert qc.probability(0) == pytest.approx(0.0)


@pytest.mark.parametrize("method", list(EncodingMethod))
def test_length_mismatch(method):
    with pytest.raises(ShapeError):
        encode(QuantumCircuit(2), [0.1, 0.2, 0.3], [0, 1], method)


def test_unknown_method():
    with pytest.raises(ConfigurationError):
        encode(QuantumCircuit(1), [0.0], [0], 'phase')


def test_string_and_enum_agree():
    a = encode(QuantumCircuit(2), [0.3, 0.8], [0, 1], 'angle')
    b = encode(QuantumCircuit(2), [0.3, 0.8], [0, 1], EncodingMethod.ANGLE)
    assert np.allclose(a.execute().amplitudes, b.execute().amplitudes)
