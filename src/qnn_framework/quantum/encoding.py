"""
Data Encoding
=============

Maps a classical input vector onto the input qubits of a circuit.

- angle:     RY(π·x_i) on qubit i, so x = 0 -> |0>, x = 1 -> |1>
- amplitude: x is L2-normalised to v, qubit i is set to (sqrt(1 - v_i²), v_i)
- basis:     X on qubit i when x_i > 0.5, otherwise left at |0>

Angle encoding queues gates; amplitude encoding writes the state
immediately through ``QuantumCircuit.initialize``.
"""

from enum import Enum
from typing import Sequence

import numpy as np

from ..exceptions import ConfigurationError, ShapeError
from .circuit import QuantumCircuit
from .gates import pauli_x, ry

ANGLE_SCALE = np.pi
BASIS_THRESHOLD = 0.5


class EncodingMethod(Enum):
    ANGLE = "angle"
    AMPLITUDE = "amplitude"
    BASIS = "basis"


def _check_lengths(inputs: Sequence[float], qubits: Sequence[int]) -> np.ndarray:
    values = np.asarray(inputs, dtype=float).reshape(-1)
    if values.shape[0] != len(qubits):
        raise ShapeError(f"Expected {len(qubits)} inputs, got {values.shape[0]}")
    return values


def angle_encoding(circuit: QuantumCircuit, inputs: Sequence[float],
                   qubits: Sequence[int], scale: float = ANGLE_SCALE) -> QuantumCircuit:
    """RY rotation proportional to each input value"""
    values = _check_lengths(inputs, qubits)
    for x, q in zip(values, qubits):
        circuit.add_gate(ry(scale * x, q))
    return circuit


def amplitude_encoding(circuit: QuantumCircuit, inputs: Sequence[float],
                       qubits: Sequence[int]) -> QuantumCircuit:
    """
    Set each input qubit's amplitude pair from the normalised input.

    An all-zero input leaves the qubits at |0>.
    """
    values = _check_lengths(inputs, qubits)
    norm = np.linalg.norm(values)
    if norm == 0:
        return circuit
    v = values / norm
    for vi, q in zip(v, qubits):
        circuit.initialize(q, np.sqrt(max(0.0, 1.0 - vi * vi)), vi)
    return circuit


def basis_encoding(circuit: QuantumCircuit, inputs: Sequence[float],
                   qubits: Sequence[int], threshold: float = BASIS_THRESHOLD) -> QuantumCircuit:
    """Flip qubit i to |1> when x_i exceeds the threshold"""
    values = _check_lengths(inputs, qubits)
    for x, q in zip(values, qubits):
        if x > threshold:
            circuit.add_gate(pauli_x(q))
    return circuit


ENCODERS = {
    EncodingMethod.ANGLE: angle_encoding,
    EncodingMethod.AMPLITUDE: amplitude_encoding,
    EncodingMethod.BASIS: basis_encoding,
}


def encode(circuit: QuantumCircuit, inputs: Sequence[float], qubits: Sequence[int],
           method=EncodingMethod.ANGLE) -> QuantumCircuit:
    """Dispatch to the encoder for ``method`` (enum or its string value)"""
    try:
        method = EncodingMethod(method)
    except ValueError:
        raise ConfigurationError(f"Unknown encoding method: {method!r}") from None
    return ENCODERS[method](circuit, inputs, qubits)


__all__ = [
    'EncodingMethod',
    'angle_encoding',
    'amplitude_encoding',
    'basis_encoding',
    'encode',
    'ENCODERS',
]
