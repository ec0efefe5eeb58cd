"""
Gate Library
============

Immutable gate descriptors: a unitary matrix plus the qubit(s) it acts on.

Fixed gates:        H, X, Y, Z, CNOT
Parameterised:      RX(θ), RY(θ), RZ(θ)   (R_P(θ) = exp(-iθP/2))

The rotation generators have eigenvalues ±1/2, which is what makes the
two-point parameter-shift rule exact for circuits built from them.

Entanglement topologies used by the neuron ansatz live here as well.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from ..exceptions import ConfigurationError, QubitIndexError

# =============================================================================
# MATRICES
# =============================================================================

_SQRT_HALF = 1.0 / np.sqrt(2.0)

HADAMARD_MATRIX = np.array([[1, 1], [1, -1]], dtype=np.complex128) * _SQRT_HALF
PAULI_X_MATRIX = np.array([[0, 1], [1, 0]], dtype=np.complex128)
PAULI_Y_MATRIX = np.array([[0, -1j], [1j, 0]], dtype=np.complex128)
PAULI_Z_MATRIX = np.array([[1, 0], [0, -1]], dtype=np.complex128)

# Basis order |control target> = |00>, |01>, |10>, |11>
CNOT_MATRIX = np.array([
    [1, 0, 0, 0],
    [0, 1, 0, 0],
    [0, 0, 0, 1],
    [0, 0, 1, 0],
], dtype=np.complex128)

for _m in (HADAMARD_MATRIX, PAULI_X_MATRIX, PAULI_Y_MATRIX, PAULI_Z_MATRIX, CNOT_MATRIX):
    _m.setflags(write=False)


def rx_matrix(theta: float) -> np.ndarray:
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -1j * s], [-1j * s, c]], dtype=np.complex128)


def ry_matrix(theta: float) -> np.ndarray:
    c, s = np.cos(theta / 2), np.sin(theta / 2)
    return np.array([[c, -s], [s, c]], dtype=np.complex128)


def rz_matrix(theta: float) -> np.ndarray:
    return np.array([
        [np.exp(-0.5j * theta), 0],
        [0, np.exp(0.5j * theta)],
    ], dtype=np.complex128)


# =============================================================================
# GATE DESCRIPTOR
# =============================================================================

@dataclass(frozen=True)
class Gate:
    """
    Unitary bound to qubits.

    Single-qubit gates carry one index; CNOT carries (control, target).
    ``angle`` is set for rotation gates only.
    """
    name: str
    matrix: np.ndarray = field(repr=False, compare=False)
    qubits: Tuple[int, ...]
    angle: Optional[float] = None

    def __post_init__(self):
        qubits = tuple(int(q) for q in self.qubits)
        object.__setattr__(self, 'qubits', qubits)

        expected = 1 << len(qubits)
        if len(qubits) not in (1, 2):
            raise QubitIndexError(f"{self.name} must act on 1 or 2 qubits, got {qubits}")
        if self.matrix.shape != (expected, expected):
            raise ValueError(
                f"{self.name} matrix shape {self.matrix.shape} does not match "
                f"{len(qubits)} qubit(s)")
        if len(qubits) == 2 and qubits[0] == qubits[1]:
            raise QubitIndexError(f"{self.name} control and target must differ, both are {qubits[0]}")
        if any(q < 0 for q in qubits):
            raise QubitIndexError(f"Negative qubit index in {self.name}{qubits}")

        if self.matrix.flags.writeable:
            matrix = self.matrix.copy()
            matrix.setflags(write=False)
            object.__setattr__(self, 'matrix', matrix)

    @property
    def num_qubits(self) -> int:
        return len(self.qubits)

    @property
    def is_parameterized(self) -> bool:
        return self.angle is not None

    def apply(self, state) -> None:
        """Apply to a ``StateVector`` in place"""
        if self.num_qubits == 1:
            state.apply_single_qubit(self.matrix, self.qubits[0])
        else:
            state.apply_cnot(*self.qubits)

    def __str__(self) -> str:
        arg = f"({self.angle:.4f})" if self.angle is not None else ""
        return f"{self.name}{arg}{list(self.qubits)}"


def hadamard(qubit: int) -> Gate:
    return Gate('H', HADAMARD_MATRIX, (qubit,))


def pauli_x(qubit: int) -> Gate:
    return Gate('X', PAULI_X_MATRIX, (qubit,))


def pauli_y(qubit: int) -> Gate:
    return Gate('Y', PAULI_Y_MATRIX, (qubit,))


def pauli_z(qubit: int) -> Gate:
    return Gate('Z', PAULI_Z_MATRIX, (qubit,))


def rx(theta: float, qubit: int) -> Gate:
    return Gate('RX', rx_matrix(theta), (qubit,), angle=float(theta))


def ry(theta: float, qubit: int) -> Gate:
    return Gate('RY', ry_matrix(theta), (qubit,), angle=float(theta))


def rz(theta: float, qubit: int) -> Gate:
    return Gate('RZ', rz_matrix(theta), (qubit,), angle=float(theta))


def cnot(control: int, target: int) -> Gate:
    return Gate('CNOT', CNOT_MATRIX, (control, target))


# Rotation gates in the order the ansatz applies them to each qubit
ROTATION_GATES = (rx, ry, rz)


# =============================================================================
# ENTANGLEMENT TOPOLOGIES
# =============================================================================

class Entanglement(Enum):
    """CNOT pattern applied after each rotation layer"""
    LINEAR = "linear"      # q -> q+1
    CIRCULAR = "circular"  # linear + (n-1) -> 0
    ALL = "all"            # every unordered pair (i < j)


def entangling_pairs(num_qubits: int, entanglement) -> List[Tuple[int, int]]:
    """
    (control, target) pairs for one entangling block.

    A single qubit has nothing to entangle with, so every pattern is
    empty for n = 1.
    """
    try:
        entanglement = Entanglement(entanglement)
    except ValueError:
        raise ConfigurationError(f"Unknown entanglement: {entanglement!r}") from None

    if entanglement is Entanglement.LINEAR:
        return [(q, q + 1) for q in range(num_qubits - 1)]
    if entanglement is Entanglement.CIRCULAR:
        if num_qubits < 2:
            return []
        return [(q, (q + 1) % num_qubits) for q in range(num_qubits)]
    return [(i, j) for i in range(num_qubits) for j in range(i + 1, num_qubits)]


__all__ = [
    'Gate',
    'Entanglement',
    'hadamard',
    'pauli_x',
    'pauli_y',
    'pauli_z',
    'rx',
    'ry',
    'rz',
    'cnot',
    'rx_matrix',
    'ry_matrix',
    'rz_matrix',
    'entangling_pairs',
    'ROTATION_GATES',
    'HADAMARD_MATRIX',
    'PAULI_X_MATRIX',
    'PAULI_Y_MATRIX',
    'PAULI_Z_MATRIX',
    'CNOT_MATRIX',
]
