"""
Quantum Computation Engine
==========================

State-vector simulation for small registers.

Core components:
- complex_utils: scalar complex arithmetic
- state_vector: amplitude array, gate application, measurement
- gates: H, X, Y, Z, RX/RY/RZ, CNOT and entanglement topologies
- circuit: ordered gate execution, initialisation, sampling
- encoding: classical input -> qubit state
"""

from .complex_utils import (
    Complex,
    ZERO,
    ONE,
    add,
    multiply,
    conjugate,
    magnitude_squared,
    magnitude,
)

from .state_vector import StateVector, basis_state

from .gates import (
    Gate,
    Entanglement,
    hadamard,
    pauli_x,
    pauli_y,
    pauli_z,
    rx,
    ry,
    rz,
    cnot,
    entangling_pairs,
)

from .circuit import QuantumCircuit

from .encoding import (
    EncodingMethod,
    angle_encoding,
    amplitude_encoding,
    basis_encoding,
    encode,
)

__all__ = [
    # Complex arithmetic
    'Complex',
    'ZERO',
    'ONE',
    'add',
    'multiply',
    'conjugate',
    'magnitude_squared',
    'magnitude',

    # State vector
    'StateVector',
    'basis_state',

    # Gates
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
    'entangling_pairs',

    # Circuit
    'QuantumCircuit',

    # Encoding
    'EncodingMethod',
    'angle_encoding',
    'amplitude_encoding',
    'basis_encoding',
    'encode',
]
