"""
Parameter Layout
================

Named offsets into a neuron's flat parameter vector.

    [ rotation block                       | memory-readout block      ]
    [ layer 0: q0(rx,ry,rz) q1(rx,ry,rz) ..| m0(ry, rz) m1(ry, rz) .. ]
    [ layer 1: ...                         |                           ]

Size = num_qubits * 3 * depth + memory_qubits * 2
"""

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..exceptions import ShapeError

ROTATIONS_PER_QUBIT = 3   # RX, RY, RZ
PARAMS_PER_MEMORY_QUBIT = 2  # readout RY on memory qubit, RZ on its input partner

# Memory readout slots
MEMORY_RY = 0
MEMORY_RZ = 1


@dataclass(frozen=True)
class ParameterLayout:
    num_qubits: int
    depth: int
    memory_qubits: int = 0

    @classmethod
    def from_config(cls, config) -> 'ParameterLayout':
        return cls(config.num_qubits, config.depth, config.memory_qubits)

    @property
    def rotation_count(self) -> int:
        return self.num_qubits * ROTATIONS_PER_QUBIT * self.depth

    @property
    def memory_count(self) -> int:
        return self.memory_qubits * PARAMS_PER_MEMORY_QUBIT

    @property
    def size(self) -> int:
        return self.rotation_count + self.memory_count

    @property
    def rotation_slice(self) -> slice:
        return slice(0, self.rotation_count)

    @property
    def memory_slice(self) -> slice:
        return slice(self.rotation_count, self.size)

    def rotation_index(self, layer: int, qubit: int, gate: int) -> int:
        """Offset of rotation ``gate`` (0=RX, 1=RY, 2=RZ) on ``qubit`` in ``layer``"""
        if not 0 <= layer < self.depth:
            raise IndexError(f"Layer {layer} out of range for depth {self.depth}")
        if not 0 <= qubit < self.num_qubits:
            raise IndexError(f"Qubit {qubit} out of range for {self.num_qubits} qubits")
        if not 0 <= gate < ROTATIONS_PER_QUBIT:
            raise IndexError(f"Rotation slot {gate} out of range")
        return (layer * self.num_qubits + qubit) * ROTATIONS_PER_QUBIT + gate

    def memory_index(self, memory: int, slot: int) -> int:
        """Offset of readout ``slot`` (MEMORY_RY / MEMORY_RZ) for memory qubit ``memory``"""
        if not 0 <= memory < self.memory_qubits:
            raise IndexError(f"Memory qubit {memory} out of range for {self.memory_qubits}")
        if not 0 <= slot < PARAMS_PER_MEMORY_QUBIT:
            raise IndexError(f"Memory slot {slot} out of range")
        return self.rotation_count + memory * PARAMS_PER_MEMORY_QUBIT + slot

    def check(self, values: Sequence[float], what: str = "parameters") -> np.ndarray:
        """Return ``values`` as a float array, raising ShapeError on a length mismatch"""
        array = np.asarray(values, dtype=float).reshape(-1)
        if array.shape[0] != self.size:
            raise ShapeError(f"Expected {self.size} {what}, got {array.shape[0]}")
        return array

    def split(self, values: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
        """
        Views of the two blocks.

        Returns:
            rotations: shape (depth, num_qubits, 3)
            memory: shape (memory_qubits, 2)
        """
        array = self.check(values)
        rotations = array[self.rotation_slice].reshape(
            self.depth, self.num_qubits, ROTATIONS_PER_QUBIT)
        memory = array[self.memory_slice].reshape(
            self.memory_qubits, PARAMS_PER_MEMORY_QUBIT)
        return rotations, memory


__all__ = [
    'ParameterLayout',
    'ROTATIONS_PER_QUBIT',
    'PARAMS_PER_MEMORY_QUBIT',
    'MEMORY_RY',
    'MEMORY_RZ',
]
