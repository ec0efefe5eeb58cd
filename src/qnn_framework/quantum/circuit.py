"""
Quantum Circuit
===============

Ordered gate list plus the state vector it acts on.

Gates are queued by ``add_gate`` and applied in insertion order by
``execute``. Each gate acts on the output of the previous one, so the
circuit is a sequential chain, not a DAG. Any operation that reads or
writes the state directly (``initialize``, ``measure``, ``probability``,
``get_amplitude``, ``snapshot``) first flushes pending gates so that
ordering is preserved.

Sampling pattern:
    circuit.execute()
    snapshot = circuit.snapshot()      # read-only
    outcome = snapshot.copy().measure(q, rng)

The shared executed state is never collapsed; each sample measures a
private copy.
"""

import logging
from typing import List, Optional

import numpy as np

from ..exceptions import QubitIndexError, ShapeError
from .complex_utils import Complex, Number
from .gates import Gate
from .state_vector import StateVector

logger = logging.getLogger(__name__)


class QuantumCircuit:
    """
    Fixed-width register with a queue of gates.

    Usage:
        qc = QuantumCircuit(2)
        qc.add_gate(hadamard(0)).add_gate(cnot(0, 1))
        qc.execute()
        p = qc.probability(1)      # 0.5
    """

    def __init__(self, n_qubits: int):
        if n_qubits < 1:
            raise ShapeError(f"A circuit needs at least one qubit, got {n_qubits}")
        self.n_qubits = int(n_qubits)
        self.state = StateVector.zero(self.n_qubits)
        self.gates: List[Gate] = []
        self._executed = 0

    @property
    def pending_gates(self) -> List[Gate]:
        """Gates queued but not yet applied"""
        return self.gates[self._executed:]

    def reset(self) -> 'QuantumCircuit':
        """Return to |0...0> and drop every gate"""
        self.state = StateVector.zero(self.n_qubits)
        self.gates = []
        self._executed = 0
        return self

    def add_gate(self, gate: Gate) -> 'QuantumCircuit':
        for q in gate.qubits:
            if not 0 <= q < self.n_qubits:
                raise QubitIndexError(
                    f"{gate.name} addresses qubit {q}; circuit has {self.n_qubits} qubits")
        self.gates.append(gate)
        return self

    def execute(self) -> StateVector:
        """Apply every pending gate in insertion order"""
        pending = self.gates[self._executed:]
        for gate in pending:
            gate.apply(self.state)
        self._executed = len(self.gates)
        if pending:
            logger.debug(f"Applied {len(pending)} gates on {self.n_qubits} qubits")
        return self.state

    def initialize(self, qubit: int, a0: Number, a1: Number) -> 'QuantumCircuit':
        """
        Force ``qubit`` to (a0, a1), renormalising the register.

        The pair need not be normalised. A (near) zero pair resets the
        qubit to |0>.
        """
        self.execute()
        self.state.initialize_qubit(qubit, complex(a0), complex(a1))
        return self

    def probability(self, qubit: int) -> float:
        """Non-collapsing P(qubit = 1)"""
        self.execute()
        return self.state.probability_one(qubit)

    def measure(self, qubit: int, rng: Optional[np.random.Generator] = None) -> int:
        """Sample ``qubit`` and collapse this circuit's state"""
        self.execute()
        return self.state.measure(qubit, rng)

    def get_amplitude(self, qubit: int) -> Complex:
        """|0> coefficient of the qubit's reduced single-qubit state"""
        self.execute()
        return self.state.qubit_amplitude(qubit)

    def snapshot(self) -> StateVector:
        """Read-only copy of the executed state"""
        self.execute()
        return self.state.copy().freeze()

    def clone(self) -> 'QuantumCircuit':
        """Independent copy; shares only immutable gates"""
        new = QuantumCircuit.__new__(QuantumCircuit)
        new.n_qubits = self.n_qubits
        new.state = self.state.copy()
        new.gates = list(self.gates)
        new._executed = self._executed
        return new

    def __len__(self) -> int:
        return len(self.gates)

    def __repr__(self) -> str:
        return (f"QuantumCircuit(n_qubits={self.n_qubits}, gates={len(self.gates)}, "
                f"pending={len(self.gates) - self._executed})")


__all__ = ['QuantumCircuit']
