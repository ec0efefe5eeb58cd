"""
Quantum Neuron
==============

A trainable function approximator backed by a small quantum circuit.

Circuit (rebuilt on every call):
    1. Encode inputs onto the input qubits (angle / amplitude / basis)
    2. Memory readout (if memory is configured and a previous state exists):
         initialise memory qubit from the carried state
         RY(θ_m0) on memory qubit -> CNOT(memory, input[m % n_in]) -> RZ(θ_m1) on that input
    3. ``depth`` layers of RX/RY/RZ on every computational qubit + CNOT entangler
    4. Memory write-back: CNOT(input[m % n_in], memory qubit)

Output:
    forward() estimates P(output qubit = 1) by measuring ``num_samples``
    private copies of the executed (read-only) state and averaging.

Memory:
    After the last sample, each memory qubit's |0> coefficient is read
    from that sample's collapsed state and blended with the carried state:
        blended = p * old + (1 - p) * new
    Decoherence then damps the phase (imaginary) part by (1 - rate).

    On readout the carried value seeds the memory qubit's |0> coefficient.
    Its |1> coefficient is rebuilt as sqrt(1 - |a0|^2) instead of being
    passed as zero, so the seeded qubit is always a unit-norm state and
    the readout does not depend on how initialize rescales a lone a0.

Gradients:
    Parameter-shift rule, exact for RX/RY/RZ generators (eigenvalues ±1/2):
        dE/dθ_i = [E(θ_i + π/2) - E(θ_i - π/2)] / 2

    Sampled gradients run through ``forward``, so memory advances with
    every evaluation (one base pass, then each shifted pass). Pass
    ``isolate_memory=True`` to evaluate every shift from the memory held
    on entry and restore it afterwards.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import numpy as np

from ..config import NeuronConfig
from ..exceptions import ShapeError
from ..quantum.circuit import QuantumCircuit
from ..quantum.complex_utils import ZERO, Complex, scale
from ..quantum.encoding import encode
from ..quantum.gates import ROTATION_GATES, cnot, entangling_pairs, ry, rz
from ..quantum.state_vector import StateVector
from .layout import MEMORY_RY, MEMORY_RZ, ParameterLayout

logger = logging.getLogger(__name__)

PARAMETER_SHIFT = np.pi / 2
DEFAULT_NUM_SAMPLES = 100


class QuantumNeuron:
    """
    Quantum neuron with optional persistent, decohering memory.

    The neuron exclusively owns its circuit and its memory buffer.
    ``parameters`` and ``memory_state`` hand out copies.

    Usage:
        neuron = QuantumNeuron(NeuronConfig(input_size=2, num_qubits=2, depth=1), seed=0)
        y = neuron.forward([0.0, 1.0], num_samples=200)
        grads = neuron.calculate_gradients([0.0, 1.0])
        neuron.update_parameters(grads, learning_rate=0.1)
    """

    def __init__(self,
                 config: Union[NeuronConfig, Mapping[str, Any]],
                 seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None):
        """
        Initialize neuron.

        Args:
            config: Neuron configuration (a mapping is validated into one)
            seed: Random seed for reproducibility (ignored if rng is given)
            rng: Explicit random generator for parameters and sampling
        """
        if not isinstance(config, NeuronConfig):
            config = NeuronConfig.from_dict(config)
        self.config = config
        self.layout = ParameterLayout.from_config(config)
        self.rng = rng if rng is not None else np.random.default_rng(seed)

        self._circuit = QuantumCircuit(config.total_qubits)

        # Qubit assignment: inputs first, output last computational, memory after
        self.input_qubits = tuple(range(config.input_size))
        self.output_qubit = config.num_qubits - 1
        self.memory_qubits = tuple(config.num_qubits + m for m in range(config.memory_qubits))

        self._memory_state: List[Complex] = [ZERO] * config.memory_qubits
        self._has_previous_state = False

        self._parameters = self.rng.uniform(-np.pi, np.pi, size=self.layout.size)

        logger.info(f"QuantumNeuron initialized: {config.num_qubits} qubits, "
                    f"depth={config.depth}, entanglement={config.entanglement.value}, "
                    f"encoding={config.encoding_method.value}, "
                    f"memory={config.memory_qubits}, parameters={self.layout.size}")

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def parameters(self) -> np.ndarray:
        return self._parameters.copy()

    @parameters.setter
    def parameters(self, values: Sequence[float]):
        values = self.layout.check(values, "parameters")
        if not np.all(np.isfinite(values)):
            raise ValueError("Parameters must be finite")
        self._parameters = values.copy()

    @property
    def num_parameters(self) -> int:
        return self.layout.size

    @property
    def memory_state(self) -> List[Complex]:
        return list(self._memory_state)

    @property
    def has_memory(self) -> bool:
        return self.config.has_memory

    @property
    def has_previous_state(self) -> bool:
        return self._has_previous_state

    # =========================================================================
    # Circuit construction
    # =========================================================================

    def _validate_inputs(self, inputs: Sequence[float]) -> np.ndarray:
        values = np.asarray(inputs, dtype=float).reshape(-1)
        if values.shape[0] != self.config.input_size:
            raise ShapeError(f"Expected {self.config.input_size} inputs, got {values.shape[0]}")
        if not np.all(np.isfinite(values)):
            raise ValueError(f"Inputs must be finite, got {values.tolist()}")
        return values

    def _build_circuit(self, inputs: Sequence[float]) -> QuantumCircuit:
        """Reset the owned circuit and lay out the full gate sequence"""
        values = self._validate_inputs(inputs)
        circuit = self._circuit
        circuit.reset()

        encode(circuit, values, self.input_qubits, self.config.encoding_method)

        if self.has_memory and self._has_previous_state:
            self._apply_memory_readout(circuit)

        rotations, _ = self.layout.split(self._parameters)
        pairs = entangling_pairs(self.config.num_qubits, self.config.entanglement)
        for layer in range(self.config.depth):
            for q in range(self.config.num_qubits):
                for gate, theta in zip(ROTATION_GATES, rotations[layer, q]):
                    circuit.add_gate(gate(theta, q))
            for control, target in pairs:
                circuit.add_gate(cnot(control, target))

        # Capture post-computation information into memory
        for m, memory_qubit in enumerate(self.memory_qubits):
            source = self.input_qubits[m % len(self.input_qubits)]
            circuit.add_gate(cnot(source, memory_qubit))

        logger.debug(f"Built circuit with {len(circuit)} gates")
        return circuit

    def _apply_memory_readout(self, circuit: QuantumCircuit):
        for m, memory_qubit in enumerate(self.memory_qubits):
            a0 = self._memory_state[m].to_builtin()
            # Carried state is the |0> coefficient; |1> takes the remaining weight
            a1 = np.sqrt(max(0.0, 1.0 - abs(a0) ** 2))
            circuit.initialize(memory_qubit, a0, a1)

            target = self.input_qubits[m % len(self.input_qubits)]
            theta1 = self._parameters[self.layout.memory_index(m, MEMORY_RY)]
            theta2 = self._parameters[self.layout.memory_index(m, MEMORY_RZ)]

            circuit.add_gate(ry(theta1, memory_qubit))
            circuit.add_gate(cnot(memory_qubit, target))
            circuit.add_gate(rz(theta2, target))

    def _execute(self, inputs: Sequence[float]) -> StateVector:
        """Build, execute and return a read-only snapshot of the state"""
        circuit = self._build_circuit(inputs)
        circuit.execute()
        return circuit.snapshot()

    # =========================================================================
    # Forward pass
    # =========================================================================

    def forward(self,
                inputs: Sequence[float],
                num_samples: int = DEFAULT_NUM_SAMPLES,
                rng: Optional[np.random.Generator] = None) -> float:
        """
        Monte-Carlo estimate of P(output qubit = 1).

        Args:
            inputs: Classical input vector of length input_size
            num_samples: Number of independent measurements
            rng: Generator for this call (defaults to the neuron's own)

        Returns:
            Sample mean in [0, 1]
        """
        if num_samples < 1:
            raise ValueError(f"num_samples must be at least 1, got {num_samples}")
        rng = rng if rng is not None else self.rng

        snapshot = self._execute(inputs)

        total = 0
        sample = snapshot
        for _ in range(num_samples):
            sample = snapshot.copy()
            total += sample.measure(self.output_qubit, rng)

        if self.has_memory:
            self._update_memory_state(sample)

        output = total / num_samples
        logger.debug(f"forward: {output:.4f} over {num_samples} samples")
        return output

    def expectation(self, inputs: Sequence[float]) -> float:
        """
        Exact P(output qubit = 1), the value ``forward`` estimates.

        Read-only: memory is used but not updated.
        """
        snapshot = self._execute(inputs)
        return snapshot.probability_one(self.output_qubit)

    # =========================================================================
    # Memory
    # =========================================================================

    def _update_memory_state(self, state: StateVector):
        new_memory_state = []

        for m, memory_qubit in enumerate(self.memory_qubits):
            fresh = state.qubit_amplitude(memory_qubit)

            if self._has_previous_state:
                p = self.config.memory_persistence
                old = self._memory_state[m]
                blended = scale(old, p) + scale(fresh, 1.0 - p)
                new_memory_state.append(self._apply_decoherence(blended))
            else:
                new_memory_state.append(fresh)

        self._memory_state = new_memory_state
        self._has_previous_state = True
        logger.debug(f"Memory updated: {new_memory_state}")

    def _apply_decoherence(self, state: Complex) -> Complex:
        """Damp the phase component"""
        return Complex(state.real, state.imag * (1.0 - self.config.decoherence_rate))

    def reset_memory(self):
        """Forget the carried memory state (no-op without memory qubits)"""
        if not self.has_memory:
            return
        self._memory_state = [ZERO] * self.config.memory_qubits
        self._has_previous_state = False

    # =========================================================================
    # Training
    # =========================================================================

    def calculate_gradients(self,
                            inputs: Sequence[float],
                            num_samples: int = DEFAULT_NUM_SAMPLES,
                            exact: bool = False,
                            rng: Optional[np.random.Generator] = None,
                            isolate_memory: bool = False) -> np.ndarray:
        """
        Parameter-shift gradient of the output w.r.t. every parameter.

        Sampled evaluations are ordinary ``forward`` calls: a base pass
        runs first, and memory then advances with every shifted pass.

        Args:
            inputs: Classical input vector
            num_samples: Samples per shifted forward pass
            exact: Use ``expectation`` instead of sampled ``forward``
            rng: Generator for the sampled evaluations
            isolate_memory: Start every shifted evaluation from the memory
                held on entry and restore it on return (no base pass)

        Returns:
            Gradient vector matching ``num_parameters``
        """
        values = self._validate_inputs(inputs)

        if exact:
            def evaluate():
                return self.expectation(values)
        else:
            def evaluate():
                return self.forward(values, num_samples=num_samples, rng=rng)

        if not isolate_memory:
            if not exact:
                evaluate()
            return self._shift_all(evaluate, after_each=None)

        saved_memory = (list(self._memory_state), self._has_previous_state)
        try:
            return self._shift_all(evaluate, after_each=lambda: self._restore_memory(saved_memory))
        finally:
            self._restore_memory(saved_memory)

    def _shift_all(self, evaluate, after_each=None) -> np.ndarray:
        """(E(θ_i + π/2) - E(θ_i - π/2)) / 2 for every parameter i"""
        gradients = np.zeros(self.layout.size)

        for i in range(self.layout.size):
            original = self._parameters[i]
            try:
                self._parameters[i] = original + PARAMETER_SHIFT
                plus = evaluate()
                if after_each is not None:
                    after_each()

                self._parameters[i] = original - PARAMETER_SHIFT
                minus = evaluate()
                if after_each is not None:
                    after_each()
            finally:
                self._parameters[i] = original

            gradients[i] = (plus - minus) / 2

        return gradients

    def _restore_memory(self, saved):
        memory_state, has_previous = saved
        self._memory_state = list(memory_state)
        self._has_previous_state = has_previous

    def update_parameters(self, gradients: Sequence[float], learning_rate: float):
        """Plain gradient-descent step: θ -= lr * g"""
        gradients = self.layout.check(gradients, "gradients")
        self._parameters -= learning_rate * gradients

    # =========================================================================
    # Copies and persistence
    # =========================================================================

    def clone(self) -> 'QuantumNeuron':
        """Deep copy with an independent random stream"""
        neuron = QuantumNeuron(self.config, rng=self.rng.spawn(1)[0])
        neuron._parameters = self._parameters.copy()

        if self.has_memory and self._has_previous_state:
            neuron._memory_state = list(self._memory_state)
            neuron._has_previous_state = True

        return neuron

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible snapshot of config, parameters and memory"""
        return {
            'config': self.config.to_dict(),
            'parameters': self._parameters.tolist(),
            'memory_state': [[c.real, c.imag] for c in self._memory_state],
            'has_previous_state': self._has_previous_state,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], seed: Optional[int] = None) -> 'QuantumNeuron':
        neuron = cls(NeuronConfig.from_dict(data['config']), seed=seed)
        neuron.parameters = data['parameters']

        memory = data.get('memory_state', [])
        if len(memory) != neuron.config.memory_qubits:
            raise ShapeError(
                f"Expected {neuron.config.memory_qubits} memory entries, got {len(memory)}")
        neuron._memory_state = [Complex(float(re), float(im)) for re, im in memory]
        neuron._has_previous_state = bool(data.get('has_previous_state', False)) and neuron.has_memory
        return neuron

    def __repr__(self) -> str:
        return (f"QuantumNeuron(inputs={self.config.input_size}, qubits={self.config.num_qubits}, "
                f"depth={self.config.depth}, memory={self.config.memory_qubits}, "
                f"parameters={self.layout.size})")


__all__ = ['QuantumNeuron', 'PARAMETER_SHIFT', 'DEFAULT_NUM_SAMPLES']
