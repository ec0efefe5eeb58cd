"""
Quantum Neurons
===============

Circuit-backed trainable units.

Core components:
- layout: named offsets into the flat parameter vector
- quantum_neuron: encoding, ansatz, sampling, memory, parameter-shift gradients
- training: MSE loss, XOR dataset, full-batch gradient descent
"""

from .layout import ParameterLayout

from .quantum_neuron import QuantumNeuron, PARAMETER_SHIFT

from .training import (
    GradientDescentTrainer,
    TrainingParameters,
    mean_squared_error,
    xor_dataset,
)

__all__ = [
    'ParameterLayout',
    'QuantumNeuron',
    'PARAMETER_SHIFT',
    'GradientDescentTrainer',
    'TrainingParameters',
    'mean_squared_error',
    'xor_dataset',
]
