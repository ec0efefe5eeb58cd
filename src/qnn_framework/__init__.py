"""
QNN Framework
=============

Quantum Neuron Simulation

State-vector simulation of small quantum circuits used as trainable
function approximators ("quantum neurons"), with Monte-Carlo output
estimation, parameter-shift gradients and a persistent, decohering
quantum memory.

Key components:
- quantum: complex arithmetic, state vector, gates, circuit, data encoding
- neural: quantum neuron, parameter layout, gradient-descent training
- config: validated neuron configurations and presets
"""

from .exceptions import (
    QNNError,
    ConfigurationError,
    ShapeError,
    QubitIndexError,
    FrozenStateError,
)

from .config import NeuronConfig, ConfigurationManager, get_config

from .quantum import (
    Complex,
    StateVector,
    QuantumCircuit,
    EncodingMethod,
    Entanglement,
)

from .neural import (
    QuantumNeuron,
    ParameterLayout,
    GradientDescentTrainer,
    TrainingParameters,
)

__version__ = '0.1.0'

__all__ = [
    # Errors
    'QNNError',
    'ConfigurationError',
    'ShapeError',
    'QubitIndexError',
    'FrozenStateError',

    # Configuration
    'NeuronConfig',
    'ConfigurationManager',
    'get_config',

    # Engine
    'Complex',
    'StateVector',
    'QuantumCircuit',
    'EncodingMethod',
    'Entanglement',

    # Neurons
    'QuantumNeuron',
    'ParameterLayout',
    'GradientDescentTrainer',
    'TrainingParameters',
]
