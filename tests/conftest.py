"""Shared fixtures for the quantum neuron test suite."""

import numpy as np
import pytest

from qnn_framework import NeuronConfig, QuantumNeuron


@pytest.fixture
def rng():
    """Seeded generator so statistical checks are reproducible."""
    return np.random.default_rng(1234)


@pytest.fixture
def xor_config():
    return NeuronConfig(input_size=2, num_qubits=2, depth=1, entanglement='linear')


@pytest.fixture
def xor_neuron(xor_config):
    return QuantumNeuron(xor_config, seed=42)


@pytest.fixture
def memory_config():
    return NeuronConfig(
        input_size=2,
        num_qubits=2,
        depth=1,
        memory_qubits=1,
        memory_persistence=0.7,
        decoherence_rate=0.05,
    )


@pytest.fixture
def single_qubit_config():
    """One input, one qubit, one layer: output = P(1) after RX, RY, RZ."""
    return NeuronConfig(input_size=1, num_qubits=1, depth=1)
