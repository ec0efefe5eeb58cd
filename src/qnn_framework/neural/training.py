"""
Gradient-Descent Training
=========================

Minimal training loop for a single quantum neuron.

Loss:
    MSE = mean_k (y_k - t_k)^2

Gradient (chain rule through the parameter-shift derivative of each output):
    dMSE/dθ = mean_k 2 (y_k - t_k) dy_k/dθ

Usage:
    neuron = QuantumNeuron(get_config('xor'), seed=0)
    trainer = GradientDescentTrainer(neuron, TrainingParameters(learning_rate=0.2))
    X, y = xor_dataset()
    history = trainer.fit(X, y, epochs=20)
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import ShapeError
from .quantum_neuron import DEFAULT_NUM_SAMPLES, QuantumNeuron

logger = logging.getLogger(__name__)


def xor_dataset() -> Tuple[np.ndarray, np.ndarray]:
    """Four XOR inputs and their labels"""
    X = np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]])
    y = np.array([0.0, 1.0, 1.0, 0.0])
    return X, y


def mean_squared_error(predictions: Sequence[float], targets: Sequence[float]) -> float:
    predictions = np.asarray(predictions, dtype=float)
    targets = np.asarray(targets, dtype=float)
    if predictions.shape != targets.shape:
        raise ShapeError(f"Prediction shape {predictions.shape} != target shape {targets.shape}")
    return float(np.mean((predictions - targets) ** 2))


@dataclass
class TrainingParameters:
    """Parameters for gradient-descent training"""
    learning_rate: float = 0.1
    epochs: int = 20
    num_samples: int = DEFAULT_NUM_SAMPLES  # per forward pass when sampling
    exact: bool = False                     # use exact expectations instead of sampling
    reset_memory_each_epoch: bool = True


class GradientDescentTrainer:
    """
    Full-batch gradient descent on one neuron.

    Each step evaluates every example, computes parameter-shift gradients
    and applies ``neuron.update_parameters`` once with the averaged
    MSE gradient.
    """

    def __init__(self,
                 neuron: QuantumNeuron,
                 params: Optional[TrainingParameters] = None,
                 seed: Optional[int] = None):
        self.neuron = neuron
        self.params = params or TrainingParameters()
        self.rng = np.random.default_rng(seed) if seed is not None else neuron.rng
        self.history: List[float] = []

    def _output(self, x: np.ndarray) -> float:
        if self.params.exact:
            return self.neuron.expectation(x)
        return self.neuron.forward(x, num_samples=self.params.num_samples, rng=self.rng)

    def _check_dataset(self, X, y) -> Tuple[np.ndarray, np.ndarray]:
        X = np.atleast_2d(np.asarray(X, dtype=float))
        y = np.asarray(y, dtype=float).reshape(-1)
        if X.shape[0] != y.shape[0]:
            raise ShapeError(f"{X.shape[0]} examples but {y.shape[0]} targets")
        return X, y

    def predict(self, X: Sequence[Sequence[float]]) -> np.ndarray:
        X = np.atleast_2d(np.asarray(X, dtype=float))
        return np.array([self._output(x) for x in X])

    def evaluate(self, X, y) -> float:
        """MSE over the dataset with the current parameters"""
        X, y = self._check_dataset(X, y)
        return mean_squared_error(self.predict(X), y)

    def step(self, X, y) -> float:
        """
        One full-batch update.

        Returns:
            Loss measured before the update
        """
        X, y = self._check_dataset(X, y)
        grad = np.zeros(self.neuron.num_parameters)
        predictions = np.zeros(len(y))

        for k, (x, target) in enumerate(zip(X, y)):
            predictions[k] = self._output(x)
            output_grad = self.neuron.calculate_gradients(
                x,
                num_samples=self.params.num_samples,
                exact=self.params.exact,
                rng=self.rng,
            )
            grad += 2.0 * (predictions[k] - target) * output_grad

        grad /= len(y)
        self.neuron.update_parameters(grad, self.params.learning_rate)
        return mean_squared_error(predictions, y)

    def fit(self, X, y, epochs: Optional[int] = None) -> List[float]:
        """
        Train for ``epochs`` steps.

        Returns:
            Loss history: loss before each step, then the final loss
        """
        epochs = self.params.epochs if epochs is None else epochs
        X, y = self._check_dataset(X, y)

        for epoch in range(epochs):
            if self.params.reset_memory_each_epoch:
                self.neuron.reset_memory()
            loss = self.step(X, y)
            self.history.append(loss)
            logger.info(f"Epoch {epoch + 1}/{epochs}: loss={loss:.4f}")

        if self.params.reset_memory_each_epoch:
            self.neuron.reset_memory()
        final = self.evaluate(X, y)
        self.history.append(final)
        logger.info(f"Final loss: {final:.4f}")
        return list(self.history)


# =============================================================================
# DEMO
# =============================================================================

if __name__ == "__main__":
    from ..config import get_config

    logging.basicConfig(level=logging.INFO)

    print("=" * 50)
    print("QUANTUM NEURON XOR DEMO")
    print("=" * 50)

    neuron = QuantumNeuron(get_config('xor'), seed=7)
    trainer = GradientDescentTrainer(
        neuron, TrainingParameters(learning_rate=0.2, epochs=40, exact=True))
    X, y = xor_dataset()

    print(f"\nInitial loss: {trainer.evaluate(X, y):.4f}")
    history = trainer.fit(X, y)
    print(f"Final loss:   {history[-1]:.4f}")

    print("\nPredictions (exact / 500 samples):")
    for x, target in zip(X, y):
        sampled = neuron.forward(x, num_samples=500)
        print(f"  {x} -> {neuron.expectation(x):.3f} / {sampled:.3f}  (target {target:.0f})")
