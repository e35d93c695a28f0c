"""
Feed-forward perceptron risk estimator.

Network: 8 inputs -> 12 sigmoid -> 8 sigmoid -> 1 sigmoid output.
Trained online with plain backpropagation on squared error, one sample
per step.

Weights are initialized uniformly in [-0.1, 0.1] and biases in
[-0.1, 0.1], so an untrained network outputs values near 0.5.
"""

from typing import List, Optional, Sequence
import logging

import numpy as np
from scipy.special import expit

from mission_risk.core.estimators.estimator_base import RiskEstimatorBase, FEATURE_COUNT


logger = logging.getLogger(__name__)

DEFAULT_HIDDEN_LAYERS = (12, 8)
INIT_SCALE: float = 0.1


class PerceptronEstimator(RiskEstimatorBase):
    """
    Multi-layer perceptron with sigmoid activations.

    Args:
        hidden_layers: Sizes of the hidden layers (default (12, 8))
        seed: Seed for weight initialization; random if None

    Example:
        >>> est = PerceptronEstimator(seed=1)
        >>> 0.0 <= est.predict([0.5] * 8) <= 1.0
        True
    """

    def __init__(self, hidden_layers: Sequence[int] = DEFAULT_HIDDEN_LAYERS, seed: Optional[int] = None):
        self.layer_sizes: List[int] = [FEATURE_COUNT, *hidden_layers, 1]
        rng = np.random.default_rng(seed)

        self.weights: List[np.ndarray] = []
        self.biases: List[np.ndarray] = []
        for n_in, n_out in zip(self.layer_sizes[:-1], self.layer_sizes[1:]):
            self.weights.append(rng.uniform(-INIT_SCALE, INIT_SCALE, size=(n_out, n_in)))
            self.biases.append(rng.uniform(-INIT_SCALE, INIT_SCALE, size=n_out))

    def get_estimator_name(self) -> str:
        return "perceptron"

    def get_architecture(self) -> str:
        return f"Perceptron({', '.join(str(n) for n in self.layer_sizes)})"

    def _activations(self, x: np.ndarray) -> List[np.ndarray]:
        activations = [x]
        for w, b in zip(self.weights, self.biases):
            activations.append(expit(w @ activations[-1] + b))
        return activations

    def _forward(self, x: np.ndarray) -> float:
        return float(self._activations(x)[-1][0])

    def partial_fit(self, features: Sequence[float], target: float, learning_rate: float) -> float:
        x = self._validate_features(features)
        y = self._validate_target(target)

        activations = self._activations(x)
        output = activations[-1]
        error = output - y

        # dE/dz for the output layer (E = 0.5 * error^2, sigmoid output)
        delta = error * output * (1.0 - output)

        for layer in range(len(self.weights) - 1, -1, -1):
            grad_w = np.outer(delta, activations[layer])
            grad_b = delta
            if layer > 0:
                a = activations[layer]
                next_delta = (self.weights[layer].T @ delta) * a * (1.0 - a)
            self.weights[layer] -= learning_rate * grad_w
            self.biases[layer] -= learning_rate * grad_b
            if layer > 0:
                delta = next_delta

        return float(error[0] ** 2)
