"""
Logistic regression risk estimator.

A single sigmoid unit over the feature vector. Smaller and faster to
train than the perceptron; useful as a baseline.
"""

from typing import Optional, Sequence

import numpy as np
from scipy.special import expit

from mission_risk.core.estimators.estimator_base import RiskEstimatorBase, FEATURE_COUNT


class LogisticEstimator(RiskEstimatorBase):
    """
    Logistic regression trained by online gradient descent.

    Args:
        seed: Seed for weight initialization; random if None
    """

    def __init__(self, seed: Optional[int] = None):
        rng = np.random.default_rng(seed)
        self.weights = rng.uniform(-0.1, 0.1, size=FEATURE_COUNT)
        self.bias = 0.0

    def get_estimator_name(self) -> str:
        return "logistic"

    def get_architecture(self) -> str:
        return f"Logistic({FEATURE_COUNT}, 1)"

    def _forward(self, x: np.ndarray) -> float:
        return float(expit(self.weights @ x + self.bias))

    def partial_fit(self, features: Sequence[float], target: float, learning_rate: float) -> float:
        x = self._validate_features(features)
        y = self._validate_target(target)

        output = self._forward(x)
        error = output - y
        # Cross-entropy gradient through the sigmoid
        self.weights -= learning_rate * error * x
        self.bias -= learning_rate * error
        return float(error ** 2)
