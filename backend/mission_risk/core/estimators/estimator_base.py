"""
Abstract base class for trainable risk estimators.

An estimator maps the 8-element passenger/mission feature vector to a
risk score in [0, 1] and can be refined online, one labeled sample at a
time. Estimators are never mutated while published: the trainer works on
a copy and swaps it in when training finishes.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Sequence
import copy
import logging

import numpy as np


logger = logging.getLogger(__name__)

# Length of the feature vector produced by the risk scorer
FEATURE_COUNT: int = 8


class RiskEstimatorBase(ABC):
    """
    Abstract base class for risk estimators.

    Concrete estimators implement `_forward` and `partial_fit`; `predict`
    adds input validation and clamps the output to [0, 1].
    """

    @abstractmethod
    def _forward(self, x: np.ndarray) -> float:
        """
        Raw estimator output for a validated feature vector.

        Args:
            x: Feature vector of shape (FEATURE_COUNT,)

        Returns:
            float: Unclamped score
        """
        pass

    @abstractmethod
    def partial_fit(self, features: Sequence[float], target: float, learning_rate: float) -> float:
        """
        Apply one online update step.

        Args:
            features: Feature vector
            target: Target risk in [0, 1]
            learning_rate: Step size

        Returns:
            float: Squared error before the update
        """
        pass

    @abstractmethod
    def get_estimator_name(self) -> str:
        """
        Return the name of the estimator.

        Returns:
            str: Estimator name identifier
        """
        pass

    def get_architecture(self) -> str:
        """
        Human-readable description of the estimator's structure.

        Default implementation returns the estimator name.
        """
        return self.get_estimator_name()

    def predict(self, features: Sequence[float]) -> float:
        """
        Predict a risk score.

        Args:
            features: Feature vector of length FEATURE_COUNT

        Returns:
            float: Risk score clamped to [0, 1]

        Raises:
            ValueError: If the vector has the wrong length or non-finite values
        """
        x = self._validate_features(features)
        score = self._forward(x)
        if not np.isfinite(score):
            raise ValueError(f"Estimator produced a non-finite score: {score}")
        return float(np.clip(score, 0.0, 1.0))

    def copy(self) -> "RiskEstimatorBase":
        """Independent deep copy, safe to train while the original is read."""
        return copy.deepcopy(self)

    def get_info(self) -> Dict[str, Any]:
        return {
            "name": self.get_estimator_name(),
            "architecture": self.get_architecture(),
            "class": type(self).__name__,
        }

    def _validate_features(self, features: Sequence[float]) -> np.ndarray:
        x = np.asarray(features, dtype=float).reshape(-1)
        if x.shape[0] != FEATURE_COUNT:
            raise ValueError(
                f"Expected {FEATURE_COUNT} features, got {x.shape[0]}"
            )
        if not np.all(np.isfinite(x)):
            raise ValueError("Feature vector contains non-finite values")
        return x

    def _validate_target(self, target: float) -> float:
        target = float(target)
        if not 0.0 <= target <= 1.0:
            raise ValueError(f"Training target must be in [0, 1], got {target}")
        return target
