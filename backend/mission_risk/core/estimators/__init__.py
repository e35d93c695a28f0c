"""
Trainable risk estimators.

Available Estimators:
- perceptron: 8-12-8-1 sigmoid network (default)
- logistic: single sigmoid unit

Usage:
    from mission_risk.core.estimators import create_estimator

    estimator = create_estimator("perceptron", seed=42)
    score = estimator.predict(features)
"""

from mission_risk.core.estimators.estimator_base import RiskEstimatorBase, FEATURE_COUNT
from mission_risk.core.estimators.perceptron import PerceptronEstimator
from mission_risk.core.estimators.logistic import LogisticEstimator
from mission_risk.core.estimators.estimator_factory import (
    ALL_ESTIMATORS,
    ESTIMATOR_LOGISTIC,
    ESTIMATOR_PERCEPTRON,
    EstimatorFactory,
    create_estimator,
    list_estimators,
)

# Register all estimators on import
EstimatorFactory.register_all()

__all__ = [
    "RiskEstimatorBase",
    "FEATURE_COUNT",
    "PerceptronEstimator",
    "LogisticEstimator",
    "EstimatorFactory",
    "create_estimator",
    "list_estimators",
    "ESTIMATOR_PERCEPTRON",
    "ESTIMATOR_LOGISTIC",
    "ALL_ESTIMATORS",
]
