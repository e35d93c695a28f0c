"""
Factory for risk estimator selection and instantiation.

Estimators are registered by name and created fresh on request; the
trainer owns the live instance, so there is no singleton cache here.
"""

from typing import Dict, Type, List
import logging

from mission_risk.core.estimators.estimator_base import RiskEstimatorBase


logger = logging.getLogger(__name__)

ESTIMATOR_PERCEPTRON = "perceptron"
ESTIMATOR_LOGISTIC = "logistic"

ALL_ESTIMATORS = [
    ESTIMATOR_PERCEPTRON,
    ESTIMATOR_LOGISTIC,
]


class EstimatorFactory:
    """
    Factory for creating risk estimator instances.

    Usage:
        EstimatorFactory.register_estimator("perceptron", PerceptronEstimator)
        estimator = EstimatorFactory.create_estimator("perceptron", seed=7)
        available = EstimatorFactory.list_estimators()
    """

    _estimators: Dict[str, Type[RiskEstimatorBase]] = {}

    @classmethod
    def register_estimator(
        cls,
        name: str,
        estimator_class: Type[RiskEstimatorBase]
    ) -> None:
        """
        Register an estimator class with a name.

        Args:
            name: Name identifier for the estimator
            estimator_class: Estimator class (must inherit from RiskEstimatorBase)

        Raises:
            TypeError: If estimator_class doesn't inherit from RiskEstimatorBase
        """
        if not issubclass(estimator_class, RiskEstimatorBase):
            raise TypeError(
                f"Estimator class must inherit from RiskEstimatorBase, "
                f"got {estimator_class.__name__}"
            )

        if name in cls._estimators and cls._estimators[name] is not estimator_class:
            logger.warning(
                f"Estimator '{name}' is already registered. "
                f"Overwriting with {estimator_class.__name__}"
            )

        cls._estimators[name] = estimator_class
        logger.debug(f"Registered estimator '{name}' -> {estimator_class.__name__}")

    @classmethod
    def unregister_estimator(cls, name: str) -> None:
        if name in cls._estimators:
            del cls._estimators[name]
            logger.debug(f"Unregistered estimator '{name}'")

    @classmethod
    def create_estimator(cls, name: str, **kwargs) -> RiskEstimatorBase:
        """
        Create a new estimator instance.

        Args:
            name: Name of the estimator to create
            **kwargs: Constructor arguments (e.g. seed)

        Returns:
            RiskEstimatorBase: New estimator instance

        Raises:
            ValueError: If estimator name is not registered
        """
        if name not in cls._estimators:
            available = ", ".join(cls.list_estimators())
            raise ValueError(
                f"Unknown estimator: '{name}'. "
                f"Available estimators: {available}"
            )

        instance = cls._estimators[name](**kwargs)
        logger.debug(f"Created estimator instance: {name}")
        return instance

    @classmethod
    def list_estimators(cls) -> List[str]:
        return list(cls._estimators.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._estimators

    @classmethod
    def register_all(cls) -> None:
        """
        Register all available estimators.

        Called during application initialization.
        """
        # Import here to avoid circular imports
        from mission_risk.core.estimators.perceptron import PerceptronEstimator
        from mission_risk.core.estimators.logistic import LogisticEstimator

        cls.register_estimator(ESTIMATOR_PERCEPTRON, PerceptronEstimator)
        cls.register_estimator(ESTIMATOR_LOGISTIC, LogisticEstimator)

        logger.info(f"Registered {len(cls._estimators)} risk estimators")

    @classmethod
    def get_default_estimator(cls) -> str:
        return ESTIMATOR_PERCEPTRON


def create_estimator(name: str, **kwargs) -> RiskEstimatorBase:
    """Convenience function to create an estimator."""
    return EstimatorFactory.create_estimator(name, **kwargs)


def list_estimators() -> List[str]:
    """Convenience function to list registered estimators."""
    return EstimatorFactory.list_estimators()
