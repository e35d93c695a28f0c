"""
Unit tests for EstimatorFactory.

Tests include:
- Estimator registration and retrieval
- Error handling for unknown estimators
- Fresh instances on every create
"""

import pytest

from mission_risk.core.estimators import (
    ALL_ESTIMATORS,
    ESTIMATOR_PERCEPTRON,
    EstimatorFactory,
    LogisticEstimator,
    PerceptronEstimator,
    RiskEstimatorBase,
    create_estimator,
    list_estimators,
)


class DummyEstimator(RiskEstimatorBase):
    """Constant estimator for testing."""

    def _forward(self, x):
        return 0.25

    def partial_fit(self, features, target, learning_rate):
        return 0.0

    def get_estimator_name(self) -> str:
        return "dummy"


class NotAnEstimator:
    """Class that doesn't inherit from RiskEstimatorBase."""

    pass


class TestEstimatorFactory:
    """Test suite for EstimatorFactory."""

    def setup_method(self):
        """Start every test from the built-in registry."""
        EstimatorFactory._estimators.clear()
        EstimatorFactory.register_all()

    def teardown_method(self):
        EstimatorFactory.unregister_estimator("dummy")
        EstimatorFactory.register_all()

    def test_builtin_estimators_registered(self):
        """Test register_all registers both estimators."""
        assert set(list_estimators()) == {"perceptron", "logistic"}
        assert EstimatorFactory.get_default_estimator() == "perceptron"

    def test_builtin_names_match_constants(self):
        """Test every named estimator constant is registered and creatable."""
        assert list_estimators() == ALL_ESTIMATORS
        for name in ALL_ESTIMATORS:
            assert create_estimator(name, seed=1).get_estimator_name() == name
        assert EstimatorFactory.get_default_estimator() == ESTIMATOR_PERCEPTRON

    def test_register_estimator(self):
        """Test registering a custom estimator."""
        EstimatorFactory.register_estimator("dummy", DummyEstimator)

        assert EstimatorFactory.is_registered("dummy")
        assert isinstance(create_estimator("dummy"), DummyEstimator)

    def test_register_type_check(self):
        """Test that only RiskEstimatorBase subclasses can be registered."""
        with pytest.raises(TypeError, match="RiskEstimatorBase"):
            EstimatorFactory.register_estimator("bad", NotAnEstimator)

    def test_unregister_estimator(self):
        """Test removing a registration."""
        EstimatorFactory.register_estimator("dummy", DummyEstimator)
        EstimatorFactory.unregister_estimator("dummy")

        assert not EstimatorFactory.is_registered("dummy")

    def test_unregister_unknown_is_noop(self):
        EstimatorFactory.unregister_estimator("never-registered")
        assert EstimatorFactory.is_registered("perceptron")

    def test_create_unknown_estimator(self):
        """Test unknown names list the available estimators."""
        with pytest.raises(ValueError, match="Unknown estimator: 'forest'"):
            create_estimator("forest")

    def test_create_returns_fresh_instances(self):
        """Test there is no instance caching."""
        first = create_estimator("perceptron", seed=1)
        second = create_estimator("perceptron", seed=1)

        assert first is not second
        assert isinstance(first, PerceptronEstimator)

    def test_create_passes_kwargs(self):
        """Test constructor arguments reach the estimator."""
        estimator = create_estimator("perceptron", hidden_layers=(4,), seed=3)
        assert estimator.get_architecture() == "Perceptron(8, 4, 1)"

    def test_create_logistic(self):
        assert isinstance(create_estimator("logistic", seed=0), LogisticEstimator)
