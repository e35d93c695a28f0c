"""
Unit tests for estimator publication and retraining.

Tests include:
- Lazy estimator construction and snapshot swap
- Training data preparation
- Single-flight retraining
"""

import threading

import pytest

from mission_risk.core.estimators import FEATURE_COUNT, PerceptronEstimator
from mission_risk.core.risk_scorer import score_person
from mission_risk.core.trainer import (
    STATUS_ALREADY_TRAINING,
    STATUS_COMPLETED,
    EstimatorHandle,
    Trainer,
    default_estimator_factory,
    prepare_training_data,
    random_training_data,
)


@pytest.fixture
def handle(fast_settings):
    return EstimatorHandle(default_estimator_factory(fast_settings))


@pytest.fixture
def trainer(handle, fast_settings):
    return Trainer(handle, fast_settings)


class TestEstimatorHandle:
    """Test estimator snapshot publication."""

    def test_lazy_initialization(self, handle):
        assert not handle.initialized

        state = handle.current

        assert handle.initialized
        assert not state.trained
        assert state.estimator.get_estimator_name() == "perceptron"

    def test_ensure_is_idempotent(self, handle):
        assert handle.ensure() is handle.ensure()

    def test_concurrent_first_use_builds_once(self, handle):
        """Test racing readers all see the same estimator."""
        seen = []

        def read():
            seen.append(handle.current.estimator)

        threads = [threading.Thread(target=read) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert all(e is seen[0] for e in seen)

    def test_reset(self, handle):
        first = handle.current.estimator
        handle.reset()

        assert not handle.initialized
        assert handle.current.estimator is not first


class TestTrainingData:
    """Test training sample preparation."""

    def test_historical_records_preferred(self, moon_mission, healthy_person):
        moon_mission.passenger_ids = [healthy_person.id]
        records = [
            {"features": [0.1] * FEATURE_COUNT, "target": 0.4},
            {"features": [0.2] * FEATURE_COUNT, "target": 0.6},
        ]

        samples = prepare_training_data([moon_mission], [healthy_person], records)

        assert samples == [([0.1] * FEATURE_COUNT, 0.4), ([0.2] * FEATURE_COUNT, 0.6)]

    def test_malformed_records_ignored(self):
        records = [
            {"features": [0.1] * 3, "target": 0.4},
            {"features": [0.1] * FEATURE_COUNT, "target": None},
            {"target": 0.2},
        ]
        assert prepare_training_data([], [], records) == []

    def test_synthesized_from_missions(self, make_mission, healthy_person, critical_person):
        """Test one sample per assigned person, labeled with overall risk."""
        mission = make_mission(passenger_ids=[healthy_person.id, critical_person.id])

        samples = prepare_training_data([mission], [healthy_person, critical_person])

        assert len(samples) == 2
        features, target = samples[1]
        assessment = score_person(critical_person, mission)
        assert features == assessment.features
        assert target == assessment.overall_risk

    def test_empty_missions_skipped(self, moon_mission, healthy_person):
        assert prepare_training_data([moon_mission], [healthy_person]) == []

    def test_random_training_data(self, rng):
        samples = random_training_data(25, rng)

        assert len(samples) == 25
        for features, target in samples:
            assert len(features) == FEATURE_COUNT
            assert 0.2 <= target <= 0.5


class TestTrainer:
    """Test retraining."""

    def test_retrain_on_random_data(self, trainer, handle, fast_settings):
        """Test retraining with no data falls back to random samples."""
        result = trainer.retrain([], [])

        assert result.status == STATUS_COMPLETED
        assert result.training_sample_count == fast_settings.synthetic_sample_count
        assert handle.current.trained
        assert handle.current.last_trained_at == result.timestamp

    def test_retrain_publishes_new_estimator(self, trainer, handle):
        """Test the published estimator is replaced, not mutated."""
        before = handle.current.estimator
        features = [0.4] * FEATURE_COUNT
        before_output = before.predict(features)

        trainer.retrain([], [], [{"features": features, "target": 1.0}])

        assert handle.current.estimator is not before
        assert before.predict(features) == before_output

    def test_retrain_with_missions(self, trainer, handle, make_mission, healthy_person, critical_person):
        mission = make_mission(passenger_ids=[healthy_person.id, critical_person.id])

        result = trainer.retrain([mission], [healthy_person, critical_person])

        assert result.status == STATUS_COMPLETED
        assert result.training_sample_count == 2
        assert handle.current.sample_count == 2

    def test_already_training(self, trainer, handle):
        """Test a second run while one holds the lock is rejected."""
        trainer._run_lock.acquire()
        try:
            assert trainer.is_training
            result = trainer.retrain([], [])
        finally:
            trainer._run_lock.release()

        assert result.status == STATUS_ALREADY_TRAINING
        assert not handle.current.trained
        assert not trainer.is_training

    def test_concurrent_retrain(self, trainer):
        """Test concurrent calls each complete or report a run in progress."""
        results = []
        barrier = threading.Barrier(4)

        def run():
            barrier.wait()
            results.append(trainer.retrain([], []).status)

        threads = [threading.Thread(target=run) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert STATUS_COMPLETED in results
        assert set(results) <= {STATUS_COMPLETED, STATUS_ALREADY_TRAINING}

    def test_failed_training_keeps_state(self, trainer, handle):
        """Test errors propagate and release the lock."""
        before = handle.current

        class Boom(PerceptronEstimator):
            def partial_fit(self, features, target, learning_rate):
                raise RuntimeError("diverged")

        handle.publish(before.__class__(estimator=Boom(seed=1)))
        published = handle.current

        with pytest.raises(RuntimeError, match="diverged"):
            trainer.retrain([], [])

        assert handle.current is published
        assert not trainer.is_training

    def test_status(self, trainer):
        status = trainer.status()

        assert status["is_trained"] is False
        assert status["is_training"] is False
        assert status["training_data_size"] == 0
        assert status["last_training_time"] is None
        assert status["model_architecture"] == "Perceptron(8, 12, 8, 1)"

        trainer.retrain([], [])

        assert trainer.status()["is_trained"] is True

    def test_result_to_dict(self, trainer):
        data = trainer.retrain([], []).to_dict()
        assert data["status"] == "completed"
        assert data["training_sample_count"] > 0
