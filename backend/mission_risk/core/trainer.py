"""
Estimator state and retraining.

The live estimator is published through an EstimatorHandle as an
immutable EstimatorState snapshot. Scorers read `handle.current` once
per request and keep using that snapshot; the trainer works on a copy
of the estimator and publishes a new snapshot when it is done, so a
reader never sees partially updated parameters.

Only one training run may be in flight. A second concurrent call returns
immediately with status "already_training" and touches nothing.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, TYPE_CHECKING
import logging
import threading

import numpy as np

from mission_risk.config import Settings, get_settings
from mission_risk.core.estimators import FEATURE_COUNT, RiskEstimatorBase, create_estimator
from mission_risk.core.mission_aggregator import assigned_people
from mission_risk.core.risk_scorer import MissionContext, build_features, score_person

if TYPE_CHECKING:
    from mission_risk.core.entities import Mission, Person


logger = logging.getLogger(__name__)

STEPS_PER_SAMPLE = 10
RANDOM_TARGET_LOW = 0.2
RANDOM_TARGET_SPAN = 0.3

STATUS_COMPLETED = "completed"
STATUS_ALREADY_TRAINING = "already_training"

# (features, target)
TrainingSample = Tuple[List[float], float]


@dataclass(frozen=True)
class EstimatorState:
    """Immutable snapshot of the published estimator."""
    estimator: RiskEstimatorBase
    trained: bool = False
    last_trained_at: Optional[datetime] = None
    sample_count: int = 0


class EstimatorHandle:
    """
    Holder for the current EstimatorState.

    Args:
        factory: Zero-argument callable returning a fresh estimator
    """

    def __init__(self, factory):
        self._factory = factory
        self._lock = threading.Lock()
        self._state: Optional[EstimatorState] = None

    @property
    def current(self) -> EstimatorState:
        """Current snapshot, constructing the estimator on first use."""
        state = self._state
        if state is None:
            return self.ensure()
        return state

    def ensure(self) -> EstimatorState:
        with self._lock:
            if self._state is None:
                logger.info("Initializing risk estimator")
                self._state = EstimatorState(estimator=self._factory())
            return self._state

    def publish(self, state: EstimatorState) -> None:
        with self._lock:
            self._state = state

    def reset(self) -> None:
        with self._lock:
            self._state = None

    @property
    def initialized(self) -> bool:
        return self._state is not None


def default_estimator_factory(settings: Optional[Settings] = None):
    settings = settings or get_settings()

    def factory() -> RiskEstimatorBase:
        return create_estimator(settings.default_estimator, seed=settings.estimator_seed)

    return factory


@dataclass
class TrainingResult:
    status: str
    training_sample_count: int = 0
    timestamp: datetime = field(default_factory=datetime.now)
    message: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status,
            "message": self.message,
            "training_sample_count": self.training_sample_count,
            "timestamp": self.timestamp,
        }


def prepare_training_data(
    missions: Iterable["Mission"],
    people: Sequence["Person"],
    historical_records: Iterable[Any] = ()
) -> List[TrainingSample]:
    """
    Build labeled training samples.

    Historical records with both `features` and `target` are used when
    any exist. Otherwise one sample is synthesized per (mission, assigned
    person) pair, labeled with the deterministic overall risk.

    Args:
        missions: Mission snapshot
        people: Person snapshot
        historical_records: Objects or dicts carrying `features` and `target`

    Returns:
        List of (features, target); may be empty
    """
    samples: List[TrainingSample] = []

    for record in historical_records or ():
        if isinstance(record, dict):
            features, target = record.get("features"), record.get("target")
        else:
            features, target = getattr(record, "features", None), getattr(record, "target", None)
        if features and target is not None and len(features) == FEATURE_COUNT:
            samples.append((list(features), float(target)))

    if samples:
        return samples

    for mission in missions:
        passengers = assigned_people(mission, people)
        if not passengers:
            continue
        context = MissionContext.from_mission(mission)
        for person in passengers:
            assessment = score_person(person, context=context)
            if assessment.degraded:
                continue
            samples.append((build_features(person, context), assessment.overall_risk))

    return samples


def random_training_data(count: int, rng: np.random.Generator) -> List[TrainingSample]:
    """Random feature vectors with targets in [0.2, 0.5]."""
    features = rng.random((count, FEATURE_COUNT))
    targets = rng.random(count) * RANDOM_TARGET_SPAN + RANDOM_TARGET_LOW
    return [(row.tolist(), float(t)) for row, t in zip(features, targets)]


class Trainer:
    """
    Serialized retraining of the published estimator.

    Args:
        handle: Estimator handle to publish into
        settings: Training parameters; application settings when omitted
        rng: Random generator for sampling
    """

    def __init__(
        self,
        handle: EstimatorHandle,
        settings: Optional[Settings] = None,
        rng: Optional[np.random.Generator] = None
    ):
        self.handle = handle
        self.settings = settings or get_settings()
        self.rng = rng if rng is not None else np.random.default_rng(self.settings.estimator_seed)
        self._run_lock = threading.Lock()

    @property
    def is_training(self) -> bool:
        return self._run_lock.locked()

    def retrain(
        self,
        missions: Iterable["Mission"],
        people: Sequence["Person"],
        historical_records: Iterable[Any] = ()
    ) -> TrainingResult:
        """
        Retrain the estimator and publish the result.

        Args:
            missions: Mission snapshot
            people: Person snapshot
            historical_records: Labeled samples from stored assessments

        Returns:
            TrainingResult with status "completed", or "already_training"
            if another run holds the lock

        Raises:
            Exception: Errors during training propagate; the lock is
                released and the published state is unchanged
        """
        if not self._run_lock.acquire(blocking=False):
            logger.info("Training already in progress")
            return TrainingResult(
                status=STATUS_ALREADY_TRAINING,
                message="Training already in progress",
            )

        try:
            logger.info("Retraining risk estimator...")
            current = self.handle.current

            samples = prepare_training_data(missions, people, historical_records)
            if not samples:
                logger.info("No training data available, using random data")
                samples = random_training_data(self.settings.synthetic_sample_count, self.rng)

            estimator = current.estimator.copy()
            steps = min(self.settings.max_training_steps, len(samples) * STEPS_PER_SAMPLE)
            logger.info(f"Training {estimator.get_estimator_name()} with {len(samples)} samples, {steps} steps")

            errors = []
            for index in self.rng.integers(0, len(samples), size=steps):
                features, target = samples[index]
                errors.append(estimator.partial_fit(features, target, self.settings.learning_rate))

            if errors:
                logger.debug(f"Mean squared error over run: {np.mean(errors):.5f}")

            trained_at = datetime.now()
            self.handle.publish(EstimatorState(
                estimator=estimator,
                trained=True,
                last_trained_at=trained_at,
                sample_count=len(samples),
            ))

            logger.info("Risk estimator training completed")
            return TrainingResult(
                status=STATUS_COMPLETED,
                training_sample_count=len(samples),
                timestamp=trained_at,
                message="Risk estimator training completed successfully",
            )
        finally:
            self._run_lock.release()

    def status(self) -> Dict[str, Any]:
        """Trained flag, sample count, last training time and in-progress flag."""
        state = self.handle.current
        return {
            "is_trained": state.trained,
            "is_training": self.is_training,
            "training_data_size": state.sample_count,
            "last_training_time": state.last_trained_at,
            "estimator": state.estimator.get_estimator_name(),
            "model_architecture": state.estimator.get_architecture(),
        }
