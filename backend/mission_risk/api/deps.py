"""
Shared dependencies for the API routers.

Process-wide singletons: entity repositories, the estimator handle, the
trainer and the event bus. Each is cached so every router sees the same
instance; tests reset them through `reset_state`.
"""
from functools import lru_cache
from typing import Any, Optional
import logging

from fastapi.encoders import jsonable_encoder

from mission_risk.config import get_settings
from mission_risk.core.entities import Mission, Person
from mission_risk.core.estimators.estimator_base import RiskEstimatorBase
from mission_risk.core.events import EventBus
from mission_risk.core.trainer import EstimatorHandle, Trainer, default_estimator_factory
from mission_risk.db.repository import InMemoryRepository


logger = logging.getLogger(__name__)


@lru_cache
def get_person_repository() -> InMemoryRepository[Person]:
    return InMemoryRepository("Passenger")


@lru_cache
def get_mission_repository() -> InMemoryRepository[Mission]:
    return InMemoryRepository("Mission")


@lru_cache
def get_estimator_handle() -> EstimatorHandle:
    return EstimatorHandle(default_estimator_factory(get_settings()))


@lru_cache
def get_trainer() -> Trainer:
    return Trainer(get_estimator_handle(), get_settings())


@lru_cache
def get_event_bus() -> EventBus:
    return EventBus(history_size=get_settings().event_history_size)


def current_estimator() -> Optional[RiskEstimatorBase]:
    """
    Estimator snapshot for one request.

    Returns None when the estimator cannot be constructed; scoring then
    uses the deterministic factor mix alone.
    """
    try:
        return get_estimator_handle().current.estimator
    except Exception as e:
        logger.error(f"Risk estimator unavailable, using deterministic scoring: {e}")
        return None


def publish(name: str, payload: Any) -> None:
    """Publish an event with a JSON-compatible payload."""
    get_event_bus().publish(name, jsonable_encoder(payload))


def reset_state() -> None:
    """Drop all in-memory entities, the estimator and the event history."""
    get_person_repository().clear()
    get_mission_repository().clear()
    get_estimator_handle().reset()
    get_event_bus().clear()
