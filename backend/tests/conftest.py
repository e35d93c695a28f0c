"""
Pytest configuration and shared fixtures.

This module provides common fixtures for all test modules.
"""

import pytest
import numpy as np
from datetime import datetime
from typing import List

from mission_risk.config import Settings
from mission_risk.core.entities import Mission, Person
from mission_risk.core.route import compute_route


# Person fixtures
@pytest.fixture
def make_person():
    """Factory for assessed passengers."""
    def factory(name: str = "Ada Lovelace", age: int = 35, experience_level: int = 5,
                health_issues: List[str] = None, **kwargs) -> Person:
        person = Person(name=name, age=age, experience_level=experience_level, **kwargs)
        person.set_health_issues(health_issues or [])
        return person
    return factory


@pytest.fixture
def healthy_person(make_person) -> Person:
    """Experienced passenger with no conditions."""
    return make_person(name="Healthy Harriet", age=30, experience_level=8)


@pytest.fixture
def critical_person(make_person) -> Person:
    """Elderly passenger with a mission-blocking condition."""
    return make_person(name="Critical Carl", age=80, experience_level=0, health_issues=["heart-disease"])


# Mission fixtures
@pytest.fixture
def make_mission():
    """Factory for missions with a computed route."""
    def factory(destination_id: str = "moon", vehicle_id: str = "sls", crew_count: int = 4,
                passenger_ids: List[str] = None, **kwargs) -> Mission:
        route = compute_route(destination_id, vehicle_id)
        return Mission(
            name=kwargs.pop("name", "Test Mission"),
            destination_id=destination_id,
            vehicle_id=vehicle_id,
            crew_count=crew_count,
            passenger_ids=list(passenger_ids or []),
            departure_time=kwargs.pop("departure_time", datetime(2030, 1, 1, 12, 0)),
            route=route,
            duration_days=route.travel_time_days,
            **kwargs,
        )
    return factory


@pytest.fixture
def moon_mission(make_mission) -> Mission:
    """Lunar mission on SLS with room for four."""
    return make_mission()


# Settings fixtures
@pytest.fixture
def fast_settings() -> Settings:
    """Small, deterministic search and training parameters."""
    return Settings(
        estimator_seed=7,
        optimizer_population=20,
        optimizer_generations=50,
        optimizer_time_budget_seconds=None,
        max_training_steps=200,
        synthetic_sample_count=20,
    )


@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator."""
    return np.random.default_rng(42)


# API fixtures
@pytest.fixture
def client():
    """Test client with fresh in-memory state and database."""
    from fastapi.testclient import TestClient
    from mission_risk.main import app
    from mission_risk.api.deps import reset_state
    from mission_risk.db.database import reset_db

    reset_state()
    reset_db()
    with TestClient(app) as test_client:
        yield test_client
    reset_state()
