"""
Mission-level risk aggregation.

Scores every person assigned to a mission and combines the results with
mission-level factors:

    overall_risk = 0.4*mean(person overall risk) + 0.3*complexity
                   + 0.2*environment + 0.1*technology

The aggregation is deterministic: identical inputs give equal results.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING
import logging

import numpy as np

from mission_risk.core.catalog import get_destination, get_vehicle
from mission_risk.core.health import ConditionSeverity
from mission_risk.core.risk_scorer import (
    FALLBACK_DISTANCE,
    FALLBACK_RELIABILITY,
    DISTANCE_BOUNDS,
    FACTOR_WEIGHTS,
    HIGH_FACTOR_THRESHOLD,
    TECHNOLOGY_FACTOR_THRESHOLD,
    NEUTRAL,
    MissionContext,
    PersonRiskAssessment,
    RiskLevel,
    environment_risk,
    normalize,
    risk_level,
    score_person,
)
from mission_risk.core.estimators.estimator_base import RiskEstimatorBase

if TYPE_CHECKING:
    from mission_risk.core.entities import Mission, Person


logger = logging.getLogger(__name__)

CREW_BOUNDS = (1.0, 10.0)
DURATION_BOUNDS = (1.0, 365.0)
DEFAULT_DURATION_DAYS = 7.0
SMALL_CREW = 3


@dataclass
class MissionRiskAssessment:
    """Mission-level risk assessment."""
    overall_risk: float
    risk_level: RiskLevel
    passenger_risks: List[PersonRiskAssessment] = field(default_factory=list)
    mission_factors: Dict[str, float] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_risk": self.overall_risk,
            "risk_level": self.risk_level.value,
            "passenger_risks": [p.to_dict() for p in self.passenger_risks],
            "mission_factors": dict(self.mission_factors),
            "recommendations": list(self.recommendations),
            "timestamp": self.timestamp,
        }


def mission_factors(mission: "Mission") -> Dict[str, float]:
    """
    Mission-level risk factors.

    Returns:
        Dict with complexity, distance, environment, technology,
        crew_size and duration, each in [0, 1]
    """
    route = mission.route
    vehicle = get_vehicle(mission.vehicle_id)
    reliability = vehicle.reliability if vehicle is not None else FALLBACK_RELIABILITY

    return {
        "complexity": route.complexity / 10.0 if route is not None else NEUTRAL,
        "distance": normalize(route.distance if route is not None else FALLBACK_DISTANCE, *DISTANCE_BOUNDS),
        "environment": environment_risk(get_destination(mission.destination_id)),
        "technology": 1.0 - reliability,
        "crew_size": normalize(mission.crew_count or 1, *CREW_BOUNDS),
        "duration": normalize(mission.duration_days or DEFAULT_DURATION_DAYS, *DURATION_BOUNDS),
    }


def _recommendations(
    mission: "Mission",
    passengers: List["Person"],
    passenger_risks: List[PersonRiskAssessment],
    factors: Dict[str, float]
) -> List[str]:
    recommendations = []

    high_risk = sum(1 for pr in passenger_risks if pr.risk_level == RiskLevel.HIGH)
    if high_risk > 0:
        recommendations.append(f"{high_risk} passengers have high risk profiles")

    if factors["complexity"] > HIGH_FACTOR_THRESHOLD:
        recommendations.append("High mission complexity: Consider additional crew training")
    if factors["environment"] > HIGH_FACTOR_THRESHOLD:
        recommendations.append("High environment risk: Enhanced safety protocols required")
    if factors["technology"] > TECHNOLOGY_FACTOR_THRESHOLD:
        recommendations.append("Technology risk: Implement backup systems")
    if mission.crew_count < SMALL_CREW:
        recommendations.append("Small crew size: Consider additional personnel for safety")

    for person in passengers:
        health = person.health_assessment
        if health is None:
            continue
        for condition in health.issues_for(ConditionSeverity.CRITICAL):
            recommendations.append(
                f"{person.name}: {condition.name} is a critical health issue. "
                f"Mission participation not recommended"
            )
        for condition in health.issues_for(ConditionSeverity.HIGH):
            recommendations.append(
                f"{person.name}: {condition.name} requires medical clearance"
            )

    return recommendations or ["Mission appears safe with current configuration"]


def assigned_people(mission: "Mission", people: Iterable["Person"]) -> List["Person"]:
    """People assigned to the mission, in the mission's boarding order."""
    by_id = {p.id: p for p in people}
    return [by_id[pid] for pid in mission.passenger_ids if pid in by_id]


def assess_mission(
    mission: "Mission",
    people: Iterable["Person"],
    estimator: Optional[RiskEstimatorBase] = None
) -> MissionRiskAssessment:
    """
    Assess the risk of a mission with its assigned passengers.

    Args:
        mission: Mission to assess
        people: Person snapshot; filtered to the mission's passenger ids
        estimator: Estimator used for the per-person risk scores

    Returns:
        MissionRiskAssessment; risk 0.5 / MEDIUM when nobody is assigned
    """
    factors = mission_factors(mission)
    passengers = assigned_people(mission, people)

    if not passengers:
        return MissionRiskAssessment(
            overall_risk=NEUTRAL,
            risk_level=RiskLevel.MEDIUM,
            mission_factors=factors,
            recommendations=["No passengers assigned to mission"],
        )

    context = MissionContext.from_mission(mission)
    passenger_risks = [
        score_person(person, estimator=estimator, context=context)
        for person in passengers
    ]

    average_passenger_risk = float(np.mean([pr.overall_risk for pr in passenger_risks]))
    overall = (
        average_passenger_risk * FACTOR_WEIGHTS["passenger"]
        + factors["complexity"] * FACTOR_WEIGHTS["mission"]
        + factors["environment"] * FACTOR_WEIGHTS["environment"]
        + factors["technology"] * FACTOR_WEIGHTS["technology"]
    )
    overall = float(np.clip(overall, 0.0, 1.0))

    logger.debug(
        f"Mission {mission.id}: {len(passengers)} passengers, overall risk {overall:.3f}"
    )

    return MissionRiskAssessment(
        overall_risk=overall,
        risk_level=risk_level(overall),
        passenger_risks=passenger_risks,
        mission_factors=factors,
        recommendations=_recommendations(mission, passengers, passenger_risks, factors),
    )
