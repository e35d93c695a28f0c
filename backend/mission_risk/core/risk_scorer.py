"""
Per-person risk scoring.

A person (and optionally the mission they are assigned to) is turned into
two numbers that are reported side by side:

- risk_score: output of the trainable estimator on an 8-element feature
  vector, clamped to [0, 1]
- overall_risk: deterministic weighted sum of four factors

    passenger   = 0.3*age + 0.4*health + 0.3*experience
    mission     = route complexity / 10
    environment = destination environment risk
    technology  = 1 - vehicle reliability

    overall_risk = 0.4*passenger + 0.3*mission + 0.2*environment + 0.1*technology

The two are not expected to agree. Risk level is derived from overall_risk.

Scoring never raises: any failure is logged and converted to a degraded
assessment (score 0.5, MEDIUM, no factors).
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING
import logging

import numpy as np

from mission_risk.core.catalog import Destination, RadiationLevel, get_destination, get_vehicle
from mission_risk.core.health import ConditionSeverity
from mission_risk.core.route import EXTREME_COLD_C, compute_route
from mission_risk.core.estimators.estimator_base import RiskEstimatorBase

if TYPE_CHECKING:
    from mission_risk.core.entities import Mission, Person


logger = logging.getLogger(__name__)

# Normalization bounds
AGE_BOUNDS = (18.0, 80.0)
EXPERIENCE_BOUNDS = (0.0, 10.0)
COMPLEXITY_BOUNDS = (1.0, 10.0)
DISTANCE_BOUNDS = (0.0, 10000.0)
GRAVITY_BOUNDS = (0.0, 3.0)

# Fallbacks used when a mission is given but a detail is missing
FALLBACK_COMPLEXITY = 5.0
FALLBACK_DISTANCE = 100.0
FALLBACK_RELIABILITY = 0.9
FALLBACK_GRAVITY = 1.0

# Neutral value for every mission-derived input when there is no mission
NEUTRAL = 0.5

PASSENGER_WEIGHTS = {"age": 0.3, "health": 0.4, "experience": 0.3}
FACTOR_WEIGHTS = {"passenger": 0.4, "mission": 0.3, "environment": 0.2, "technology": 0.1}

LOW_RISK_MAX = 0.3
MEDIUM_RISK_MAX = 0.6

HIGH_FACTOR_THRESHOLD = 0.7
TECHNOLOGY_FACTOR_THRESHOLD = 0.3

COLD_C: float = -100.0


class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


def normalize(value: float, lower: float, upper: float) -> float:
    """Linear map of value onto [0, 1], clamped."""
    return float(np.clip((value - lower) / (upper - lower), 0.0, 1.0))


def risk_level(overall_risk: float) -> RiskLevel:
    """LOW up to 0.3, MEDIUM up to 0.6, else HIGH."""
    if overall_risk <= LOW_RISK_MAX:
        return RiskLevel.LOW
    if overall_risk <= MEDIUM_RISK_MAX:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def environment_risk(destination: Optional[Destination]) -> float:
    """
    Environment risk of a destination.

    Base 0.5, plus radiation (Extreme +0.3, High +0.2, Moderate +0.1),
    temperature (extreme label or -200 °C and colder +0.2, otherwise
    -100 °C and colder +0.1), no atmosphere +0.1, CO2 atmosphere +0.1,
    gravity above 2 g or below 0.2 g +0.1. Clamped to [0, 1].

    Args:
        destination: Destination, or None for the neutral value

    Returns:
        Environment risk in [0, 1]
    """
    if destination is None:
        return NEUTRAL

    risk = 0.5

    if destination.radiation == RadiationLevel.EXTREME:
        risk += 0.3
    elif destination.radiation == RadiationLevel.HIGH:
        risk += 0.2
    elif destination.radiation == RadiationLevel.MODERATE:
        risk += 0.1

    min_temp = destination.min_temperature_c
    if destination.has_extreme_temperature_label or (min_temp is not None and min_temp <= EXTREME_COLD_C):
        risk += 0.2
    elif min_temp is not None and min_temp <= COLD_C:
        risk += 0.1

    if not destination.has_atmosphere:
        risk += 0.1
    if destination.has_co2_atmosphere:
        risk += 0.1

    if destination.gravity > 2 or destination.gravity < 0.2:
        risk += 0.1

    return float(np.clip(risk, 0.0, 1.0))


@dataclass(frozen=True)
class MissionContext:
    """Mission-derived scoring inputs.

    Holds the five mission features fed to the estimator and the three
    mission-side factors. `default()` is the context used when a person is
    scored without a mission.
    """
    complexity_feature: float
    distance_feature: float
    reliability_feature: float
    radiation_feature: float
    gravity_feature: float
    mission_factor: float
    environment_factor: float
    technology_factor: float

    @classmethod
    def default(cls) -> "MissionContext":
        return cls(
            complexity_feature=NEUTRAL,
            distance_feature=NEUTRAL,
            reliability_feature=NEUTRAL,
            radiation_feature=NEUTRAL,
            gravity_feature=NEUTRAL,
            mission_factor=NEUTRAL,
            environment_factor=NEUTRAL,
            technology_factor=NEUTRAL,
        )

    @classmethod
    def from_mission(cls, mission: "Mission") -> "MissionContext":
        """Build the context from a mission's route, destination and vehicle."""
        destination = get_destination(mission.destination_id)
        vehicle = get_vehicle(mission.vehicle_id)

        route = mission.route
        if route is None and destination is not None and vehicle is not None:
            route = compute_route(mission.destination_id, mission.vehicle_id)

        complexity = route.complexity if route is not None else FALLBACK_COMPLEXITY
        distance = route.distance if route is not None else FALLBACK_DISTANCE
        reliability = vehicle.reliability if vehicle is not None else FALLBACK_RELIABILITY
        gravity = destination.gravity if destination is not None else FALLBACK_GRAVITY
        extreme_radiation = destination is not None and destination.radiation == RadiationLevel.EXTREME

        return cls(
            complexity_feature=normalize(complexity, *COMPLEXITY_BOUNDS),
            distance_feature=normalize(distance, *DISTANCE_BOUNDS),
            reliability_feature=normalize(reliability, 0.0, 1.0),
            radiation_feature=1.0 if extreme_radiation else 0.0,
            gravity_feature=normalize(gravity, *GRAVITY_BOUNDS),
            mission_factor=complexity / 10.0,
            environment_factor=environment_risk(destination),
            technology_factor=1.0 - reliability,
        )


@dataclass
class PersonRiskAssessment:
    """Risk assessment for one person.

    The timestamp is excluded from equality so repeated assessments of
    unchanged inputs compare equal.
    """
    person_id: str
    person_name: str
    risk_score: float
    overall_risk: float
    risk_level: RiskLevel
    factors: Dict[str, float] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)
    features: List[float] = field(default_factory=list)
    confidence: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now, compare=False)

    @property
    def degraded(self) -> bool:
        return not self.factors

    def to_dict(self) -> Dict[str, Any]:
        return {
            "person_id": self.person_id,
            "person_name": self.person_name,
            "risk_score": self.risk_score,
            "overall_risk": self.overall_risk,
            "risk_level": self.risk_level.value,
            "factors": dict(self.factors),
            "recommendations": list(self.recommendations),
            "features": list(self.features),
            "confidence": self.confidence,
            "timestamp": self.timestamp,
        }


def health_risk_input(person: "Person") -> float:
    """Health input: assessment, else inverse legacy health score, else 0.5."""
    if person.health_assessment is not None:
        return float(person.health_assessment.overall_risk)
    if person.health_score is not None:
        return normalize(100.0 - person.health_score, 0.0, 100.0)
    return NEUTRAL


def build_features(person: "Person", context: MissionContext) -> List[float]:
    """
    Assemble the estimator feature vector.

    Order: age, health risk, experience, route complexity, route distance,
    vehicle reliability, extreme radiation, destination gravity.
    """
    return [
        normalize(person.age, *AGE_BOUNDS),
        health_risk_input(person),
        normalize(person.experience_level, *EXPERIENCE_BOUNDS),
        context.complexity_feature,
        context.distance_feature,
        context.reliability_feature,
        context.radiation_feature,
        context.gravity_feature,
    ]


def _recommendations(factors: Dict[str, float], person: "Person") -> List[str]:
    recommendations = []

    if factors["passenger"] > HIGH_FACTOR_THRESHOLD:
        recommendations.append("High passenger risk: Consider additional medical screening")
    if factors["mission"] > HIGH_FACTOR_THRESHOLD:
        recommendations.append("High mission complexity: Additional training recommended")
    if factors["environment"] > HIGH_FACTOR_THRESHOLD:
        recommendations.append("High environment risk: Enhanced protection equipment required")
    if factors["technology"] > TECHNOLOGY_FACTOR_THRESHOLD:
        recommendations.append("Technology risk: Backup systems recommended")

    health = person.health_assessment
    if health is not None:
        critical = health.issues_for(ConditionSeverity.CRITICAL)
        if critical:
            names = ", ".join(c.name for c in critical)
            recommendations.append(
                f"Critical health issues detected ({names}): Mission participation not recommended"
            )
        high = health.issues_for(ConditionSeverity.HIGH)
        if high:
            names = ", ".join(c.name for c in high)
            recommendations.append(f"High-risk health issues ({names}): Medical clearance required")

    return recommendations or ["Standard monitoring recommended"]


def degraded_assessment(person: "Person") -> PersonRiskAssessment:
    return PersonRiskAssessment(
        person_id=getattr(person, "id", ""),
        person_name=getattr(person, "name", ""),
        risk_score=0.5,
        overall_risk=0.5,
        risk_level=RiskLevel.MEDIUM,
        recommendations=["Error in risk assessment"],
    )


def score_person(
    person: "Person",
    mission: Optional["Mission"] = None,
    estimator: Optional[RiskEstimatorBase] = None,
    context: Optional[MissionContext] = None
) -> PersonRiskAssessment:
    """
    Score one person, optionally in the context of a mission.

    Args:
        person: Person to score
        mission: Mission the person is assigned to; the default context
            is used when omitted
        estimator: Estimator for risk_score; when None, risk_score
            mirrors overall_risk
        context: Precomputed mission context (overrides `mission`)

    Returns:
        PersonRiskAssessment; a degraded assessment if scoring fails
    """
    try:
        if context is None:
            context = MissionContext.from_mission(mission) if mission is not None else MissionContext.default()

        features = build_features(person, context)
        age_n, health, experience_n = features[0], features[1], features[2]

        factors = {
            "passenger": (
                age_n * PASSENGER_WEIGHTS["age"]
                + health * PASSENGER_WEIGHTS["health"]
                + experience_n * PASSENGER_WEIGHTS["experience"]
            ),
            "mission": context.mission_factor,
            "environment": context.environment_factor,
            "technology": context.technology_factor,
        }

        overall = float(np.clip(
            sum(factors[name] * weight for name, weight in FACTOR_WEIGHTS.items()),
            0.0, 1.0,
        ))

        score = estimator.predict(features) if estimator is not None else overall

        return PersonRiskAssessment(
            person_id=person.id,
            person_name=person.name,
            risk_score=score,
            overall_risk=overall,
            risk_level=risk_level(overall),
            factors=factors,
            recommendations=_recommendations(factors, person),
            features=features,
            confidence=1.0 - abs(score - overall),
        )
    except Exception:
        logger.exception(f"Error in risk assessment for person {getattr(person, 'id', '?')}")
        return degraded_assessment(person)


def batch_assess(
    people: Sequence["Person"],
    mission: Optional["Mission"] = None,
    estimator: Optional[RiskEstimatorBase] = None
) -> List[PersonRiskAssessment]:
    """Score several people against the same mission context."""
    try:
        context = MissionContext.from_mission(mission) if mission is not None else MissionContext.default()
    except Exception:
        logger.exception("Could not build mission context for batch assessment")
        return [degraded_assessment(p) for p in people]
    return [score_person(p, estimator=estimator, context=context) for p in people]
