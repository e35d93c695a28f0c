"""
Read-side reductions over assessments and risk factors.

These feed the insight, statistics and risk analysis endpoints. All
functions are pure and return plain dicts.
"""
from typing import Any, Dict, List, Optional, Sequence, TYPE_CHECKING

import numpy as np

from mission_risk.core.risk_scorer import PersonRiskAssessment, RiskLevel

if TYPE_CHECKING:
    from mission_risk.core.entities import Mission


HIGH_AVERAGE_RISK = 0.7
HIGH_RISK_SHARE = 0.3
HIGH_ROUTE_COMPLEXITY = 7.0
TOP_FACTOR_COUNT = 3

HIGH_SEVERITY = 8
MEDIUM_SEVERITY = 4
TOP_RISK_COUNT = 5


def _distribution(levels: Sequence[str]) -> Dict[str, int]:
    return {
        "low": sum(1 for level in levels if level == RiskLevel.LOW.value),
        "medium": sum(1 for level in levels if level == RiskLevel.MEDIUM.value),
        "high": sum(1 for level in levels if level == RiskLevel.HIGH.value),
    }


def assessment_insights(
    assessments: Sequence[PersonRiskAssessment],
    mission: Optional["Mission"] = None
) -> Dict[str, Any]:
    """
    Summarize a batch of person assessments.

    Args:
        assessments: Person risk assessments
        mission: Mission they were assessed against, if any

    Returns:
        Dict with average_risk, risk_distribution, top_risk_factors
        (three highest mean factors), recommendations and total_passengers
    """
    if not assessments:
        return {
            "average_risk": 0.0,
            "risk_distribution": {"low": 0, "medium": 0, "high": 0},
            "top_risk_factors": [],
            "recommendations": [],
            "total_passengers": 0,
        }

    average_risk = float(np.mean([a.overall_risk for a in assessments]))
    distribution = _distribution([a.risk_level.value for a in assessments])

    factor_values: Dict[str, List[float]] = {}
    for assessment in assessments:
        for name, value in assessment.factors.items():
            factor_values.setdefault(name, []).append(value)

    top_factors = sorted(
        ({"factor": name, "average_value": float(np.mean(values))} for name, values in factor_values.items()),
        key=lambda f: f["average_value"],
        reverse=True,
    )[:TOP_FACTOR_COUNT]

    recommendations = []
    if average_risk > HIGH_AVERAGE_RISK:
        recommendations.append("High overall risk detected - consider mission postponement")
    if distribution["high"] > len(assessments) * HIGH_RISK_SHARE:
        recommendations.append("Significant number of high-risk passengers - additional screening recommended")
    if mission is not None and mission.route is not None and mission.route.complexity > HIGH_ROUTE_COMPLEXITY:
        recommendations.append("High mission complexity - additional training required")

    return {
        "average_risk": average_risk,
        "risk_distribution": distribution,
        "top_risk_factors": top_factors,
        "recommendations": recommendations,
        "total_passengers": len(assessments),
    }


def assessment_overview(records: Sequence[Sequence[Dict[str, Any]]]) -> Dict[str, Any]:
    """
    Statistics over stored assessment records.

    Args:
        records: One list of serialized person assessments per stored record

    Returns:
        Dict with total counts, average risk score, average confidence and
        the distribution by risk level; averages are 0 when empty
    """
    flat = [a for record in records for a in record]
    scores = [a.get("risk_score", 0.0) for a in flat]
    confidences = [a.get("confidence", 0.0) for a in flat]

    return {
        "total_assessments": len(records),
        "total_passenger_assessments": len(flat),
        "average_risk_score": float(np.mean(scores)) if scores else 0.0,
        "average_confidence": float(np.mean(confidences)) if confidences else 0.0,
        "risk_distribution": _distribution([a.get("risk_level") for a in flat]),
    }


def risk_factor_summary(risks: Sequence[Any]) -> Dict[str, Any]:
    """
    Severity analysis of active registry risk factors.

    Args:
        risks: Objects with name, category, severity (0-10),
            probability and status attributes

    Returns:
        Dict with counts by severity band, averages, categories and the
        five risks with the highest severity x probability
    """
    active = [r for r in risks if r.status == "ACTIVE"]
    severities = [r.severity for r in active]
    probabilities = [r.probability for r in active]

    categories: List[str] = []
    for r in active:
        if r.category not in categories:
            categories.append(r.category)

    top = sorted(active, key=lambda r: r.severity * r.probability, reverse=True)[:TOP_RISK_COUNT]

    return {
        "total_risks": len(active),
        "high_severity": sum(1 for s in severities if s >= HIGH_SEVERITY),
        "medium_severity": sum(1 for s in severities if MEDIUM_SEVERITY <= s < HIGH_SEVERITY),
        "low_severity": sum(1 for s in severities if s < MEDIUM_SEVERITY),
        "average_severity": float(np.mean(severities)) if severities else 0.0,
        "average_probability": float(np.mean(probabilities)) if probabilities else 0.0,
        "categories": categories,
        "top_risks": top,
    }
