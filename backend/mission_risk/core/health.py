"""
Health condition catalog and passenger health assessment.

The catalog is a fixed taxonomy of conditions in four severity tiers.
A passenger's condition list is reduced to an overall health risk (the
mean of the per-condition contributions), a risk tier, a mission
eligibility flag and tiered remediation recommendations.

Unknown condition keys are tolerated: they contribute a MODERATE risk of
0.35 and never block a mission.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Any
import logging


logger = logging.getLogger(__name__)

# Overall risk for a passenger with no reported conditions
NO_CONDITION_RISK: float = 0.05

# Contribution of a key that is not in the catalog
UNKNOWN_CONDITION_RISK: float = 0.35

# (minimum overall risk, tier), checked in order
TIER_THRESHOLDS = (
    (0.7, "CRITICAL"),
    (0.5, "HIGH"),
    (0.3, "MODERATE"),
)


class ConditionSeverity(str, Enum):
    """Severity tier of a health condition."""
    LOW = "LOW"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


SEVERITY_ORDER = (
    ConditionSeverity.CRITICAL,
    ConditionSeverity.HIGH,
    ConditionSeverity.MODERATE,
    ConditionSeverity.LOW,
)

_GROUP_HEADERS = {
    ConditionSeverity.CRITICAL: "CRITICAL: Passenger is NOT eligible for mission due to critical health issues.",
    ConditionSeverity.HIGH: "HIGH RISK: Medical clearance required before mission.",
    ConditionSeverity.MODERATE: "MODERATE RISK: Monitor during mission.",
    ConditionSeverity.LOW: "LOW RISK: Standard monitoring.",
}


@dataclass(frozen=True)
class HealthCondition:
    """Catalog entry for a health condition.

    Attributes:
        key: Catalog key (e.g. "heart-disease")
        name: Display name
        description: Free text description
        severity: Severity tier
        risk_score: Base risk contribution in [0, 1]
        mission_blocking: True if the condition alone makes a person ineligible
        treatment_required: Remediation note
        symptoms: Typical symptoms (used for search)
        category: Medical category (used for search)
        in_catalog: False for placeholder entries built from unknown keys
    """
    key: str
    name: str
    description: str
    severity: ConditionSeverity
    risk_score: float
    mission_blocking: bool
    treatment_required: str
    symptoms: tuple = ()
    category: str = ""
    in_catalog: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "name": self.name,
            "description": self.description,
            "risk_level": self.severity.value,
            "risk_score": self.risk_score,
            "mission_blocking": self.mission_blocking,
            "treatment_required": self.treatment_required,
            "symptoms": list(self.symptoms),
            "category": self.category,
        }


@dataclass
class HealthAssessment:
    """Health assessment derived from a passenger's condition list."""
    overall_risk: float
    risk_level: ConditionSeverity
    mission_eligible: bool
    recommendations: List[str] = field(default_factory=list)
    critical_issues: List[HealthCondition] = field(default_factory=list)
    high_risk_issues: List[HealthCondition] = field(default_factory=list)
    moderate_risk_issues: List[HealthCondition] = field(default_factory=list)
    low_risk_issues: List[HealthCondition] = field(default_factory=list)

    def issues_for(self, severity: ConditionSeverity) -> List[HealthCondition]:
        return {
            ConditionSeverity.CRITICAL: self.critical_issues,
            ConditionSeverity.HIGH: self.high_risk_issues,
            ConditionSeverity.MODERATE: self.moderate_risk_issues,
            ConditionSeverity.LOW: self.low_risk_issues,
        }[severity]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_risk": self.overall_risk,
            "risk_level": self.risk_level.value,
            "mission_eligible": self.mission_eligible,
            "recommendations": list(self.recommendations),
            "critical_issues": [c.to_dict() for c in self.critical_issues],
            "high_risk_issues": [c.to_dict() for c in self.high_risk_issues],
            "moderate_risk_issues": [c.to_dict() for c in self.moderate_risk_issues],
            "low_risk_issues": [c.to_dict() for c in self.low_risk_issues],
        }


def _condition(key, name, description, severity, risk_score, treatment, symptoms, category,
               blocking=False) -> HealthCondition:
    return HealthCondition(
        key=key, name=name, description=description, severity=severity,
        risk_score=risk_score, mission_blocking=blocking,
        treatment_required=treatment, symptoms=tuple(symptoms), category=category,
    )


_C = ConditionSeverity

HEALTH_CONDITIONS: Dict[str, HealthCondition] = {
    c.key: c for c in (
        # Critical - mission blocking
        _condition("heart-disease", "Heart Disease",
                   "Cardiovascular conditions including coronary artery disease, heart failure, arrhythmias",
                   _C.CRITICAL, 0.95, "Must be fully treated and cleared by cardiologist",
                   ["chest pain", "shortness of breath", "irregular heartbeat", "fatigue"],
                   "cardiovascular", blocking=True),
        _condition("cancer-active", "Active Cancer",
                   "Currently undergoing cancer treatment or active cancer diagnosis",
                   _C.CRITICAL, 0.90, "Must be in complete remission for at least 2 years",
                   ["unexplained weight loss", "fatigue", "pain", "lumps"],
                   "oncology", blocking=True),
        _condition("severe-respiratory", "Severe Respiratory Disease",
                   "Severe asthma, COPD, or other chronic respiratory conditions",
                   _C.CRITICAL, 0.85, "Must be well-controlled with medication",
                   ["severe shortness of breath", "wheezing", "chronic cough"],
                   "respiratory", blocking=True),
        _condition("diabetes-uncontrolled", "Uncontrolled Diabetes",
                   "Poorly controlled diabetes with frequent complications",
                   _C.CRITICAL, 0.80, "Must have stable blood glucose levels for 6+ months",
                   ["frequent urination", "excessive thirst", "fatigue", "blurred vision"],
                   "endocrine", blocking=True),
        _condition("severe-mental-health", "Severe Mental Health Conditions",
                   "Severe depression, bipolar disorder, schizophrenia, or other serious mental health conditions",
                   _C.CRITICAL, 0.75, "Must be stable on medication for 1+ year",
                   ["severe mood swings", "hallucinations", "suicidal thoughts"],
                   "psychiatric", blocking=True),
        # High - requires medical clearance
        _condition("hypertension", "Hypertension", "High blood pressure requiring medication",
                   _C.HIGH, 0.65, "Must be well-controlled with medication",
                   ["headaches", "dizziness", "chest pain"], "cardiovascular"),
        _condition("diabetes-controlled", "Controlled Diabetes",
                   "Well-controlled diabetes with stable blood glucose",
                   _C.HIGH, 0.60, "Regular monitoring and medication compliance",
                   ["increased thirst", "frequent urination"], "endocrine"),
        _condition("asthma-mild", "Mild Asthma", "Well-controlled asthma with infrequent symptoms",
                   _C.HIGH, 0.55, "Inhaler available and symptoms under control",
                   ["occasional wheezing", "mild shortness of breath"], "respiratory"),
        _condition("epilepsy-controlled", "Controlled Epilepsy",
                   "Epilepsy that is well-controlled with medication",
                   _C.HIGH, 0.70, "Seizure-free for 2+ years on medication",
                   ["seizures", "loss of consciousness"], "neurological"),
        _condition("depression-mild", "Mild Depression", "Mild to moderate depression under treatment",
                   _C.HIGH, 0.50, "Stable on medication and therapy",
                   ["sadness", "fatigue", "sleep changes"], "psychiatric"),
        # Moderate - requires monitoring
        _condition("allergies-severe", "Severe Allergies", "Severe food or environmental allergies",
                   _C.MODERATE, 0.40, "EpiPen available and allergy management plan",
                   ["severe allergic reactions", "anaphylaxis risk"], "immunological"),
        _condition("migraines", "Migraines", "Frequent or severe migraine headaches",
                   _C.MODERATE, 0.35, "Medication available and trigger avoidance",
                   ["severe headaches", "nausea", "light sensitivity"], "neurological"),
        _condition("back-pain-chronic", "Chronic Back Pain", "Chronic back pain requiring regular treatment",
                   _C.MODERATE, 0.30, "Physical therapy and pain management",
                   ["chronic pain", "limited mobility"], "musculoskeletal"),
        _condition("sleep-apnea", "Sleep Apnea", "Sleep apnea requiring CPAP or other treatment",
                   _C.MODERATE, 0.45, "CPAP machine available",
                   ["loud snoring", "daytime fatigue", "breathing pauses"], "respiratory"),
        _condition("anxiety-mild", "Mild Anxiety", "Mild anxiety or panic attacks",
                   _C.MODERATE, 0.25, "Therapy and/or medication as needed",
                   ["worry", "panic attacks", "restlessness"], "psychiatric"),
        # Low - minor impact
        _condition("cough", "Cough", "Minor cough or cold symptoms",
                   _C.LOW, 0.15, "Over-the-counter medication",
                   ["coughing", "sore throat", "mild congestion"], "respiratory"),
        _condition("headache-occasional", "Occasional Headaches", "Infrequent tension headaches",
                   _C.LOW, 0.10, "Over-the-counter pain relievers",
                   ["mild headaches", "tension"], "neurological"),
        _condition("allergies-mild", "Mild Allergies", "Seasonal or mild environmental allergies",
                   _C.LOW, 0.12, "Antihistamines as needed",
                   ["sneezing", "runny nose", "itchy eyes"], "immunological"),
        _condition("insomnia-mild", "Mild Insomnia", "Occasional difficulty sleeping",
                   _C.LOW, 0.08, "Sleep hygiene practices",
                   ["difficulty falling asleep", "waking up frequently"], "sleep"),
        _condition("mild-anxiety", "Very Mild Anxiety", "Occasional nervousness or stress",
                   _C.LOW, 0.05, "Stress management techniques",
                   ["occasional worry", "mild stress"], "psychiatric"),
    )
}


def get_condition(key: str) -> Optional[HealthCondition]:
    """Look up a catalog condition by key, or None."""
    return HEALTH_CONDITIONS.get(key)


def unknown_condition(key: str) -> HealthCondition:
    """Placeholder entry for a key that is not in the catalog."""
    return HealthCondition(
        key=key,
        name=key,
        description="Health issue not in database",
        severity=ConditionSeverity.MODERATE,
        risk_score=UNKNOWN_CONDITION_RISK,
        mission_blocking=False,
        treatment_required="Consult a flight surgeon for evaluation",
        in_catalog=False,
    )


def classify_risk(overall_risk: float) -> ConditionSeverity:
    """Map an overall health risk to its tier."""
    for threshold, tier in TIER_THRESHOLDS:
        if overall_risk >= threshold:
            return ConditionSeverity(tier)
    return ConditionSeverity.LOW


def assess_health(condition_keys: Iterable[str]) -> HealthAssessment:
    """
    Assess a passenger's health from their condition keys.

    The overall risk is the arithmetic mean of the condition contributions
    (catalog risk score, or 0.35 for unknown keys). A passenger is
    ineligible iff at least one matched condition is mission-blocking.

    Args:
        condition_keys: Condition keys as entered at intake

    Returns:
        HealthAssessment

    Examples:
        >>> assess_health([]).overall_risk
        0.05
        >>> assess_health(["heart-disease"]).mission_eligible
        False
    """
    keys = list(condition_keys or [])

    if not keys:
        return HealthAssessment(
            overall_risk=NO_CONDITION_RISK,
            risk_level=ConditionSeverity.LOW,
            mission_eligible=True,
            recommendations=["No health issues detected. Passenger is eligible for mission."],
        )

    assessment = HealthAssessment(
        overall_risk=0.0,
        risk_level=ConditionSeverity.LOW,
        mission_eligible=True,
    )

    total = 0.0
    for key in keys:
        condition = get_condition(key)
        if condition is None:
            logger.debug(f"Health condition '{key}' not in catalog, treating as moderate")
            condition = unknown_condition(key)
        total += condition.risk_score
        assessment.issues_for(condition.severity).append(condition)

    assessment.overall_risk = total / len(keys)
    assessment.risk_level = classify_risk(assessment.overall_risk)
    assessment.mission_eligible = not any(
        c.mission_blocking
        for tier in SEVERITY_ORDER
        for c in assessment.issues_for(tier)
        if c.in_catalog
    )

    for tier in SEVERITY_ORDER:
        issues = assessment.issues_for(tier)
        if not issues:
            continue
        assessment.recommendations.append(_GROUP_HEADERS[tier])
        for issue in issues:
            assessment.recommendations.append(f"- {issue.name}: {issue.treatment_required}")

    return assessment


def search_conditions(keyword: str) -> List[HealthCondition]:
    """
    Case-insensitive search over name, description, category and symptoms.

    Args:
        keyword: Search term

    Returns:
        Matching catalog conditions in catalog order
    """
    term = keyword.lower()
    results = []
    for condition in HEALTH_CONDITIONS.values():
        if (
            term in condition.name.lower()
            or term in condition.description.lower()
            or term in condition.category.lower()
            or any(term in symptom.lower() for symptom in condition.symptoms)
        ):
            results.append(condition)
    return results


def list_conditions() -> List[HealthCondition]:
    """All catalog conditions, most severe tier first."""
    rank = {tier: i for i, tier in enumerate(SEVERITY_ORDER)}
    return sorted(HEALTH_CONDITIONS.values(), key=lambda c: rank[c.severity])


def conditions_by_severity(severity: ConditionSeverity) -> List[HealthCondition]:
    """Catalog conditions in one severity tier."""
    return [c for c in HEALTH_CONDITIONS.values() if c.severity == severity]
