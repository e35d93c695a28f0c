"""
SQLAlchemy models package.
"""
from mission_risk.models.assessment import AssessmentRecord
from mission_risk.models.risk_factor import RiskFactor
from mission_risk.models.training_sample import TrainingSample

__all__ = [
    "AssessmentRecord",
    "RiskFactor",
    "TrainingSample",
]
