"""
Pydantic schemas package.
"""
from mission_risk.schemas.passenger import (
    HealthConditionResponse,
    HealthAssessmentResponse,
    PassengerBase,
    PassengerCreate,
    PassengerUpdate,
    PassengerResponse,
    PersonRiskResponse,
    BatchRiskRequest
)
from mission_risk.schemas.mission import (
    DestinationResponse,
    VehicleResponse,
    RouteResponse,
    MissionRiskResponse,
    OptimizationResponse,
    MissionBase,
    MissionCreate,
    MissionUpdate,
    MissionResponse,
    AddPassengerRequest,
    MissionProgressResponse,
    RecommendationGroup
)
from mission_risk.schemas.assessment import (
    InsightsResponse,
    BatchRiskResponse,
    AssessmentCreate,
    AssessmentUpdate,
    AssessmentResponse,
    StatisticsOverview,
    TrainingResultResponse,
    EstimatorStatusResponse,
    TrainingSampleCreate,
    TrainingSampleResponse
)
from mission_risk.schemas.risk_factor import (
    RiskFactorBase,
    RiskFactorCreate,
    RiskFactorUpdate,
    RiskFactorResponse,
    RiskSummaryResponse
)
from mission_risk.schemas.event import EventResponse

__all__ = [
    "HealthConditionResponse",
    "HealthAssessmentResponse",
    "PassengerBase",
    "PassengerCreate",
    "PassengerUpdate",
    "PassengerResponse",
    "PersonRiskResponse",
    "BatchRiskRequest",
    "DestinationResponse",
    "VehicleResponse",
    "RouteResponse",
    "MissionRiskResponse",
    "OptimizationResponse",
    "MissionBase",
    "MissionCreate",
    "MissionUpdate",
    "MissionResponse",
    "AddPassengerRequest",
    "MissionProgressResponse",
    "RecommendationGroup",
    "InsightsResponse",
    "BatchRiskResponse",
    "AssessmentCreate",
    "AssessmentUpdate",
    "AssessmentResponse",
    "StatisticsOverview",
    "TrainingResultResponse",
    "EstimatorStatusResponse",
    "TrainingSampleCreate",
    "TrainingSampleResponse",
    "RiskFactorBase",
    "RiskFactorCreate",
    "RiskFactorUpdate",
    "RiskFactorResponse",
    "RiskSummaryResponse",
    "EventResponse"
]
