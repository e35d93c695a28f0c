"""
Pydantic schemas for stored assessments, statistics and the estimator.
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, List, Optional

from mission_risk.schemas.passenger import PersonRiskResponse


class TopRiskFactor(BaseModel):
    factor: str
    average_value: float


class InsightsResponse(BaseModel):
    """Summary of a batch of person assessments."""
    average_risk: float = 0.0
    risk_distribution: Dict[str, int] = {}
    top_risk_factors: List[TopRiskFactor] = []
    recommendations: List[str] = []
    total_passengers: int = 0


class BatchRiskResponse(BaseModel):
    assessments: List[PersonRiskResponse]
    insights: InsightsResponse


class AssessmentCreate(BaseModel):
    """Schema for creating an assessment."""
    mission_id: str = Field(..., description="Mission to assess against")
    passenger_ids: List[str] = Field(..., description="Passengers to assess")
    assessment_type: str = Field(default="AI_AUTOMATED", description="Assessment origin")
    notes: str = Field(default="", description="Free text notes")


class AssessmentUpdate(BaseModel):
    """Schema for updating an assessment."""
    notes: Optional[str] = None
    assessment_type: Optional[str] = None


class AssessmentResponse(BaseModel):
    """Schema for assessment response."""
    id: int
    mission_id: str
    passenger_ids: List[str]
    assessment_type: str
    assessments: List[PersonRiskResponse]
    insights: InsightsResponse
    notes: Optional[str] = ""
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class StatisticsOverview(BaseModel):
    """Aggregate statistics over stored assessments."""
    total_assessments: int
    total_passenger_assessments: int
    average_risk_score: float
    average_confidence: float
    risk_distribution: Dict[str, int]
    recent_assessments: List[AssessmentResponse] = []


class TrainingResultResponse(BaseModel):
    status: str = Field(..., description="completed or already_training")
    message: str = ""
    training_sample_count: int = 0
    timestamp: datetime


class EstimatorStatusResponse(BaseModel):
    """Estimator and trainer status."""
    is_trained: bool
    is_training: bool
    training_data_size: int
    last_training_time: Optional[datetime] = None
    estimator: str
    model_architecture: str
    stored_sample_count: int = 0
    stored_assessment_count: int = 0


class TrainingSampleCreate(BaseModel):
    """Schema for adding a labeled training sample."""
    features: List[float] = Field(..., min_length=8, max_length=8, description="Normalized feature vector")
    target: float = Field(..., ge=0, le=1, description="Target risk")


class TrainingSampleResponse(BaseModel):
    id: int
    features: List[float]
    target: float
    source: str
    assessment_id: Optional[int] = None
    created_at: datetime

    class Config:
        from_attributes = True
