"""
Pydantic schemas for passengers and person risk assessments.
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, List, Optional


class HealthConditionResponse(BaseModel):
    """Health condition catalog entry."""
    key: str
    name: str
    description: str
    risk_level: str
    risk_score: float
    mission_blocking: bool
    treatment_required: str
    symptoms: List[str] = []
    category: str = ""


class HealthAssessmentResponse(BaseModel):
    """Derived health assessment."""
    overall_risk: float = Field(..., ge=0, le=1)
    risk_level: str
    mission_eligible: bool
    recommendations: List[str] = []
    critical_issues: List[HealthConditionResponse] = []
    high_risk_issues: List[HealthConditionResponse] = []
    moderate_risk_issues: List[HealthConditionResponse] = []
    low_risk_issues: List[HealthConditionResponse] = []


class PassengerBase(BaseModel):
    """Base passenger schema."""
    name: str = Field(..., min_length=1, description="Full name")
    age: int = Field(..., ge=18, description="Age in years")
    experience_level: int = Field(..., ge=0, le=10, description="Space-flight experience, 0-10")
    health_issues: List[str] = Field(default_factory=list, description="Health condition keys")
    health_score: Optional[float] = Field(None, ge=0, le=100, description="Legacy health score, 0-100")
    special_needs: str = Field(default="", description="Special needs")
    emergency_contact: str = Field(default="", description="Emergency contact")


class PassengerCreate(PassengerBase):
    """Schema for creating a passenger."""
    pass


class PassengerUpdate(BaseModel):
    """Schema for updating a passenger."""
    name: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, ge=18)
    experience_level: Optional[int] = Field(None, ge=0, le=10)
    health_issues: Optional[List[str]] = None
    health_score: Optional[float] = Field(None, ge=0, le=100)
    special_needs: Optional[str] = None
    emergency_contact: Optional[str] = None


class PassengerResponse(PassengerBase):
    """Schema for passenger response."""
    id: str
    health_assessment: Optional[HealthAssessmentResponse] = None
    created_at: datetime
    updated_at: datetime


class PersonRiskResponse(BaseModel):
    """Risk assessment for one person."""
    person_id: str
    person_name: str
    risk_score: float = Field(..., ge=0, le=1, description="Estimator output")
    overall_risk: float = Field(..., ge=0, le=1, description="Weighted factor risk")
    risk_level: str
    factors: Dict[str, float] = {}
    recommendations: List[str] = []
    features: List[float] = []
    confidence: float = 0.0
    timestamp: datetime


class BatchRiskRequest(BaseModel):
    """Request for assessing several passengers at once."""
    passenger_ids: List[str] = Field(..., description="Passengers to assess")
    mission_id: Optional[str] = Field(None, description="Mission context; none for the default context")
