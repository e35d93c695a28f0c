"""
Pydantic schemas for the risk factor registry.
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional


class RiskFactorBase(BaseModel):
    """Base risk factor schema."""
    name: str = Field(..., min_length=1, description="Risk name")
    category: str = Field(..., min_length=1, description="Risk category")
    severity: int = Field(..., ge=0, le=10, description="Severity, 0-10")
    probability: int = Field(..., ge=0, le=10, description="Probability, 0-10")
    impact: int = Field(default=0, ge=0, le=10, description="Impact, 0-10")
    mitigation: str = Field(default="", description="Mitigation plan")
    description: str = Field(default="", description="Description")


class RiskFactorCreate(RiskFactorBase):
    """Schema for creating a risk factor."""
    pass


class RiskFactorUpdate(BaseModel):
    """Schema for updating a risk factor."""
    name: Optional[str] = None
    category: Optional[str] = None
    severity: Optional[int] = Field(None, ge=0, le=10)
    probability: Optional[int] = Field(None, ge=0, le=10)
    impact: Optional[int] = Field(None, ge=0, le=10)
    mitigation: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = Field(None, pattern="^(ACTIVE|RESOLVED)$")


class RiskFactorResponse(RiskFactorBase):
    """Schema for risk factor response."""
    id: int
    status: str
    mitigation: Optional[str] = ""
    description: Optional[str] = ""
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class RiskSummaryResponse(BaseModel):
    """Severity analysis of active risk factors."""
    total_risks: int
    high_severity: int
    medium_severity: int
    low_severity: int
    average_severity: float
    average_probability: float
    categories: List[str]
    top_risks: List[RiskFactorResponse]
