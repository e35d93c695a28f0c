"""
Pydantic schemas for missions, routes and the destination/vehicle catalog.
"""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any, Dict, List, Optional

from mission_risk.schemas.passenger import PersonRiskResponse


class CoordinatesResponse(BaseModel):
    x: float
    y: float
    z: float


class DestinationResponse(BaseModel):
    """Destination catalog entry."""
    id: str
    name: str
    distance: float = Field(..., description="Million km")
    gravity: float
    atmosphere: str
    temperature: str
    radiation: str
    coordinates: CoordinatesResponse
    mission_complexity: str = ""
    description: str = ""


class VehicleResponse(BaseModel):
    """Vehicle catalog entry."""
    id: str
    name: str
    payload_capacity: float = Field(..., description="kg")
    max_distance: float = Field(..., description="Million km")
    fuel_efficiency: float
    reliability: float
    crew_capacity: int
    cost: float = Field(0.0, description="Million USD")
    description: str = ""


class WaypointResponse(BaseModel):
    name: str
    distance: float
    type: str


class RouteRiskResponse(BaseModel):
    type: str
    severity: str
    description: str


class TravelTime(BaseModel):
    days: int
    hours: int


class RouteResponse(BaseModel):
    """Derived route."""
    origin: str
    destination_name: str
    destination_id: str
    vehicle_id: str
    distance: float
    travel_time: TravelTime
    travel_time_days: float
    fuel_required: int
    complexity: float = Field(..., ge=1, le=10)
    waypoints: List[WaypointResponse] = []
    risks: List[RouteRiskResponse] = []


class MissionRiskResponse(BaseModel):
    """Mission-level risk assessment."""
    overall_risk: float = Field(..., ge=0, le=1)
    risk_level: str
    passenger_risks: List[PersonRiskResponse] = []
    mission_factors: Dict[str, float] = {}
    recommendations: List[str] = []
    timestamp: datetime


class OptimizationResponse(BaseModel):
    """Passenger ordering optimization result."""
    optimized: bool
    reason: Optional[str] = None
    optimal_order: List[int] = []
    passenger_order: List[Dict[str, str]] = []
    route: Dict[str, Any] = {}
    fitness: float = 0.0
    average_risk: float = 0.0
    generations: int = 0
    recommendations: List[str] = []
    timestamp: datetime


class MissionBase(BaseModel):
    """Base mission schema."""
    name: str = Field(..., min_length=1, description="Mission name")
    destination_id: str = Field(..., description="Destination catalog id")
    vehicle_id: str = Field(..., description="Vehicle catalog id")
    crew_count: int = Field(..., ge=1, description="Planned crew size")
    departure_time: datetime = Field(..., description="Planned departure")
    description: str = Field(default="", description="Mission description")


class MissionCreate(MissionBase):
    """Schema for creating a mission."""
    pass


class MissionUpdate(BaseModel):
    """Schema for updating a mission."""
    name: Optional[str] = Field(None, min_length=1)
    destination_id: Optional[str] = None
    vehicle_id: Optional[str] = None
    crew_count: Optional[int] = Field(None, ge=1)
    departure_time: Optional[datetime] = None
    description: Optional[str] = None
    status: Optional[str] = Field(None, pattern="^(PLANNED|ACTIVE|COMPLETED|CANCELLED)$")


class MissionResponse(BaseModel):
    """Schema for mission response."""
    id: str
    name: str
    destination_id: str
    vehicle_id: str
    crew_count: int
    passenger_ids: List[str] = []
    departure_time: Optional[datetime] = None
    description: str = ""
    status: str
    route: Optional[RouteResponse] = None
    risk_assessment: Optional[MissionRiskResponse] = None
    route_optimization: Optional[OptimizationResponse] = None
    return_time: Optional[datetime] = None
    duration_days: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class AddPassengerRequest(BaseModel):
    passenger_id: str = Field(..., description="Passenger to assign")


class MissionProgressResponse(BaseModel):
    mission_id: str
    status: str
    progress: float = Field(..., ge=0, le=100)
    current_phase: str
    departure_time: datetime
    return_time: Optional[datetime] = None
    timestamp: datetime


class RecommendationItem(BaseModel):
    name: str
    reason: str


class RecommendationGroup(BaseModel):
    """Planning recommendation group."""
    type: str
    title: str
    items: List[RecommendationItem] = []
