"""
Person and Mission entities.

Entities are plain records owned by the repositories. The core computes
their derived fields (health assessment, route, mission risk) from
snapshots; it never stores entities itself.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import uuid

from mission_risk.core.health import HealthAssessment, assess_health
from mission_risk.core.route import Route

if TYPE_CHECKING:
    from mission_risk.core.mission_aggregator import MissionRiskAssessment
    from mission_risk.core.optimizer import OptimizationResult


def new_id() -> str:
    return str(uuid.uuid4())


class MissionStatus(str, Enum):
    PLANNED = "PLANNED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


@dataclass
class Person:
    """A prospective passenger.

    Attributes:
        id: Unique id
        name: Full name
        age: Age in years (>= 18)
        experience_level: Space-flight experience, 0-10
        health_issues: Health condition keys
        health_assessment: Derived from health_issues
        health_score: Legacy 0-100 health score, used when no assessment exists
    """
    name: str
    age: int
    experience_level: int = 0
    health_issues: List[str] = field(default_factory=list)
    health_assessment: Optional[HealthAssessment] = None
    health_score: Optional[float] = None
    special_needs: str = ""
    emergency_contact: str = ""
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def set_health_issues(self, condition_keys: List[str]) -> HealthAssessment:
        """Replace the condition list and recompute the health assessment."""
        self.health_issues = list(condition_keys)
        self.health_assessment = assess_health(self.health_issues)
        self.updated_at = datetime.now()
        return self.health_assessment

    @property
    def health_risk(self) -> Optional[float]:
        """Overall health risk, or None if never assessed."""
        if self.health_assessment is None:
            return None
        return self.health_assessment.overall_risk

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
            "experience_level": self.experience_level,
            "health_issues": list(self.health_issues),
            "health_assessment": self.health_assessment.to_dict() if self.health_assessment else None,
            "health_score": self.health_score,
            "special_needs": self.special_needs,
            "emergency_contact": self.emergency_contact,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


@dataclass
class Mission:
    """A planned mission.

    Attributes:
        id: Unique id
        name: Mission name
        destination_id: Destination catalog id
        vehicle_id: Vehicle catalog id
        crew_count: Planned crew size (capacity for passengers)
        passenger_ids: Assigned person ids, in boarding order
        departure_time: Planned departure
        route: Derived route
        risk_assessment: Derived mission risk, refreshed on every mutation
        route_optimization: Last optimizer result, if any
    """
    name: str
    destination_id: str
    vehicle_id: str
    crew_count: int = 1
    passenger_ids: List[str] = field(default_factory=list)
    departure_time: Optional[datetime] = None
    description: str = ""
    status: MissionStatus = MissionStatus.PLANNED
    route: Optional[Route] = None
    risk_assessment: Optional["MissionRiskAssessment"] = None
    route_optimization: Optional["OptimizationResult"] = None
    return_time: Optional[datetime] = None
    duration_days: Optional[float] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "destination_id": self.destination_id,
            "vehicle_id": self.vehicle_id,
            "crew_count": self.crew_count,
            "passenger_ids": list(self.passenger_ids),
            "departure_time": self.departure_time,
            "description": self.description,
            "status": self.status.value,
            "route": self.route.to_dict() if self.route else None,
            "risk_assessment": self.risk_assessment.to_dict() if self.risk_assessment else None,
            "route_optimization": self.route_optimization.to_dict() if self.route_optimization else None,
            "return_time": self.return_time,
            "duration_days": self.duration_days,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
