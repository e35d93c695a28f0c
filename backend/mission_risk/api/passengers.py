"""
Passenger endpoints.

Provides endpoints for:
- Passenger CRUD with health assessment on intake
- Health condition lookup for the intake form
- Single and batch passenger risk assessment
"""
from fastapi import APIRouter, HTTPException, status
from datetime import datetime
from typing import List, Optional
import logging

from mission_risk.api.deps import (
    current_estimator,
    get_mission_repository,
    get_person_repository,
    publish,
)
from mission_risk.core import events
from mission_risk.core.entities import Person
from mission_risk.core.errors import NotFound
from mission_risk.core.health import list_conditions, search_conditions
from mission_risk.core.mission_planner import refresh_missions_for_person
from mission_risk.core.risk_scorer import batch_assess, score_person
from mission_risk.core.statistics import assessment_insights
from mission_risk.schemas.assessment import BatchRiskResponse
from mission_risk.schemas.passenger import (
    BatchRiskRequest,
    HealthConditionResponse,
    PassengerCreate,
    PassengerResponse,
    PassengerUpdate,
    PersonRiskResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/passengers", tags=["passengers"])


def _refresh_missions(person_id: str, detach: bool = False) -> None:
    """Re-assess every mission the person is on; publishing happens after the lock is released."""
    missions = get_mission_repository()
    with missions.locked():
        changes = refresh_missions_for_person(
            person_id, missions.list(), get_person_repository().list(), current_estimator(), detach=detach
        )
        for change in changes:
            missions.put(change.mission)

    for change in changes:
        publish(change.event, change.mission.to_dict())


@router.get("", response_model=List[PassengerResponse])
async def get_passengers():
    """Get all passengers."""
    return [p.to_dict() for p in get_person_repository().list()]


@router.get("/health-issues", response_model=List[HealthConditionResponse])
async def get_health_issues(search: Optional[str] = None):
    """Health conditions for the intake form, optionally filtered by keyword."""
    conditions = search_conditions(search) if search else list_conditions()
    return [c.to_dict() for c in conditions]


@router.post("/batch-risk-assessment", response_model=BatchRiskResponse)
async def batch_risk_assessment(request: BatchRiskRequest):
    """Assess several passengers against one mission (or the default context)."""
    mission = None
    if request.mission_id:
        mission = get_mission_repository().get(request.mission_id)
        if mission is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Mission {request.mission_id} not found"
            )

    wanted = set(request.passenger_ids)
    people = [p for p in get_person_repository().list() if p.id in wanted]

    assessments = batch_assess(people, mission, current_estimator())
    return {
        "assessments": [a.to_dict() for a in assessments],
        "insights": assessment_insights(assessments, mission),
    }


@router.get("/{passenger_id}", response_model=PassengerResponse)
async def get_passenger(passenger_id: str):
    """Get a specific passenger by ID."""
    person = get_person_repository().get(passenger_id)
    if person is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Passenger {passenger_id} not found"
        )
    return person.to_dict()


@router.post("", response_model=PassengerResponse, status_code=status.HTTP_201_CREATED)
async def create_passenger(request: PassengerCreate):
    """Create a passenger and assess their health."""
    try:
        person = Person(
            name=request.name,
            age=request.age,
            experience_level=request.experience_level,
            health_score=request.health_score,
            special_needs=request.special_needs,
            emergency_contact=request.emergency_contact,
        )
        person.set_health_issues(request.health_issues)
        get_person_repository().put(person)
    except Exception as e:
        logger.error(f"Error creating passenger: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create passenger: {str(e)}"
        )

    logger.info(f"Created passenger {person.id} ({person.name})")
    publish(events.PASSENGER_CREATED, person.to_dict())
    return person.to_dict()


@router.put("/{passenger_id}", response_model=PassengerResponse)
async def update_passenger(passenger_id: str, request: PassengerUpdate):
    """Update a passenger; missions they are assigned to are re-assessed."""
    people = get_person_repository()
    person = people.get(passenger_id)
    if person is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Passenger {passenger_id} not found"
        )

    update_data = request.model_dump(exclude_unset=True)
    health_issues = update_data.pop("health_issues", None)
    for field, value in update_data.items():
        if value is not None:
            setattr(person, field, value)
    if health_issues is not None:
        person.set_health_issues(health_issues)
    person.updated_at = datetime.now()
    people.put(person)

    publish(events.PASSENGER_UPDATED, person.to_dict())

    try:
        _refresh_missions(person.id)
    except Exception as e:
        logger.error(f"Error refreshing missions for passenger {passenger_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to refresh missions: {str(e)}"
        )

    return person.to_dict()


@router.delete("/{passenger_id}")
async def delete_passenger(passenger_id: str):
    """Delete a passenger and remove them from their missions."""
    people = get_person_repository()
    try:
        person = people.delete(passenger_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    _refresh_missions(person.id, detach=True)

    publish(events.PASSENGER_DELETED, person.to_dict())
    return {"message": "Passenger deleted successfully", "passenger": person.to_dict()}


@router.get("/{passenger_id}/risk-assessment", response_model=PersonRiskResponse)
async def get_passenger_risk_assessment(passenger_id: str, mission_id: Optional[str] = None):
    """Risk assessment for a passenger, optionally against a mission."""
    person = get_person_repository().get(passenger_id)
    if person is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Passenger {passenger_id} not found"
        )

    mission = None
    if mission_id:
        mission = get_mission_repository().get(mission_id)
        if mission is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Mission {mission_id} not found"
            )

    return score_person(person, mission, current_estimator()).to_dict()
