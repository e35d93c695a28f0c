"""
Mission endpoints.

Provides endpoints for:
- Mission CRUD with vehicle/destination validation
- Passenger assignment and removal
- Mission risk assessment, passenger ordering optimization, progress
- Destination and vehicle catalog lookups and planning recommendations

Every mutation goes through the mission planner so the stored mission
always carries a risk assessment computed from its current state.
Mutations of an existing mission run against the stored copy under the
repository lock.
"""
from fastapi import APIRouter, HTTPException, Query, status
from typing import List
import logging

from mission_risk.api.deps import (
    current_estimator,
    get_mission_repository,
    get_person_repository,
    publish,
)
from mission_risk.core import events
from mission_risk.core import mission_planner
from mission_risk.core.catalog import list_destinations, list_vehicles, search_destinations
from mission_risk.core.errors import NotFound, StaleMission, ValidationFailed
from mission_risk.core.mission_aggregator import assess_mission
from mission_risk.core.optimizer import optimize_route
from mission_risk.core.route import get_mission_recommendations
from mission_risk.schemas.mission import (
    AddPassengerRequest,
    DestinationResponse,
    MissionCreate,
    MissionProgressResponse,
    MissionResponse,
    MissionRiskResponse,
    MissionUpdate,
    OptimizationResponse,
    RecommendationGroup,
    VehicleResponse,
)


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/missions", tags=["missions"])

OPTIMIZE_ATTEMPTS = 3


def _get_mission_or_404(mission_id: str):
    try:
        return get_mission_repository().get_or_raise(mission_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _validation_error(e: ValidationFailed) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={"message": "Mission validation failed", "reason": e.reason}
    )


def _store(change: mission_planner.MissionChange) -> dict:
    get_mission_repository().put(change.mission)
    data = change.mission.to_dict()
    publish(change.event, data)
    return data


def _apply(mission_id: str, mutate) -> dict:
    """Run a planner mutation against the stored mission atomically, store and publish it."""
    applied = []

    def apply(current):
        applied.append(mutate(current))
        return applied[-1].mission

    get_mission_repository().update(mission_id, apply)
    change = applied[-1]
    data = change.mission.to_dict()
    publish(change.event, data)
    return data


@router.get("", response_model=List[MissionResponse])
async def get_missions():
    """Get all missions."""
    return [m.to_dict() for m in get_mission_repository().list()]


@router.get("/destinations/available", response_model=List[DestinationResponse])
async def get_available_destinations():
    """All catalog destinations."""
    return [d.to_dict() for d in list_destinations()]


@router.get("/destinations/search", response_model=List[DestinationResponse])
async def search_available_destinations(query: str = Query(..., min_length=1)):
    """Search destinations by name or description."""
    return [d.to_dict() for d in search_destinations(query)]


@router.get("/vehicles/available", response_model=List[VehicleResponse])
async def get_available_vehicles():
    """All catalog vehicles."""
    return [v.to_dict() for v in list_vehicles()]


@router.get("/recommendations", response_model=List[RecommendationGroup])
async def get_recommendations(
    destination_id: str = Query(..., min_length=1),
    crew_count: int = Query(..., ge=1)
):
    """Planning recommendations for a destination and crew size."""
    return get_mission_recommendations(destination_id, crew_count)


@router.get("/{mission_id}", response_model=MissionResponse)
async def get_mission(mission_id: str):
    """Get a specific mission by ID."""
    return _get_mission_or_404(mission_id).to_dict()


@router.post("", response_model=MissionResponse, status_code=status.HTTP_201_CREATED)
async def create_mission(request: MissionCreate):
    """Create a mission after validating the vehicle against the destination and crew."""
    try:
        change = mission_planner.create_mission(
            name=request.name,
            destination_id=request.destination_id,
            vehicle_id=request.vehicle_id,
            crew_count=request.crew_count,
            departure_time=request.departure_time,
            people=get_person_repository().list(),
            estimator=current_estimator(),
            description=request.description,
        )
    except ValidationFailed as e:
        raise _validation_error(e)
    except Exception as e:
        logger.error(f"Error creating mission: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to create mission: {str(e)}"
        )

    return _store(change)


@router.put("/{mission_id}", response_model=MissionResponse)
async def update_mission(mission_id: str, request: MissionUpdate):
    """Update a mission; route-relevant changes are revalidated."""
    changes = request.model_dump(exclude_unset=True)

    try:
        return _apply(mission_id, lambda current: mission_planner.update_mission(
            current, changes, get_person_repository().list(), current_estimator()
        ))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationFailed as e:
        raise _validation_error(e)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        logger.error(f"Error updating mission {mission_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to update mission: {str(e)}"
        )


@router.delete("/{mission_id}")
async def delete_mission(mission_id: str):
    """Delete a mission."""
    try:
        mission = get_mission_repository().delete(mission_id)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    data = mission.to_dict()
    publish(events.MISSION_DELETED, data)
    return {"message": "Mission deleted successfully", "mission": data}


@router.post("/{mission_id}/passengers", response_model=MissionResponse)
async def add_passenger(mission_id: str, request: AddPassengerRequest):
    """Assign a passenger to a mission."""
    people = get_person_repository()
    try:
        return _apply(mission_id, lambda current: mission_planner.assign_passenger(
            current, people.get_or_raise(request.passenger_id), people.list(), current_estimator()
        ))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.reason)


@router.delete("/{mission_id}/passengers/{passenger_id}", response_model=MissionResponse)
async def remove_passenger(mission_id: str, passenger_id: str):
    """Remove a passenger from a mission."""
    try:
        return _apply(mission_id, lambda current: mission_planner.remove_passenger(
            current, passenger_id, get_person_repository().list(), current_estimator()
        ))
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get("/{mission_id}/risk-assessment", response_model=MissionRiskResponse)
async def get_mission_risk_assessment(mission_id: str):
    """Fresh risk assessment for a mission."""
    mission = _get_mission_or_404(mission_id)
    assessment = assess_mission(mission, get_person_repository().list(), current_estimator())
    return assessment.to_dict()


@router.post("/{mission_id}/optimize-route", response_model=OptimizationResponse)
def optimize_mission_route(mission_id: str):
    """
    Optimize the passenger boarding order of a mission.

    The search runs on a snapshot outside the repository lock. If the
    passengers or route change before the result is stored, the result is
    discarded and the search reruns against the current mission.
    """
    for attempt in range(1, OPTIMIZE_ATTEMPTS + 1):
        snapshot = _get_mission_or_404(mission_id)
        result = optimize_route(snapshot, get_person_repository().list())
        try:
            _apply(mission_id, lambda current: mission_planner.attach_optimization(current, snapshot, result))
        except NotFound as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
        except StaleMission:
            logger.info(f"Mission {mission_id} changed during optimization (attempt {attempt})")
            continue
        return result.to_dict()

    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail=f"Mission {mission_id} kept changing during optimization"
    )


@router.get("/{mission_id}/progress", response_model=MissionProgressResponse)
async def get_mission_progress(mission_id: str):
    """Progress and current phase of a mission."""
    mission = _get_mission_or_404(mission_id)
    try:
        return mission_planner.mission_progress(mission)
    except ValidationFailed as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.reason)
