"""
Mission mutation surface.

Every mutation of a mission goes through this module so that the derived
route and risk assessment are recomputed before the mutation is
considered complete. Functions return a MissionChange naming the event
the caller should publish; the planner never publishes or stores
anything itself.

Mutations never modify the mission passed in: they return a new Mission
with all derived fields already refreshed.
"""
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, TYPE_CHECKING
import logging

from mission_risk.config import Settings
from mission_risk.core import events
from mission_risk.core.entities import Mission, MissionStatus, Person
from mission_risk.core.errors import NotFound, StaleMission, ValidationFailed
from mission_risk.core.estimators.estimator_base import RiskEstimatorBase
from mission_risk.core.mission_aggregator import assess_mission
from mission_risk.core.optimizer import OptimizationResult, optimize_route
from mission_risk.core.route import validate_vehicle_for_mission

if TYPE_CHECKING:
    import numpy as np


logger = logging.getLogger(__name__)

ROUTE_FIELDS = ("destination_id", "vehicle_id", "crew_count")
EDITABLE_FIELDS = ROUTE_FIELDS + ("name", "departure_time", "description", "status")


@dataclass(frozen=True)
class MissionChange:
    """What changed: the event name to publish and the refreshed mission."""
    event: str
    mission: Mission


def _validated_route(destination_id: str, vehicle_id: str, crew_count: int):
    if crew_count < 1:
        raise ValidationFailed("Crew count must be at least 1")

    validation = validate_vehicle_for_mission(vehicle_id, destination_id, crew_count)
    if not validation.valid:
        raise ValidationFailed(validation.reason)
    return validation.route


def _return_time(departure_time: Optional[datetime], travel_days: float) -> Optional[datetime]:
    if departure_time is None:
        return None
    return departure_time + timedelta(days=travel_days)


def refresh_mission(
    mission: Mission,
    people: Iterable[Person],
    estimator: Optional[RiskEstimatorBase] = None
) -> Mission:
    """
    Recompute a mission's risk assessment from current state.

    Returns:
        New Mission with a fresh risk_assessment and updated_at
    """
    return replace(
        mission,
        risk_assessment=assess_mission(mission, people, estimator),
        updated_at=datetime.now(),
    )


def create_mission(
    name: str,
    destination_id: str,
    vehicle_id: str,
    crew_count: int,
    departure_time: Optional[datetime],
    people: Iterable[Person],
    estimator: Optional[RiskEstimatorBase] = None,
    description: str = ""
) -> MissionChange:
    """
    Validate and create a mission.

    Args:
        name: Mission name
        destination_id: Destination catalog id
        vehicle_id: Vehicle catalog id
        crew_count: Planned crew size
        departure_time: Planned departure
        people: Person snapshot used for the initial risk assessment
        estimator: Estimator for passenger risk scores
        description: Free text

    Returns:
        MissionChange("missionCreated", mission)

    Raises:
        ValidationFailed: If the vehicle cannot fly the crew to the destination
    """
    route = _validated_route(destination_id, vehicle_id, crew_count)

    mission = Mission(
        name=name,
        destination_id=destination_id,
        vehicle_id=vehicle_id,
        crew_count=crew_count,
        departure_time=departure_time,
        description=description,
        route=route,
        duration_days=route.travel_time_days,
        return_time=_return_time(departure_time, route.travel_time_days),
    )
    mission = refresh_mission(mission, people, estimator)

    logger.info(f"Created mission {mission.id} '{name}' to {destination_id} on {vehicle_id}")
    return MissionChange(event=events.MISSION_CREATED, mission=mission)


def update_mission(
    mission: Mission,
    changes: Dict[str, Any],
    people: Iterable[Person],
    estimator: Optional[RiskEstimatorBase] = None
) -> MissionChange:
    """
    Apply field changes to a mission.

    Changes to destination, vehicle or crew count are revalidated and the
    route is recomputed. The risk assessment is always recomputed.

    Args:
        mission: Current mission
        changes: Field name -> new value; None values are ignored
        people: Person snapshot
        estimator: Estimator for passenger risk scores

    Returns:
        MissionChange("missionUpdated", mission)

    Raises:
        ValidationFailed: If the new configuration is not flyable, or the
            crew count drops below the number of assigned passengers
        ValueError: If an unknown field is given
    """
    updates = {k: v for k, v in changes.items() if v is not None}
    unknown = set(updates) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValueError(f"Cannot update mission fields: {', '.join(sorted(unknown))}")

    if "status" in updates:
        updates["status"] = MissionStatus(updates["status"])

    candidate = replace(mission, **updates)

    if len(candidate.passenger_ids) > candidate.crew_count:
        raise ValidationFailed(
            f"Crew count {candidate.crew_count} is below the {len(candidate.passenger_ids)} assigned passengers"
        )

    route = candidate.route
    optimization = candidate.route_optimization
    if route is None or any(getattr(candidate, f) != getattr(mission, f) for f in ROUTE_FIELDS):
        route = _validated_route(candidate.destination_id, candidate.vehicle_id, candidate.crew_count)
        optimization = None

    candidate = replace(
        candidate,
        route=route,
        duration_days=route.travel_time_days,
        return_time=_return_time(candidate.departure_time, route.travel_time_days),
        route_optimization=optimization,
    )
    candidate = refresh_mission(candidate, people, estimator)

    logger.info(f"Updated mission {mission.id}: {', '.join(sorted(updates)) or 'no field changes'}")
    return MissionChange(event=events.MISSION_UPDATED, mission=candidate)


def assign_passenger(
    mission: Mission,
    person: Person,
    people: Iterable[Person],
    estimator: Optional[RiskEstimatorBase] = None
) -> MissionChange:
    """
    Add a person to a mission.

    Raises:
        ValidationFailed: If the person is already assigned, the mission
            is full, or the person is not medically eligible
    """
    if person.id in mission.passenger_ids:
        raise ValidationFailed("Passenger already assigned to mission")

    if len(mission.passenger_ids) >= mission.crew_count:
        raise ValidationFailed("Mission crew capacity reached")

    health = person.health_assessment
    if health is not None and not health.mission_eligible:
        names = ", ".join(c.name for c in health.critical_issues)
        raise ValidationFailed(
            f"Passenger is not eligible for mission due to critical health issues: {names}"
        )

    updated = replace(mission, passenger_ids=[*mission.passenger_ids, person.id], route_optimization=None)
    updated = refresh_mission(updated, people, estimator)

    logger.info(f"Assigned passenger {person.id} to mission {mission.id}")
    return MissionChange(event=events.MISSION_UPDATED, mission=updated)


def remove_passenger(
    mission: Mission,
    person_id: str,
    people: Iterable[Person],
    estimator: Optional[RiskEstimatorBase] = None
) -> MissionChange:
    """
    Remove a person from a mission.

    Raises:
        NotFound: If the person is not assigned to the mission
    """
    if person_id not in mission.passenger_ids:
        raise NotFound("Passenger in mission", person_id)

    updated = replace(
        mission,
        passenger_ids=[pid for pid in mission.passenger_ids if pid != person_id],
        route_optimization=None,
    )
    updated = refresh_mission(updated, people, estimator)

    logger.info(f"Removed passenger {person_id} from mission {mission.id}")
    return MissionChange(event=events.MISSION_UPDATED, mission=updated)


def refresh_missions_for_person(
    person_id: str,
    missions: Iterable[Mission],
    people: Sequence[Person],
    estimator: Optional[RiskEstimatorBase] = None,
    detach: bool = False
) -> List[MissionChange]:
    """
    Refresh every mission that a person is assigned to.

    Called after a person's data changes. With `detach=True` (person
    deleted) the person is also removed from those missions. A stored
    boarding order is dropped either way since it was computed from the
    person's previous data.

    Returns:
        One MissionChange per affected mission
    """
    changes = []
    for mission in missions:
        if person_id not in mission.passenger_ids:
            continue
        if detach:
            changes.append(remove_passenger(mission, person_id, people, estimator))
        else:
            changes.append(MissionChange(
                event=events.MISSION_UPDATED,
                mission=refresh_mission(replace(mission, route_optimization=None), people, estimator),
            ))
    return changes


def attach_optimization(
    mission: Mission,
    source: Mission,
    result: OptimizationResult
) -> MissionChange:
    """
    Store an optimization result computed from `source` on `mission`.

    Args:
        mission: Mission as currently stored
        source: Copy of the mission the optimizer ran on
        result: Optimizer output

    Returns:
        MissionChange("missionOptimized", mission)

    Raises:
        StaleMission: If passengers, destination or vehicle changed since
            `source` was read
    """
    if (mission.passenger_ids != source.passenger_ids
            or mission.destination_id != source.destination_id
            or mission.vehicle_id != source.vehicle_id):
        raise StaleMission(mission.id)

    updated = replace(mission, route_optimization=result, updated_at=datetime.now())
    return MissionChange(event=events.MISSION_OPTIMIZED, mission=updated)


def optimize_mission(
    mission: Mission,
    people: Sequence[Person],
    settings: Optional[Settings] = None,
    rng: Optional["np.random.Generator"] = None
) -> MissionChange:
    """Run the ordering optimizer and store its result on the mission."""
    result = optimize_route(mission, people, settings=settings, rng=rng)
    return attach_optimization(mission, mission, result)


def mission_progress(mission: Mission, now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Progress of a mission between departure and return.

    Phases: Pre-launch, Outbound Journey (< 25%), At Destination (< 75%),
    Return Journey, Completed.

    Raises:
        ValidationFailed: If the mission has no departure time
    """
    if mission.departure_time is None:
        raise ValidationFailed("Mission has no departure time")

    departure = mission.departure_time
    now = now or datetime.now(departure.tzinfo)
    returning = mission.return_time or departure

    progress = 0.0
    phase = "Pre-launch"
    if departure <= now <= returning and returning > departure:
        progress = min(100.0, (now - departure) / (returning - departure) * 100.0)
        if progress < 25:
            phase = "Outbound Journey"
        elif progress < 75:
            phase = "At Destination"
        else:
            phase = "Return Journey"
    elif now > returning:
        progress = 100.0
        phase = "Completed"

    return {
        "mission_id": mission.id,
        "status": mission.status.value,
        "progress": progress,
        "current_phase": phase,
        "departure_time": departure,
        "return_time": mission.return_time,
        "timestamp": now,
    }
