"""
Unit tests for the mission mutation surface.

Tests include:
- Creation and validation
- Updates with revalidation
- Passenger assignment rules
- Refresh after person changes
- Optimization and progress
"""

from dataclasses import replace
from datetime import datetime, timedelta

import pytest

from mission_risk.core import events
from mission_risk.core.entities import MissionStatus
from mission_risk.core.errors import NotFound, StaleMission, ValidationFailed
from mission_risk.core.mission_aggregator import assess_mission
from mission_risk.core.optimizer import optimize_route
from mission_risk.core.mission_planner import (
    assign_passenger,
    attach_optimization,
    create_mission,
    mission_progress,
    optimize_mission,
    refresh_missions_for_person,
    remove_passenger,
    update_mission,
)


DEPARTURE = datetime(2030, 1, 1, 12, 0)


@pytest.fixture
def created(healthy_person):
    return create_mission(
        name="Artemis",
        destination_id="moon",
        vehicle_id="sls",
        crew_count=4,
        departure_time=DEPARTURE,
        people=[healthy_person],
    ).mission


class TestCreateMission:
    """Test mission creation."""

    def test_valid_lunar_mission(self):
        """Test moon on SLS with four crew."""
        change = create_mission(
            name="Artemis", destination_id="moon", vehicle_id="sls",
            crew_count=4, departure_time=DEPARTURE, people=[],
        )
        mission = change.mission

        assert change.event == events.MISSION_CREATED
        assert mission.route.destination_id == "moon"
        assert mission.duration_days == 1.5
        assert mission.return_time == DEPARTURE + timedelta(days=1.5)
        assert mission.risk_assessment.overall_risk == 0.5
        assert mission.status == MissionStatus.PLANNED

    def test_crew_exceeds_vehicle(self):
        with pytest.raises(ValidationFailed) as exc_info:
            create_mission(
                name="Crowded", destination_id="moon", vehicle_id="sls",
                crew_count=5, departure_time=DEPARTURE, people=[],
            )
        assert exc_info.value.reason == "Vehicle crew capacity exceeded"

    def test_unknown_destination(self):
        with pytest.raises(ValidationFailed, match="Invalid vehicle or destination"):
            create_mission(
                name="Nowhere", destination_id="vulcan", vehicle_id="sls",
                crew_count=1, departure_time=DEPARTURE, people=[],
            )

    def test_zero_crew(self):
        with pytest.raises(ValidationFailed, match="at least 1"):
            create_mission(
                name="Ghost", destination_id="moon", vehicle_id="sls",
                crew_count=0, departure_time=DEPARTURE, people=[],
            )

    def test_no_departure_time(self):
        mission = create_mission(
            name="Someday", destination_id="moon", vehicle_id="sls",
            crew_count=1, departure_time=None, people=[],
        ).mission

        assert mission.return_time is None


class TestUpdateMission:
    """Test mission updates."""

    def test_rename_keeps_route(self, created):
        change = update_mission(created, {"name": "Artemis II"}, [])

        assert change.event == events.MISSION_UPDATED
        assert change.mission.name == "Artemis II"
        assert change.mission.route is created.route
        assert created.name == "Artemis"

    def test_destination_change_recomputes_route(self, created):
        change = update_mission(created, {"destination_id": "mars", "vehicle_id": "starship"}, [])

        assert change.mission.route.destination_id == "mars"
        assert change.mission.duration_days == 30.0
        assert change.mission.return_time == DEPARTURE + timedelta(days=30)

    def test_invalid_change_rejected(self, created):
        with pytest.raises(ValidationFailed, match="Vehicle cannot reach destination"):
            update_mission(created, {"destination_id": "pluto"}, [])

    def test_crew_below_passengers(self, created, make_person):
        people = [make_person(name=n) for n in ("A", "B", "C")]
        mission = created
        for p in people:
            mission = assign_passenger(mission, p, people).mission

        with pytest.raises(ValidationFailed, match="below the 3 assigned passengers"):
            update_mission(mission, {"crew_count": 2}, people)

    def test_unknown_field(self, created):
        with pytest.raises(ValueError, match="passenger_ids"):
            update_mission(created, {"passenger_ids": []}, [])

    def test_none_values_ignored(self, created):
        change = update_mission(created, {"name": None, "description": "Lunar flyby"}, [])

        assert change.mission.name == "Artemis"
        assert change.mission.description == "Lunar flyby"

    def test_status(self, created):
        change = update_mission(created, {"status": "ACTIVE"}, [])
        assert change.mission.status == MissionStatus.ACTIVE


class TestPassengerAssignment:
    """Test adding and removing passengers."""

    def test_assign_refreshes_risk(self, created, healthy_person):
        change = assign_passenger(created, healthy_person, [healthy_person])
        mission = change.mission

        assert change.event == events.MISSION_UPDATED
        assert mission.passenger_ids == [healthy_person.id]
        assert created.passenger_ids == []
        assert mission.risk_assessment == assess_mission(mission, [healthy_person])

    def test_assign_twice(self, created, healthy_person):
        mission = assign_passenger(created, healthy_person, [healthy_person]).mission

        with pytest.raises(ValidationFailed, match="already assigned"):
            assign_passenger(mission, healthy_person, [healthy_person])

    def test_capacity_reached(self, make_person):
        mission = create_mission(
            name="Solo", destination_id="moon", vehicle_id="sls",
            crew_count=1, departure_time=DEPARTURE, people=[],
        ).mission
        first, second = make_person(name="First"), make_person(name="Second")
        mission = assign_passenger(mission, first, [first, second]).mission

        with pytest.raises(ValidationFailed, match="capacity reached"):
            assign_passenger(mission, second, [first, second])

    def test_critical_passenger_rejected(self, created, critical_person):
        with pytest.raises(ValidationFailed) as exc_info:
            assign_passenger(created, critical_person, [critical_person])

        assert exc_info.value.reason == (
            "Passenger is not eligible for mission due to critical health issues: Heart Disease"
        )

    def test_remove(self, created, healthy_person):
        mission = assign_passenger(created, healthy_person, [healthy_person]).mission
        change = remove_passenger(mission, healthy_person.id, [healthy_person])

        assert change.mission.passenger_ids == []
        assert change.mission.risk_assessment.overall_risk == 0.5

    def test_remove_not_assigned(self, created):
        with pytest.raises(NotFound):
            remove_passenger(created, "nobody", [])


class TestRefreshMissionsForPerson:
    """Test propagation of person changes."""

    def test_only_affected_missions(self, created, healthy_person, make_person):
        other = make_person(name="Other")
        with_person = assign_passenger(created, healthy_person, [healthy_person, other]).mission
        without_person = assign_passenger(created, other, [healthy_person, other]).mission

        changes = refresh_missions_for_person(
            healthy_person.id, [with_person, without_person], [healthy_person, other]
        )

        assert len(changes) == 1
        assert changes[0].mission.passenger_ids == [healthy_person.id]
        assert changes[0].event == events.MISSION_UPDATED

    def test_health_change_updates_risk(self, created, healthy_person):
        mission = assign_passenger(created, healthy_person, [healthy_person]).mission
        before = mission.risk_assessment.overall_risk

        healthy_person.set_health_issues(["hypertension", "sleep-apnea"])
        changes = refresh_missions_for_person(healthy_person.id, [mission], [healthy_person])

        assert changes[0].mission.risk_assessment.overall_risk > before

    def test_detach(self, created, healthy_person):
        mission = assign_passenger(created, healthy_person, [healthy_person]).mission

        changes = refresh_missions_for_person(healthy_person.id, [mission], [], detach=True)

        assert changes[0].mission.passenger_ids == []


class TestOptimizeMission:
    """Test optimization through the planner."""

    def test_result_stored(self, created, healthy_person, fast_settings, rng):
        mission = assign_passenger(created, healthy_person, [healthy_person]).mission

        change = optimize_mission(mission, [healthy_person], settings=fast_settings, rng=rng)

        assert change.event == events.MISSION_OPTIMIZED
        assert change.mission.route_optimization.optimized
        assert mission.route_optimization is None


class TestMissionProgress:
    """Test progress phases."""

    @pytest.mark.parametrize("offset_hours,phase", [
        (-1, "Pre-launch"),
        (6, "Outbound Journey"),
        (18, "At Destination"),
        (30, "Return Journey"),
        (48, "Completed"),
    ])
    def test_phases(self, created, offset_hours, phase):
        """Test phases across a 36-hour lunar mission."""
        progress = mission_progress(created, now=DEPARTURE + timedelta(hours=offset_hours))
        assert progress["current_phase"] == phase

    def test_progress_percentage(self, created):
        progress = mission_progress(created, now=DEPARTURE + timedelta(hours=18))
        assert progress["progress"] == pytest.approx(50.0)

    def test_no_departure(self, created):
        created.departure_time = None
        with pytest.raises(ValidationFailed, match="no departure time"):
            mission_progress(created)


class TestOptimizationInvalidation:
    """Test a stored boarding order is dropped when its inputs change."""

    @pytest.fixture
    def optimized(self, created, healthy_person, make_person, fast_settings, rng):
        other = make_person(name="Other", health_issues=["migraines"])
        people = [healthy_person, other]
        mission = created
        for person in people:
            mission = assign_passenger(mission, person, people).mission
        mission = optimize_mission(mission, people, settings=fast_settings, rng=rng).mission
        assert mission.route_optimization.optimized
        return mission, people

    def test_assign_clears(self, optimized, make_person):
        mission, people = optimized
        newcomer = make_person(name="Newcomer")

        change = assign_passenger(mission, newcomer, [*people, newcomer])

        assert change.mission.route_optimization is None

    def test_remove_clears(self, optimized):
        mission, people = optimized
        change = remove_passenger(mission, people[1].id, people)
        assert change.mission.route_optimization is None

    def test_detach_clears(self, optimized):
        """Test a deleted person does not linger in the stored boarding order."""
        mission, people = optimized

        changes = refresh_missions_for_person(people[1].id, [mission], people[:1], detach=True)

        assert changes[0].mission.passenger_ids == [people[0].id]
        assert changes[0].mission.route_optimization is None

    def test_health_change_clears(self, optimized):
        mission, people = optimized
        people[0].set_health_issues(["hypertension"])

        changes = refresh_missions_for_person(people[0].id, [mission], people)

        assert changes[0].mission.route_optimization is None

    def test_route_change_clears(self, optimized):
        mission, people = optimized
        change = update_mission(mission, {"destination_id": "mars", "vehicle_id": "starship"}, people)
        assert change.mission.route_optimization is None

    def test_rename_keeps(self, optimized):
        mission, people = optimized
        change = update_mission(mission, {"name": "Artemis III"}, people)
        assert change.mission.route_optimization is mission.route_optimization


class TestAttachOptimization:
    """Test results are only stored on the mission they were computed from."""

    def test_attach_to_unchanged_mission(self, created, healthy_person, fast_settings, rng):
        mission = assign_passenger(created, healthy_person, [healthy_person]).mission
        result = optimize_route(mission, [healthy_person], settings=fast_settings, rng=rng)

        change = attach_optimization(replace(mission, name="Renamed"), mission, result)

        assert change.event == events.MISSION_OPTIMIZED
        assert change.mission.route_optimization is result
        assert change.mission.name == "Renamed"

    def test_passengers_changed(self, created, healthy_person, make_person, fast_settings, rng):
        other = make_person(name="Other")
        source = assign_passenger(created, healthy_person, [healthy_person, other]).mission
        result = optimize_route(source, [healthy_person, other], settings=fast_settings, rng=rng)
        current = assign_passenger(source, other, [healthy_person, other]).mission

        with pytest.raises(StaleMission):
            attach_optimization(current, source, result)

    def test_route_changed(self, created, healthy_person, fast_settings, rng):
        source = assign_passenger(created, healthy_person, [healthy_person]).mission
        result = optimize_route(source, [healthy_person], settings=fast_settings, rng=rng)
        current = update_mission(source, {"destination_id": "iss", "vehicle_id": "falcon_9"}, [healthy_person]).mission

        with pytest.raises(StaleMission):
            attach_optimization(current, source, result)
