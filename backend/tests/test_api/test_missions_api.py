"""
Unit tests for Mission API endpoints.

Tests include:
- Mission CRUD with vehicle validation
- Passenger assignment rules
- Risk assessment, optimization and progress
- Catalog lookups and recommendations
"""

import pytest
from fastapi import status


def create_passenger(client, **overrides):
    payload = {"name": "Ada Lovelace", "age": 35, "experience_level": 5, "health_issues": []}
    payload.update(overrides)
    return client.post("/api/passengers", json=payload).json()


def mission_payload(**overrides):
    payload = {
        "name": "Artemis",
        "destination_id": "moon",
        "vehicle_id": "sls",
        "crew_count": 4,
        "departure_time": "2030-01-01T12:00:00",
    }
    payload.update(overrides)
    return payload


class TestCatalogEndpoints:
    """Test destination and vehicle lookups."""

    def test_destinations(self, client):
        data = client.get("/api/missions/destinations/available").json()

        assert len(data) == 13
        assert data[0]["id"] == "mercury"

    def test_destination_search(self, client):
        data = client.get("/api/missions/destinations/search", params={"query": "saturn"}).json()
        assert [d["id"] for d in data] == ["saturn", "titan"]

    def test_vehicles(self, client):
        data = client.get("/api/missions/vehicles/available").json()
        assert {v["id"] for v in data} == {"falcon_9", "falcon_heavy", "starship", "sls", "new_glenn", "electron"}

    def test_recommendations(self, client):
        response = client.get("/api/missions/recommendations", params={"destination_id": "jupiter", "crew_count": 4})

        assert response.status_code == status.HTTP_200_OK
        assert [g["type"] for g in response.json()] == ["vehicle", "safety"]


class TestMissionCrud:
    """Test /api/missions CRUD endpoints."""

    def test_create_lunar_mission(self, client):
        """Test moon on SLS with four crew is accepted."""
        response = client.post("/api/missions", json=mission_payload())

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["status"] == "PLANNED"
        assert data["route"]["destination_id"] == "moon"
        assert data["route"]["travel_time"] == {"days": 1, "hours": 12}
        assert data["duration_days"] == 1.5
        assert data["risk_assessment"]["overall_risk"] == 0.5

    def test_create_over_capacity(self, client):
        response = client.post("/api/missions", json=mission_payload(crew_count=5))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == {
            "message": "Mission validation failed",
            "reason": "Vehicle crew capacity exceeded",
        }

    def test_create_unknown_vehicle(self, client):
        response = client.post("/api/missions", json=mission_payload(vehicle_id="enterprise"))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["reason"] == "Invalid vehicle or destination"

    def test_list_and_get(self, client):
        created = client.post("/api/missions", json=mission_payload()).json()

        assert [m["id"] for m in client.get("/api/missions").json()] == [created["id"]]
        assert client.get(f"/api/missions/{created['id']}").json()["name"] == "Artemis"

    def test_get_missing(self, client):
        assert client.get("/api/missions/nowhere").status_code == status.HTTP_404_NOT_FOUND

    def test_update(self, client):
        created = client.post("/api/missions", json=mission_payload()).json()

        response = client.put(f"/api/missions/{created['id']}", json={
            "destination_id": "mars", "vehicle_id": "starship", "status": "ACTIVE"
        })

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["route"]["destination_id"] == "mars"
        assert data["duration_days"] == 30.0
        assert data["status"] == "ACTIVE"

    def test_update_invalid(self, client):
        created = client.post("/api/missions", json=mission_payload()).json()

        response = client.put(f"/api/missions/{created['id']}", json={"crew_count": 5})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert client.get(f"/api/missions/{created['id']}").json()["crew_count"] == 4

    def test_update_bad_status(self, client):
        created = client.post("/api/missions", json=mission_payload()).json()
        response = client.put(f"/api/missions/{created['id']}", json={"status": "LOST"})
        assert response.status_code == 422

    def test_delete(self, client):
        created = client.post("/api/missions", json=mission_payload()).json()

        response = client.delete(f"/api/missions/{created['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["mission"]["id"] == created["id"]
        assert client.get(f"/api/missions/{created['id']}").status_code == status.HTTP_404_NOT_FOUND

    def test_delete_missing(self, client):
        assert client.delete("/api/missions/nowhere").status_code == status.HTTP_404_NOT_FOUND


class TestMissionPassengers:
    """Test passenger assignment endpoints."""

    def setup_mission(self, client, **overrides):
        return client.post("/api/missions", json=mission_payload(**overrides)).json()

    def test_add_passenger(self, client):
        mission = self.setup_mission(client)
        passenger = create_passenger(client)

        response = client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": passenger["id"]})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["passenger_ids"] == [passenger["id"]]
        assert len(data["risk_assessment"]["passenger_risks"]) == 1

    def test_add_critical_passenger(self, client):
        """Test an 80-year-old with heart disease cannot be assigned."""
        mission = self.setup_mission(client)
        passenger = create_passenger(client, name="Critical Carl", age=80, health_issues=["heart-disease"])

        response = client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": passenger["id"]})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "critical health issues: Heart Disease" in response.json()["detail"]

    def test_add_twice(self, client):
        mission = self.setup_mission(client)
        passenger = create_passenger(client)
        url = f"/api/missions/{mission['id']}/passengers"
        client.post(url, json={"passenger_id": passenger["id"]})

        response = client.post(url, json={"passenger_id": passenger["id"]})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Passenger already assigned to mission"

    def test_add_over_capacity(self, client):
        mission = self.setup_mission(client, crew_count=1)
        url = f"/api/missions/{mission['id']}/passengers"
        client.post(url, json={"passenger_id": create_passenger(client, name="A")["id"]})

        response = client.post(url, json={"passenger_id": create_passenger(client, name="B")["id"]})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Mission crew capacity reached"

    def test_add_unknown_passenger(self, client):
        mission = self.setup_mission(client)
        response = client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": "nobody"})
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_remove_passenger(self, client):
        mission = self.setup_mission(client)
        passenger = create_passenger(client)
        client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": passenger["id"]})

        response = client.delete(f"/api/missions/{mission['id']}/passengers/{passenger['id']}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["passenger_ids"] == []

    def test_remove_not_assigned(self, client):
        mission = self.setup_mission(client)
        response = client.delete(f"/api/missions/{mission['id']}/passengers/nobody")
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestMissionAnalysis:
    """Test risk assessment, optimization and progress endpoints."""

    def test_risk_assessment(self, client):
        mission = client.post("/api/missions", json=mission_payload()).json()
        passenger = create_passenger(client, name="Hyper Henry", health_issues=["hypertension"])
        client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": passenger["id"]})

        data = client.get(f"/api/missions/{mission['id']}/risk-assessment").json()

        assert 0.0 <= data["overall_risk"] <= 1.0
        assert "Hyper Henry: Hypertension requires medical clearance" in data["recommendations"]
        assert set(data["mission_factors"]) == {
            "complexity", "distance", "environment", "technology", "crew_size", "duration"
        }

    def test_optimize_route(self, client):
        mission = client.post("/api/missions", json=mission_payload()).json()
        ids = []
        for name, issues in (("High", ["hypertension"]), ("Low", []), ("Mid", ["migraines"])):
            passenger = create_passenger(client, name=name, health_issues=issues)
            client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": passenger["id"]})
            ids.append(passenger["id"])

        response = client.post(f"/api/missions/{mission['id']}/optimize-route")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["optimized"] is True
        assert [p["name"] for p in data["passenger_order"]] == ["Low", "Mid", "High"]
        stored = client.get(f"/api/missions/{mission['id']}").json()
        assert stored["route_optimization"]["passenger_order"] == data["passenger_order"]

    def test_optimize_empty_mission(self, client):
        mission = client.post("/api/missions", json=mission_payload()).json()

        data = client.post(f"/api/missions/{mission['id']}/optimize-route").json()

        assert data["optimized"] is False
        assert data["reason"] == "No passengers to optimize"

    def test_progress_before_launch(self, client):
        mission = client.post("/api/missions", json=mission_payload()).json()

        data = client.get(f"/api/missions/{mission['id']}/progress").json()

        assert data["current_phase"] == "Pre-launch"
        assert data["progress"] == 0.0

    def test_progress_completed(self, client):
        mission = client.post("/api/missions", json=mission_payload(departure_time="2001-01-01T00:00:00")).json()

        data = client.get(f"/api/missions/{mission['id']}/progress").json()

        assert data["current_phase"] == "Completed"
        assert data["progress"] == pytest.approx(100.0)


class TestOptimizeWhileEditing:
    """Test optimization results never overwrite concurrent mission edits."""

    def setup_mission(self, client, monkeypatch, on_optimize):
        """Mission with one passenger; `on_optimize(attempt, mission_id)` runs before each search."""
        from mission_risk.api import missions as missions_api

        mission = client.post("/api/missions", json=mission_payload()).json()
        first = create_passenger(client, name="First")
        client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": first["id"]})

        real_optimize = missions_api.optimize_route
        attempts = []

        def optimize(snapshot, people):
            attempts.append(snapshot.passenger_ids)
            on_optimize(len(attempts), mission["id"])
            return real_optimize(snapshot, people)

        monkeypatch.setattr(missions_api, "optimize_route", optimize)
        return mission, first, attempts

    def toggle(self, mission_id, passenger_id):
        from mission_risk.api.deps import get_mission_repository, get_person_repository
        from mission_risk.core import mission_planner

        people = get_person_repository().list()

        def edit(current):
            if passenger_id in current.passenger_ids:
                return mission_planner.remove_passenger(current, passenger_id, people).mission
            person = get_person_repository().get_or_raise(passenger_id)
            return mission_planner.assign_passenger(current, person, people).mission

        get_mission_repository().update(mission_id, edit)

    def test_assignment_during_search_is_kept(self, client, monkeypatch):
        second = create_passenger(client, name="Second")

        def assign_once(attempt, mission_id):
            if attempt == 1:
                self.toggle(mission_id, second["id"])

        mission, first, attempts = self.setup_mission(client, monkeypatch, assign_once)

        response = client.post(f"/api/missions/{mission['id']}/optimize-route")

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["passenger_order"]) == 2
        assert attempts == [[first["id"]], [first["id"], second["id"]]]
        stored = client.get(f"/api/missions/{mission['id']}").json()
        assert stored["passenger_ids"] == [first["id"], second["id"]]
        assert {p["id"] for p in stored["route_optimization"]["passenger_order"]} == {first["id"], second["id"]}

    def test_conflict_when_mission_keeps_changing(self, client, monkeypatch):
        second = create_passenger(client, name="Second")
        mission, first, attempts = self.setup_mission(
            client, monkeypatch, lambda attempt, mission_id: self.toggle(mission_id, second["id"])
        )

        response = client.post(f"/api/missions/{mission['id']}/optimize-route")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert len(attempts) == 3
        stored = client.get(f"/api/missions/{mission['id']}").json()
        assert stored["passenger_ids"] == [first["id"], second["id"]]
        assert stored["route_optimization"] is None

    def test_mission_deleted_during_search(self, client, monkeypatch):
        from mission_risk.api.deps import get_mission_repository

        mission, _, _ = self.setup_mission(
            client, monkeypatch, lambda attempt, mission_id: get_mission_repository().delete(mission_id)
        )

        response = client.post(f"/api/missions/{mission['id']}/optimize-route")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_search_failure(self, client, monkeypatch):
        from mission_risk.core.optimizer import GeneticOrderSearch

        def failing_run(self):
            raise RuntimeError("search diverged")

        monkeypatch.setattr(GeneticOrderSearch, "run", failing_run)
        mission = client.post("/api/missions", json=mission_payload()).json()
        passenger = create_passenger(client)
        client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": passenger["id"]})

        response = client.post(f"/api/missions/{mission['id']}/optimize-route")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["optimized"] is False
        assert data["reason"] == "Error in optimization"

    def test_assignment_drops_stored_order(self, client):
        mission = client.post("/api/missions", json=mission_payload()).json()
        first = create_passenger(client, name="First")
        second = create_passenger(client, name="Second")
        client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": first["id"]})
        client.post(f"/api/missions/{mission['id']}/optimize-route")

        data = client.post(f"/api/missions/{mission['id']}/passengers", json={"passenger_id": second["id"]}).json()

        assert data["route_optimization"] is None
