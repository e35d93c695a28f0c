"""
Route calculation and mission feasibility checks.

This module is the physical-model layer of the risk pipeline. It maps an
(origin, destination, vehicle) triple to a deterministic travel plan:

- Distance: Euclidean norm of the coordinate difference, AU → million km
- Travel time: step function of distance
- Fuel: distance × 1000 kg × (1 + 0.5 × destination gravity)
- Complexity: additive score in [1, 10]
- Discrete route risks (communication delay, radiation, temperature, gravity)

The model is intentionally simple and is not an orbital-mechanics
simulation.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
import logging

import numpy as np

from mission_risk.core.catalog import (
    AU_TO_MILLION_KM,
    Coordinates,
    Destination,
    Vehicle,
    RadiationLevel,
    get_destination,
    get_vehicle,
    list_vehicles,
)
from mission_risk.core.errors import UnknownDestination, UnknownVehicle


logger = logging.getLogger(__name__)

# Payload allowance per crew member (kg)
PAYLOAD_PER_PERSON_KG: float = 100.0

# (upper distance bound in million km, travel days); last band is open-ended
TRAVEL_TIME_BANDS = (
    (1.0, 1.5),
    (10.0, 3.0),
    (100.0, 7.0),
    (1000.0, 30.0),
)
LONG_HAUL_TRAVEL_DAYS: float = 365.0

CHECKPOINT_DISTANCE_THRESHOLD: float = 100.0
COMMUNICATION_DELAY_DISTANCE: float = 1000.0
EXTREME_COLD_C: float = -200.0

ORIGIN = Coordinates()


@dataclass(frozen=True)
class Waypoint:
    """A point along the route with its cumulative distance."""
    name: str
    distance: float
    type: str  # 'launch' | 'checkpoint' | 'arrival'

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "distance": self.distance, "type": self.type}


@dataclass(frozen=True)
class RouteRisk:
    """A discrete hazard identified for a route."""
    type: str
    severity: str  # 'Medium' | 'High' | 'Critical'
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "severity": self.severity, "description": self.description}


@dataclass(frozen=True)
class Route:
    """Derived travel plan between an origin and a destination.

    Attributes:
        origin: Origin display name ("Earth" unless given)
        destination_id: Destination catalog id
        destination_name: Destination display name
        vehicle_id: Vehicle catalog id
        distance: Route distance in million km
        travel_time_days: Travel time in days
        fuel_required: Fuel requirement in kg
        complexity: Complexity score in [1, 10]
        waypoints: Ordered launch/checkpoint/arrival waypoints
        risks: Identified route risks
    """
    origin: str
    destination_id: str
    destination_name: str
    vehicle_id: str
    distance: float
    travel_time_days: float
    fuel_required: int
    complexity: float
    waypoints: List[Waypoint] = field(default_factory=list)
    risks: List[RouteRisk] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        days = int(self.travel_time_days)
        return {
            "origin": self.origin,
            "destination_name": self.destination_name,
            "destination_id": self.destination_id,
            "vehicle_id": self.vehicle_id,
            "distance": self.distance,
            "travel_time": {
                "days": days,
                "hours": int(round((self.travel_time_days - days) * 24)),
            },
            "travel_time_days": self.travel_time_days,
            "fuel_required": self.fuel_required,
            "complexity": self.complexity,
            "waypoints": [w.to_dict() for w in self.waypoints],
            "risks": [r.to_dict() for r in self.risks],
        }


@dataclass
class VehicleValidation:
    """Outcome of a vehicle/destination/crew compatibility check."""
    valid: bool
    reason: Optional[str] = None
    vehicle: Optional[Vehicle] = None
    destination: Optional[Destination] = None
    route: Optional[Route] = None


def calculate_distance(origin: Coordinates, target: Coordinates) -> float:
    """
    Calculate route distance between two catalog positions.

    Args:
        origin: Start position in AU
        target: End position in AU

    Returns:
        Distance in million km
    """
    delta = np.subtract(target.as_tuple(), origin.as_tuple())
    return float(np.linalg.norm(delta) * AU_TO_MILLION_KM)


def calculate_travel_time(distance: float) -> float:
    """
    Travel time in days for a route distance.

    Args:
        distance: Route distance in million km

    Returns:
        Travel time in days (monotone non-decreasing in distance)
    """
    for upper_bound, days in TRAVEL_TIME_BANDS:
        if distance < upper_bound:
            return days
    return LONG_HAUL_TRAVEL_DAYS


def calculate_fuel_requirements(distance: float, destination_gravity: float) -> int:
    """
    Fuel requirement for a route.

    Args:
        distance: Route distance in million km
        destination_gravity: Destination surface gravity in g

    Returns:
        Fuel in kg, rounded to the nearest kilogram
    """
    base_fuel = distance * 1000.0
    gravity_factor = 1.0 + destination_gravity * 0.5
    return int(round(base_fuel * gravity_factor))


def is_extreme_temperature(destination: Destination) -> bool:
    """True if the descriptor is labelled extreme or reaches -200 °C or colder."""
    if destination.has_extreme_temperature_label:
        return True
    min_temp = destination.min_temperature_c
    return min_temp is not None and min_temp <= EXTREME_COLD_C


def calculate_route_complexity(destination: Destination, distance: float) -> float:
    """
    Additive route complexity score.

    Starts at 1 and accumulates distance/100, radiation (Extreme +2,
    High +1), missing atmosphere (+0.5), CO2 atmosphere (+1), an "extreme"
    temperature label (+1) and a minimum temperature of -200 °C or colder
    (+1). The result is clamped to [1, 10].

    Args:
        destination: Destination catalog entry
        distance: Route distance in million km

    Returns:
        Complexity in [1, 10]
    """
    complexity = 1.0
    complexity += distance / 100.0

    if destination.radiation == RadiationLevel.EXTREME:
        complexity += 2.0
    elif destination.radiation == RadiationLevel.HIGH:
        complexity += 1.0

    if not destination.has_atmosphere:
        complexity += 0.5
    if destination.has_co2_atmosphere:
        complexity += 1.0

    if destination.has_extreme_temperature_label:
        complexity += 1.0
    min_temp = destination.min_temperature_c
    if min_temp is not None and min_temp <= EXTREME_COLD_C:
        complexity += 1.0

    return float(min(10.0, max(1.0, complexity)))


def generate_waypoints(destination: Destination, distance: float) -> List[Waypoint]:
    """Launch, optional mid-route checkpoint, and arrival waypoints."""
    waypoints = [Waypoint(name="Earth Departure", distance=0.0, type="launch")]

    if distance > CHECKPOINT_DISTANCE_THRESHOLD:
        waypoints.append(
            Waypoint(name="Deep Space Checkpoint", distance=distance * 0.5, type="checkpoint")
        )

    waypoints.append(Waypoint(name=f"{destination.name} Arrival", distance=distance, type="arrival"))
    return waypoints


def assess_route_risks(destination: Destination, distance: float) -> List[RouteRisk]:
    """
    Identify discrete hazards along a route.

    Args:
        destination: Destination catalog entry
        distance: Route distance in million km

    Returns:
        List of findings, possibly empty
    """
    risks = []

    if distance > COMMUNICATION_DELAY_DISTANCE:
        risks.append(RouteRisk(
            type="Communication Delay",
            severity="High",
            description="Significant delay in Earth communication",
        ))

    if destination.radiation == RadiationLevel.EXTREME:
        risks.append(RouteRisk(
            type="Radiation Exposure",
            severity="Critical",
            description="Extreme radiation levels require special protection",
        ))

    if is_extreme_temperature(destination):
        risks.append(RouteRisk(
            type="Temperature Extremes",
            severity="High",
            description="Extreme temperature variations require advanced thermal protection",
        ))

    if destination.gravity > 2:
        risks.append(RouteRisk(
            type="High Gravity",
            severity="Medium",
            description="High gravity environment affects landing and operations",
        ))

    return risks


def compute_route(
    destination_id: str,
    vehicle_id: str,
    origin_id: Optional[str] = None
) -> Route:
    """
    Compute the travel plan for a destination and vehicle.

    Args:
        destination_id: Destination catalog id
        vehicle_id: Vehicle catalog id
        origin_id: Optional origin destination id; Earth (zero vector)
            when omitted or not in the catalog

    Returns:
        Route with distance, travel time, fuel, complexity, waypoints
        and risks

    Raises:
        UnknownDestination: If destination_id is not in the catalog
        UnknownVehicle: If vehicle_id is not in the catalog

    Examples:
        >>> route = compute_route("mars", "starship")
        >>> route.travel_time_days
        30.0
    """
    destination = get_destination(destination_id)
    if destination is None:
        raise UnknownDestination(destination_id)

    if get_vehicle(vehicle_id) is None:
        raise UnknownVehicle(vehicle_id)

    origin = get_destination(origin_id) if origin_id else None
    origin_coordinates = origin.coordinates if origin else ORIGIN
    origin_name = origin.name if origin else "Earth"

    distance = calculate_distance(origin_coordinates, destination.coordinates)

    route = Route(
        origin=origin_name,
        destination_id=destination.id,
        destination_name=destination.name,
        vehicle_id=vehicle_id,
        distance=distance,
        travel_time_days=calculate_travel_time(distance),
        fuel_required=calculate_fuel_requirements(distance, destination.gravity),
        complexity=calculate_route_complexity(destination, distance),
        waypoints=generate_waypoints(destination, distance),
        risks=assess_route_risks(destination, distance),
    )

    logger.debug(
        f"Route {origin_name} -> {destination.name} via {vehicle_id}: "
        f"{distance:.2f} Mkm, {route.travel_time_days} days, "
        f"complexity={route.complexity:.2f}"
    )
    return route


def validate_vehicle_for_mission(
    vehicle_id: str,
    destination_id: str,
    crew_count: int
) -> VehicleValidation:
    """
    Check that a vehicle can fly a crew to a destination.

    The check fails when the crew payload allowance (100 kg per person)
    exceeds the vehicle payload capacity, when the route distance exceeds
    the vehicle range, or when the crew exceeds the vehicle crew capacity.
    This is the gate used before a mission is created or re-validated.

    Args:
        vehicle_id: Vehicle catalog id
        destination_id: Destination catalog id
        crew_count: Number of crew

    Returns:
        VehicleValidation; never raises for unknown ids
    """
    vehicle = get_vehicle(vehicle_id)
    destination = get_destination(destination_id)

    if vehicle is None or destination is None:
        return VehicleValidation(valid=False, reason="Invalid vehicle or destination")

    route = compute_route(destination_id, vehicle_id)

    if crew_count * PAYLOAD_PER_PERSON_KG > vehicle.payload_capacity:
        return VehicleValidation(
            valid=False,
            reason="Vehicle payload capacity insufficient for crew",
            vehicle=vehicle, destination=destination, route=route,
        )

    if route.distance > vehicle.max_distance:
        return VehicleValidation(
            valid=False,
            reason="Vehicle cannot reach destination",
            vehicle=vehicle, destination=destination, route=route,
        )

    if crew_count > vehicle.crew_capacity:
        return VehicleValidation(
            valid=False,
            reason="Vehicle crew capacity exceeded",
            vehicle=vehicle, destination=destination, route=route,
        )

    return VehicleValidation(valid=True, vehicle=vehicle, destination=destination, route=route)


def get_mission_recommendations(destination_id: str, crew_count: int) -> List[Dict[str, Any]]:
    """
    Planning recommendations for a destination and crew size.

    Returns grouped recommendations: suitable vehicles (up to three),
    radiation protection for extreme-radiation destinations, and logistics
    for journeys longer than 30 days.

    Args:
        destination_id: Destination catalog id
        crew_count: Planned crew size

    Returns:
        List of {'type', 'title', 'items'} groups; empty for unknown
        destinations
    """
    destination = get_destination(destination_id)
    if destination is None:
        return []

    suitable = [
        v for v in list_vehicles()
        if validate_vehicle_for_mission(v.id, destination_id, crew_count).valid
    ]

    recommendations = [{
        "type": "vehicle",
        "title": "Recommended Vehicles",
        "items": [{"name": v.name, "reason": v.description} for v in suitable[:3]],
    }]

    if destination.radiation == RadiationLevel.EXTREME:
        recommendations.append({
            "type": "safety",
            "title": "Radiation Protection Required",
            "items": [
                {"name": "Enhanced Shielding", "reason": "Protect against extreme radiation"},
                {"name": "Radiation Monitoring", "reason": "Continuous monitoring of exposure levels"},
            ],
        })

    distance = calculate_distance(ORIGIN, destination.coordinates)
    if calculate_travel_time(distance) > 30:
        recommendations.append({
            "type": "logistics",
            "title": "Long Duration Mission",
            "items": [
                {"name": "Extended Life Support", "reason": "Sufficient supplies for long journey"},
                {"name": "Psychological Support", "reason": "Mental health considerations for crew"},
            ],
        })

    return recommendations
