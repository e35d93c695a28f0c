"""
Destination and vehicle catalog.

Immutable reference data loaded at import time. Destinations carry the
environmental properties used by the route calculator and the environment
risk model; vehicles carry the capacity and reliability figures used for
mission validation and the technology risk factor.

Units:
    distance / max_distance: million km
    coordinates: AU (heliocentric-ish, simplified to the z axis)
    gravity: multiples of Earth g
    payload_capacity: kg
    cost: million USD
"""
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, List, Optional, Tuple
import re


# 1 AU expressed in million km
AU_TO_MILLION_KM: float = 149.6

_TEMPERATURE_PATTERN = re.compile(r"(-?\d+(?:\.\d+)?)\s*°C")


class RadiationLevel(str, Enum):
    """Radiation tier of a destination."""
    NONE = "None"
    LOW = "Low"
    MODERATE = "Moderate"
    HIGH = "High"
    EXTREME = "Extreme"


@dataclass(frozen=True)
class Coordinates:
    """Position in AU."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)


@dataclass(frozen=True)
class Destination:
    """Catalog entry for a mission destination.

    Attributes:
        id: Catalog key (e.g. "mars")
        name: Display name
        distance: Nominal distance from Earth in million km
        gravity: Surface gravity in g
        atmosphere: Atmosphere descriptor (e.g. "Thin CO2", "None")
        temperature: Temperature descriptor (e.g. "-140°C to 20°C")
        radiation: Radiation tier
        coordinates: 3-D position used for route distance
        mission_complexity: Qualitative complexity label
        description: Free text
    """
    id: str
    name: str
    distance: float
    gravity: float
    atmosphere: str
    temperature: str
    radiation: RadiationLevel
    coordinates: Coordinates
    mission_complexity: str = ""
    description: str = ""

    @property
    def temperatures_c(self) -> List[float]:
        """Temperatures (°C) mentioned in the descriptor."""
        return [float(t) for t in _TEMPERATURE_PATTERN.findall(self.temperature)]

    @property
    def min_temperature_c(self) -> Optional[float]:
        """Lowest temperature in the descriptor, or None if not numeric."""
        temps = self.temperatures_c
        return min(temps) if temps else None

    @property
    def has_extreme_temperature_label(self) -> bool:
        return "extreme" in self.temperature.lower()

    @property
    def has_atmosphere(self) -> bool:
        return self.atmosphere.strip().lower() != "none"

    @property
    def has_co2_atmosphere(self) -> bool:
        return "co2" in self.atmosphere.lower()

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["radiation"] = self.radiation.value
        return data


@dataclass(frozen=True)
class Vehicle:
    """Catalog entry for a launch vehicle.

    Attributes:
        id: Catalog key (e.g. "starship")
        name: Display name
        payload_capacity: Payload in kg
        max_distance: Maximum range in million km
        fuel_efficiency: Efficiency in [0, 1]
        reliability: Success probability in [0, 1]
        cost: Launch cost in million USD
        crew_capacity: Maximum number of crew
        description: Free text
    """
    id: str
    name: str
    payload_capacity: float
    max_distance: float
    fuel_efficiency: float
    reliability: float
    crew_capacity: int
    cost: float = 0.0
    description: str = ""

    def to_dict(self) -> Dict:
        return asdict(self)


DESTINATIONS: Dict[str, Destination] = {
    d.id: d for d in (
        # Solar system planets
        Destination(
            id="mercury", name="Mercury", distance=77.3, gravity=0.38,
            atmosphere="None", temperature="Extreme (-180°C to 430°C)",
            radiation=RadiationLevel.HIGH, coordinates=Coordinates(z=0.39),
            mission_complexity="Very High",
            description="Closest planet to the Sun, extreme temperature variations",
        ),
        Destination(
            id="venus", name="Venus", distance=38.2, gravity=0.91,
            atmosphere="Dense CO2", temperature="460°C",
            radiation=RadiationLevel.HIGH, coordinates=Coordinates(z=0.72),
            mission_complexity="Very High",
            description="Hottest planet, thick atmosphere, sulfuric acid clouds",
        ),
        Destination(
            id="mars", name="Mars", distance=54.6, gravity=0.38,
            atmosphere="Thin CO2", temperature="-140°C to 20°C",
            radiation=RadiationLevel.HIGH, coordinates=Coordinates(z=1.52),
            mission_complexity="High",
            description="Red planet, potential for human colonization",
        ),
        Destination(
            id="jupiter", name="Jupiter", distance=588.5, gravity=2.34,
            atmosphere="Hydrogen/Helium", temperature="-110°C",
            radiation=RadiationLevel.EXTREME, coordinates=Coordinates(z=5.20),
            mission_complexity="Extreme",
            description="Largest planet, gas giant with intense radiation",
        ),
        Destination(
            id="saturn", name="Saturn", distance=1200.0, gravity=0.93,
            atmosphere="Hydrogen/Helium", temperature="-140°C",
            radiation=RadiationLevel.HIGH, coordinates=Coordinates(z=9.58),
            mission_complexity="Extreme",
            description="Ringed planet, beautiful but challenging destination",
        ),
        Destination(
            id="uranus", name="Uranus", distance=2581.9, gravity=0.89,
            atmosphere="Hydrogen/Helium/Methane", temperature="-195°C",
            radiation=RadiationLevel.MODERATE, coordinates=Coordinates(z=19.18),
            mission_complexity="Extreme",
            description="Ice giant, tilted on its side",
        ),
        Destination(
            id="neptune", name="Neptune", distance=4305.9, gravity=1.12,
            atmosphere="Hydrogen/Helium/Methane", temperature="-200°C",
            radiation=RadiationLevel.MODERATE, coordinates=Coordinates(z=30.07),
            mission_complexity="Extreme",
            description="Farthest planet, strong winds and storms",
        ),
        # Moons
        Destination(
            id="moon", name="Moon", distance=0.384, gravity=0.17,
            atmosphere="None", temperature="-173°C to 127°C",
            radiation=RadiationLevel.HIGH, coordinates=Coordinates(z=0.00257),
            mission_complexity="Medium",
            description="Earth's natural satellite, closest celestial body",
        ),
        Destination(
            id="europa", name="Europa (Jupiter's Moon)", distance=588.5, gravity=0.13,
            atmosphere="Thin Oxygen", temperature="-160°C",
            radiation=RadiationLevel.EXTREME, coordinates=Coordinates(z=5.20),
            mission_complexity="Very High",
            description="Icy moon with potential subsurface ocean",
        ),
        Destination(
            id="titan", name="Titan (Saturn's Moon)", distance=1200.0, gravity=0.14,
            atmosphere="Nitrogen/Methane", temperature="-179°C",
            radiation=RadiationLevel.HIGH, coordinates=Coordinates(z=9.58),
            mission_complexity="Very High",
            description="Largest moon of Saturn, thick atmosphere",
        ),
        # Other destinations
        Destination(
            id="iss", name="International Space Station", distance=0.000408, gravity=0.0,
            atmosphere="Controlled", temperature="Controlled",
            radiation=RadiationLevel.MODERATE, coordinates=Coordinates(z=0.000408),
            mission_complexity="Low",
            description="Low Earth orbit space station",
        ),
        Destination(
            id="asteroid_belt", name="Asteroid Belt", distance=329.0, gravity=0.0,
            atmosphere="None", temperature="-73°C",
            radiation=RadiationLevel.HIGH, coordinates=Coordinates(z=2.2),
            mission_complexity="High",
            description="Region between Mars and Jupiter with numerous asteroids",
        ),
        Destination(
            id="pluto", name="Pluto", distance=5900.0, gravity=0.06,
            atmosphere="Thin Nitrogen", temperature="-230°C",
            radiation=RadiationLevel.LOW, coordinates=Coordinates(z=39.48),
            mission_complexity="Extreme",
            description="Dwarf planet in the Kuiper Belt",
        ),
    )
}


VEHICLES: Dict[str, Vehicle] = {
    v.id: v for v in (
        Vehicle(
            id="falcon_9", name="SpaceX Falcon 9", payload_capacity=22800,
            max_distance=1000, fuel_efficiency=0.85, reliability=0.98,
            crew_capacity=7, cost=67,
            description="Reusable rocket, excellent for Earth orbit and lunar missions",
        ),
        Vehicle(
            id="falcon_heavy", name="SpaceX Falcon Heavy", payload_capacity=63800,
            max_distance=2000, fuel_efficiency=0.80, reliability=0.95,
            crew_capacity=7, cost=97,
            description="Most powerful operational rocket, suitable for Mars missions",
        ),
        Vehicle(
            id="starship", name="SpaceX Starship", payload_capacity=100000,
            max_distance=10000, fuel_efficiency=0.90, reliability=0.85,
            crew_capacity=100, cost=10,
            description="Next-generation spacecraft for interplanetary travel",
        ),
        Vehicle(
            id="sls", name="NASA SLS", payload_capacity=95000,
            max_distance=5000, fuel_efficiency=0.75, reliability=0.90,
            crew_capacity=4, cost=2000,
            description="NASA's heavy-lift rocket for deep space exploration",
        ),
        Vehicle(
            id="new_glenn", name="Blue Origin New Glenn", payload_capacity=45000,
            max_distance=1500, fuel_efficiency=0.82, reliability=0.92,
            crew_capacity=7, cost=120,
            description="Reusable rocket for orbital and lunar missions",
        ),
        Vehicle(
            id="electron", name="Rocket Lab Electron", payload_capacity=300,
            max_distance=100, fuel_efficiency=0.88, reliability=0.96,
            crew_capacity=0, cost=7,
            description="Small satellite launcher, not suitable for crewed missions",
        ),
    )
}


def get_destination(destination_id: str) -> Optional[Destination]:
    """Look up a destination by id, or None."""
    return DESTINATIONS.get(destination_id)


def get_vehicle(vehicle_id: str) -> Optional[Vehicle]:
    """Look up a vehicle by id, or None."""
    return VEHICLES.get(vehicle_id)


def list_destinations() -> List[Destination]:
    """All destinations in catalog order."""
    return list(DESTINATIONS.values())


def list_vehicles() -> List[Vehicle]:
    """All vehicles in catalog order."""
    return list(VEHICLES.values())


def search_destinations(query: str) -> List[Destination]:
    """
    Case-insensitive search over destination name and description.

    Args:
        query: Search term

    Returns:
        Matching destinations in catalog order
    """
    term = query.lower()
    return [
        d for d in DESTINATIONS.values()
        if term in d.name.lower() or term in d.description.lower()
    ]
