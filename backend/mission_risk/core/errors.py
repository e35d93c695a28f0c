"""
Error kinds raised by the mission risk core.

Scoring-path failures are not represented here: they degrade to a default
assessment inside the risk scorer instead of propagating.
"""


class MissionRiskError(Exception):
    """Base class for all mission risk errors."""
    pass


class UnknownDestination(MissionRiskError, LookupError):
    """Raised when a destination id is not in the catalog."""

    def __init__(self, destination_id: str):
        self.destination_id = destination_id
        super().__init__(f"Unknown destination: '{destination_id}'")


class UnknownVehicle(MissionRiskError, LookupError):
    """Raised when a vehicle id is not in the catalog."""

    def __init__(self, vehicle_id: str):
        self.vehicle_id = vehicle_id
        super().__init__(f"Unknown vehicle: '{vehicle_id}'")


class ValidationFailed(MissionRiskError):
    """Vehicle, destination and crew are incompatible.

    Attributes:
        reason: Human-readable explanation suitable for API responses.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Mission validation failed: {reason}")


class NotFound(MissionRiskError, LookupError):
    """A referenced mission or person is absent from the snapshot given."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class StaleMission(MissionRiskError):
    """A result computed from an older copy of a mission no longer applies."""

    def __init__(self, mission_id: str):
        self.mission_id = mission_id
        super().__init__(f"Mission {mission_id} changed while the result was computed")
