"""
API routes package.

Exports all API routers for easy inclusion in the main application.
"""
from mission_risk.api import passengers, missions, assessments, risks, events

__all__ = [
    "passengers",
    "missions",
    "assessments",
    "risks",
    "events"
]
