"""
Event polling endpoint.

Clients poll with the last sequence number they have seen.
"""
from fastapi import APIRouter, Query
from typing import List

from mission_risk.api.deps import get_event_bus
from mission_risk.schemas.event import EventResponse


router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=List[EventResponse])
async def get_events(
    after: int = Query(0, ge=0, description="Return events with a larger sequence number"),
    limit: int = Query(100, ge=1, le=1000)
):
    """Recent events, oldest first."""
    return [e.to_dict() for e in get_event_bus().history(after=after, limit=limit)]
