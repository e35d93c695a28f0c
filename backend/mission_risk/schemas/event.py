"""
Pydantic schemas for published events.
"""
from pydantic import BaseModel
from datetime import datetime
from typing import Any


class EventResponse(BaseModel):
    sequence: int
    name: str
    payload: Any = None
    timestamp: datetime
