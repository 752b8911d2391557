"""Party domain models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from app.schemas.track import Track


class PartyRecord(BaseModel):
    """Party record as seen by the domain layer."""

    code: str
    host_id: str
    host_secret: str
    participants: list[str] = Field(default_factory=list)
    current_track: Track | None = None
    created_at: datetime
    updated_at: datetime


class PartyStartResponse(BaseModel):
    """Returned once, to the host, when a party is created."""

    code: str
    host_secret: str


class LeaveOutcome(str, Enum):
    DISBANDED = "disbanded"
    LEFT = "left"
