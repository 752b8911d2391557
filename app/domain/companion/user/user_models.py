"""User domain models."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.track import Track


class UserRecord(BaseModel):
    """User record as seen by the domain layer."""

    user_id: str
    display_name: str
    session_secret: str = ""
    registered_capabilities: list[str] = Field(default_factory=list)
    online: bool = False
    current_track: Track | None = None
    created_at: datetime
    updated_at: datetime


class UserStats(BaseModel):
    online_users: int
    total_users: int
