"""User ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator

from .schema_utils import parse_mongo_datetime
from .track import Track


class User(Document):
    """User document model.

    `session_secret` is empty while the user is offline, so
    `online == bool(session_secret)` holds for every stored record.
    """

    user_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    display_name: str

    session_secret: str = ""
    registered_capabilities: list[str] = Field(default_factory=list)
    online: bool = False
    current_track: Track | None = None

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        """Parse MongoDB Extended JSON datetime format."""
        return parse_mongo_datetime(v)

    class Settings:
        name = "users"
        indexes = [
            "online",
        ]
