"""Party ODM schema."""

from datetime import datetime
from typing import Any

from beanie import Document, Indexed
from pydantic import Field, field_validator

from .schema_utils import parse_mongo_datetime
from .track import Track


class Party(Document):
    """Party document model.

    Unique indexes on `code` and `host_id` make insertion atomic-if-absent:
    a code clash or a second open party for the same host is rejected by the
    store with a duplicate key error.
    """

    code: Indexed(str, unique=True)  # type: ignore[valid-type]
    host_id: Indexed(str, unique=True)  # type: ignore[valid-type]
    host_secret: str
    participants: list[str] = Field(default_factory=list)
    current_track: Track | None = None

    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        """Parse MongoDB Extended JSON datetime format."""
        return parse_mongo_datetime(v)

    class Settings:
        name = "parties"
        indexes = [
            "participants",
        ]
