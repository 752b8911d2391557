from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.schemas.track import Track

from .base import SessionIn
from .validators import parse_track


class LevelheadUpdateIn(SessionIn):
    track: Track | None = Field(default=None, description="Track object or JSON-encoded string")

    @field_validator("track", mode="before")
    @classmethod
    def parse_track_field(cls, v: Any) -> Any:
        return parse_track(v)


class SongInformationOut(BaseModel):
    track: Track
