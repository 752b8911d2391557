from typing import Any

from pydantic import BaseModel, Field, field_validator

from app.domain.companion.party import LeaveOutcome
from app.schemas.track import Track

from .base import SessionIn
from .validators import parse_track, validate_optional_secret, validate_party_code, validate_secret


class StartPartyIn(SessionIn):
    current_track: Track | None = Field(default=None, alias="currentTrack")

    @field_validator("current_track", mode="before")
    @classmethod
    def parse_current_track(cls, v: Any) -> Any:
        return parse_track(v)


class PartyCodeIn(SessionIn):
    party_code: str = Field(alias="partyCode", description="6-char party code")

    @field_validator("party_code")
    @classmethod
    def check_party_code(cls, v: str) -> str:
        return validate_party_code(v)


class LeavePartyIn(PartyCodeIn):
    party_secret: str | None = Field(default=None, alias="partySecret")

    @field_validator("party_secret")
    @classmethod
    def check_party_secret(cls, v: str | None) -> str | None:
        return validate_optional_secret(v)


class UpdatePartyIn(PartyCodeIn):
    party_secret: str = Field(alias="partySecret")
    current_track: Track | None = Field(default=None, alias="currentTrack")

    @field_validator("party_secret")
    @classmethod
    def check_party_secret(cls, v: str) -> str:
        return validate_secret(v)

    @field_validator("current_track", mode="before")
    @classmethod
    def parse_current_track(cls, v: Any) -> Any:
        return parse_track(v)


class StartPartyOut(BaseModel):
    code: str
    secret: str = Field(description="Host secret, disclosed only once")


class JoinPartyOut(BaseModel):
    host: str = Field(description="User id of the party host")


class LeavePartyOut(BaseModel):
    outcome: LeaveOutcome


class PartyStatusOut(BaseModel):
    track: Track | None = None
