from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import SessionIn
from .validators import validate_required


class SpotifyTokenIn(SessionIn):
    code: str = Field(description="Authorization code returned by Spotify")

    @field_validator("code")
    @classmethod
    def check_code(cls, v: str) -> str:
        return validate_required(v, "code")


class SpotifyRefreshIn(SessionIn):
    refresh_token: str

    @field_validator("refresh_token")
    @classmethod
    def check_refresh_token(cls, v: str) -> str:
        return validate_required(v, "refresh_token")


class SpotifyClientIdOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_id: str = Field(alias="clientID")


class SpotifyTokensOut(BaseModel):
    access_token: str
    refresh_token: str | None = None
