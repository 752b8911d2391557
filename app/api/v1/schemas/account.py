from pydantic import BaseModel, ConfigDict, Field, field_validator

from .validators import validate_required, validate_user_id


class RegisterIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="uuid", description="User id, 36-char dashed UUID")
    mod: str = Field(description="Client identifier registering the user")
    server_id: str = Field(alias="serverID", description="Server id joined as possession proof")

    @field_validator("user_id")
    @classmethod
    def normalize_user_id(cls, v: str) -> str:
        return validate_user_id(v)

    @field_validator("mod")
    @classmethod
    def check_mod(cls, v: str) -> str:
        return validate_required(v, "mod")

    @field_validator("server_id")
    @classmethod
    def check_server_id(cls, v: str) -> str:
        return validate_required(v, "serverID")


class RegisterOut(BaseModel):
    secret: str = Field(description="Session secret, valid until the next login or logout")


class StatsOut(BaseModel):
    online_users: int
    total_users: int
