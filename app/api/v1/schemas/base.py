from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.shared.api.utils import ApiSuccess

from .validators import validate_secret, validate_user_id

T = TypeVar("T")


class ApiOut(ApiSuccess, Generic[T]):
    """Standard API envelope used by public routers."""

    results: T  # type: ignore[valid-type]


class SessionIn(BaseModel):
    """Caller identity presented with every privileged request."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="uuid", description="User id, 36-char dashed UUID")
    secret: str = Field(description="Session secret issued by /register")

    @field_validator("user_id")
    @classmethod
    def normalize_user_id(cls, v: str) -> str:
        return validate_user_id(v)

    @field_validator("secret")
    @classmethod
    def check_secret(cls, v: str) -> str:
        return validate_secret(v)
