"""Boundary validators: reject malformed identifiers before any lookup."""

import re
from typing import Any

from app.domain.utils.idgen import PARTY_CODE_LENGTH, SECRET_LENGTH
from app.schemas.track import coerce_track
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

USER_ID_LENGTH = 36

_UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def _invalid(errmesg: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_INVALID_REQUEST,
        errmesg=errmesg,
        status_code=HttpStatusCode.BAD_REQUEST,
    )


def validate_user_id(v: str) -> str:
    """Accept only the 36-char dashed form; normalize to lowercase."""
    if len(v) != USER_ID_LENGTH or not _UUID_RE.match(v):
        raise _invalid("Invalid UUID")
    return v.lower()


def validate_party_code(v: str) -> str:
    if len(v) != PARTY_CODE_LENGTH or not v.isascii() or not v.isalnum():
        raise _invalid("Invalid party code")
    return v


def validate_secret(v: str) -> str:
    if len(v) != SECRET_LENGTH:
        raise _invalid("Invalid secret")
    return v


def validate_optional_secret(v: str | None) -> str | None:
    # legacy clients send "" when they hold no host secret
    if not v:
        return None
    return validate_secret(v)


def validate_required(v: str, name: str) -> str:
    v = v.strip()
    if not v:
        raise _invalid(f"Invalid {name}")
    return v


def parse_track(v: Any) -> Any:
    return coerce_track(v)


__all__ = [
    "parse_track",
    "validate_optional_secret",
    "validate_party_code",
    "validate_required",
    "validate_secret",
    "validate_user_id",
]
