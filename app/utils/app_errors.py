"""Application error types shared by the domain and API layers."""

import inspect
from enum import Enum, IntEnum
from uuid import uuid4


class HttpStatusCode(IntEnum):
    OK = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    INTERNAL_SERVER_ERROR = 500
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503


class AppErrorCode(str, Enum):
    # Validation
    E_INVALID_REQUEST = "E_INVALID_REQUEST"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"

    # Not found
    E_USER_NOT_FOUND = "E_USER_NOT_FOUND"
    E_PARTY_NOT_FOUND = "E_PARTY_NOT_FOUND"
    E_NOT_PARTICIPANT = "E_NOT_PARTICIPANT"
    E_TRACK_NOT_FOUND = "E_TRACK_NOT_FOUND"

    # Unauthorized
    E_BAD_SECRET = "E_BAD_SECRET"
    E_BAD_HOST_SECRET = "E_BAD_HOST_SECRET"
    E_BAD_SERVICE_SECRET = "E_BAD_SERVICE_SECRET"
    E_IDENTITY_REJECTED = "E_IDENTITY_REJECTED"

    # Conflict
    E_USER_EXISTS = "E_USER_EXISTS"
    E_ALREADY_HOSTING = "E_ALREADY_HOSTING"
    E_PARTY_CODE_TAKEN = "E_PARTY_CODE_TAKEN"

    # Server side
    E_UPSTREAM_FAILURE = "E_UPSTREAM_FAILURE"
    E_NAMESPACE_EXHAUSTED = "E_NAMESPACE_EXHAUSTED"
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"

    def __str__(self) -> str:
        return self.value


class AppError(Exception):
    """Error raised by domain code and rendered by the API error handler.

    Captures the raise site so the handler can log where the failure
    originated without a full traceback.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str = AppErrorCode.E_INTERNAL_ERROR,
        errmesg: str = "We are sorry, an error occurred.",
        status_code: int = HttpStatusCode.BAD_REQUEST,
    ):
        super().__init__(errmesg)
        self.errcode = errcode.value if isinstance(errcode, AppErrorCode) else str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.erresid = uuid4().hex[:10]

        caller_frame = inspect.stack()[1]
        module = inspect.getmodule(caller_frame.frame)
        module_name = (
            module.__name__ if module and getattr(module, "__name__", None) else caller_frame.filename
        )
        self.caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= 500

    def __repr__(self) -> str:
        return f"AppError({self.errcode}, {self.errmesg!r}, {self.status_code})"
