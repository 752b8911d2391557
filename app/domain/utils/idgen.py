import hmac
import secrets
import string
import uuid
from collections.abc import Awaitable, Callable

from loguru import logger

from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

PARTY_CODE_LENGTH = 6
PARTY_CODE_ALPHABET = string.ascii_letters + string.digits
SECRET_LENGTH = 36


def new_secret() -> str:
    """Opaque 36-char token (dashed uuid4, drawn from os.urandom)."""
    return str(uuid.uuid4())


def new_party_code() -> str:
    return "".join(secrets.choice(PARTY_CODE_ALPHABET) for _ in range(PARTY_CODE_LENGTH))


def namespace_exhausted(attempts: int) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_NAMESPACE_EXHAUSTED,
        errmesg=f"Could not allocate a free party code after {attempts} attempts",
        status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
    )


class PartyCodeGenerator:
    """Draws random party codes until one is not held by an open party.

    `code_in_use` is usually `PartyRepository.code_exists`. The loop is bounded
    by `max_attempts`; running out raises E_NAMESPACE_EXHAUSTED.
    """

    def __init__(
        self,
        code_in_use: Callable[[str], Awaitable[bool]],
        max_attempts: int = 10,
        draw: Callable[[], str] = new_party_code,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._code_in_use = code_in_use
        self._draw = draw
        self.max_attempts = max_attempts

    async def generate(self) -> str:
        for attempt in range(1, self.max_attempts + 1):
            code = self._draw()
            if not await self._code_in_use(code):
                return code
            logger.debug(f"Party code collision on attempt {attempt}: {code}")

        logger.error(f"Party code generation exhausted after {self.max_attempts} attempts")
        raise namespace_exhausted(self.max_attempts)


def secrets_match(stored: str | None, presented: str | None) -> bool:
    """Constant-time comparison. An empty stored secret never matches."""
    if not stored or not presented:
        return False
    return hmac.compare_digest(stored.encode(), presented.encode())
