"""Base user repository: session-credential issuance on top of storage primitives."""

from abc import ABC, abstractmethod

from loguru import logger

from app.schemas.schema_utils import utc_now
from app.schemas.track import Track
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ...utils.idgen import new_secret
from .user_models import UserRecord


def user_not_found(user_id: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_USER_NOT_FOUND,
        errmesg=f"User not found: {user_id}",
        status_code=HttpStatusCode.NOT_FOUND,
    )


def user_exists(user_id: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_USER_EXISTS,
        errmesg=f"User already registered: {user_id}",
        status_code=HttpStatusCode.CONFLICT,
    )


class UserRepository(ABC):
    """Owns user records and their session secrets.

    At most one session secret is valid per user: every `login` overwrites the
    stored value in a single atomic update, and `logout` blanks it. Backends
    only implement the storage primitives below.
    """

    async def register(self, user_id: str, display_name: str, capability: str | None) -> str:
        """Create a user record and return its first session secret.

        Raises AppError(E_USER_EXISTS) if the user already has a record; callers
        route known ids through `login` instead.
        """
        secret = new_secret()
        now = utc_now()
        record = UserRecord(
            user_id=user_id,
            display_name=display_name,
            session_secret=secret,
            registered_capabilities=[capability] if capability else [],
            online=True,
            created_at=now,
            updated_at=now,
        )
        await self._insert(record)
        logger.info(f"Registered user {display_name} ({user_id})")
        return secret

    async def login(
        self,
        user_id: str,
        capability: str | None = None,
        display_name: str | None = None,
    ) -> str:
        """Issue a fresh session secret, invalidating the previous one."""
        secret = new_secret()
        if not await self._start_session(user_id, secret, capability, display_name):
            raise user_not_found(user_id)
        logger.info(f"User {user_id} logged in")
        return secret

    async def logout(self, user_id: str) -> None:
        """Blank the session secret and clear the track. Idempotent."""
        await self._end_session(user_id)
        logger.info(f"User {user_id} logged out")

    async def update_track(self, user_id: str, track: Track | None) -> None:
        if not await self._set_track(user_id, track):
            raise user_not_found(user_id)

    @abstractmethod
    async def get(self, user_id: str) -> UserRecord | None: ...

    @abstractmethod
    async def count_online(self) -> int: ...

    @abstractmethod
    async def count_all(self) -> int: ...

    @abstractmethod
    async def _insert(self, record: UserRecord) -> None:
        """Insert if absent; raise E_USER_EXISTS otherwise."""

    @abstractmethod
    async def _start_session(
        self,
        user_id: str,
        secret: str,
        capability: str | None,
        display_name: str | None,
    ) -> bool:
        """Atomically store `secret`, mark online. False when the user is unknown."""

    @abstractmethod
    async def _end_session(self, user_id: str) -> None: ...

    @abstractmethod
    async def _set_track(self, user_id: str, track: Track | None) -> bool: ...
