"""Session guard applied before every privileged operation."""

from loguru import logger

from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ..utils.idgen import secrets_match
from .user import UserRecord, UserRepository
from .user._base import user_not_found


class SessionGuard:
    def __init__(self, users: UserRepository):
        self._users = users

    async def check(self, user_id: str, presented_secret: str | None) -> UserRecord:
        """Resolve the caller and confirm it presents its current session secret.

        Raises E_USER_NOT_FOUND for unknown ids and E_BAD_SECRET on any
        mismatch, including users that are logged out (empty stored secret).
        Returns the user record so callers can skip a second lookup.
        """
        user = await self._users.get(user_id)
        if user is None:
            raise user_not_found(user_id)

        if not secrets_match(user.session_secret, presented_secret):
            logger.warning(f"Session secret mismatch for user {user_id} (online={user.online})")
            raise AppError(
                errcode=AppErrorCode.E_BAD_SECRET,
                errmesg="Invalid session secret",
                status_code=HttpStatusCode.UNAUTHORIZED,
            )

        return user
