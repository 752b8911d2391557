"""Account service: identity-verified login, logout and per-user tracks."""

from loguru import logger

from app.schemas.track import Track
from app.services.integrations.identity_verifier import IdentityVerifier
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ...utils.idgen import secrets_match
from ..guard import SessionGuard
from ..party import PartyCoordinator
from ..user import UserRepository, UserStats
from ..user._base import user_not_found


class AccountService:
    def __init__(
        self,
        users: UserRepository,
        guard: SessionGuard,
        parties: PartyCoordinator,
        verifier: IdentityVerifier,
        service_secret: str | None = None,
    ):
        self._users = users
        self._guard = guard
        self._parties = parties
        self._verifier = verifier
        self._service_secret = service_secret

    async def register(self, user_id: str, capability: str, server_id: str) -> str:
        """Verify the caller's identity and hand out a session secret.

        Known users are checked against the display name on file and logged
        in; new users are resolved through the profile service first and then
        registered. All upstream calls happen before any repository write.
        """
        user = await self._users.get(user_id)
        if user is not None:
            await self._verifier.verify_session(user.display_name, server_id, user_id)
            return await self._users.login(user_id, capability=capability)

        profile = await self._verifier.resolve_profile(user_id)
        await self._verifier.verify_session(profile.display_name, server_id, user_id)
        try:
            return await self._users.register(user_id, profile.display_name, capability)
        except AppError as e:
            if e.errcode != AppErrorCode.E_USER_EXISTS:
                raise
            # registered concurrently by another request
            logger.info(f"User {user_id} registered concurrently, logging in instead")
            return await self._users.login(
                user_id, capability=capability, display_name=profile.display_name
            )

    async def check_session(self, user_id: str, session_secret: str) -> None:
        """Session guard for routes that only need an authenticated caller."""
        await self._guard.check(user_id, session_secret)

    async def logout(self, user_id: str, session_secret: str) -> None:
        await self._guard.check(user_id, session_secret)
        await self._parties.on_user_logout(user_id)
        await self._users.logout(user_id)

    async def update_track(self, user_id: str, session_secret: str, track: Track | None) -> None:
        await self._guard.check(user_id, session_secret)
        await self._users.update_track(user_id, track)

    async def get_track_for_service(self, user_id: str, service_secret: str | None) -> Track:
        """Read a user's current track on behalf of a partner service."""
        if not secrets_match(self._service_secret, service_secret):
            logger.warning(f"Invalid service secret presented for track of {user_id}")
            raise AppError(
                errcode=AppErrorCode.E_BAD_SERVICE_SECRET,
                errmesg="Invalid service secret",
                status_code=HttpStatusCode.UNAUTHORIZED,
            )

        user = await self._users.get(user_id)
        if user is None:
            raise user_not_found(user_id)
        if user.current_track is None:
            raise AppError(
                errcode=AppErrorCode.E_TRACK_NOT_FOUND,
                errmesg=f"User {user_id} is not playing a track",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        return user.current_track

    async def get_stats(self) -> UserStats:
        return UserStats(
            online_users=await self._users.count_online(),
            total_users=await self._users.count_all(),
        )
