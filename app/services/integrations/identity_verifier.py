"""Identity verifier client.

Maps a user id to its display name through the profile service and confirms a
one-time possession proof (the client joined `server_id`) through the session
server's hasJoined endpoint.
"""

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from app.app_config import get_app_environ_config
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class IdentityProfile(BaseModel):
    user_id: str
    display_name: str


class _ProfilePayload(BaseModel):
    uuid: str
    username: str


class _SessionPayload(BaseModel):
    id: str
    name: str


def _upstream_failure(errmesg: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_UPSTREAM_FAILURE,
        errmesg=errmesg,
        status_code=HttpStatusCode.BAD_GATEWAY,
    )


def _identity_rejected(errmesg: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_IDENTITY_REJECTED,
        errmesg=errmesg,
        status_code=HttpStatusCode.UNAUTHORIZED,
    )


class IdentityVerifier:
    def __init__(
        self,
        profile_url: str,
        session_url: str,
        timeout: float = 5,
        demo_mode: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.profile_url = profile_url.rstrip("/")
        self.session_url = session_url
        self.timeout = timeout
        self.demo_mode = demo_mode
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def resolve_profile(self, user_id: str) -> IdentityProfile:
        """Look up the display name for `user_id`.

        Raises E_IDENTITY_REJECTED if the profile service does not know the id
        and E_UPSTREAM_FAILURE for transport errors or unexpected payloads.
        """
        if self.demo_mode:
            logger.info("Identity verifier DEMO_MODE=true: returning stubbed profile")
            return IdentityProfile(user_id=user_id, display_name=f"demo_{user_id[:8]}")

        url = f"{self.profile_url}/{user_id}"
        try:
            async with self._client() as client:
                response = await client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Error querying profile service for {user_id}: {e}")
            raise _upstream_failure("Profile service unavailable") from e

        if response.status_code == HttpStatusCode.NOT_FOUND:
            raise _identity_rejected(f"Unknown user: {user_id}")
        if response.status_code != HttpStatusCode.OK:
            logger.error(f"Profile service returned {response.status_code} for {user_id}")
            raise _upstream_failure("Profile service error")

        try:
            payload = _ProfilePayload.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Unexpected profile payload for {user_id}: {e}")
            raise _upstream_failure("Profile service returned an invalid payload") from e

        if payload.uuid.lower() != user_id:
            logger.error(f"Profile id mismatch: expected {user_id}, got {payload.uuid}")
            raise _upstream_failure("Profile service returned a different user")

        return IdentityProfile(user_id=user_id, display_name=payload.username)

    async def verify_session(self, display_name: str, server_id: str, user_id: str) -> None:
        """Confirm that `display_name` joined `server_id` as `user_id`.

        The session server answers with the undashed id; anything but an exact
        id and name match is a rejection.
        """
        if self.demo_mode:
            logger.info("Identity verifier DEMO_MODE=true: accepting session proof")
            return

        params = {"username": display_name, "serverId": server_id}
        try:
            async with self._client() as client:
                response = await client.get(self.session_url, params=params)
        except httpx.HTTPError as e:
            logger.error(f"Error querying session server for {user_id}: {e}")
            raise _upstream_failure("Session server unavailable") from e

        if response.status_code >= HttpStatusCode.INTERNAL_SERVER_ERROR:
            logger.error(f"Session server returned {response.status_code} for {user_id}")
            raise _upstream_failure("Session server error")
        # 204 means the user has not joined that server
        if response.status_code != HttpStatusCode.OK or not response.content:
            raise _identity_rejected("Session proof rejected")

        try:
            payload = _SessionPayload.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.warning(f"Unexpected session payload for {user_id}: {e}")
            raise _identity_rejected("Session proof rejected") from e

        if payload.id.lower() != user_id.replace("-", "") or payload.name != display_name:
            logger.warning(
                f"Session server answer did not match (expected {display_name}/{user_id}, "
                f"got {payload.name}/{payload.id})"
            )
            raise _identity_rejected("Session proof rejected")


_identity_verifier: IdentityVerifier | None = None


def get_identity_verifier() -> IdentityVerifier:
    global _identity_verifier
    if _identity_verifier is None:
        app_config = get_app_environ_config()
        _identity_verifier = IdentityVerifier(
            profile_url=app_config.IDENTITY_PROFILE_URL,
            session_url=app_config.IDENTITY_SESSION_URL,
            timeout=app_config.UPSTREAM_TIMEOUT_SECONDS,
            demo_mode=app_config.DEMO_MODE,
        )
    return _identity_verifier
