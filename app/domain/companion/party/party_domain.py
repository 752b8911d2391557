"""Party coordinator: the start/join/leave/status/update protocol."""

from loguru import logger

from app.schemas.schema_utils import utc_now
from app.schemas.track import Track
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ...utils.idgen import PartyCodeGenerator, namespace_exhausted, new_secret, secrets_match
from ..guard import SessionGuard
from ._base import PartyRepository, already_hosting
from .party_models import LeaveOutcome, PartyRecord, PartyStartResponse


def party_not_found(code: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_PARTY_NOT_FOUND,
        errmesg=f"Party not found: {code}",
        status_code=HttpStatusCode.NOT_FOUND,
    )


def bad_host_secret(code: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_BAD_HOST_SECRET,
        errmesg=f"Invalid host secret for party {code}",
        status_code=HttpStatusCode.UNAUTHORIZED,
    )


class PartyCoordinator:
    """Enforces the party protocol on top of the party repository.

    Every public operation runs the session guard before touching storage. Only
    the host, proving itself with the host secret, can change the track or
    disband the party; there is no host transfer. A user is a member of at most
    one party: joining or starting another party first drops a non-host
    membership, while a host must disband before moving on.
    """

    def __init__(
        self,
        parties: PartyRepository,
        guard: SessionGuard,
        max_code_attempts: int = 10,
    ):
        self._parties = parties
        self._guard = guard
        self._max_code_attempts = max_code_attempts
        self._codes = PartyCodeGenerator(parties.code_exists, max_attempts=max_code_attempts)

    async def _get_party(self, code: str) -> PartyRecord:
        party = await self._parties.get_by_code(code)
        if party is None:
            raise party_not_found(code)
        return party

    async def _drop_other_membership(self, user_id: str, keep_code: str | None = None) -> None:
        current = await self._parties.find_by_participant(user_id)
        if current is None or current.code == keep_code:
            return
        if current.host_id == user_id:
            raise already_hosting(user_id)
        await self._parties.remove_participant(current.code, user_id)
        logger.info(f"User {user_id} moved out of party {current.code}")

    async def start_party(
        self,
        host_id: str,
        session_secret: str,
        initial_track: Track | None = None,
    ) -> PartyStartResponse:
        """Create a party hosted by the caller.

        The host secret is disclosed here and never again. A lost race on the
        generated code retries with a new code, within the same attempt budget
        as code generation.
        """
        await self._guard.check(host_id, session_secret)
        previous = await self._parties.find_by_participant(host_id)
        if previous is not None and previous.host_id == host_id:
            raise already_hosting(host_id)

        host_secret = new_secret()
        for attempt in range(1, self._max_code_attempts + 1):
            code = await self._codes.generate()
            now = utc_now()
            party = PartyRecord(
                code=code,
                host_id=host_id,
                host_secret=host_secret,
                participants=[host_id],
                current_track=initial_track,
                created_at=now,
                updated_at=now,
            )
            try:
                await self._parties.insert(party)
            except AppError as e:
                if e.errcode != AppErrorCode.E_PARTY_CODE_TAKEN:
                    raise
                logger.warning(f"Party code {code} taken during insert (attempt {attempt})")
                continue

            # old membership is only dropped once the new party exists
            if previous is not None:
                await self._parties.remove_participant(previous.code, host_id)
                logger.info(f"User {host_id} moved out of party {previous.code}")

            logger.info(f"Party {code} started by {host_id}")
            return PartyStartResponse(code=code, host_secret=host_secret)

        raise namespace_exhausted(self._max_code_attempts)

    async def join_party(self, user_id: str, session_secret: str, code: str) -> str:
        """Add the caller to the party and return the host's id. Idempotent."""
        await self._guard.check(user_id, session_secret)
        party = await self._get_party(code)
        if user_id in party.participants:
            return party.host_id

        await self._drop_other_membership(user_id, keep_code=code)
        if not await self._parties.add_participant(code, user_id):
            # disbanded between lookup and update
            raise party_not_found(code)

        logger.info(f"User {user_id} joined party {code}")
        return party.host_id

    async def leave_party(
        self,
        user_id: str,
        session_secret: str,
        code: str,
        host_secret: str | None = None,
    ) -> LeaveOutcome:
        """Host with the correct host secret disbands; a member just leaves.

        A host without the right secret, or a member presenting a host secret,
        is refused and nothing changes.
        """
        await self._guard.check(user_id, session_secret)
        party = await self._get_party(code)

        if party.host_id == user_id:
            if not secrets_match(party.host_secret, host_secret):
                raise bad_host_secret(code)
            if not await self._parties.delete(code, host_secret=host_secret):
                raise party_not_found(code)
            logger.info(f"Party {code} disbanded by host {user_id}")
            return LeaveOutcome.DISBANDED

        if user_id not in party.participants:
            raise AppError(
                errcode=AppErrorCode.E_NOT_PARTICIPANT,
                errmesg=f"User {user_id} is not in party {code}",
                status_code=HttpStatusCode.NOT_FOUND,
            )
        if host_secret:
            raise bad_host_secret(code)

        if not await self._parties.remove_participant(code, user_id):
            raise AppError(
                errcode=AppErrorCode.E_NOT_PARTICIPANT,
                errmesg=f"User {user_id} is not in party {code}",
                status_code=HttpStatusCode.NOT_FOUND,
            )

        logger.info(f"User {user_id} left party {code}")
        return LeaveOutcome.LEFT

    async def get_status(self, user_id: str, session_secret: str, code: str) -> Track | None:
        await self._guard.check(user_id, session_secret)
        party = await self._get_party(code)
        return party.current_track

    async def update_track(
        self,
        user_id: str,
        session_secret: str,
        code: str,
        host_secret: str,
        track: Track | None,
    ) -> None:
        await self._guard.check(user_id, session_secret)
        await self._get_party(code)
        if not host_secret or not await self._parties.update_track(code, host_secret, track):
            raise bad_host_secret(code)

    async def on_user_logout(self, user_id: str) -> None:
        """Disband the party the user hosts, or drop them from the one they joined."""
        if await self._parties.delete_by_host(user_id):
            logger.info(f"Party hosted by {user_id} disbanded on logout")
            return

        party = await self._parties.find_by_participant(user_id)
        if party is not None:
            await self._parties.remove_participant(party.code, user_id)
            logger.info(f"User {user_id} removed from party {party.code} on logout")
