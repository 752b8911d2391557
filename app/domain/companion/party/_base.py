"""Base party repository: raw storage operations on party records."""

from abc import ABC, abstractmethod

from app.schemas.track import Track
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from .party_models import PartyRecord


def party_code_taken(code: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_PARTY_CODE_TAKEN,
        errmesg=f"Party code already in use: {code}",
        status_code=HttpStatusCode.CONFLICT,
    )


def already_hosting(host_id: str) -> AppError:
    return AppError(
        errcode=AppErrorCode.E_ALREADY_HOSTING,
        errmesg=f"User {host_id} is already hosting a party",
        status_code=HttpStatusCode.CONFLICT,
    )


class PartyRepository(ABC):
    """Party storage.

    Membership changes are single-field set operations (add-to-set /
    remove-from-set) so concurrent joins and leaves never overwrite each other.
    Mutations return False when nothing matched instead of raising; the
    coordinator decides what that means.
    """

    @abstractmethod
    async def insert(self, party: PartyRecord) -> PartyRecord:
        """Insert if absent.

        Raises E_PARTY_CODE_TAKEN when the code is held by an open party and
        E_ALREADY_HOSTING when the host already has one.
        """

    @abstractmethod
    async def get_by_code(self, code: str) -> PartyRecord | None: ...

    @abstractmethod
    async def get_by_host(self, host_id: str) -> PartyRecord | None: ...

    @abstractmethod
    async def find_by_participant(self, user_id: str) -> PartyRecord | None: ...

    @abstractmethod
    async def update_track(self, code: str, host_secret: str, track: Track | None) -> bool:
        """Set `current_track` only if `host_secret` matches the stored one."""

    @abstractmethod
    async def add_participant(self, code: str, user_id: str) -> bool:
        """False if the party does not exist. Adding a member twice is a no-op."""

    @abstractmethod
    async def remove_participant(self, code: str, user_id: str) -> bool:
        """Remove a non-host member. Never removes the host; False if nothing changed."""

    @abstractmethod
    async def delete(self, code: str, host_secret: str | None = None) -> bool:
        """Delete the party, conditionally on `host_secret` when one is given."""

    @abstractmethod
    async def delete_by_host(self, host_id: str) -> bool: ...

    @abstractmethod
    async def count(self) -> int: ...

    async def code_exists(self, code: str) -> bool:
        return await self.get_by_code(code) is not None
