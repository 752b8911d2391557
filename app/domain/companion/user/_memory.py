"""In-memory user repository for demo mode and tests.

Methods never await between reading and writing `_users`, so each call is
atomic with respect to other coroutines on the same event loop.
"""

from app.schemas.schema_utils import utc_now
from app.schemas.track import Track

from ._base import UserRepository, user_exists
from .user_models import UserRecord


class InMemoryUserRepository(UserRepository):
    def __init__(self):
        self._users: dict[str, UserRecord] = {}

    async def get(self, user_id: str) -> UserRecord | None:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    async def count_online(self) -> int:
        return sum(1 for user in self._users.values() if user.online)

    async def count_all(self) -> int:
        return len(self._users)

    async def _insert(self, record: UserRecord) -> None:
        if record.user_id in self._users:
            raise user_exists(record.user_id)
        self._users[record.user_id] = record.model_copy(deep=True)

    async def _start_session(
        self,
        user_id: str,
        secret: str,
        capability: str | None,
        display_name: str | None,
    ) -> bool:
        user = self._users.get(user_id)
        if user is None:
            return False
        user.session_secret = secret
        user.online = True
        if display_name:
            user.display_name = display_name
        if capability and capability not in user.registered_capabilities:
            user.registered_capabilities.append(capability)
        user.updated_at = utc_now()
        return True

    async def _end_session(self, user_id: str) -> None:
        user = self._users.get(user_id)
        if user is None:
            return
        user.session_secret = ""
        user.online = False
        user.current_track = None
        user.updated_at = utc_now()

    async def _set_track(self, user_id: str, track: Track | None) -> bool:
        user = self._users.get(user_id)
        if user is None:
            return False
        user.current_track = track.model_copy(deep=True) if track else None
        user.updated_at = utc_now()
        return True
