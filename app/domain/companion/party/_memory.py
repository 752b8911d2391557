"""In-memory party repository for demo mode and tests.

No method awaits between reading and writing `_parties`, so each call is atomic
on the event loop, mirroring the single-document guarantees of the Mongo backend.
"""

from app.schemas.schema_utils import utc_now
from app.schemas.track import Track

from ...utils.idgen import secrets_match
from ._base import PartyRepository, already_hosting, party_code_taken
from .party_models import PartyRecord


class InMemoryPartyRepository(PartyRepository):
    def __init__(self):
        self._parties: dict[str, PartyRecord] = {}

    def _copy(self, party: PartyRecord | None) -> PartyRecord | None:
        return party.model_copy(deep=True) if party else None

    async def insert(self, party: PartyRecord) -> PartyRecord:
        if party.code in self._parties:
            raise party_code_taken(party.code)
        if any(p.host_id == party.host_id for p in self._parties.values()):
            raise already_hosting(party.host_id)
        self._parties[party.code] = party.model_copy(deep=True)
        return party.model_copy(deep=True)

    async def get_by_code(self, code: str) -> PartyRecord | None:
        return self._copy(self._parties.get(code))

    async def get_by_host(self, host_id: str) -> PartyRecord | None:
        return self._copy(next((p for p in self._parties.values() if p.host_id == host_id), None))

    async def find_by_participant(self, user_id: str) -> PartyRecord | None:
        return self._copy(
            next((p for p in self._parties.values() if user_id in p.participants), None)
        )

    async def update_track(self, code: str, host_secret: str, track: Track | None) -> bool:
        party = self._parties.get(code)
        if party is None or not secrets_match(party.host_secret, host_secret):
            return False
        party.current_track = track.model_copy(deep=True) if track else None
        party.updated_at = utc_now()
        return True

    async def add_participant(self, code: str, user_id: str) -> bool:
        party = self._parties.get(code)
        if party is None:
            return False
        if user_id not in party.participants:
            party.participants.append(user_id)
            party.updated_at = utc_now()
        return True

    async def remove_participant(self, code: str, user_id: str) -> bool:
        party = self._parties.get(code)
        if party is None or party.host_id == user_id or user_id not in party.participants:
            return False
        party.participants.remove(user_id)
        party.updated_at = utc_now()
        return True

    async def delete(self, code: str, host_secret: str | None = None) -> bool:
        party = self._parties.get(code)
        if party is None:
            return False
        if host_secret is not None and not secrets_match(party.host_secret, host_secret):
            return False
        del self._parties[code]
        return True

    async def delete_by_host(self, host_id: str) -> bool:
        party = next((p for p in self._parties.values() if p.host_id == host_id), None)
        if party is None:
            return False
        del self._parties[party.code]
        return True

    async def count(self) -> int:
        return len(self._parties)
