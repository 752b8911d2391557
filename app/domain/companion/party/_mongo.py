"""Party repository backed by MongoDB through Beanie.

Unique indexes on `code` and `host_id` make `insert` atomic-if-absent; the
duplicate key error tells which of the two clashed.
"""

from beanie.operators import AddToSet, Pull, Set
from loguru import logger
from pymongo.errors import DuplicateKeyError

from app.schemas import Party
from app.schemas.schema_utils import utc_now
from app.schemas.track import Track

from ._base import PartyRepository, already_hosting, party_code_taken
from .party_models import PartyRecord


def _to_record(party: Party | None) -> PartyRecord | None:
    if not party:
        return None
    return PartyRecord(**party.model_dump(exclude={"id"}))


class MongoPartyRepository(PartyRepository):
    async def insert(self, party: PartyRecord) -> PartyRecord:
        document = Party(**party.model_dump())
        try:
            await document.insert()
        except DuplicateKeyError as e:
            key_pattern = (e.details or {}).get("keyPattern") or {}
            logger.warning(f"Duplicate key error creating party {party.code}: {key_pattern}")
            if "host_id" in key_pattern:
                raise already_hosting(party.host_id) from e
            raise party_code_taken(party.code) from e

        return _to_record(document)  # type: ignore[return-value]

    async def get_by_code(self, code: str) -> PartyRecord | None:
        return _to_record(await Party.find_one(Party.code == code))

    async def get_by_host(self, host_id: str) -> PartyRecord | None:
        return _to_record(await Party.find_one(Party.host_id == host_id))

    async def find_by_participant(self, user_id: str) -> PartyRecord | None:
        return _to_record(await Party.find_one({"participants": user_id}))

    async def update_track(self, code: str, host_secret: str, track: Track | None) -> bool:
        result = await Party.find(
            Party.code == code,
            Party.host_secret == host_secret,
        ).update(
            Set(
                {
                    Party.current_track: track.model_dump() if track else None,
                    Party.updated_at: utc_now(),
                }
            )  # type: ignore[arg-type]
        )
        return bool(result and result.matched_count > 0)

    async def add_participant(self, code: str, user_id: str) -> bool:
        result = await Party.find(Party.code == code).update(
            AddToSet({Party.participants: user_id}),  # type: ignore[arg-type]
            Set({Party.updated_at: utc_now()}),  # type: ignore[arg-type]
        )
        return bool(result and result.matched_count > 0)

    async def remove_participant(self, code: str, user_id: str) -> bool:
        result = await Party.find(
            Party.code == code,
            Party.host_id != user_id,
            {"participants": user_id},
        ).update(
            Pull({Party.participants: user_id}),  # type: ignore[arg-type]
            Set({Party.updated_at: utc_now()}),  # type: ignore[arg-type]
        )
        return bool(result and result.modified_count > 0)

    async def delete(self, code: str, host_secret: str | None = None) -> bool:
        conditions = [Party.code == code]
        if host_secret is not None:
            conditions.append(Party.host_secret == host_secret)
        result = await Party.find(*conditions).delete()
        return bool(result and result.deleted_count > 0)

    async def delete_by_host(self, host_id: str) -> bool:
        result = await Party.find(Party.host_id == host_id).delete()
        return bool(result and result.deleted_count > 0)

    async def count(self) -> int:
        return await Party.find_all().count()
