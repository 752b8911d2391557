"""User repository backed by MongoDB through Beanie."""

from beanie.operators import AddToSet, Set
from loguru import logger
from pymongo.errors import DuplicateKeyError

from app.schemas import User
from app.schemas.schema_utils import utc_now
from app.schemas.track import Track

from ._base import UserRepository, user_exists
from .user_models import UserRecord


class MongoUserRepository(UserRepository):
    """Every mutation is a single-document update; no read-modify-write."""

    async def get(self, user_id: str) -> UserRecord | None:
        user = await User.find_one(User.user_id == user_id)
        if not user:
            return None
        return UserRecord(**user.model_dump(exclude={"id"}))

    async def count_online(self) -> int:
        return await User.find(User.online == True).count()  # noqa: E712

    async def count_all(self) -> int:
        return await User.find_all().count()

    async def _insert(self, record: UserRecord) -> None:
        user = User(**record.model_dump())
        try:
            await user.insert()
        except DuplicateKeyError as e:
            logger.warning(f"Duplicate key error registering user {record.user_id}: {e}")
            raise user_exists(record.user_id) from e

    async def _start_session(
        self,
        user_id: str,
        secret: str,
        capability: str | None,
        display_name: str | None,
    ) -> bool:
        fields = {
            User.session_secret: secret,
            User.online: True,
            User.updated_at: utc_now(),
        }
        if display_name:
            fields[User.display_name] = display_name

        operations = [Set(fields)]
        if capability:
            operations.append(AddToSet({User.registered_capabilities: capability}))

        result = await User.find(User.user_id == user_id).update(*operations)  # type: ignore[arg-type]
        return bool(result and result.matched_count > 0)

    async def _end_session(self, user_id: str) -> None:
        await User.find(User.user_id == user_id).update(
            Set(
                {
                    User.session_secret: "",
                    User.online: False,
                    User.current_track: None,
                    User.updated_at: utc_now(),
                }
            )  # type: ignore[arg-type]
        )

    async def _set_track(self, user_id: str, track: Track | None) -> bool:
        result = await User.find(User.user_id == user_id).update(
            Set(
                {
                    User.current_track: track.model_dump() if track else None,
                    User.updated_at: utc_now(),
                }
            )  # type: ignore[arg-type]
        )
        return bool(result and result.matched_count > 0)
