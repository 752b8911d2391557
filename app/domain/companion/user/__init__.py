from ._base import UserRepository
from ._memory import InMemoryUserRepository
from ._mongo import MongoUserRepository
from .user_models import UserRecord, UserStats

__all__ = [
    "InMemoryUserRepository",
    "MongoUserRepository",
    "UserRecord",
    "UserRepository",
    "UserStats",
]
