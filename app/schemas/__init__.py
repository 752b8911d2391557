"""Beanie ODM schemas for MongoDB collections."""

from .init import init_beanie_odm
from .party import Party
from .track import Track
from .user import User

__all__ = [
    "Party",
    "Track",
    "User",
    "init_beanie_odm",
]
