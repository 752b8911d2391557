"""Database client helpers for application services."""

from motor.motor_asyncio import AsyncIOMotorClient

from app.shared.storage.mongo import get_mongo_client

# MongoDB label for companion data (MONGO_URL_COMPANION)
COMPANION_MONGO_LABEL = "companion"


def get_companion_mongo_client() -> AsyncIOMotorClient:
    """Get MongoDB client for the companion database.

    Falls back to the default connection when MONGO_URL_COMPANION is unset.
    """
    try:
        return get_mongo_client(COMPANION_MONGO_LABEL)
    except ValueError:
        return get_mongo_client()
