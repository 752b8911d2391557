"""Builds the companion domain objects for the configured storage backend."""

from loguru import logger

from app.app_config import get_app_environ_config
from app.domain.companion.account import AccountService
from app.domain.companion.guard import SessionGuard
from app.domain.companion.party import (
    InMemoryPartyRepository,
    MongoPartyRepository,
    PartyCoordinator,
    PartyRepository,
)
from app.domain.companion.user import (
    InMemoryUserRepository,
    MongoUserRepository,
    UserRepository,
)
from app.services.integrations.identity_verifier import IdentityVerifier, get_identity_verifier

STORAGE_MONGO = "mongo"
STORAGE_MEMORY = "memory"


class Companion:
    """Explicitly constructed repositories shared by the guard and services."""

    def __init__(
        self,
        users: UserRepository,
        parties: PartyRepository,
        verifier: IdentityVerifier,
        max_code_attempts: int = 10,
        service_secret: str | None = None,
    ):
        self.users = users
        self.parties = parties
        self.guard = SessionGuard(users)
        self.coordinator = PartyCoordinator(parties, self.guard, max_code_attempts=max_code_attempts)
        self.accounts = AccountService(
            users,
            self.guard,
            self.coordinator,
            verifier,
            service_secret=service_secret,
        )


def build_companion(
    storage: str | None = None,
    verifier: IdentityVerifier | None = None,
) -> Companion:
    app_config = get_app_environ_config()
    storage = (storage or app_config.COMPANION_STORAGE).lower()

    users: UserRepository
    parties: PartyRepository
    if storage == STORAGE_MONGO:
        users, parties = MongoUserRepository(), MongoPartyRepository()
    elif storage == STORAGE_MEMORY:
        users, parties = InMemoryUserRepository(), InMemoryPartyRepository()
    else:
        raise ValueError(f"Unknown COMPANION_STORAGE: {storage}")

    logger.info(f"Companion storage backend: {storage}")
    return Companion(
        users,
        parties,
        verifier or get_identity_verifier(),
        max_code_attempts=app_config.PARTY_CODE_MAX_ATTEMPTS,
        service_secret=app_config.LEVELHEAD_SECRET,
    )


_companion: Companion | None = None


def get_companion() -> Companion:
    global _companion
    if _companion is None:
        _companion = build_companion()
    return _companion
