from ._base import PartyRepository
from ._memory import InMemoryPartyRepository
from ._mongo import MongoPartyRepository
from .party_domain import PartyCoordinator
from .party_models import LeaveOutcome, PartyRecord, PartyStartResponse

__all__ = [
    "InMemoryPartyRepository",
    "LeaveOutcome",
    "MongoPartyRepository",
    "PartyCoordinator",
    "PartyRecord",
    "PartyRepository",
    "PartyStartResponse",
]
