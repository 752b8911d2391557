from app.domain.companion.account import AccountService
from app.domain.companion.party import PartyCoordinator
from app.services.companion import get_companion
from app.services.integrations.spotify_client import SpotifyClient, get_spotify_client


def get_account_service() -> AccountService:
    return get_companion().accounts


def get_party_coordinator() -> PartyCoordinator:
    return get_companion().coordinator


def get_spotify() -> SpotifyClient:
    return get_spotify_client()
