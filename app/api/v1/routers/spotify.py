from fastapi import APIRouter, Depends

from app.api.v1.dependency import get_account_service, get_spotify
from app.api.v1.schemas.base import ApiOut, SessionIn
from app.api.v1.schemas.spotify import (
    SpotifyClientIdOut,
    SpotifyRefreshIn,
    SpotifyTokenIn,
    SpotifyTokensOut,
)
from app.domain.companion.account import AccountService
from app.services.integrations.spotify_client import SpotifyClient

router = APIRouter(prefix="/spotify")


@router.post("/clientid")
async def client_id(
    body: SessionIn,
    service: AccountService = Depends(get_account_service),
    spotify: SpotifyClient = Depends(get_spotify),
) -> ApiOut[SpotifyClientIdOut]:
    await service.check_session(body.user_id, body.secret)
    return ApiOut[SpotifyClientIdOut](results=SpotifyClientIdOut(client_id=spotify.client_id))


@router.post("/token")
async def exchange_code(
    body: SpotifyTokenIn,
    service: AccountService = Depends(get_account_service),
    spotify: SpotifyClient = Depends(get_spotify),
) -> ApiOut[SpotifyTokensOut]:
    """Exchange an authorization code for Spotify tokens on the caller's behalf."""
    await service.check_session(body.user_id, body.secret)
    tokens = await spotify.exchange_code(body.code)
    return ApiOut[SpotifyTokensOut](
        results=SpotifyTokensOut(access_token=tokens.access_token, refresh_token=tokens.refresh_token)
    )


@router.post("/refresh")
async def refresh_token(
    body: SpotifyRefreshIn,
    service: AccountService = Depends(get_account_service),
    spotify: SpotifyClient = Depends(get_spotify),
) -> ApiOut[SpotifyTokensOut]:
    await service.check_session(body.user_id, body.secret)
    tokens = await spotify.refresh(body.refresh_token)
    return ApiOut[SpotifyTokensOut](
        results=SpotifyTokensOut(access_token=tokens.access_token, refresh_token=tokens.refresh_token)
    )
