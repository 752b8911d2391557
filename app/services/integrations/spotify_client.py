"""Spotify OAuth token-exchange proxy.

The client secret stays on the server; clients send the authorization code or
refresh token and get tokens back.
"""

import httpx
from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

from app.app_config import get_app_environ_config
from app.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class SpotifyTokens(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str | None = None
    expires_in: int | None = None


class SpotifyClient:
    def __init__(
        self,
        client_id: str | None,
        client_secret: str | None,
        redirect_uri: str | None,
        token_url: str,
        timeout: float = 5,
        demo_mode: bool = False,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client_id = client_id
        self._client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.token_url = token_url
        self.timeout = timeout
        self.demo_mode = demo_mode
        self._transport = transport

    @property
    def client_id(self) -> str:
        if self._client_id:
            return self._client_id
        if self.demo_mode:
            return "demo-client-id"
        raise AppError(
            errcode=AppErrorCode.E_UPSTREAM_FAILURE,
            errmesg="Spotify integration is not configured",
            status_code=HttpStatusCode.BAD_GATEWAY,
        )

    async def exchange_code(self, code: str) -> SpotifyTokens:
        if self.demo_mode:
            logger.info("Spotify client DEMO_MODE=true: returning stubbed tokens")
            return SpotifyTokens(access_token=f"demo-access-{code[:8]}", refresh_token="demo-refresh")

        return await self._request_tokens(
            {
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri or "",
            }
        )

    async def refresh(self, refresh_token: str) -> SpotifyTokens:
        """Trade a refresh token for a new access token.

        Spotify may omit the refresh token on refresh; the one presented stays valid then.
        """
        if self.demo_mode:
            logger.info("Spotify client DEMO_MODE=true: returning stubbed refreshed tokens")
            return SpotifyTokens(access_token="demo-access-refreshed", refresh_token=refresh_token)

        tokens = await self._request_tokens(
            {"grant_type": "refresh_token", "refresh_token": refresh_token}
        )
        if not tokens.refresh_token:
            tokens.refresh_token = refresh_token
        return tokens

    async def _request_tokens(self, form: dict[str, str]) -> SpotifyTokens:
        if not self._client_id or not self._client_secret:
            raise AppError(
                errcode=AppErrorCode.E_UPSTREAM_FAILURE,
                errmesg="Spotify integration is not configured",
                status_code=HttpStatusCode.BAD_GATEWAY,
            )

        auth = httpx.BasicAuth(self._client_id, self._client_secret)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.token_url, data=form, auth=auth)
        except httpx.HTTPError as e:
            logger.error(f"Error calling Spotify token endpoint ({form['grant_type']}): {e}")
            raise AppError(
                errcode=AppErrorCode.E_UPSTREAM_FAILURE,
                errmesg="Spotify token endpoint unavailable",
                status_code=HttpStatusCode.BAD_GATEWAY,
            ) from e

        if response.status_code >= HttpStatusCode.INTERNAL_SERVER_ERROR:
            logger.error(f"Spotify token endpoint returned {response.status_code}")
            raise AppError(
                errcode=AppErrorCode.E_UPSTREAM_FAILURE,
                errmesg="Spotify token endpoint error",
                status_code=HttpStatusCode.BAD_GATEWAY,
            )

        try:
            response.raise_for_status()
            return SpotifyTokens.model_validate(response.json())
        except (httpx.HTTPStatusError, ValueError, ValidationError) as e:
            logger.warning(f"Spotify rejected {form['grant_type']} grant: {response.status_code}")
            raise AppError(
                errcode=AppErrorCode.E_INVALID_REQUEST,
                errmesg="Spotify rejected the authorization grant",
                status_code=HttpStatusCode.BAD_REQUEST,
            ) from e


_spotify_client: SpotifyClient | None = None


def get_spotify_client() -> SpotifyClient:
    global _spotify_client
    if _spotify_client is None:
        app_config = get_app_environ_config()
        _spotify_client = SpotifyClient(
            client_id=app_config.SPOTIFY_CLIENT_ID,
            client_secret=app_config.SPOTIFY_CLIENT_SECRET,
            redirect_uri=app_config.SPOTIFY_REDIRECT_URI,
            token_url=app_config.SPOTIFY_TOKEN_URL,
            timeout=app_config.UPSTREAM_TIMEOUT_SECONDS,
            demo_mode=app_config.DEMO_MODE,
        )
    return _spotify_client
