from pydantic import BaseModel

from app.shared.config import config


def _split_csv(value: str | None) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


class AppEnvironConfig(BaseModel):
    DEBUG: bool = config.get_bool("DEBUG", False)
    # Public demo switch: when enabled, upstream integrations return stubs and avoid network calls.
    DEMO_MODE: bool = config.get_bool("DEMO_MODE", True)

    # HTTP server
    API_HOST: str = config.get("API_HOST", "0.0.0.0").strip()  # type: ignore
    API_PORT: int = config.get_positive_int("API_PORT", 3001)
    API_WORKERS: int = config.get_positive_int("API_WORKERS", 1)
    API_CORS_ORIGINS: list[str] = _split_csv(config.get("API_CORS_ORIGINS", "*"))

    # Storage backend: "mongo" or "memory"
    COMPANION_STORAGE: str = config.get("COMPANION_STORAGE", "mongo").strip().lower()  # type: ignore

    # Party codes
    PARTY_CODE_MAX_ATTEMPTS: int = config.get_positive_int("PARTY_CODE_MAX_ATTEMPTS", 10, maximum=100)

    # Identity verification
    IDENTITY_PROFILE_URL: str = config.get(
        "IDENTITY_PROFILE_URL", "https://api.ashcon.app/mojang/v2/user"
    ).strip()  # type: ignore
    IDENTITY_SESSION_URL: str = config.get(
        "IDENTITY_SESSION_URL", "https://sessionserver.mojang.com/session/minecraft/hasJoined"
    ).strip()  # type: ignore
    UPSTREAM_TIMEOUT_SECONDS: int = config.get_positive_int("UPSTREAM_TIMEOUT_SECONDS", 5)

    # Spotify OAuth proxy
    SPOTIFY_CLIENT_ID: str | None = (config.get("SPOTIFY_CLIENT_ID") or "").strip() or None
    SPOTIFY_CLIENT_SECRET: str | None = (config.get("SPOTIFY_CLIENT_SECRET") or "").strip() or None
    SPOTIFY_REDIRECT_URI: str | None = (config.get("SPOTIFY_REDIRECT_URI") or "").strip() or None
    SPOTIFY_TOKEN_URL: str = config.get(
        "SPOTIFY_TOKEN_URL", "https://accounts.spotify.com/api/token"
    ).strip()  # type: ignore

    # Levelhead partner integration
    LEVELHEAD_SECRET: str | None = (config.get("LEVELHEAD_SECRET") or "").strip() or None

    # Observability
    LOGFIRE_ENABLE: bool = config.get_bool("LOGFIRE_ENABLE", False)
    LOGFIRE_TOKEN: str | None = (config.get("LOGFIRE_TOKEN") or "").strip() or None


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
