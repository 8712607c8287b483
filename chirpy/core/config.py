"""
Configuration helpers for the Chirpy backend.

Routers and services read settings through get_settings() instead of fetching
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

DEV_JWT_SECRET = "chirpy-dev-secret"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_path: str
    jwt_secret: str
    polka_key: str
    access_token_ttl_seconds: int
    refresh_token_ttl_days: int
    fileserver_root: str
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    app_env = (os.getenv("APP_ENV") or "dev").lower()
    jwt_secret = os.getenv("JWT_SECRET", "")
    if not jwt_secret and app_env != "prod":
        jwt_secret = DEV_JWT_SECRET

    return Settings(
        app_env=app_env,
        database_path=os.getenv("DATABASE_PATH", "database.json"),
        jwt_secret=jwt_secret,
        polka_key=os.getenv("POLKA_KEY", ""),
        access_token_ttl_seconds=_int(os.getenv("ACCESS_TOKEN_TTL_SECONDS", "3600"), 3600),
        refresh_token_ttl_days=_int(os.getenv("REFRESH_TOKEN_TTL_DAYS", "60"), 60),
        fileserver_root=os.getenv("FILESERVER_ROOT", "."),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
