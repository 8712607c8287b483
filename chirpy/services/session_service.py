"""Request helpers (service lookup on app.state, bearer credentials)."""
from __future__ import annotations

from fastapi import HTTPException, Request

from chirpy.core.config import Settings
from chirpy.core.metrics import HitCounter
from chirpy.core.security import extract_authorization
from chirpy.repositories.json_storage import JSONStore
from chirpy.services.auth_service import AuthService, TokenInvalidError
from chirpy.services.chirp_service import ChirpService


def _state(request: Request, name: str):
    value = getattr(getattr(request.app, "state", None), name, None)
    if value is None:
        raise RuntimeError(f"{name} is not configured")
    return value


def get_settings_from(request: Request) -> Settings:
    return _state(request, "settings")


def get_store(request: Request) -> JSONStore:
    return _state(request, "store")


def get_hits(request: Request) -> HitCounter:
    return _state(request, "hits")


def get_auth_service(request: Request) -> AuthService:
    return _state(request, "auth_service")


def get_chirp_service(request: Request) -> ChirpService:
    return _state(request, "chirp_service")


def bearer_token(request: Request) -> str | None:
    return extract_authorization(request.headers.get("authorization"), scheme="Bearer")


def current_user_id(request: Request) -> int:
    """Return the user id of the access token on the request, or raise 401."""
    try:
        return get_auth_service(request).authenticate(bearer_token(request))
    except TokenInvalidError:
        raise HTTPException(401, "Unauthorized")
