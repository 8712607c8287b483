"""
Authentication and account related use cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from chirpy.core.config import Settings, get_settings
from chirpy.core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    make_refresh_token,
    needs_rehash,
    verify_password,
)
from chirpy.domain.entities import User
from chirpy.repositories.errors import DuplicateEmailError, ExpiredTokenError, NotFoundError
from chirpy.repositories.json_storage import JSONStore

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Base class for authentication-related exceptions."""


class RegistrationError(AuthError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccountExistsError(AuthError):
    pass


class InvalidCredentialsError(AuthError):
    pass


class TokenInvalidError(AuthError):
    pass


@dataclass
class LoginSuccess:
    user: User
    access_token: str
    refresh_token: str


class AuthService:
    """Handles registration, login, token refresh/revocation and account updates."""

    def __init__(self, store: JSONStore, settings: Optional[Settings] = None) -> None:
        self.store = store
        self.settings = settings or get_settings()

    # -------------------------------------- helpers --------------------------------------
    def _secret(self) -> str:
        secret = self.settings.jwt_secret
        if not secret:
            raise RuntimeError("JWT_SECRET must be set to issue access tokens.")
        return secret

    def _access_ttl(self, expires_in_seconds: Optional[int] = None) -> timedelta:
        ttl = self.settings.access_token_ttl_seconds
        if expires_in_seconds is None or expires_in_seconds <= 0 or expires_in_seconds > ttl:
            return timedelta(seconds=ttl)
        return timedelta(seconds=expires_in_seconds)

    def _require_credentials(self, email: str, password: str) -> None:
        if not email or not password:
            raise RegistrationError("Email and password are required")

    # -------------------------------------- accounts --------------------------------------
    def register(self, email: str, password: str) -> User:
        self._require_credentials(email, password)
        try:
            user = self.store.create_user(email, hash_password(password))
        except DuplicateEmailError as exc:
            raise AccountExistsError(exc.message) from exc
        logger.info("Registered user %s", user.id)
        return user

    def update_account(self, user_id: int, email: str, password: str) -> User:
        self._require_credentials(email, password)
        try:
            return self.store.update_user(user_id, email, hash_password(password))
        except DuplicateEmailError as exc:
            raise AccountExistsError(exc.message) from exc

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str, expires_in_seconds: Optional[int] = None) -> LoginSuccess:
        try:
            user = self.store.get_user_by_email(email or "")
        except NotFoundError:
            raise InvalidCredentialsError("Invalid email or password") from None
        if not verify_password(password or "", user.password):
            raise InvalidCredentialsError("Invalid email or password")
        if needs_rehash(user.password):
            logger.info("Upgrading legacy password hash for user %s", user.id)
            user = self.store.update_user(user.id, user.email, hash_password(password))

        access = create_access_token(user.id, self._secret(), self._access_ttl(expires_in_seconds))
        refresh = make_refresh_token()
        self.store.create_refresh_token(refresh, user.id)
        return LoginSuccess(user=user, access_token=access, refresh_token=refresh)

    # -------------------------------------- tokens --------------------------------------
    def authenticate(self, access_token: Optional[str]) -> int:
        """Return the user id behind a valid access token."""
        user_id = decode_access_token(access_token, self._secret()) if access_token else None
        if user_id is None:
            raise TokenInvalidError("Unauthorized")
        return user_id

    def refresh(self, refresh_token: Optional[str]) -> str:
        if not refresh_token:
            raise TokenInvalidError("Unauthorized")
        try:
            user_id = self.store.validate_refresh_token(refresh_token)
        except (NotFoundError, ExpiredTokenError) as exc:
            raise TokenInvalidError(exc.message) from exc
        return create_access_token(user_id, self._secret(), self._access_ttl())

    def revoke(self, refresh_token: Optional[str]) -> None:
        if not refresh_token:
            return
        self.store.revoke_refresh_token(refresh_token)
