"""Security helpers (password hashing, access tokens, refresh tokens)."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from argon2 import PasswordHasher, exceptions as argon_exc
from jose import JWTError, jwt

_ph = PasswordHasher()
_PREFIX = "argon2$"
JWT_ISSUER = "chirpy"
JWT_ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    """Create a modern Argon2 hash with a prefix for detection."""
    hashed = _ph.hash(password)
    return f"{_PREFIX}{hashed}"


def needs_rehash(stored_hash: str | None) -> bool:
    return not (stored_hash or "").startswith(_PREFIX)


def verify_password(password: str, stored_hash: str | None) -> bool:
    stored = stored_hash or ""
    if stored.startswith(_PREFIX):
        hashed = stored[len(_PREFIX) :]
        try:
            return _ph.verify(hashed, password)
        except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
            return False
    # bcrypt hashes written by the original Go service
    if not stored.startswith("$2"):
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), stored.encode("utf-8"))
    except ValueError:
        return False


def make_refresh_token() -> str:
    """256 random bits, hex encoded."""
    return secrets.token_hex(32)


def create_access_token(user_id: int, secret: str, expires_in: timedelta) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "iss": JWT_ISSUER,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
        "sub": str(user_id),
    }
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str, secret: str) -> Optional[int]:
    """Return the user id carried by a valid token, or None."""
    try:
        payload = jwt.decode(token, secret, algorithms=[JWT_ALGORITHM], issuer=JWT_ISSUER)
    except JWTError:
        return None
    try:
        return int(payload.get("sub"))
    except (TypeError, ValueError):
        return None


def extract_authorization(header: str | None, scheme: str = "Bearer") -> Optional[str]:
    """Return the credential from an ``Authorization: <scheme> <value>`` header."""
    parts = (header or "").split(" ")
    if len(parts) != 2 or parts[0].lower() != scheme.lower() or not parts[1]:
        return None
    return parts[1]
