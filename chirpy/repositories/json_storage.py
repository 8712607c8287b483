"""
JSON-file persistence for users, chirps and refresh tokens.

The whole document is read from disk at the start of every call and, for
writes, rewritten at the end. One readers-writer lock per store covers the
full read-modify-write cycle, disk I/O included.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from contextlib import suppress
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from chirpy.core.locks import ReadWriteLock
from chirpy.domain.entities import Chirp, ChirpFilter, ChirpSorter, RefreshToken, User
from chirpy.repositories.errors import (
    DuplicateEmailError,
    ExpiredTokenError,
    NotFoundError,
    SerializationError,
    StoreIOError,
)

logger = logging.getLogger(__name__)

REFRESH_TOKEN_TTL = timedelta(days=60)
COLLECTIONS = ("chirps", "users", "refresh_tokens")
# key the Go service used for refresh tokens; see scripts/import_legacy_db.py
LEGACY_TOKENS_KEY = "RefreshTokens"
_FRACTION = re.compile(r"\.(\d+)")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Document:
    chirps: dict[int, Chirp] = field(default_factory=dict)
    users: dict[int, User] = field(default_factory=dict)
    refresh_tokens: dict[str, RefreshToken] = field(default_factory=dict)
    # highest id ever issued per collection, so deleted ids are never handed out again
    sequences: dict[str, int] = field(default_factory=dict)

    def next_id(self, collection: str) -> int:
        items = self.chirps if collection == "chirps" else self.users
        last = max([self.sequences.get(collection, 0), *items.keys()])
        self.sequences[collection] = last + 1
        return last + 1

    def to_dict(self) -> dict:
        return {
            "chirps": {str(k): v.to_dict() for k, v in self.chirps.items()},
            "users": {str(k): v.to_dict() for k, v in self.users.items()},
            "refresh_tokens": {k: v.to_dict() for k, v in self.refresh_tokens.items()},
            "sequences": dict(self.sequences),
        }


# -------------------------------------- decoding --------------------------------------
def db_defaults(db: dict) -> dict:
    for name in COLLECTIONS:
        db.setdefault(name, {})
    db.setdefault("sequences", {})
    return db


def _field(entry: Any, name: str, kind: type, where: str) -> Any:
    if not isinstance(entry, dict) or name not in entry:
        raise SerializationError(f"{where}: missing field '{name}'")
    value = entry[name]
    if (kind is int and isinstance(value, bool)) or not isinstance(value, kind):
        raise SerializationError(f"{where}: field '{name}' must be {kind.__name__}")
    return value


def _check_key(key: str, expected: str, where: str) -> None:
    if key != expected:
        raise SerializationError(f"{where}: key does not match stored identifier {expected!r}")


def parse_timestamp(value: str) -> datetime:
    """Parse RFC 3339, tolerating a ``Z`` suffix and nanosecond fractions."""
    text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def decode_document(raw: Any) -> Document:
    if not isinstance(raw, dict):
        raise SerializationError("Document must be a JSON object")
    if LEGACY_TOKENS_KEY in raw:
        raise SerializationError(f"legacy '{LEGACY_TOKENS_KEY}' key present; run scripts/import_legacy_db.py")
    raw = db_defaults(raw)
    for name in (*COLLECTIONS, "sequences"):
        if not isinstance(raw[name], dict):
            raise SerializationError(f"'{name}' must be a JSON object")

    doc = Document()
    for key, entry in raw["chirps"].items():
        where = f"chirps[{key}]"
        chirp = Chirp(
            id=_field(entry, "id", int, where),
            body=_field(entry, "body", str, where),
            author_id=_field(entry, "author_id", int, where),
        )
        _check_key(key, str(chirp.id), where)
        doc.chirps[chirp.id] = chirp
    for key, entry in raw["users"].items():
        where = f"users[{key}]"
        user = User(
            id=_field(entry, "id", int, where),
            email=_field(entry, "email", str, where),
            password=_field(entry, "password", str, where),
            is_chirpy_red=_field(entry, "is_chirpy_red", bool, where) if "is_chirpy_red" in entry else False,
        )
        _check_key(key, str(user.id), where)
        doc.users[user.id] = user
    for key, entry in raw["refresh_tokens"].items():
        where = f"refresh_tokens[{key}]"
        expires_raw = _field(entry, "expires_at", str, where)
        try:
            expires_at = parse_timestamp(expires_raw)
        except ValueError as exc:
            raise SerializationError(f"{where}: invalid expires_at {expires_raw!r}") from exc
        token = RefreshToken(
            token=_field(entry, "token", str, where),
            expires_at=expires_at,
            user_id=_field(entry, "user_id", int, where),
        )
        _check_key(key, token.token, where)
        doc.refresh_tokens[token.token] = token
    for name in raw["sequences"]:
        doc.sequences[name] = _field(raw["sequences"], name, int, "sequences")
    return doc


# -------------------------------------- store --------------------------------------
class JSONStore:
    """CRUD and query operations over one JSON data file."""

    def __init__(
        self,
        path: str | os.PathLike,
        *,
        refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.path = Path(path)
        self.refresh_ttl = refresh_ttl
        self._clock = clock or _utcnow
        self._lock = ReadWriteLock()
        self._ensure()

    # -------------------------------------- persistence --------------------------------------
    def _ensure(self) -> None:
        if self.path.exists():
            return
        logger.info("Creating empty database at %s", self.path)
        self._save(Document())

    def _load(self) -> Document:
        """Ensure, read and decode the file. Caller holds the write lock."""
        self._ensure()
        return self._read()

    def _snapshot(self) -> Document:
        """Decode the file under the shared lock, creating it first if missing."""
        if not self.path.exists():
            with self._lock.write_locked():
                self._ensure()
        with self._lock.read_locked():
            return self._read()

    def _read(self) -> Document:
        try:
            data = self.path.read_bytes()
        except OSError as exc:
            raise StoreIOError(f"Failed to read {self.path}: {exc}") from exc
        try:
            raw = json.loads(data.decode("utf-8"))
        except ValueError as exc:
            logger.warning("Database file %s is not valid JSON: %s", self.path, exc)
            raise SerializationError(f"Failed to decode {self.path}: {exc}") from exc
        try:
            return decode_document(raw)
        except SerializationError as exc:
            logger.warning("Database file %s has an invalid layout: %s", self.path, exc)
            raise

    def _save(self, doc: Document) -> None:
        payload = json.dumps(doc.to_dict(), ensure_ascii=False, indent=2)
        try:
            fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.chmod(tmp, 0o644)
                os.replace(tmp, self.path)
            except BaseException:
                with suppress(OSError):
                    os.unlink(tmp)
                raise
        except OSError as exc:
            raise StoreIOError(f"Failed to write {self.path}: {exc}") from exc
        logger.debug("Wrote %d bytes to %s", len(payload), self.path)

    # -------------------------------------- refresh tokens --------------------------------------
    def create_refresh_token(self, token: str, user_id: int) -> RefreshToken:
        with self._lock.write_locked():
            doc = self._load()
            entity = RefreshToken(token=token, expires_at=self._clock() + self.refresh_ttl, user_id=user_id)
            doc.refresh_tokens[token] = entity
            self._save(doc)
        return entity

    def validate_refresh_token(self, token: str) -> int:
        """Return the owning user id of an active token."""
        doc = self._snapshot()
        entity = doc.refresh_tokens.get(token)
        if entity is None:
            raise NotFoundError("RefreshToken")
        if entity.is_expired(self._clock()):
            raise ExpiredTokenError()
        return entity.user_id

    def revoke_refresh_token(self, token: str) -> None:
        with self._lock.write_locked():
            doc = self._load()
            doc.refresh_tokens.pop(token, None)
            self._save(doc)

    # -------------------------------------- chirps --------------------------------------
    def create_chirp(self, body: str, author_id: int) -> Chirp:
        with self._lock.write_locked():
            doc = self._load()
            chirp = Chirp(id=doc.next_id("chirps"), body=body, author_id=author_id)
            doc.chirps[chirp.id] = chirp
            self._save(doc)
        return chirp

    def get_chirps(self, filters: ChirpFilter = ChirpFilter(), sorter: ChirpSorter = ChirpSorter()) -> list[Chirp]:
        doc = self._snapshot()
        return sorter.sort([c for c in doc.chirps.values() if filters.matches(c)])

    def get_chirp_by_id(self, chirp_id: int) -> Chirp:
        doc = self._snapshot()
        chirp = doc.chirps.get(chirp_id)
        if chirp is None:
            raise NotFoundError("Chirp")
        return chirp

    def delete_chirp(self, chirp_id: int) -> None:
        with self._lock.write_locked():
            doc = self._load()
            doc.chirps.pop(chirp_id, None)
            self._save(doc)

    # -------------------------------------- users --------------------------------------
    def create_user(self, email: str, password_hash: str) -> User:
        with self._lock.write_locked():
            doc = self._load()
            if any(u.email == email for u in doc.users.values()):
                raise DuplicateEmailError(email)
            user = User(id=doc.next_id("users"), email=email, password=password_hash, is_chirpy_red=False)
            doc.users[user.id] = user
            self._save(doc)
        return user

    def update_user(self, user_id: int, email: str, password_hash: str) -> User:
        with self._lock.write_locked():
            doc = self._load()
            existing = doc.users.get(user_id)
            if existing is None:
                raise NotFoundError("User")
            if any(u.email == email and u.id != user_id for u in doc.users.values()):
                raise DuplicateEmailError(email)
            user = User(id=user_id, email=email, password=password_hash, is_chirpy_red=existing.is_chirpy_red)
            doc.users[user_id] = user
            self._save(doc)
        return user

    def upgrade_user(self, user_id: int) -> User:
        with self._lock.write_locked():
            doc = self._load()
            user = doc.users.get(user_id)
            if user is None:
                raise NotFoundError("User")
            if not user.is_chirpy_red:
                user.is_chirpy_red = True
                self._save(doc)
        return user

    def get_users(self) -> list[User]:
        doc = self._snapshot()
        return sorted(doc.users.values(), key=lambda u: u.id)

    def get_user_by_id(self, user_id: int) -> User:
        doc = self._snapshot()
        user = doc.users.get(user_id)
        if user is None:
            raise NotFoundError("User")
        return user

    def get_user_by_email(self, email: str) -> User:
        doc = self._snapshot()
        for user in doc.users.values():
            if user.email == email:
                return user
        raise NotFoundError("User")
