"""Records stored in the JSON document, plus the chirp query helpers."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

DESC = "desc"


def format_timestamp(value: datetime) -> str:
    """RFC 3339 in UTC with a ``Z`` suffix (the format existing data files use)."""
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass
class User:
    id: int
    email: str
    password: str
    is_chirpy_red: bool = False

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class Chirp:
    id: int
    body: str
    author_id: int

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class RefreshToken:
    token: str
    expires_at: datetime
    user_id: int

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def to_dict(self) -> dict:
        return {
            "token": self.token,
            "expires_at": format_timestamp(self.expires_at),
            "user_id": self.user_id,
        }


@dataclass(frozen=True)
class ChirpFilter:
    """All set predicates must match; ``None`` matches everything."""

    author_id: Optional[int] = None
    contains: Optional[str] = None

    def matches(self, chirp: Chirp) -> bool:
        if self.author_id is not None and chirp.author_id != self.author_id:
            return False
        if self.contains is not None and self.contains not in chirp.body:
            return False
        return True


@dataclass(frozen=True)
class ChirpSorter:
    """Orders by id; anything other than ``"desc"`` means ascending."""

    order: Optional[str] = None

    @property
    def descending(self) -> bool:
        return self.order == DESC

    def sort(self, chirps: list[Chirp]) -> list[Chirp]:
        return sorted(chirps, key=lambda c: c.id, reverse=self.descending)
