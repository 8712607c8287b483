"""Errors raised by the JSON store.

Callers should branch on ``exc.kind`` (or on the subclass) instead of comparing
error instances.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE_EMAIL = "duplicate_email"
    EXPIRED_TOKEN = "expired_token"
    SERIALIZATION = "serialization"
    IO = "io"


class StoreError(Exception):
    """Base class for every failure returned by the store."""

    kind: ErrorKind

    def __init__(self, message: str, entity: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.entity = entity


class NotFoundError(StoreError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str):
        super().__init__(f"{entity} not found", entity=entity)


class DuplicateEmailError(StoreError):
    kind = ErrorKind.DUPLICATE_EMAIL

    def __init__(self, email: str = ""):
        super().__init__("Email already in use", entity="User")
        self.email = email


class ExpiredTokenError(StoreError):
    kind = ErrorKind.EXPIRED_TOKEN

    def __init__(self):
        super().__init__("Refresh token expired", entity="RefreshToken")


class SerializationError(StoreError):
    """The data file exists but does not hold a valid document."""

    kind = ErrorKind.SERIALIZATION


class StoreIOError(StoreError):
    """The data file could not be created, read or written."""

    kind = ErrorKind.IO
