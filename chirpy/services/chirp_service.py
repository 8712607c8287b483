"""Chirp use cases (post, list, delete with ownership checks)."""

from __future__ import annotations

import logging
from typing import Optional

from chirpy.domain.chirps import clean_body, is_valid_length
from chirpy.domain.entities import Chirp, ChirpFilter, ChirpSorter
from chirpy.repositories.json_storage import JSONStore

logger = logging.getLogger(__name__)


class ChirpError(Exception):
    """Base exception for chirp workflow."""


class ChirpTooLongError(ChirpError):
    def __init__(self):
        super().__init__("Chirp is too long")


class ChirpForbiddenError(ChirpError):
    """Raised when someone other than the author tries to delete a chirp."""


class ChirpService:
    def __init__(self, store: JSONStore) -> None:
        self.store = store

    def post(self, body: str, author_id: int) -> Chirp:
        if not is_valid_length(body):
            raise ChirpTooLongError()
        chirp = self.store.create_chirp(clean_body(body), author_id)
        logger.info("User %s posted chirp %s", author_id, chirp.id)
        return chirp

    def list_chirps(
        self,
        author_id: Optional[int] = None,
        contains: Optional[str] = None,
        order: Optional[str] = None,
    ) -> list[Chirp]:
        return self.store.get_chirps(ChirpFilter(author_id=author_id, contains=contains), ChirpSorter(order=order))

    def get(self, chirp_id: int) -> Chirp:
        return self.store.get_chirp_by_id(chirp_id)

    def delete(self, chirp_id: int, requester_id: int) -> None:
        # NotFoundError from the lookup propagates to the caller
        chirp = self.store.get_chirp_by_id(chirp_id)
        if chirp.author_id != requester_id:
            raise ChirpForbiddenError(f"User {requester_id} is not the author of chirp {chirp_id}")
        self.store.delete_chirp(chirp_id)
        logger.info("User %s deleted chirp %s", requester_id, chirp_id)
