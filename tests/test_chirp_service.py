from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chirpy.domain.chirps import MAX_CHIRP_LENGTH, clean_body, is_valid_length  # noqa: E402
from chirpy.repositories.errors import NotFoundError  # noqa: E402
from chirpy.repositories.json_storage import JSONStore  # noqa: E402
from chirpy.services.chirp_service import ChirpForbiddenError, ChirpService, ChirpTooLongError  # noqa: E402


@pytest.fixture()
def svc(tmp_path):
    return ChirpService(JSONStore(tmp_path / "database.json"))


def test_clean_body_masks_whole_words_only():
    assert clean_body("I had a Kerfuffle with a sharbert") == "I had a **** with a ****"
    assert clean_body("Fornax! is fine") == "Fornax! is fine"
    assert clean_body("") == ""


def test_length_limit():
    assert is_valid_length("x" * MAX_CHIRP_LENGTH)
    assert not is_valid_length("x" * (MAX_CHIRP_LENGTH + 1))


def test_post_cleans_and_stores(svc):
    chirp = svc.post("what a kerfuffle", 3)
    assert chirp.body == "what a ****"
    assert svc.get(chirp.id).author_id == 3


def test_post_rejects_long_bodies(svc):
    with pytest.raises(ChirpTooLongError):
        svc.post("x" * 141, 1)
    assert svc.list_chirps() == []


def test_list_passes_filters(svc):
    svc.post("alpha", 1)
    svc.post("beta", 2)
    svc.post("alphabet", 1)
    assert [c.id for c in svc.list_chirps(author_id=1, order="desc")] == [3, 1]
    assert [c.body for c in svc.list_chirps(contains="bet")] == ["beta", "alphabet"]


def test_only_author_can_delete(svc):
    chirp = svc.post("mine", 1)
    with pytest.raises(ChirpForbiddenError):
        svc.delete(chirp.id, 2)
    svc.delete(chirp.id, 1)
    with pytest.raises(NotFoundError):
        svc.get(chirp.id)
    with pytest.raises(NotFoundError):
        svc.delete(chirp.id, 1)
