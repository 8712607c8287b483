"""Domain helpers for chirp bodies."""
from __future__ import annotations

MAX_CHIRP_LENGTH = 140
PROFANE_WORDS = {
    "kerfuffle",
    "sharbert",
    "fornax",
}
CENSORED = "****"


def is_valid_length(body: str | None) -> bool:
    return len(body or "") <= MAX_CHIRP_LENGTH


def clean_body(body: str) -> str:
    """Mask profane words. Only whole space-separated words are replaced."""
    words = body.split(" ")
    return " ".join(CENSORED if word.lower() in PROFANE_WORDS else word for word in words)
