"""Chirpy: a small social-posting backend over a single JSON data file."""

__version__ = "0.1.0"
