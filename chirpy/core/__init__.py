"""
Core utilities shared across the Chirpy API.

This package hosts configuration, security helpers (password hashing, JWT),
the readers-writer lock used by the store and the file server hit counter.
"""
