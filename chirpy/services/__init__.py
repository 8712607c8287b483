"""
High-level use cases for the Chirpy API.

Routers (FastAPI endpoints) call these services instead of manipulating the
store directly when a use case has rules of its own (credentials, ownership).
"""
