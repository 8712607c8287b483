"""
Persistence adapters.

json_storage holds the single-file JSON store; errors holds the failures it
returns. Services depend on the store instead of touching the data file.
"""
