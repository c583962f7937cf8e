"""Defines common Value Objects used across the cache contexts.

These objects represent simple values like group names and the
persisted entry structure, ensuring consistency and type safety.
"""

from typing import Any, NamedTuple, NewType, TypedDict

# === Core Value Objects ===

# Using NewType for semantic clarity, although it is a string at runtime.
CacheGroup = NewType("CacheGroup", str)    # Namespace partitioning keys

DEFAULT_GROUP = CacheGroup("default")

# Value returned by get() when nothing is found.
NOT_FOUND_VALUE = False

# --- Structured Data ---
class CacheRecord(TypedDict):
    """On-disk representation of one cache entry."""
    value: Any
    expires: int  # Absolute epoch seconds, 0 means never

class CacheResult(NamedTuple):
    """Outcome of a cache lookup."""
    value: Any
    found: bool

MISS = CacheResult(NOT_FOUND_VALUE, False)

class CacheStats(TypedDict):
    """Snapshot of cache counters for diagnostics."""
    hits: int
    misses: int
    groups: int
    entries: int
