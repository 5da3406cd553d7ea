"""Cache library — in-memory TTL cache for upstream payloads and derived lists.

Public API:
    - TTLCache: Per-key cache with lazy expiry
    - CacheEntry: Stored value with its expiry timestamp
"""

from votes_api.lib.cache.ttl_cache import CacheEntry, TTLCache

__all__ = [
    "CacheEntry",
    "TTLCache",
]
