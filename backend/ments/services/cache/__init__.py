"""
Response Cache Services

In-process TTL cache and the read-through helper used by listing endpoints.
"""

from .response_cache import CachedResult, ResponseCache
from .ttl_cache import CacheEntry, CacheStats, TTLCache

__all__ = [
    "TTLCache",
    "CacheEntry",
    "CacheStats",
    "ResponseCache",
    "CachedResult",
]
