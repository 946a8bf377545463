"""
Cache Domain Module

Value objects for the response cache key namespace and TTL policy.
"""

from .value_objects import TTL, CacheDomain, CacheKey

__all__ = ["TTL", "CacheDomain", "CacheKey"]
