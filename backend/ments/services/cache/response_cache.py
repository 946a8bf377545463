"""
Response Cache Service

Read-through caching for hot listing endpoints on top of TTLCache.
Only successful loader results are stored; a failing loader leaves the
cache untouched so a transient backend error is never served as data.
"""

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

import structlog
from opentelemetry import trace
from prometheus_client import CollectorRegistry, Counter, generate_latest

from ...core.config import Settings
from ...domain.cache.value_objects import TTL, CacheDomain, CacheKey
from .ttl_cache import CacheStats, TTLCache

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

_MISSING = object()


@dataclass
class CachedResult:
    """Payload returned to a handler along with its cache status."""

    value: Any
    hit: bool
    ttl: TTL

    @property
    def headers(self) -> Dict[str, str]:
        """Response headers describing the cache outcome."""
        return {
            "X-Cache": "HIT" if self.hit else "MISS",
            "Cache-Control": (
                f"public, s-maxage={self.ttl.seconds}, "
                f"stale-while-revalidate={self.ttl.stale_while_revalidate}"
            ),
        }


class ResponseCache:
    """
    Read-through cache used by listing endpoints.

    Keys are built from the listing domain and its normalized query
    parameters; TTLs come from the configured per-domain policy.
    """

    def __init__(self, cache: TTLCache, settings: Settings):
        self.cache = cache
        self.settings = settings

        self.registry = CollectorRegistry()
        self.hits_total = Counter(
            "ments_response_cache_hits_total",
            "Total number of response cache hits",
            ["domain"],
            registry=self.registry,
        )
        self.misses_total = Counter(
            "ments_response_cache_misses_total",
            "Total number of response cache misses",
            ["domain"],
            registry=self.registry,
        )
        self.invalidations_total = Counter(
            "ments_response_cache_invalidated_entries_total",
            "Total number of entries removed by invalidation",
            ["domain"],
            registry=self.registry,
        )

    def ttl_for(self, domain: Union[str, CacheDomain]) -> TTL:
        """Configured TTL for a listing domain."""
        return TTL.for_domain(domain, self.settings.cache_ttl_overrides)

    async def get_or_compute(
        self,
        domain: Union[str, CacheDomain],
        params: Optional[Mapping[str, Any]],
        loader: Callable[[], Awaitable[Any]],
        ttl: Optional[TTL] = None,
    ) -> CachedResult:
        """
        Return the cached result for a query, computing it on a miss.

        Args:
            domain: Listing domain
            params: Query parameters identifying the variant
            loader: Async callable producing the result on a miss
            ttl: TTL override (defaults to the domain policy)

        Returns:
            CachedResult with the value and hit/miss status

        Raises:
            ValueError: If ``domain`` is not a known CacheDomain
            Whatever ``loader`` raises; nothing is cached in that case
        """
        domain = CacheDomain(domain)
        key = CacheKey.for_query(domain, params)
        cache_ttl = ttl or self.ttl_for(domain)

        with tracer.start_as_current_span("response_cache.get_or_compute") as span:
            span.set_attribute("cache.key", key.value)
            span.set_attribute("cache.domain", key.domain)

            cached = self.cache.get(key.value, _MISSING)
            if cached is not _MISSING:
                span.set_attribute("cache_hit", True)
                self.hits_total.labels(domain=key.domain).inc()
                return CachedResult(value=cached, hit=True, ttl=cache_ttl)

            span.set_attribute("cache_hit", False)
            self.misses_total.labels(domain=key.domain).inc()

            try:
                value = await loader()
            except Exception as e:
                logger.warning(
                    "Response loader failed, result not cached",
                    key=key.value,
                    error=str(e),
                )
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

            self.cache.set(key.value, value, cache_ttl.seconds)
            logger.debug("Cached response", key=key.value, ttl=cache_ttl.seconds)
            return CachedResult(value=value, hit=False, ttl=cache_ttl)

    def invalidate(self, domain: Union[str, CacheDomain]) -> int:
        """
        Drop every cached variant of a listing domain.

        Called by write endpoints after a successful mutation.

        Returns:
            Number of entries removed

        Raises:
            ValueError: If ``domain`` is not a known CacheDomain
        """
        domain = CacheDomain(domain)
        prefix = CacheKey.prefix(domain)
        count = self.cache.clear_by_prefix(prefix)
        self.invalidations_total.labels(domain=domain.value).inc(count)

        logger.info("Invalidated cached responses", prefix=prefix, count=count)
        return count

    def stats(self) -> CacheStats:
        return self.cache.stats()

    def metrics(self) -> bytes:
        """Prometheus exposition of the cache counters."""
        return generate_latest(self.registry)
