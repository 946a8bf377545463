"""
Cache administration endpoints.

Manual inspection and forced invalidation of the in-process response cache.
"""

from typing import List, Optional

import structlog
from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel

from ...services.cache.response_cache import ResponseCache
from ...services.cache.ttl_cache import TTLCache
from ..dependencies import get_response_cache, get_ttl_cache

logger = structlog.get_logger(__name__)
router = APIRouter(prefix="/api/cache", tags=["cache"])


class CacheStatsResponse(BaseModel):
    """Live cache contents."""

    size: int
    keys: List[str]


class CacheClearResponse(BaseModel):
    """Outcome of a cache invalidation."""

    cleared: int
    remaining: int
    prefix: Optional[str] = None


@router.get("/clear", response_model=CacheStatsResponse)
def cache_stats(cache: TTLCache = Depends(get_ttl_cache)) -> CacheStatsResponse:
    """
    View cache stats.

    Expired entries are swept before counting, so only live keys are listed.
    """
    stats = cache.stats()
    return CacheStatsResponse(size=stats.size, keys=stats.keys)


@router.post("/clear", response_model=CacheClearResponse)
def clear_cache(
    prefix: Optional[str] = Query(
        None, description="Only clear keys starting with this prefix"
    ),
    cache: TTLCache = Depends(get_ttl_cache),
) -> CacheClearResponse:
    """
    Clear the in-memory cache.

    With ``?prefix=trending`` only keys starting with ``trending`` are
    removed; without a prefix (or with an empty one) everything is cleared.
    """
    prefix = prefix or None
    if prefix:
        cleared = cache.clear_by_prefix(prefix)
    else:
        cleared = cache.clear_all()

    remaining = cache.stats().size
    logger.info("Cache cleared via admin API", prefix=prefix, cleared=cleared)

    return CacheClearResponse(cleared=cleared, remaining=remaining, prefix=prefix)


@router.get("/metrics")
def cache_metrics(
    response_cache: ResponseCache = Depends(get_response_cache),
) -> Response:
    """Prometheus metrics for response cache hits, misses and invalidations."""
    return Response(
        content=response_cache.metrics(),
        media_type="text/plain; version=0.0.4; charset=utf-8",
    )
