"""
FastAPI dependencies resolving the per-application cache instances.
"""

from fastapi import HTTPException, Request, status

from ..services.cache.response_cache import ResponseCache
from ..services.cache.ttl_cache import TTLCache


def get_response_cache(request: Request) -> ResponseCache:
    """Response cache owned by the running application."""
    response_cache = getattr(request.app.state, "response_cache", None)
    if response_cache is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Response cache is not initialized",
        )
    return response_cache


def get_ttl_cache(request: Request) -> TTLCache:
    """Underlying TTL cache owned by the running application."""
    return get_response_cache(request).cache
