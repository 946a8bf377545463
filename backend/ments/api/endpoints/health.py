"""
Health check endpoints for Ments API.
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request

from ...services.cache.ttl_cache import TTLCache
from ..dependencies import get_ttl_cache

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check(
    request: Request, cache: TTLCache = Depends(get_ttl_cache)
) -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns a simple health status for load balancers and monitoring systems.
    """
    settings = request.app.state.settings
    return {
        "status": "healthy",
        "timestamp": datetime.utcnow().isoformat(),
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "environment": settings.ENVIRONMENT,
        "cache": {"entries": len(cache), "sweeping": cache.is_sweeping},
    }
