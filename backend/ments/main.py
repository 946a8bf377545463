"""
Ments API - Main FastAPI Application

Owns the process-local response cache: constructs it with the application,
exposes it to handlers through dependencies, and stops its background
sweeper on shutdown.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.endpoints.cache import router as cache_router
from .api.endpoints.health import router as health_router
from .core.config import Settings, get_settings
from .core.logging import configure_logging
from .services.cache.response_cache import ResponseCache
from .services.cache.ttl_cache import TTLCache

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info(
        "Starting Ments API",
        version=settings.SERVICE_VERSION,
        environment=settings.ENVIRONMENT,
        cache_sweep_interval=app.state.ttl_cache.sweep_interval,
    )

    yield

    logger.info("Shutting down Ments API")
    cache: TTLCache = app.state.ttl_cache
    try:
        cache.stop()
        logger.info("Response cache stopped", remaining=cache.stats().size)
    except Exception as e:
        logger.error("Error during cache shutdown", error=str(e))


def create_app(
    settings: Optional[Settings] = None, cache: Optional[TTLCache] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings (defaults to environment settings)
        cache: TTL cache instance (defaults to a new cache per application)

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL, json_logs=settings.is_production)

    if cache is None:
        cache = TTLCache(sweep_interval=settings.CACHE_SWEEP_INTERVAL_SECONDS)

    app = FastAPI(
        title="Ments API",
        description="Ments startup networking backend",
        version=settings.SERVICE_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.ttl_cache = cache
    app.state.response_cache = ResponseCache(cache, settings)

    app.include_router(health_router)
    if settings.CACHE_ADMIN_ENABLED:
        app.include_router(cache_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for unhandled errors."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=True,
        )

        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred",
                "timestamp": datetime.utcnow().isoformat(),
            },
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
