"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger

from votes_api.core.config import get_settings
from votes_api.core.logging import setup_logging
from votes_api.lib.fetcher import UpstreamError
from votes_api.services.votes_service import VotesService


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build the votes service on startup and release the browser on shutdown.

    A service already placed on ``app.state.votes_service`` (e.g. one wired
    with a fake fetcher) is used as-is.
    """
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)
    logger.info("Romania feed: {}", settings.romania_api_url)
    logger.info("Diaspora feed: {}", settings.diaspora_api_url)
    logger.info(
        "Fetcher={} timeout={}s cache_ttl={}s raw_cache_ttl={}s",
        settings.fetcher_backend,
        settings.fetch_timeout,
        settings.cache_ttl,
        settings.raw_cache_ttl,
    )

    service: VotesService | None = getattr(app.state, "votes_service", None)
    if service is None:
        service = VotesService.from_settings(settings)
        app.state.votes_service = service

    yield

    logger.info("Shutting down; releasing fetcher resources")
    await service.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="Votes API",
        description="Live presidential election vote counts for Romania and the diaspora",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
        logger.error("Error {}: {}", request.url.path, exc)
        return JSONResponse(
            status_code=502,
            content={"error": str(exc)},
        )

    from votes_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app
