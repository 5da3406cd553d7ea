"""Root API router and middleware registration."""

from fastapi import APIRouter, FastAPI

from votes_api.api.middleware import RequestLoggingMiddleware, setup_cors
from votes_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router under ``settings.api_prefix``.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from votes_api.api.v1.votes import votes_router

    root_router = APIRouter(prefix=settings.api_prefix)
    root_router.include_router(votes_router)
    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    app.add_middleware(RequestLoggingMiddleware)
    setup_cors(app, settings)
