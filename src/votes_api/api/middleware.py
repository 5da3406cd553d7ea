"""CORS and request logging middleware."""

import time
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from votes_api.core.config import Settings


def setup_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware on the FastAPI app.

    A ``*`` origin allows any site to read the (public) results, without
    credentials.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    origins = settings.cors_origin_list
    kwargs: dict[str, Any] = {
        "allow_origins": origins,
        "allow_credentials": "*" not in origins,
        "allow_methods": ["GET"],
        "allow_headers": ["*"],
    }
    app.add_middleware(CORSMiddleware, **kwargs)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status, and duration of every request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Time the downstream handler and log the outcome.

        Args:
            request: The incoming request.
            call_next: The next middleware/handler.

        Returns:
            The downstream response, with an ``X-Response-Time`` header.
        """
        start = time.monotonic()
        response = await call_next(request)
        elapsed_ms = (time.monotonic() - start) * 1000
        response.headers["X-Response-Time"] = f"{elapsed_ms:.1f}ms"
        log = logger.warning if response.status_code >= 500 else logger.info
        log("{} {} -> {} ({:.1f}ms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response
