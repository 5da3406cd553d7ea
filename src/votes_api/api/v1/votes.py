"""Votes API endpoints.

GET /votes — romania, diaspora, and combined candidate lists
GET /count — raw national feed document (legacy)
GET /count-dias — raw diaspora feed document (legacy)
GET /health — liveness and fetcher backend

Upstream failures are turned into ``502 {"error": ...}`` by the
application's ``UpstreamError`` handler.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from votes_api.core.dependencies import get_votes_service
from votes_api.schemas.votes import ErrorResponse, HealthResponse, VotesResponse
from votes_api.services.votes_service import VotesService

votes_router = APIRouter(tags=["votes"])

_UPSTREAM_FAILURE: dict[int | str, dict[str, Any]] = {502: {"model": ErrorResponse}}


@votes_router.get("/votes", response_model=VotesResponse, responses=_UPSTREAM_FAILURE)
async def get_votes(service: Annotated[VotesService, Depends(get_votes_service)]) -> VotesResponse:
    """Per-electorate and combined vote counts. Public endpoint."""
    return await service.get_votes()


@votes_router.get("/count", responses=_UPSTREAM_FAILURE)
async def get_raw_romania(service: Annotated[VotesService, Depends(get_votes_service)]) -> JSONResponse:
    """Raw national feed document, unmodified."""
    return JSONResponse(content=await service.get_raw_romania())


@votes_router.get("/count-dias", responses=_UPSTREAM_FAILURE)
async def get_raw_diaspora(service: Annotated[VotesService, Depends(get_votes_service)]) -> JSONResponse:
    """Raw diaspora feed document, unmodified."""
    return JSONResponse(content=await service.get_raw_diaspora())


@votes_router.get("/health", response_model=HealthResponse)
async def health(service: Annotated[VotesService, Depends(get_votes_service)]) -> HealthResponse:
    """Liveness check; does not touch the upstream."""
    return HealthResponse(fetcher=service.fetcher.backend)
