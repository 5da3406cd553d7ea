"""FastAPI dependency injection for the votes service."""

from fastapi import Request

from votes_api.services.votes_service import VotesService


def get_votes_service(request: Request) -> VotesService:
    """Return the service created by the application lifespan.

    Raises:
        RuntimeError: If the lifespan has not initialized the service.
    """
    service: VotesService | None = getattr(request.app.state, "votes_service", None)
    if service is None:
        msg = "Votes service is not initialized"
        raise RuntimeError(msg)
    return service
