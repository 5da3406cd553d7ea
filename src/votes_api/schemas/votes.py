"""Pydantic v2 schemas for the votes endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from votes_api.lib.aggregator import Candidate, ScopeResult


class CandidateResponse(BaseModel):
    """Candidate wire shape."""

    model_config = ConfigDict(extra="forbid")

    id: str
    candidate: str
    party: str | None
    votes: int = Field(ge=0)

    @classmethod
    def from_candidate(cls, c: Candidate) -> "CandidateResponse":
        """Serialize an aggregated candidate."""
        return cls(id=c.id, candidate=c.name, party=c.party, votes=c.votes)


def to_candidate_list(result: ScopeResult) -> list[CandidateResponse]:
    """Serialize a whole scope result."""
    return [CandidateResponse.from_candidate(c) for c in result]


class VotesResponse(BaseModel):
    """Per-electorate and combined candidate lists."""

    romania: list[CandidateResponse]
    diaspora: list[CandidateResponse]
    combined: list[CandidateResponse]


class ErrorResponse(BaseModel):
    """Body of a 502 response."""

    error: str


class HealthResponse(BaseModel):
    """Liveness response."""

    status: str = "ok"
    fetcher: str
