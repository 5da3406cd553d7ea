"""Ranking helpers for displaying a candidate list."""

from collections.abc import Iterable
from dataclasses import dataclass

from votes_api.schemas.votes import CandidateResponse


@dataclass(frozen=True)
class RankedCandidate:
    """A candidate with its lead over the next-ranked candidate and vote share."""

    id: str
    candidate: str
    party: str | None
    votes: int
    gap: int
    share: float


def total_votes(candidates: Iterable[CandidateResponse]) -> int:
    """Sum of votes in a list."""
    return sum(c.votes for c in candidates)


def rank_candidates(candidates: Iterable[CandidateResponse]) -> list[RankedCandidate]:
    """Sort by votes descending and compute gaps and percentage shares.

    Ties keep their input order. ``gap`` is the vote difference to the
    next-lower-ranked candidate (0 for the last). ``share`` is a percentage
    of the list total (0.0 when the total is 0).
    """
    ordered = sorted(candidates, key=lambda c: c.votes, reverse=True)
    total = total_votes(ordered)
    ranked: list[RankedCandidate] = []
    for i, c in enumerate(ordered):
        gap = c.votes - ordered[i + 1].votes if i + 1 < len(ordered) else 0
        share = (c.votes / total) * 100 if total else 0.0
        ranked.append(
            RankedCandidate(id=c.id, candidate=c.candidate, party=c.party, votes=c.votes, gap=gap, share=share)
        )
    return ranked


def remaining_votes(counted: int, registered: int) -> int:
    """Registered voters who have not yet been counted."""
    return registered - counted
