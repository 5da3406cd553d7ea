"""Dashboard poll state.

The dashboard is either loading (no successful poll yet), showing the
latest snapshot, or showing an error. A failed poll discards the previous
snapshot; there is no last-known-good fallback.
"""

from dataclasses import dataclass
from typing import Any

from votes_api.lib.dashboard.ranking import RankedCandidate, rank_candidates, remaining_votes, total_votes
from votes_api.schemas.votes import VotesResponse


@dataclass(frozen=True)
class DashboardSnapshot:
    """One successfully polled and ranked ``/votes`` response."""

    romania: list[RankedCandidate]
    diaspora: list[RankedCandidate]
    combined: list[RankedCandidate]
    total_combined: int
    remaining: int

    @classmethod
    def from_response(cls, response: VotesResponse, registered_voters: int) -> "DashboardSnapshot":
        total = total_votes(response.combined)
        return cls(
            romania=rank_candidates(response.romania),
            diaspora=rank_candidates(response.diaspora),
            combined=rank_candidates(response.combined),
            total_combined=total,
            remaining=remaining_votes(total, registered_voters),
        )


@dataclass
class DashboardState:
    """Mutable view state updated after every poll."""

    registered_voters: int
    snapshot: DashboardSnapshot | None = None
    error: str | None = None
    polls: int = 0

    @property
    def loading(self) -> bool:
        return self.snapshot is None and self.error is None

    def apply_success(self, payload: Any) -> None:
        """Replace the snapshot with a freshly polled payload.

        Raises:
            pydantic.ValidationError: If the payload is not a votes response.
        """
        response = VotesResponse.model_validate(payload)
        self.snapshot = DashboardSnapshot.from_response(response, self.registered_voters)
        self.error = None
        self.polls += 1

    def apply_failure(self, message: str) -> None:
        """Record a failed poll and drop the previous snapshot."""
        self.snapshot = None
        self.error = message
        self.polls += 1
