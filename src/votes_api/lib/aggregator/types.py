"""Aggregator data types.

Frozen dataclasses so that lists stored in a cache are immutable snapshots.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Candidate:
    """One candidate's vote count within a scope."""

    id: str
    name: str
    party: str | None
    votes: int

    def __post_init__(self) -> None:
        if self.votes < 0:
            msg = f"votes must be non-negative, got {self.votes} for candidate {self.id!r}"
            raise ValueError(msg)


# One electorate snapshot; unique ids, order not semantically meaningful.
ScopeResult = tuple[Candidate, ...]


def votes_by_id(result: ScopeResult) -> dict[str, int]:
    """Map candidate id to votes."""
    return {c.id: c.votes for c in result}
