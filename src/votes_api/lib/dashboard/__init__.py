"""Dashboard library — rank, track, and render polled vote snapshots.

Public API:
    - rank_candidates: Sort a list and compute gaps and shares
    - remaining_votes / total_votes: Summary figures
    - DashboardState / DashboardSnapshot: Poll state machine
    - render: Plain-text screen for a state
"""

from votes_api.lib.dashboard.ranking import RankedCandidate, rank_candidates, remaining_votes, total_votes
from votes_api.lib.dashboard.render import render
from votes_api.lib.dashboard.state import DashboardSnapshot, DashboardState

__all__ = [
    "DashboardSnapshot",
    "DashboardState",
    "RankedCandidate",
    "rank_candidates",
    "remaining_votes",
    "render",
    "total_votes",
]
