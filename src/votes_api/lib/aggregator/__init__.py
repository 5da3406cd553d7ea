"""Aggregator library — turn raw feed documents into candidate vote lists.

Public API:
    - extract_romania: National candidate list from a feed document
    - extract_diaspora: Region-folded diaspora candidate list
    - combine: Union of two lists by id with summed votes
    - Candidate / ScopeResult: Result types
    - AggregationError: Malformed or missing document shape
"""

from votes_api.lib.aggregator.aggregator import combine, extract_diaspora, extract_romania
from votes_api.lib.aggregator.parser import AggregationError, UpstreamCandidate
from votes_api.lib.aggregator.types import Candidate, ScopeResult, votes_by_id

__all__ = [
    "AggregationError",
    "Candidate",
    "ScopeResult",
    "UpstreamCandidate",
    "combine",
    "extract_diaspora",
    "extract_romania",
    "votes_by_id",
]
