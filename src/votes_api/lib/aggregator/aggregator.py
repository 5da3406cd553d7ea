"""Per-electorate candidate extraction and the combined merge.

All functions are pure: the same input document (or pair of lists) always
yields the same result, and inputs are never mutated.
"""

from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from loguru import logger

from votes_api.lib.aggregator.parser import (
    NATIONAL_PATH,
    AggregationError,
    UpstreamCandidate,
    parse_national_candidates,
    parse_region_candidates,
)
from votes_api.lib.aggregator.types import Candidate, ScopeResult


def _to_candidate(entry: UpstreamCandidate) -> Candidate:
    return Candidate(id=entry.id, name=entry.candidate, party=entry.party, votes=entry.votes)


def extract_romania(raw: Any) -> ScopeResult:
    """Extract the national (Romania) candidate list from a feed document.

    Args:
        raw: Parsed national feed document.

    Returns:
        Candidates in upstream order.

    Raises:
        AggregationError: If the national scope is missing, malformed, or
            lists the same candidate id twice.
    """
    candidates = tuple(_to_candidate(entry) for entry in parse_national_candidates(raw))
    seen: set[str] = set()
    for c in candidates:
        if c.id in seen:
            raise AggregationError(".".join(NATIONAL_PATH), f"duplicate candidate id '{c.id}'")
        seen.add(c.id)
    return candidates


def extract_diaspora(raw: Any) -> ScopeResult:
    """Fold every diaspora region into one candidate list.

    Votes for the same id are summed across regions. Name and party come
    from the first region in which the id appears. A region lists each id
    at most once; a repeated entry within one region is ignored.

    Args:
        raw: Parsed diaspora feed document.

    Returns:
        One candidate per distinct id, in first-seen order.

    Raises:
        AggregationError: If the regional scopes are missing or malformed.
    """
    folded: dict[str, Candidate] = {}
    for region, entries in parse_region_candidates(raw):
        seen_in_region: set[str] = set()
        for entry in entries:
            if entry.id in seen_in_region:
                logger.warning("Ignoring repeated candidate {} in diaspora region {}", entry.id, region)
                continue
            seen_in_region.add(entry.id)

            existing = folded.get(entry.id)
            if existing is None:
                folded[entry.id] = _to_candidate(entry)
            else:
                folded[entry.id] = replace(existing, votes=existing.votes + entry.votes)
    return tuple(folded.values())


def combine(romania: Iterable[Candidate], diaspora: Iterable[Candidate]) -> ScopeResult:
    """Union two candidate lists by id, summing votes.

    Starts from ``romania`` in its order, adds diaspora votes to matching
    ids, then appends diaspora-only candidates in their order.

    Args:
        romania: National candidate list.
        diaspora: Diaspora candidate list.

    Returns:
        The combined candidate list.
    """
    merged: dict[str, Candidate] = {c.id: c for c in romania}
    for c in diaspora:
        existing = merged.get(c.id)
        merged[c.id] = c if existing is None else replace(existing, votes=existing.votes + c.votes)
    return tuple(merged.values())
