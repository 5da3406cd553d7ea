"""Shared test fixtures: settings, feed documents, a fake fetcher, and a service."""

from typing import Any

import pytest
from factories import (
    DIASPORA_URL,
    ROMANIA_URL,
    FakeClock,
    FakeFetcher,
    make_candidate,
    make_diaspora_doc,
    make_romania_doc,
)

from votes_api.core.config import Settings
from votes_api.lib.cache import TTLCache
from votes_api.services.votes_service import VotesService


@pytest.fixture
def settings() -> Settings:
    """Test application settings."""
    return Settings(
        romania_api_url=ROMANIA_URL,
        diaspora_api_url=DIASPORA_URL,
        fetcher_backend="http",
        cache_ttl=20,
        raw_cache_ttl=30,
    )


@pytest.fixture
def romania_doc() -> dict[str, Any]:
    """National document with candidates A=100 and B=50."""
    return make_romania_doc([make_candidate("A", 100, party="P1"), make_candidate("B", 50, party="P2")])


@pytest.fixture
def diaspora_doc() -> dict[str, Any]:
    """Diaspora document with two regions: A=5, then A=3 and C=2."""
    return make_diaspora_doc(
        {
            "AUSTRIA": [make_candidate("A", 5, party="P1")],
            "BELGIA": [make_candidate("A", 3, party="P1"), make_candidate("C", 2)],
        }
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_fetcher(romania_doc: dict[str, Any], diaspora_doc: dict[str, Any]) -> FakeFetcher:
    return FakeFetcher({ROMANIA_URL: romania_doc, DIASPORA_URL: diaspora_doc})


@pytest.fixture
def votes_service(fake_fetcher: FakeFetcher, clock: FakeClock) -> VotesService:
    """Service wired with the fake fetcher and a controllable clock."""
    return VotesService(
        fake_fetcher,
        romania_url=ROMANIA_URL,
        diaspora_url=DIASPORA_URL,
        raw_cache=TTLCache(30, clock=clock, name="raw-cache"),
        derived_cache=TTLCache(20, clock=clock, name="votes-cache"),
    )
