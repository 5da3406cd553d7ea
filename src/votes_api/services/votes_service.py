"""Votes service — fetch, aggregate, and cache election results.

Caching applies at two layers: raw feed documents keyed by URL, and
derived candidate lists keyed by name (``romania``, ``diaspora``,
``combined``). Each layer short-circuits the work beneath it. Nothing is
cached on an error path.
"""

import asyncio
from typing import Any

from loguru import logger

from votes_api.core.config import Settings
from votes_api.lib.aggregator import ScopeResult, combine, extract_diaspora, extract_romania
from votes_api.lib.cache import TTLCache
from votes_api.lib.fetcher import RawFetcher, create_fetcher
from votes_api.schemas.votes import VotesResponse, to_candidate_list

ROMANIA_KEY = "romania"
DIASPORA_KEY = "diaspora"
COMBINED_KEY = "combined"


class VotesService:
    """Orchestrates the raw fetcher, the aggregator, and both caches.

    Args:
        fetcher: Source of raw feed documents.
        romania_url: National feed URL.
        diaspora_url: Diaspora feed URL.
        raw_cache: Cache for raw documents, keyed by URL.
        derived_cache: Cache for candidate lists, keyed by list name.
        coalesce: Share one in-flight fetch between concurrent misses for a URL.
    """

    def __init__(
        self,
        fetcher: RawFetcher,
        *,
        romania_url: str,
        diaspora_url: str,
        raw_cache: TTLCache[Any],
        derived_cache: TTLCache[ScopeResult],
        coalesce: bool = True,
    ) -> None:
        self._fetcher = fetcher
        self._romania_url = romania_url
        self._diaspora_url = diaspora_url
        self._raw_cache = raw_cache
        self._derived_cache = derived_cache
        self._coalesce = coalesce
        self._inflight: dict[str, asyncio.Task[Any]] = {}

    @classmethod
    def from_settings(cls, settings: Settings, fetcher: RawFetcher | None = None) -> "VotesService":
        """Build a service wired from application settings.

        Args:
            settings: Application settings.
            fetcher: Optional fetcher override; defaults to the configured backend.
        """
        if fetcher is None:
            fetcher = create_fetcher(
                settings.fetcher_backend,
                timeout=settings.fetch_timeout,
                headless=settings.browser_headless,
            )
        return cls(
            fetcher,
            romania_url=settings.romania_api_url,
            diaspora_url=settings.diaspora_api_url,
            raw_cache=TTLCache(settings.raw_cache_ttl, name="raw-cache"),
            derived_cache=TTLCache(settings.cache_ttl, name="votes-cache"),
            coalesce=settings.fetch_coalescing,
        )

    @property
    def fetcher(self) -> RawFetcher:
        return self._fetcher

    async def fetch_raw(self, url: str) -> Any:
        """Return the raw document for ``url``, from cache when fresh.

        Raises:
            FetchError: If the fetch fails.
            UpstreamUnavailable: If the fetch resource is unusable.
        """
        cached = self._raw_cache.get(url)
        if cached is not None:
            return cached

        if not self._coalesce:
            return await self._fetch_and_store(url)

        task = self._inflight.get(url)
        if task is None:
            task = asyncio.create_task(self._fetch_and_store(url))
            self._inflight[url] = task
            task.add_done_callback(lambda done: self._forget(url, done))
        else:
            logger.debug("Joining in-flight fetch for {}", url)
        return await asyncio.shield(task)

    def _forget(self, url: str, task: "asyncio.Task[Any]") -> None:
        if self._inflight.get(url) is task:
            del self._inflight[url]
        if not task.cancelled():
            # Every waiter may have been cancelled; mark a failure as retrieved.
            task.exception()

    async def _fetch_and_store(self, url: str) -> Any:
        logger.debug("Raw cache miss for {}", url)
        data = await self._fetcher.fetch(url)
        self._raw_cache.set(url, data)
        return data

    async def get_raw_romania(self) -> Any:
        """Raw national feed document (legacy passthrough)."""
        return await self.fetch_raw(self._romania_url)

    async def get_raw_diaspora(self) -> Any:
        """Raw diaspora feed document (legacy passthrough)."""
        return await self.fetch_raw(self._diaspora_url)

    async def get_romania(self) -> ScopeResult:
        """National candidate list.

        Raises:
            UpstreamError: If fetching or extraction fails.
        """
        cached = self._derived_cache.get(ROMANIA_KEY)
        if cached is not None:
            return cached

        result = extract_romania(await self.fetch_raw(self._romania_url))
        self._derived_cache.set(ROMANIA_KEY, result)
        logger.debug("Computed romania list ({} candidates)", len(result))
        return result

    async def get_diaspora(self) -> ScopeResult:
        """Diaspora candidate list, folded across regions.

        Raises:
            UpstreamError: If fetching or extraction fails.
        """
        cached = self._derived_cache.get(DIASPORA_KEY)
        if cached is not None:
            return cached

        result = extract_diaspora(await self.fetch_raw(self._diaspora_url))
        self._derived_cache.set(DIASPORA_KEY, result)
        logger.debug("Computed diaspora list ({} candidates)", len(result))
        return result

    def get_combined(self, romania: ScopeResult, diaspora: ScopeResult) -> ScopeResult:
        """Combined candidate list.

        A cached combined list is returned while fresh, even if ``romania``
        and ``diaspora`` differ from the inputs it was computed from. The
        combined view stays stable for one derived-cache TTL window.
        """
        cached = self._derived_cache.get(COMBINED_KEY)
        if cached is not None:
            return cached

        result = combine(romania, diaspora)
        self._derived_cache.set(COMBINED_KEY, result)
        return result

    async def get_votes(self) -> VotesResponse:
        """Assemble the ``{romania, diaspora, combined}`` response.

        Any failure propagates; no partial results are returned.

        Raises:
            UpstreamError: If either electorate cannot be fetched or aggregated.
        """
        romania = await self.get_romania()
        diaspora = await self.get_diaspora()
        combined = self.get_combined(romania, diaspora)
        return VotesResponse(
            romania=to_candidate_list(romania),
            diaspora=to_candidate_list(diaspora),
            combined=to_candidate_list(combined),
        )

    def invalidate(self) -> None:
        """Drop every cached document and list."""
        self._raw_cache.invalidate()
        self._derived_cache.invalidate()

    async def close(self) -> None:
        """Release the fetcher's resources."""
        await self._fetcher.close()
