"""Fetcher library — retrieve raw upstream JSON documents.

Public API:
    - RawFetcher: Protocol implemented by every fetcher
    - BrowserFetcher: Headless-browser fetcher for script-rendered feeds
    - BrowserManager: Shared browser lifecycle with transparent relaunch
    - HttpFetcher: Direct httpx fetcher
    - create_fetcher: Build the configured fetcher backend
    - UpstreamError / FetchError / UpstreamUnavailable: Error types
"""

from typing import Literal

from votes_api.lib.fetcher.base import FetchError, RawFetcher, UpstreamError, UpstreamUnavailable
from votes_api.lib.fetcher.browser import BrowserFetcher, BrowserManager, is_json_response
from votes_api.lib.fetcher.http import HttpFetcher

FetcherBackend = Literal["browser", "http"]


def create_fetcher(backend: FetcherBackend, *, timeout: float = 15.0, headless: bool = True) -> RawFetcher:
    """Build a fetcher for the given backend name.

    Args:
        backend: ``"browser"`` for the headless-browser fetcher, ``"http"`` for httpx.
        timeout: Per-fetch timeout in seconds.
        headless: Run the browser without a window (browser backend only).

    Returns:
        A RawFetcher instance.

    Raises:
        ValueError: If the backend name is unknown.
    """
    if backend == "browser":
        return BrowserFetcher(BrowserManager(headless=headless), timeout=timeout)
    if backend == "http":
        return HttpFetcher(timeout=timeout)
    msg = f"Unknown fetcher backend '{backend}'"
    raise ValueError(msg)


__all__ = [
    "BrowserFetcher",
    "BrowserManager",
    "FetchError",
    "FetcherBackend",
    "HttpFetcher",
    "RawFetcher",
    "UpstreamError",
    "UpstreamUnavailable",
    "create_fetcher",
    "is_json_response",
]
