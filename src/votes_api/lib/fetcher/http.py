"""Plain HTTP fetcher for feeds that can be requested directly.

Uses httpx for async HTTP requests with timeout and error handling. A
drop-in alternative to the headless-browser fetcher when the upstream
serves its JSON without requiring script execution.
"""

from typing import Any

import httpx
from loguru import logger

from votes_api.lib.fetcher.base import FetchError


class HttpFetcher:
    """Fetch JSON documents with a single GET request.

    Args:
        timeout: HTTP request timeout in seconds.
        headers: Extra request headers (e.g. a browser-like User-Agent).
    """

    backend = "http"

    def __init__(self, timeout: float = 15.0, headers: dict[str, str] | None = None) -> None:
        self._timeout = timeout
        self._headers = headers or {}

    async def fetch(self, url: str) -> Any:
        """Fetch and parse the JSON document at ``url``.

        Args:
            url: The JSON feed URL.

        Returns:
            The parsed JSON value.

        Raises:
            FetchError: If the HTTP request fails or the response is not JSON.
        """
        try:
            async with httpx.AsyncClient(timeout=self._timeout, follow_redirects=True, headers=self._headers) as client:
                logger.debug("Fetching {} via HTTP", url)
                response = await client.get(url)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            logger.error("Timeout fetching {}", url)
            raise FetchError(url, f"Timeout after {self._timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("HTTP {} fetching {}", status, url)
            raise FetchError(url, f"HTTP {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            logger.error("HTTP error fetching {}: {}", url, exc)
            raise FetchError(url, f"HTTP error: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            logger.error("Invalid JSON response from {}", url)
            raise FetchError(url, "Invalid JSON response", page_content=response.text[:2000]) from exc

    async def close(self) -> None:
        """Nothing to release; a client is opened per request."""
