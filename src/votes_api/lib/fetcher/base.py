"""Raw fetcher interface and upstream error types.

A raw fetcher turns a URL into a parsed JSON document. Callers only
depend on :class:`RawFetcher`, never on how the document is obtained
(headless browser, plain HTTP, or a fake in tests).
"""

from typing import Any, Protocol, runtime_checkable


class UpstreamError(Exception):
    """Base class for failures talking to or interpreting the upstream feed."""


class FetchError(UpstreamError):
    """Raised when a raw document cannot be retrieved or parsed as JSON.

    Args:
        url: The URL that was being fetched.
        cause: Human-readable description of the underlying failure.
        page_content: Best-effort snapshot of the rendered page, if any.
        status_code: HTTP status of the upstream response, if known.
    """

    def __init__(
        self,
        url: str,
        cause: str,
        *,
        page_content: str | None = None,
        status_code: int | None = None,
    ):
        message = f"Failed to fetch JSON. URL: {url}. Error: {cause}"
        if page_content:
            message = f"{message}. Page content: {page_content}"
        super().__init__(message)
        self.url = url
        self.cause = cause
        self.page_content = page_content
        self.status_code = status_code


class UpstreamUnavailable(UpstreamError):
    """Raised when the fetch resource stays unusable after a recreate attempt."""


@runtime_checkable
class RawFetcher(Protocol):
    """Anything that can fetch a URL and return its parsed JSON body."""

    backend: str

    async def fetch(self, url: str) -> Any:
        """Return the parsed JSON document behind ``url``.

        Raises:
            FetchError: If the document cannot be retrieved or parsed.
            UpstreamUnavailable: If the underlying resource is unusable.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the fetcher."""
        ...
