"""Headless-browser fetcher for JSON feeds that only load after script execution.

The upstream results site does not expose its data endpoint directly: the
page's own scripts request a ``*.json`` document in the background. The
fetcher navigates to the page in an isolated browser context and captures
the first successful JSON response.

One Chromium process is shared across calls (managed by
:class:`BrowserManager`); each fetch only opens and closes a lightweight
context.
"""

import asyncio
import contextlib
import json
from collections.abc import Callable
from typing import Any
from urllib.parse import urlparse

from loguru import logger
from playwright.async_api import Browser, BrowserContext, Page, Playwright, Response
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from votes_api.lib.fetcher.base import FetchError, UpstreamUnavailable

DEFAULT_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]
_PAGE_CONTENT_LIMIT = 2000


def is_json_response(response: Response) -> bool:
    """Return True for a 2xx response whose URL path ends in ``.json``."""
    path = urlparse(response.url).path
    return path.endswith(".json") and 200 <= response.status < 300


class BrowserManager:
    """Owns the shared headless browser and relaunches it when it goes away.

    Launching is lazy: the first caller of :meth:`get_browser` starts the
    Playwright driver and Chromium. A ``disconnected`` listener drops the
    reference so the next call launches a fresh process.

    Args:
        headless: Run Chromium without a window.
        launch_args: Extra Chromium command-line flags.
        driver_factory: Callable returning a Playwright context manager.
            Injectable for tests.
    """

    def __init__(
        self,
        *,
        headless: bool = True,
        launch_args: list[str] | None = None,
        driver_factory: Callable[[], Any] = async_playwright,
    ) -> None:
        self._headless = headless
        self._launch_args = launch_args if launch_args is not None else list(DEFAULT_LAUNCH_ARGS)
        self._driver_factory = driver_factory
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        """True when a connected browser is currently held."""
        return self._browser is not None and self._browser.is_connected()

    async def get_browser(self) -> Browser:
        """Return the shared browser, launching it if needed.

        Raises:
            UpstreamUnavailable: If the browser cannot be launched.
        """
        async with self._lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser
            if self._browser is not None:
                logger.warning("Headless browser is no longer connected; relaunching")
                self._browser = None

            try:
                if self._playwright is None:
                    self._playwright = await self._driver_factory().start()
                browser = await self._playwright.chromium.launch(
                    headless=self._headless,
                    args=self._launch_args,
                )
            except PlaywrightError as exc:
                msg = f"Failed to launch headless browser: {exc}"
                logger.error(msg)
                # The driver itself may be dead; start a new one on the next call.
                driver, self._playwright = self._playwright, None
                if driver is not None:
                    with contextlib.suppress(PlaywrightError):
                        await driver.stop()
                raise UpstreamUnavailable(msg) from exc

            browser.on("disconnected", self._on_disconnected)
            self._browser = browser
            logger.info("Launched headless browser (headless={})", self._headless)
            return browser

    def _on_disconnected(self, browser: Browser) -> None:
        if self._browser is browser:
            logger.warning("Headless browser disconnected; it will be relaunched on next use")
            self._browser = None

    async def discard(self, browser: Browser) -> None:
        """Forget ``browser`` so the next call launches a new one."""
        async with self._lock:
            if self._browser is browser:
                self._browser = None
        with contextlib.suppress(PlaywrightError):
            await browser.close()

    async def new_context(self) -> BrowserContext:
        """Open an isolated browser context, relaunching the browser once if it is dead.

        Raises:
            UpstreamUnavailable: If no context can be opened even after a relaunch.
        """
        browser = await self.get_browser()
        try:
            return await browser.new_context()
        except PlaywrightError as exc:
            logger.warning("Headless browser unusable ({}); relaunching", exc)
            await self.discard(browser)

        browser = await self.get_browser()
        try:
            return await browser.new_context()
        except PlaywrightError as exc:
            await self.discard(browser)
            msg = f"Headless browser unusable after relaunch: {exc}"
            logger.error(msg)
            raise UpstreamUnavailable(msg) from exc

    async def close(self) -> None:
        """Close the browser and stop the Playwright driver (best-effort)."""
        async with self._lock:
            browser, self._browser = self._browser, None
            driver, self._playwright = self._playwright, None

        if browser is not None:
            logger.info("Closing headless browser")
            try:
                await browser.close()
            except PlaywrightError as exc:
                logger.warning("Error closing headless browser: {}", exc)
        if driver is not None:
            try:
                await driver.stop()
            except PlaywrightError as exc:
                logger.warning("Error stopping Playwright driver: {}", exc)


async def _snapshot_page(page: Page | None) -> str:
    """Return the rendered page HTML for diagnostics, truncated."""
    if page is None:
        return "<page was not opened>"
    try:
        content = await page.content()
    except PlaywrightError as exc:
        return f"<unable to read page content: {exc}>"
    return content[:_PAGE_CONTENT_LIMIT]


class BrowserFetcher:
    """Fetch JSON documents by rendering their host page in a headless browser.

    Args:
        manager: Shared browser manager.
        timeout: Seconds allowed for navigation and for the JSON response.
    """

    backend = "browser"

    def __init__(self, manager: BrowserManager, timeout: float = 15.0) -> None:
        self._manager = manager
        self._timeout = timeout

    async def fetch(self, url: str) -> Any:
        """Navigate to ``url`` and return the first JSON document it loads.

        Args:
            url: Page URL whose scripts request the JSON feed.

        Returns:
            The parsed JSON value.

        Raises:
            FetchError: On timeout, navigation failure, or an invalid JSON body.
            UpstreamUnavailable: If the browser cannot be (re)launched.
        """
        timeout_ms = self._timeout * 1000
        context = await self._manager.new_context()
        page: Page | None = None
        try:
            page = await context.new_page()
            logger.debug("Fetching {} via headless browser", url)
            async with page.expect_response(is_json_response, timeout=timeout_ms) as response_info:
                try:
                    await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
                except PlaywrightTimeoutError:
                    # The background JSON request may still complete.
                    logger.debug("Navigation to {} timed out; waiting for JSON response", url)
            response = await response_info.value
            body = await response.text()
            return json.loads(body)
        except (PlaywrightError, ValueError) as exc:
            page_content = await _snapshot_page(page)
            logger.error("Failed to fetch JSON from {}: {}", url, exc)
            raise FetchError(url, str(exc), page_content=page_content) from exc
        finally:
            with contextlib.suppress(PlaywrightError):
                await context.close()

    async def close(self) -> None:
        """Close the shared browser."""
        await self._manager.close()
