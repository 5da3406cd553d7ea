"""Terminal dashboard that polls a running votes API.

Polls ``/votes`` on a fixed interval, ranks each list, and redraws the
screen. A failed poll shows an error screen until the next success.
"""

import asyncio
from typing import Annotated

import httpx
import typer
from loguru import logger

from votes_api.lib.dashboard import DashboardState, render


async def poll_once(client: httpx.AsyncClient, url: str, state: DashboardState) -> None:
    """Poll ``url`` once and update ``state``.

    Args:
        client: HTTP client.
        url: Full ``/votes`` URL.
        state: Dashboard state to update.
    """
    try:
        response = await client.get(url)
        response.raise_for_status()
        state.apply_success(response.json())
    except httpx.HTTPStatusError as exc:
        state.apply_failure(f"HTTP error! status: {exc.response.status_code}")
    except httpx.HTTPError as exc:
        state.apply_failure(f"Request failed: {exc}")
    except ValueError as exc:
        state.apply_failure(f"Unexpected response: {exc}")

    if state.error is not None:
        logger.warning("Dashboard poll failed: {}", state.error)


async def run_dashboard(url: str, interval: int, registered_voters: int, *, once: bool = False) -> DashboardState:
    """Poll and render until interrupted, or a single time when ``once`` is set."""
    state = DashboardState(registered_voters=registered_voters)
    async with httpx.AsyncClient(timeout=30.0) as client:
        while True:
            await poll_once(client, url, state)
            if not once:
                typer.clear()
            typer.echo(render(state))
            if once:
                return state
            await asyncio.sleep(interval)


def dashboard(
    url: Annotated[
        str | None,
        typer.Option("--url", help="Full /votes URL (default: local server from settings)"),
    ] = None,
    interval: Annotated[
        int | None,
        typer.Option("--interval", min=1, help="Seconds between polls (default: DASHBOARD_POLL_INTERVAL)"),
    ] = None,
    once: Annotated[bool, typer.Option("--once", help="Poll and render a single time")] = False,
) -> None:
    """Show a live terminal dashboard of the vote counts."""
    from votes_api.core.config import get_settings

    settings = get_settings()
    target = url or f"http://localhost:{settings.port}{settings.api_prefix}/votes"
    state = asyncio.run(
        run_dashboard(
            target,
            interval or settings.dashboard_poll_interval,
            settings.registered_voters_total,
            once=once,
        )
    )
    if once and state.error is not None:
        raise typer.Exit(code=1)
