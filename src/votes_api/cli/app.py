"""Typer CLI root application with serve and one-shot fetch commands."""

import asyncio
import json
from enum import StrEnum
from typing import Annotated

import typer

from votes_api.core.config import get_settings
from votes_api.core.logging import setup_logging

app = typer.Typer(name="votes-api", help="Live election vote counts proxy")


class Electorate(StrEnum):
    """Which raw feed to dump."""

    ROMANIA = "romania"
    DIASPORA = "diaspora"


@app.callback()
def _main_callback() -> None:
    """Initialize logging for all CLI commands."""
    settings = get_settings()
    setup_logging(settings.log_level, log_dir=settings.log_dir, json_logs=settings.log_json)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload for development"),
    host: str | None = typer.Option(None, "--host", help="Bind host (default: HOST setting)"),
    port: int | None = typer.Option(None, "--port", help="Bind port (default: PORT setting)"),
) -> None:
    """Start the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "votes_api.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@app.command()
def votes() -> None:
    """Fetch both feeds once and print the aggregated lists as JSON."""
    asyncio.run(_votes_impl())


async def _votes_impl() -> None:
    from votes_api.lib.fetcher import UpstreamError
    from votes_api.services.votes_service import VotesService

    service = VotesService.from_settings(get_settings())
    try:
        result = await service.get_votes()
    except UpstreamError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        await service.close()
    typer.echo(result.model_dump_json(indent=2))


@app.command()
def raw(
    electorate: Annotated[Electorate, typer.Argument(help="Feed to dump")] = Electorate.ROMANIA,
) -> None:
    """Fetch one raw feed document and print it unmodified."""
    asyncio.run(_raw_impl(electorate))


async def _raw_impl(electorate: Electorate) -> None:
    from votes_api.lib.fetcher import UpstreamError
    from votes_api.services.votes_service import VotesService

    service = VotesService.from_settings(get_settings())
    try:
        if electorate is Electorate.ROMANIA:
            document = await service.get_raw_romania()
        else:
            document = await service.get_raw_diaspora()
    except UpstreamError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    finally:
        await service.close()
    typer.echo(json.dumps(document, ensure_ascii=False, indent=2))


def _register_subcommands() -> None:
    """Register CLI subcommands defined in other modules."""
    from votes_api.cli.dashboard_cmd import dashboard

    app.command("dashboard")(dashboard)


_register_subcommands()
