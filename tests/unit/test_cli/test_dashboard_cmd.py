"""Unit tests for the terminal dashboard command."""

from unittest.mock import patch

import httpx
import pytest
from typer.testing import CliRunner

from votes_api.cli.app import app
from votes_api.cli.dashboard_cmd import poll_once, run_dashboard
from votes_api.lib.dashboard import DashboardState

runner = CliRunner()
_RealAsyncClient = httpx.AsyncClient

VOTES_PAYLOAD = {
    "romania": [{"id": "A", "candidate": "Ana", "party": "P1", "votes": 100}],
    "diaspora": [],
    "combined": [{"id": "A", "candidate": "Ana", "party": "P1", "votes": 100}],
}


def _client(handler) -> httpx.AsyncClient:
    return _RealAsyncClient(transport=httpx.MockTransport(handler))


class TestPollOnce:
    """Tests for poll_once()."""

    async def test_success_updates_snapshot(self):
        state = DashboardState(registered_voters=1000)
        async with _client(lambda request: httpx.Response(200, json=VOTES_PAYLOAD)) as client:
            await poll_once(client, "http://api.test/api/votes", state)

        assert state.error is None
        assert state.snapshot.remaining == 900

    async def test_http_status_error(self):
        state = DashboardState(registered_voters=1000)
        async with _client(lambda request: httpx.Response(502, json={"error": "boom"})) as client:
            await poll_once(client, "http://api.test/api/votes", state)

        assert state.error == "HTTP error! status: 502"
        assert state.snapshot is None

    async def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        state = DashboardState(registered_voters=1000)
        async with _client(handler) as client:
            await poll_once(client, "http://api.test/api/votes", state)

        assert state.error == "Request failed: connection refused"

    async def test_unexpected_payload(self):
        state = DashboardState(registered_voters=1000)
        async with _client(lambda request: httpx.Response(200, json={"nope": 1})) as client:
            await poll_once(client, "http://api.test/api/votes", state)

        assert state.error.startswith("Unexpected response:")

    async def test_failure_after_success_drops_snapshot(self):
        responses = iter([httpx.Response(200, json=VOTES_PAYLOAD), httpx.Response(500)])
        state = DashboardState(registered_voters=1000)
        async with _client(lambda request: next(responses)) as client:
            await poll_once(client, "http://api.test/api/votes", state)
            await poll_once(client, "http://api.test/api/votes", state)

        assert state.snapshot is None
        assert state.error == "HTTP error! status: 500"


@pytest.fixture
def mock_api():
    """Route the dashboard's HTTP client to an in-memory handler."""
    calls: list[str] = []
    outcome = {"response": httpx.Response(200, json=VOTES_PAYLOAD)}

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return outcome["response"]

    with patch("votes_api.cli.dashboard_cmd.httpx.AsyncClient", side_effect=lambda **kwargs: _client(handler)):
        yield calls, outcome


class TestRunDashboard:
    """Tests for run_dashboard() and the dashboard command."""

    async def test_once_renders_single_screen(self, mock_api, capsys):
        calls, _ = mock_api

        state = await run_dashboard("http://api.test/api/votes", 20, 1000, once=True)

        assert calls == ["http://api.test/api/votes"]
        assert state.polls == 1
        assert "Voturi rămase: 900" in capsys.readouterr().out

    def test_command_uses_local_default_url(self, mock_api, settings):
        calls, _ = mock_api
        with (
            patch("votes_api.cli.app.get_settings", return_value=settings),
            patch("votes_api.cli.app.setup_logging"),
            patch("votes_api.core.config.get_settings", return_value=settings),
        ):
            result = runner.invoke(app, ["dashboard", "--once"])

        assert result.exit_code == 0, result.output
        assert calls == ["http://localhost:3001/api/votes"]
        assert "Ana" in result.output

    def test_command_exits_1_on_failed_poll(self, mock_api, settings):
        _, outcome = mock_api
        outcome["response"] = httpx.Response(502)
        with (
            patch("votes_api.cli.app.get_settings", return_value=settings),
            patch("votes_api.cli.app.setup_logging"),
            patch("votes_api.core.config.get_settings", return_value=settings),
        ):
            result = runner.invoke(app, ["dashboard", "--once", "--url", "http://api.test/api/votes"])

        assert result.exit_code == 1
        assert "Error: HTTP error! status: 502" in result.output
