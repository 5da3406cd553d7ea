"""Unit tests for the dashboard poll state machine and text rendering."""

import pydantic
import pytest

from votes_api.lib.dashboard import DashboardState, render
from votes_api.lib.dashboard.render import TITLE


def _payload(diaspora: list[dict] | None = None) -> dict:
    a = {"id": "A", "candidate": "Ana", "party": "P1", "votes": 100}
    b = {"id": "B", "candidate": "Bogdan", "party": "P2", "votes": 50}
    return {
        "romania": [b, a],
        "diaspora": diaspora if diaspora is not None else [{**a, "votes": 8}],
        "combined": [{**a, "votes": 108}, b],
    }


class TestDashboardState:
    """Tests for DashboardState transitions."""

    def test_starts_loading(self):
        state = DashboardState(registered_voters=1000)

        assert state.loading is True
        assert state.polls == 0

    def test_success_builds_ranked_snapshot(self):
        state = DashboardState(registered_voters=1000)

        state.apply_success(_payload())

        assert state.loading is False
        assert state.error is None
        assert [r.id for r in state.snapshot.romania] == ["A", "B"]
        assert state.snapshot.total_combined == 158
        assert state.snapshot.remaining == 842
        assert state.polls == 1

    def test_failure_discards_previous_snapshot(self):
        state = DashboardState(registered_voters=1000)
        state.apply_success(_payload())

        state.apply_failure("HTTP error! status: 502")

        assert state.snapshot is None
        assert state.error == "HTTP error! status: 502"
        assert state.loading is False
        assert state.polls == 2

    def test_success_clears_error(self):
        state = DashboardState(registered_voters=1000)
        state.apply_failure("boom")

        state.apply_success(_payload())

        assert state.error is None
        assert state.snapshot is not None

    def test_malformed_payload_rejected(self):
        state = DashboardState(registered_voters=1000)

        with pytest.raises(pydantic.ValidationError):
            state.apply_success({"romania": []})


class TestRender:
    """Tests for render()."""

    def test_loading(self):
        assert render(DashboardState(registered_voters=1)) == "Loading…"

    def test_error(self):
        state = DashboardState(registered_voters=1)
        state.apply_failure("Request failed: connection refused")

        assert render(state) == "Error: Request failed: connection refused"

    def test_sections_and_totals(self):
        state = DashboardState(registered_voters=1000)
        state.apply_success(_payload())

        screen = render(state)

        assert screen.startswith(TITLE)
        assert screen.index("România") < screen.index("Diaspora") < screen.index("Combinate")
        assert "Total voturi: 158" in screen
        assert "Voturi rămase: 842" in screen

    def test_row_format_with_gap(self):
        state = DashboardState(registered_voters=1000)
        state.apply_success(_payload())

        lines = render(state).splitlines()
        romania_top = next(line for line in lines if "Ana" in line)

        assert romania_top == f"  {'Ana':<40} {100:>12,} (66.67%) (+50)"

    def test_last_row_has_no_gap_suffix(self):
        state = DashboardState(registered_voters=1000)
        state.apply_success(_payload())

        bogdan_rows = [line for line in render(state).splitlines() if "Bogdan" in line]

        assert all("(+" not in line for line in bogdan_rows)

    def test_empty_diaspora_message(self):
        state = DashboardState(registered_voters=1000)
        state.apply_success(_payload(diaspora=[]))

        assert "Nu există date pentru Diaspora." in render(state)

    def test_large_numbers_use_thousands_separator(self):
        state = DashboardState(registered_voters=11_543_811)
        state.apply_success(
            {
                "romania": [{"id": "A", "candidate": "Ana", "party": None, "votes": 1_234_567}],
                "diaspora": [],
                "combined": [{"id": "A", "candidate": "Ana", "party": None, "votes": 1_234_567}],
            }
        )

        screen = render(state)

        assert "1,234,567" in screen
        assert "Voturi rămase: 10,309,244" in screen
