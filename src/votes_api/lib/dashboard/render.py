"""Plain-text rendering of the dashboard state."""

from votes_api.lib.dashboard.ranking import RankedCandidate
from votes_api.lib.dashboard.state import DashboardState

TITLE = "Candidați Prezență la vot"
_NAME_WIDTH = 40


def _format_row(c: RankedCandidate) -> str:
    line = f"  {c.candidate:<{_NAME_WIDTH}} {c.votes:>12,} ({c.share:.2f}%)"
    if c.gap:
        line += f" (+{c.gap:,})"
    return line


def _section(title: str, candidates: list[RankedCandidate], empty_text: str | None = None) -> list[str]:
    lines = [title, "-" * len(title)]
    if not candidates and empty_text:
        lines.append(f"  {empty_text}")
    lines.extend(_format_row(c) for c in candidates)
    lines.append("")
    return lines


def render(state: DashboardState) -> str:
    """Render the full dashboard screen for ``state``."""
    if state.error is not None:
        return f"Error: {state.error}"
    if state.snapshot is None:
        return "Loading…"

    snap = state.snapshot
    lines = [TITLE, ""]
    lines += _section("România", snap.romania)
    lines += _section("Diaspora", snap.diaspora, empty_text="Nu există date pentru Diaspora.")
    lines += _section("Combinate", snap.combined)
    lines.append(f"Total voturi: {snap.total_combined:,}")
    lines.append(f"Voturi rămase: {snap.remaining:,}")
    return "\n".join(lines)
