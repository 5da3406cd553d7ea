"""Upstream results document parser and Pydantic validation models.

The feed is a JSON document with a nested ``scopes`` tree. The national
presidential result lives at ``scopes.CNTRY.PRSD.RO`` and the diaspora
document splits the same race into per-region entries under
``scopes.UAT.PRSD.<region>``. Each leaf carries a ``candidates`` array.

Navigation fails fast: a missing or mistyped node raises
:class:`AggregationError` naming the dotted path, rather than yielding an
empty list.
"""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from votes_api.lib.fetcher.base import UpstreamError

NATIONAL_PATH = ("scopes", "CNTRY", "PRSD", "RO", "candidates")
REGIONS_PATH = ("scopes", "UAT", "PRSD")


class AggregationError(UpstreamError):
    """Raised when the upstream document does not have the expected shape.

    Args:
        path: Dotted path of the node that was missing or malformed.
        message: What was wrong with it.
    """

    def __init__(self, path: str, message: str):
        super().__init__(f"Unexpected upstream document at '{path}': {message}")
        self.path = path


class UpstreamCandidate(BaseModel):
    """A candidate entry as it appears in the feed."""

    model_config = ConfigDict(extra="ignore")

    id: str
    candidate: str
    party: str | None = None
    votes: int = Field(default=0, ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> Any:
        return str(v) if isinstance(v, int) else v

    @field_validator("party", mode="before")
    @classmethod
    def _coerce_party(cls, v: Any) -> Any:
        return v or None

    @field_validator("votes", mode="before")
    @classmethod
    def _coerce_votes(cls, v: Any) -> Any:
        return v if v is not None else 0


_candidate_list = TypeAdapter(list[UpstreamCandidate])


def _join(path: Sequence[str]) -> str:
    return ".".join(path)


def descend(raw: Any, path: Sequence[str]) -> Any:
    """Walk ``path`` through nested objects.

    Args:
        raw: Parsed JSON document.
        path: Keys to follow, outermost first.

    Returns:
        The node at ``path``.

    Raises:
        AggregationError: If any step is missing or not an object.
    """
    node = raw
    for depth, key in enumerate(path):
        if not isinstance(node, dict):
            raise AggregationError(_join(path[:depth]) or "<root>", f"expected an object, got {type(node).__name__}")
        if key not in node:
            raise AggregationError(_join(path[: depth + 1]), "missing")
        node = node[key]
    return node


def parse_candidates(raw: Any, path: Sequence[str]) -> list[UpstreamCandidate]:
    """Validate a ``candidates`` array.

    Args:
        raw: The array node.
        path: Its dotted location, for error messages.

    Raises:
        AggregationError: If the array or any entry is malformed.
    """
    try:
        return _candidate_list.validate_python(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = _join([*path, *(str(p) for p in first["loc"])])
        raise AggregationError(loc, first["msg"]) from exc


def parse_national_candidates(raw: Any) -> list[UpstreamCandidate]:
    """Return the national presidential candidate list from a feed document."""
    return parse_candidates(descend(raw, NATIONAL_PATH), NATIONAL_PATH)


def parse_region_candidates(raw: Any) -> list[tuple[str, list[UpstreamCandidate]]]:
    """Return ``(region, candidates)`` pairs from a diaspora feed document, in document order."""
    regions = descend(raw, REGIONS_PATH)
    if not isinstance(regions, dict):
        raise AggregationError(_join(REGIONS_PATH), f"expected an object, got {type(regions).__name__}")

    parsed: list[tuple[str, list[UpstreamCandidate]]] = []
    for region in regions:
        path = (*REGIONS_PATH, region, "candidates")
        parsed.append((region, parse_candidates(descend(raw, path), path)))
    return parsed
