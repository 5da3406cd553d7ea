"""Unit tests for upstream document navigation and candidate validation."""

import pytest

from votes_api.lib.aggregator.parser import (
    AggregationError,
    UpstreamCandidate,
    descend,
    parse_candidates,
    parse_region_candidates,
)


class TestUpstreamCandidate:
    """Tests for UpstreamCandidate coercion."""

    def test_numeric_id_coerced_to_string(self) -> None:
        c = UpstreamCandidate.model_validate({"id": 7, "candidate": "X", "votes": 1})
        assert c.id == "7"

    def test_null_votes_coerced_to_zero(self) -> None:
        c = UpstreamCandidate.model_validate({"id": "1", "candidate": "X", "votes": None})
        assert c.votes == 0

    def test_empty_party_becomes_none(self) -> None:
        c = UpstreamCandidate.model_validate({"id": "1", "candidate": "X", "party": "", "votes": 1})
        assert c.party is None

    def test_extra_fields_ignored(self) -> None:
        c = UpstreamCandidate.model_validate({"id": "1", "candidate": "X", "votes": 1, "color": "#fff"})
        assert not hasattr(c, "color")


class TestDescend:
    """Tests for descend()."""

    def test_returns_nested_node(self) -> None:
        assert descend({"a": {"b": {"c": 1}}}, ("a", "b", "c")) == 1

    def test_missing_key_reports_path_up_to_key(self) -> None:
        with pytest.raises(AggregationError) as exc_info:
            descend({"a": {"b": {}}}, ("a", "b", "c", "d"))
        assert exc_info.value.path == "a.b.c"

    def test_non_object_reports_parent_path(self) -> None:
        with pytest.raises(AggregationError, match="expected an object, got list") as exc_info:
            descend({"a": []}, ("a", "b"))
        assert exc_info.value.path == "a"


class TestParseCandidates:
    """Tests for parse_candidates()."""

    def test_not_a_list(self) -> None:
        with pytest.raises(AggregationError) as exc_info:
            parse_candidates({"oops": 1}, ("x", "candidates"))
        assert exc_info.value.path == "x.candidates"

    def test_negative_votes_rejected_with_entry_path(self) -> None:
        raw = [{"id": "1", "candidate": "X", "votes": 3}, {"id": "2", "candidate": "Y", "votes": -1}]

        with pytest.raises(AggregationError) as exc_info:
            parse_candidates(raw, ("x", "candidates"))

        assert exc_info.value.path == "x.candidates.1.votes"

    def test_missing_name_rejected(self) -> None:
        with pytest.raises(AggregationError, match="candidate"):
            parse_candidates([{"id": "1", "votes": 3}], ("x",))


class TestParseRegionCandidates:
    """Tests for parse_region_candidates()."""

    def test_regions_in_document_order(self) -> None:
        doc = {
            "scopes": {
                "UAT": {
                    "PRSD": {
                        "ZZ": {"candidates": []},
                        "AA": {"candidates": [{"id": "1", "candidate": "X", "votes": 1}]},
                    }
                }
            }
        }

        regions = parse_region_candidates(doc)

        assert [name for name, _ in regions] == ["ZZ", "AA"]
        assert regions[1][1][0].votes == 1

    def test_regions_not_an_object(self) -> None:
        with pytest.raises(AggregationError, match=r"scopes\.UAT\.PRSD"):
            parse_region_candidates({"scopes": {"UAT": {"PRSD": []}}})
