"""Tests for FastAPI dependency injection module."""

from unittest.mock import MagicMock

import pytest

from votes_api.core.dependencies import get_votes_service


class TestGetVotesService:
    """Tests for get_votes_service."""

    def test_returns_service_from_app_state(self, votes_service) -> None:
        request = MagicMock()
        request.app.state.votes_service = votes_service

        assert get_votes_service(request) is votes_service

    def test_missing_service_raises(self) -> None:
        request = MagicMock()
        request.app.state = object()

        with pytest.raises(RuntimeError, match="not initialized"):
            get_votes_service(request)
