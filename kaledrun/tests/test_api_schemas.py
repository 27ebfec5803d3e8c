"""
Tests for API request/response schemas.
"""

import pytest
from pydantic import ValidationError

from kaledrun.api.schemas import (
    ChooseOptionRequest,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    OptionView,
    SessionStatus,
    StatsView,
)
from kaledrun.engine_core.state import Stats


class TestRequestSchemas:
    """Tests for request body validation."""

    def test_choose_option_minimal(self):
        """Only the option index is required."""
        request = ChooseOptionRequest(option_index=1)
        assert request.combat_commit is None
        assert request.authority_commit is None

    def test_negative_option_index_rejected(self):
        """Option indexes cannot be negative."""
        with pytest.raises(ValidationError):
            ChooseOptionRequest(option_index=-1)

    def test_missing_option_index_rejected(self):
        with pytest.raises(ValidationError):
            ChooseOptionRequest()

    def test_seed_optional(self):
        """Sessions may be created without a seed."""
        assert CreateSessionRequest().seed is None
        assert CreateSessionRequest(seed=7).seed == 7

    def test_negative_seed_rejected(self):
        with pytest.raises(ValidationError):
            CreateSessionRequest(seed=-1)


class TestResponseSchemas:
    """Tests for response models."""

    def test_stats_from_engine(self):
        """StatsView reads engine stats by attribute."""
        view = StatsView.model_validate(Stats())
        assert view.gold == 50
        assert view.land_forces == 5
        assert view.authority == 20

    def test_error_response_serializes_code(self):
        """Error codes serialize to their string value."""
        payload = ErrorResponse(
            error="Session not found",
            error_code=ErrorCode.SESSION_NOT_FOUND,
        ).model_dump(mode="json")

        assert payload["error_code"] == "SESSION_NOT_FOUND"
        assert payload["details"] is None
        assert payload["api_version"] == "v1"

    def test_option_view_ranges_optional(self):
        option = OptionView(index=0, text="Rest")
        assert option.combat_commit is None
        assert option.authority_commit is None

    def test_game_state_defaults(self):
        """Counters and logs default to empty."""
        response = GameStateResponse(
            session_id="abc",
            status=SessionStatus.ACTIVE,
            seed=1,
            tick=0,
            stats=StatsView.model_validate(Stats()),
        )
        assert response.current_request is None
        assert response.scheduled_events == 0
        assert response.recent_log == []
        assert response.last_changes == []
