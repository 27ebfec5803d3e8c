"""
Tests for session management.

Tests:
- Session creation and seeding
- Applying choices through a session
- Game over and ending sessions
- Stale session cleanup
"""

import threading
import time

import pytest

from ..engine_core.action import Action, ErrorCode
from ..session import SessionManager, SessionNotFoundError, SessionState
from .conftest import presenting


class TestSessionManager:
    """Tests for SessionManager."""

    @pytest.fixture
    def manager(self, village_catalog):
        """Session manager over the synthetic catalog."""
        return SessionManager(catalog=village_catalog)

    def test_create_session(self, manager):
        """A new session holds a fresh game with a request picked."""
        session = manager.create_session(seed=42)

        assert session.session_id
        assert session.seed == 42
        assert session.is_active()
        assert session.game_state.tick == 0
        assert session.game_state.current_request_id is not None

    def test_same_seed_same_start(self, manager):
        """Sessions with the same seed start identically."""
        first = manager.create_session(seed=3)
        second = manager.create_session(seed=3)
        assert first.session_id != second.session_id
        assert first.game_state == second.game_state

    def test_unseeded_session_reports_seed(self, manager):
        """An unseeded session still records the seed it used."""
        assert isinstance(manager.create_session().seed, int)

    def test_choose_option(self, manager):
        """A successful choice replaces the session state."""
        session = manager.create_session(seed=1)
        session.game_state = presenting("PAY_TEN")

        result = manager.choose_option(session.session_id, Action.choose_option(0))

        assert result.success
        assert session.game_state.tick == 1
        assert session.actions_applied == 1

    def test_rejected_choice_keeps_state(self, manager):
        """A rejected choice leaves the session untouched."""
        session = manager.create_session(seed=1)
        before = session.game_state

        result = manager.choose_option(session.session_id, Action.choose_option(9))

        assert result.error_code == ErrorCode.INVALID_ACTION
        assert session.game_state is before
        assert session.actions_applied == 0

    def test_game_over(self, manager):
        """Bankruptcy marks the session game over."""
        session = manager.create_session(seed=1)
        session.game_state = presenting("RUIN")

        manager.choose_option(session.session_id, Action.choose_option(0))

        assert session.state == SessionState.GAME_OVER
        assert session.session_id not in manager.list_active_sessions()
        assert manager.get_session(session.session_id) is session

    def test_unknown_session(self, manager):
        """Unknown sessions raise SessionNotFoundError."""
        with pytest.raises(SessionNotFoundError):
            manager.choose_option("missing", Action.choose_option(0))
        assert manager.get_session("missing") is None

    def test_end_session(self, manager):
        """Ending a session removes it."""
        session = manager.create_session(seed=1)

        assert manager.end_session(session.session_id)
        assert session.state == SessionState.ABANDONED
        assert manager.get_session(session.session_id) is None
        assert not manager.end_session(session.session_id)

    def test_list_sessions(self, manager):
        """Active sessions are listed."""
        ids = {manager.create_session(seed=i).session_id for i in range(3)}
        assert set(manager.list_active_sessions()) == ids
        assert len(manager.list_sessions()) == 3

    def test_cleanup_stale_sessions(self, manager):
        """Idle sessions are removed."""
        stale = manager.create_session(seed=1)
        fresh = manager.create_session(seed=2)
        stale.last_active_at = time.time() - 7200

        removed = manager.cleanup_stale_sessions(max_age_seconds=3600)

        assert removed == 1
        assert manager.get_session(stale.session_id) is None
        assert manager.get_session(fresh.session_id) is fresh

    def test_choices_wait_for_session_lock(self, manager):
        """A choice waits while another holds the session, then applies once."""
        session = manager.create_session(seed=1)
        session.game_state = presenting("PAY_TEN")
        results = []

        with session.lock:
            worker = threading.Thread(
                target=lambda: results.append(
                    manager.choose_option(session.session_id, Action.choose_option(0))
                )
            )
            worker.start()
            worker.join(timeout=0.2)
            assert worker.is_alive()
            assert session.actions_applied == 0

        worker.join(timeout=5)
        assert not worker.is_alive()
        assert results[0].success
        assert session.actions_applied == 1
        assert session.game_state.tick == 1
