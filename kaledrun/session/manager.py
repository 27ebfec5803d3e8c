"""
Session Manager - Creates and manages game sessions.

LIFECYCLE:
1. User starts a session -> a fresh game with its own seeded reducer
2. During the game each choice goes through the session's reducer
3. Bankruptcy marks the game over; the session stays readable
4. The session is ended explicitly or cleaned up when stale

PERSISTENCE RULES:
- No database, no save files
- Sessions are in-memory only and lost on restart
- A session's seed is kept so a run can be replayed
"""

from __future__ import annotations
import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum

from ..catalog import Catalog, default_catalog
from ..engine_core.action import Action, ActionResult, ErrorCode
from ..engine_core.reducer import Reducer
from ..engine_core.rng import GameRandom
from ..engine_core.state import GameState, Stats

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """State of a game session."""
    ACTIVE = "active"  # Game in progress
    GAME_OVER = "game_over"  # Bankrupt, read-only
    ABANDONED = "abandoned"  # Ended before game over


@dataclass
class Session:
    """
    An ephemeral game session.

    Contains:
    - Current canonical game state
    - The reducer (and through it the random source) of this game
    - Session metadata
    """
    session_id: str
    game_state: GameState
    reducer: Reducer
    created_at: float
    seed: int

    state: SessionState = SessionState.ACTIVE
    last_active_at: float = field(default_factory=time.time)
    actions_applied: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def is_active(self) -> bool:
        """Check if session is still playable."""
        return self.state == SessionState.ACTIVE


class SessionNotFoundError(KeyError):
    """No session with the given id."""


class SessionManager:
    """
    Manages game sessions.

    Responsibilities:
    - Create sessions with their own seeded reducer
    - Serialize actions per session
    - Clean up ended and stale sessions

    No persistence - sessions are in-memory only.
    """

    def __init__(self, catalog: Catalog | None = None):
        self.catalog = catalog or default_catalog()
        self._sessions: dict[str, Session] = {}

    def create_session(self, seed: int | None = None, initial_stats: Stats | None = None) -> Session:
        """
        Create a new game session.

        Args:
            seed: RNG seed; drawn from the OS when omitted
            initial_stats: Optional starting stats (defaults to the standard start)

        Returns:
            New Session with the first request already picked
        """
        rng = GameRandom(seed)
        reducer = Reducer(catalog=self.catalog, rng=rng)
        now = time.time()

        session = Session(
            session_id=str(uuid.uuid4()),
            game_state=reducer.initial_state(initial_stats),
            reducer=reducer,
            created_at=now,
            seed=rng.seed,
            last_active_at=now,
        )
        self._sessions[session.session_id] = session
        logger.info("Created session %s (seed %d)", session.session_id, session.seed)
        return session

    def get_session(self, session_id: str) -> Session | None:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def require_session(self, session_id: str) -> Session:
        session = self.get_session(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def choose_option(self, session_id: str, action: Action) -> ActionResult:
        """
        Apply an action to a session's game.

        Actions on one session run one at a time under the session lock.
        The session keeps the new state only when the action succeeds.
        Raises SessionNotFoundError for unknown sessions.
        """
        session = self.require_session(session_id)
        with session.lock:
            result = session.reducer.apply(session.game_state, action)
            session.last_active_at = time.time()

            if result.success:
                session.game_state = result.new_state
                session.actions_applied += 1
                if session.game_state.game_over:
                    session.state = SessionState.GAME_OVER
                    logger.info(
                        "Session %s game over at tick %d: %s",
                        session_id, session.game_state.tick, session.game_state.game_over_reason,
                    )
            elif result.error_code != ErrorCode.GAME_OVER:
                logger.warning("Session %s rejected action: %s", session_id, result.error)

        return result

    def end_session(self, session_id: str, reason: str = "completed") -> bool:
        """
        End a session and remove it from memory.

        Returns False if the session did not exist.
        """
        session = self._sessions.pop(session_id, None)
        if session is None:
            return False
        if session.state == SessionState.ACTIVE:
            session.state = SessionState.ABANDONED
        logger.info("Ended session %s (%s)", session_id, reason)
        return True

    def list_active_sessions(self) -> list[str]:
        """List IDs of sessions whose game is still running."""
        return [
            sid for sid, session in self._sessions.items()
            if session.is_active()
        ]

    def list_sessions(self) -> list[Session]:
        return list(self._sessions.values())

    def cleanup_stale_sessions(self, max_age_seconds: int = 3600) -> int:
        """
        Remove sessions idle for longer than max_age_seconds.

        Returns the number of sessions removed.
        """
        current_time = time.time()
        to_remove = [
            session_id for session_id, session in self._sessions.items()
            if current_time - session.last_active_at > max_age_seconds
        ]

        for session_id in to_remove:
            self.end_session(session_id, reason="stale")
        return len(to_remove)
