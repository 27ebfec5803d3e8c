"""
Session Module - Manages ephemeral game sessions.

A session represents one play-through:
- Created when a user starts a game
- Holds the current game state and its seeded reducer
- Applies the user's choices one at a time
- Removed when ended or stale

Sessions are EPHEMERAL: no persistence to database or disk.
"""

from .manager import SessionManager, Session, SessionState, SessionNotFoundError

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
    "SessionNotFoundError",
]
