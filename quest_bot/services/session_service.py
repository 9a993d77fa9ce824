import logging
from typing import Optional

from quest_bot.states import ChooseLanguage, Session


class SessionStore:
    """In-memory sessions keyed by user ID."""

    def __init__(self) -> None:
        self._sessions: dict[int, Session] = {}

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, user_id: int) -> Optional[Session]:
        """Get user's session, if any."""
        return self._sessions.get(user_id)

    def create(self, user_id: int) -> Session:
        """Create a session for a new user. Returns the stored session."""
        return self._sessions.setdefault(user_id, ChooseLanguage())

    def reset(self, user_id: int) -> Session:
        """Discard user's session and start over."""
        session = ChooseLanguage()
        self._sessions[user_id] = session
        logging.info(f"Session reset for {user_id}")
        return session

    def save(self, user_id: int, session: Session) -> Session:
        """Store a new state for user."""
        self._sessions[user_id] = session
        return session
