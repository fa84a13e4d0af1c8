"""Session management for in-memory storage."""

from datetime import UTC, datetime, timedelta

from cuid2 import cuid_wrapper

from gemini_chat.models.session import ChatSession
from gemini_chat.utils.logging import get_logger

logger = get_logger(__name__)

cuid = cuid_wrapper()


class InMemorySessionManager:
    """Keeps chat sessions for the lifetime of the process."""

    def __init__(self, session_timeout_minutes: int = 60):
        """Initialize session manager.

        Args:
            session_timeout_minutes: Minutes of inactivity before a session expires
        """
        self.sessions: dict[str, ChatSession] = {}
        self.session_timeout = timedelta(minutes=session_timeout_minutes)

    def get_or_create_session(self, session_id: str | None = None) -> ChatSession:
        """Get existing session or create new one.

        Args:
            session_id: Optional existing session ID

        Returns:
            Session object (existing or newly created)
        """
        self._cleanup_expired_sessions()

        if session_id and session_id in self.sessions:
            session = self.sessions[session_id]
            session.update_activity()
            return session

        new_session_id = session_id or cuid()
        session = ChatSession(session_id=new_session_id)
        self.sessions[new_session_id] = session
        logger.info(f"Created session {new_session_id}")
        return session

    def get_session(self, session_id: str) -> ChatSession | None:
        """Get existing session by ID.

        Returns:
            Session if found and not expired, None otherwise
        """
        self._cleanup_expired_sessions()

        session = self.sessions.get(session_id)
        if session:
            session.update_activity()
        return session

    def delete_session(self, session_id: str) -> bool:
        """Delete a session.

        Returns:
            True if session was deleted, False if not found
        """
        return self.sessions.pop(session_id, None) is not None

    def _cleanup_expired_sessions(self) -> None:
        """Remove idle sessions; a session with a request outstanding is kept."""
        current_time = datetime.now(UTC)
        expired_sessions = [
            session_id
            for session_id, session in self.sessions.items()
            if not session.busy and current_time - session.last_activity > self.session_timeout
        ]

        for session_id in expired_sessions:
            logger.info(f"Expiring idle session {session_id}")
            del self.sessions[session_id]

    def get_session_count(self) -> int:
        """Get current number of active sessions."""
        self._cleanup_expired_sessions()
        return len(self.sessions)

    def get_busy_session_count(self) -> int:
        """Get current number of sessions with a request outstanding."""
        self._cleanup_expired_sessions()
        return sum(1 for session in self.sessions.values() if session.busy)


session_manager = InMemorySessionManager()
