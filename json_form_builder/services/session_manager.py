"""In-memory session manager with TTL expiry."""

import logging
import threading
import time
import uuid
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..models.errors import SessionNotFoundException
from .session_controller import SessionController


class SessionManager:
    """Registry of session controllers kept in process memory.

    Sessions expire ``session_ttl`` seconds after their last access.
    """

    def __init__(
        self,
        controller_factory: Callable[[str], SessionController],
        session_ttl: int = 3600,
        cleanup_interval: int = 300,
    ):
        """
        Initialize the session manager.

        Args:
            controller_factory: Builds a controller for a new session id
            session_ttl: Session time-to-live in seconds (default: 1 hour)
            cleanup_interval: Seconds between opportunistic expiry sweeps
        """
        self.controller_factory = controller_factory
        self.session_ttl = session_ttl
        self.logger = logging.getLogger(__name__)

        self._sessions: Dict[str, Tuple[SessionController, float]] = {}  # session_id -> (controller, expiry_time)
        self._lock = threading.RLock()
        self._cleanup_interval = cleanup_interval
        self._last_cleanup = time.time()

    def _cleanup_if_needed(self) -> None:
        current_time = time.time()
        if current_time - self._last_cleanup > self._cleanup_interval:
            self.cleanup_expired_sessions()
            self._last_cleanup = current_time

    def _is_expired(self, expiry_time: float) -> bool:
        return time.time() > expiry_time

    def generate_session_id(self) -> str:
        return uuid.uuid4().hex

    def create_session(self) -> SessionController:
        """Create and register a fresh session."""
        session_id = self.generate_session_id()
        controller = self.controller_factory(session_id)
        with self._lock:
            self._cleanup_if_needed()
            self._sessions[session_id] = (controller, time.time() + self.session_ttl)
        self.logger.info(f"Created session {session_id}")
        return controller

    def get_session(self, session_id: str) -> SessionController:
        """
        Retrieve a session and refresh its expiry.

        Raises:
            SessionNotFoundException: If the session is unknown or expired
        """
        with self._lock:
            self._cleanup_if_needed()

            entry = self._sessions.get(session_id)
            if entry is not None and self._is_expired(entry[1]):
                del self._sessions[session_id]
                entry = None

            if entry is None:
                raise SessionNotFoundException(
                    "SESSION_NOT_FOUND",
                    f"Session not found or expired: {session_id}",
                    {"session_id": session_id}
                )

            controller, _ = entry
            self._sessions[session_id] = (controller, time.time() + self.session_ttl)
            return controller

    def peek(self, session_id: str) -> Optional[SessionController]:
        """Return a live session without refreshing its expiry, or None."""
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None or self._is_expired(entry[1]):
                return None
            return entry[0]

    def delete_session(self, session_id: str) -> bool:
        """Delete a session. Returns True if the session existed."""
        with self._lock:
            if session_id in self._sessions:
                del self._sessions[session_id]
                self.logger.info(f"Deleted session {session_id}")
                return True
            return False

    def list_active_sessions(self) -> List[str]:
        with self._lock:
            current_time = time.time()
            return [
                session_id
                for session_id, (_, expiry_time) in self._sessions.items()
                if expiry_time > current_time
            ]

    def get_ttl(self, session_id: str) -> Optional[int]:
        """Remaining seconds before expiry, or None for unknown sessions."""
        with self._lock:
            entry = self._sessions.get(session_id)
            if entry is None or self._is_expired(entry[1]):
                return None
            return max(0, int(entry[1] - time.time()))

    def cleanup_expired_sessions(self) -> int:
        """Drop expired sessions. Returns the number removed."""
        with self._lock:
            current_time = time.time()
            expired = [
                session_id
                for session_id, (_, expiry_time) in self._sessions.items()
                if expiry_time <= current_time
            ]
            for session_id in expired:
                del self._sessions[session_id]

        if expired:
            self.logger.info(f"Cleaned up {len(expired)} expired sessions")
        return len(expired)

    def health_check(self) -> Dict[str, Any]:
        with self._lock:
            total = len(self._sessions)
        return {
            "status": "healthy",
            "storage": "memory",
            "total_sessions": total,
            "active_sessions": len(self.list_active_sessions()),
            "session_ttl": self.session_ttl,
        }
