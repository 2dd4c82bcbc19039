"""
Session table for MCP transports.

Maps a session id to its live transport. A manager owns exactly one store,
passed in at construction, so tests and alternative deployments can swap or
inspect it.

Each mutation is a single dict operation with no await in between, which is
what keeps the table consistent on a single event loop.
"""
from __future__ import annotations

from typing import Generic, TypeVar

from bandmate_mcp.core.observability import get_logger

logger = get_logger("bandmate-mcp.sessions")

T = TypeVar("T")


class DuplicateSessionError(KeyError):
    """Raised when a session id is stored twice."""


class SessionStore(Generic[T]):
    """In-memory session id -> transport table.

    Example:
        store: SessionStore[StreamableHTTPServerTransport] = SessionStore("streamable")
        store.put(session_id, transport)
        transport = store.get(session_id)
        store.remove(session_id)
    """

    def __init__(self, name: str = "sessions") -> None:
        self.name = name
        self._sessions: dict[str, T] = {}

    def get(self, session_id: str | None) -> T | None:
        """Look up a session; None for a missing or unknown id."""
        if not session_id:
            return None
        return self._sessions.get(session_id)

    def put(self, session_id: str, transport: T) -> None:
        """Register a new session.

        Raises:
            DuplicateSessionError: The id is already in the table
        """
        if session_id in self._sessions:
            raise DuplicateSessionError(session_id)
        self._sessions[session_id] = transport
        logger.info("Session opened", store=self.name, session_id=session_id, active=len(self))

    def remove(self, session_id: str) -> T | None:
        """Drop a session. Removing an unknown id is a no-op."""
        transport = self._sessions.pop(session_id, None)
        if transport is not None:
            logger.info("Session closed", store=self.name, session_id=session_id, active=len(self))
        return transport

    def ids(self) -> list[str]:
        return list(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
