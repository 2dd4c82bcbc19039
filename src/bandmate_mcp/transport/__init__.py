"""
MCP transports served over HTTP.

- streamable: Streamable HTTP sessions on /mcp
- sse: legacy HTTP+SSE sessions on /sse + /messages
- store: the session table both managers use
"""

from .sse import LegacySseManager, SseSession
from .store import DuplicateSessionError, SessionStore
from .streamable import BAD_REQUEST_MESSAGE, StreamableSessionManager

__all__ = [
    "SessionStore",
    "DuplicateSessionError",
    "StreamableSessionManager",
    "BAD_REQUEST_MESSAGE",
    "LegacySseManager",
    "SseSession",
]
