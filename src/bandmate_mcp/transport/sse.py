"""
Legacy HTTP+SSE transport for /sse and /messages.

GET /sse opens an event stream bound to a fresh session. The first event is
`endpoint`, carrying the callback URL the client must POST its JSON-RPC
messages to; server messages follow as `message` events. The session lives
exactly as long as its stream.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from uuid import uuid4

import anyio
from anyio.abc import TaskGroup
from anyio.streams.memory import MemoryObjectSendStream
from mcp.server.lowlevel.server import Server as MCPServer
from mcp.shared.message import SessionMessage
from mcp.types import JSONRPCMessage
from pydantic import ValidationError
from sse_starlette import EventSourceResponse
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import Receive, Scope, Send

from bandmate_mcp.core.observability import get_logger

from .store import SessionStore

logger = get_logger("bandmate-mcp.sessions")

MESSAGES_PATH = "/messages"


@dataclass
class SseSession:
    """One open event stream and the writer feeding its MCP server."""
    session_id: str
    read_stream_writer: MemoryObjectSendStream[SessionMessage | Exception]


def endpoint_url(session_id: str) -> str:
    """Callback URL announced in the `endpoint` event."""
    return f"{MESSAGES_PATH}?sessionId={session_id}"


class LegacySseManager:
    """Serves legacy SSE sessions against one MCP server.

    Both handlers are raw ASGI callables; the HTTP front end mounts them on
    /sse (GET) and /messages (POST).
    """

    def __init__(
        self,
        app: MCPServer[Any, Any],
        store: SessionStore[SseSession] | None = None,
    ) -> None:
        self.app = app
        self.store = store if store is not None else SessionStore("sse")

    async def handle_sse(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Open an event stream and run an MCP server session over it."""
        read_stream_writer, read_stream = anyio.create_memory_object_stream[SessionMessage | Exception](0)
        write_stream, write_stream_reader = anyio.create_memory_object_stream[SessionMessage](0)
        sse_stream_writer, sse_stream_reader = anyio.create_memory_object_stream[dict[str, Any]](0)

        session_id = uuid4().hex
        self.store.put(session_id, SseSession(session_id, read_stream_writer))

        async def sse_writer() -> None:
            async with sse_stream_writer, write_stream_reader:
                await sse_stream_writer.send({"event": "endpoint", "data": endpoint_url(session_id)})
                async for session_message in write_stream_reader:
                    await sse_stream_writer.send(
                        {
                            "event": "message",
                            "data": session_message.message.model_dump_json(by_alias=True, exclude_none=True),
                        }
                    )

        async def serve_stream(task_group: TaskGroup) -> None:
            response = EventSourceResponse(content=sse_stream_reader, data_sender_callable=sse_writer)
            try:
                await response(scope, receive, send)
            finally:
                # client went away; stop the server side too
                task_group.cancel_scope.cancel()

        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(serve_stream, tg)
                await self.app.run(read_stream, write_stream, self.app.create_initialization_options())
                tg.cancel_scope.cancel()
        finally:
            self.store.remove(session_id)
            await read_stream_writer.aclose()
            await write_stream.aclose()

    async def handle_post_message(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Deliver one client JSON-RPC message to its session."""
        request = Request(scope, receive)
        session_id = request.query_params.get("sessionId") or request.query_params.get("session_id")

        if not session_id:
            response = Response("session ID is required", status_code=400)
            await response(scope, receive, send)
            return

        session = self.store.get(session_id)
        if session is None:
            logger.warning("Message for unknown SSE session", session_id=session_id)
            response = Response("Could not find session", status_code=404)
            await response(scope, receive, send)
            return

        body = await request.body()
        try:
            message = JSONRPCMessage.model_validate_json(body)
        except ValidationError as e:
            logger.warning("Invalid JSON-RPC message", session_id=session_id, error=str(e))
            response = Response("Could not parse message", status_code=400)
            await response(scope, receive, send)
            return

        response = Response("Accepted", status_code=202)
        await response(scope, receive, send)
        try:
            await session.read_stream_writer.send(SessionMessage(message))
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            logger.warning("SSE session closed before delivery", session_id=session_id)
