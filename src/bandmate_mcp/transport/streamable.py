"""
Streamable HTTP session manager for /mcp.

Per-session state machine:
- known mcp-session-id: the request goes to that session's transport
- no session id, POST: a new transport is started; its id is stored only
  once the transport answers the handshake with a 2xx
- anything else: 400, nothing created

A session leaves the store when its server task ends (DELETE, crash, or
shutdown), and immediately after a DELETE that terminated it.
"""
from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from typing import Any
from uuid import uuid4

import anyio
from anyio.abc import TaskGroup, TaskStatus
from mcp.server.lowlevel.server import Server as MCPServer
from mcp.server.streamable_http import MCP_SESSION_ID_HEADER, StreamableHTTPServerTransport
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import Message, Receive, Scope, Send

from bandmate_mcp.core.observability import get_logger

from .store import SessionStore

logger = get_logger("bandmate-mcp.sessions")

BAD_REQUEST_MESSAGE = "Bad Request: missing session ID or not an initialization request"


class StreamableSessionManager:
    """Routes /mcp requests to per-session Streamable HTTP transports.

    Use run() from the application lifespan; it owns the task group that
    hosts one MCP server task per session.

    Example:
        manager = StreamableSessionManager(server._mcp_server)
        async with manager.run():
            ...  # serve requests via manager.handle_request
    """

    def __init__(
        self,
        app: MCPServer[Any, Any],
        store: SessionStore[StreamableHTTPServerTransport] | None = None,
        json_response: bool = False,
    ) -> None:
        self.app = app
        self.store = store if store is not None else SessionStore("streamable")
        self.json_response = json_response
        self._task_group: TaskGroup | None = None
        self._has_started = False

    @contextlib.asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        """Own the task group for session server tasks. Single use."""
        if self._has_started:
            raise RuntimeError("StreamableSessionManager.run() can only be called once")
        self._has_started = True

        async with anyio.create_task_group() as tg:
            self._task_group = tg
            logger.info("Streamable HTTP session manager started", json_response=self.json_response)
            try:
                yield
            finally:
                logger.info("Streamable HTTP session manager shutting down", active=len(self.store))
                tg.cancel_scope.cancel()
                self._task_group = None
                for session_id in self.store.ids():
                    self.store.remove(session_id)

    async def handle_request(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Dispatch one ASGI request on /mcp."""
        if self._task_group is None:
            raise RuntimeError("Task group is not initialized. Make sure to use run().")

        request = Request(scope, receive)
        session_id = request.headers.get(MCP_SESSION_ID_HEADER)

        transport = self.store.get(session_id)
        if transport is not None:
            await transport.handle_request(scope, receive, send)
            if request.method == "DELETE" and transport.is_terminated:
                self.store.remove(session_id)
            return

        if not session_id and request.method == "POST":
            await self._open_session(scope, receive, send)
            return

        logger.warning(
            "Rejected MCP request",
            method=request.method,
            session_id=session_id,
        )
        response = JSONResponse({"error": BAD_REQUEST_MESSAGE}, status_code=400)
        await response(scope, receive, send)

    async def _open_session(self, scope: Scope, receive: Receive, send: Send) -> None:
        session_id = uuid4().hex
        transport = StreamableHTTPServerTransport(
            mcp_session_id=session_id,
            is_json_response_enabled=self.json_response,
        )

        assert self._task_group is not None
        await self._task_group.start(self._run_server, transport)

        status: dict[str, int] = {}

        async def send_and_record(message: Message) -> None:
            if message["type"] == "http.response.start":
                status["code"] = message["status"]
                if 200 <= message["status"] < 300 and not transport.is_terminated:
                    self.store.put(session_id, transport)
            await send(message)

        try:
            await transport.handle_request(scope, receive, send_and_record)
        finally:
            code = status.get("code")
            if code is None or not 200 <= code < 300:
                logger.info("Handshake rejected, discarding transport", status=code)
                await transport.terminate()

    async def _run_server(
        self,
        transport: StreamableHTTPServerTransport,
        *,
        task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        session_id = transport.mcp_session_id
        async with transport.connect() as (read_stream, write_stream):
            task_status.started()
            try:
                await self.app.run(
                    read_stream,
                    write_stream,
                    self.app.create_initialization_options(),
                )
            except Exception:
                logger.exception("MCP session crashed", session_id=session_id)
            finally:
                if session_id:
                    self.store.remove(session_id)
