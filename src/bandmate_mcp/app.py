"""
Bandmate MCP HTTP front end.

FastAPI application exposing:
- GET /health: liveness probe
- GET /: service manifest
- /mcp (any method): Streamable HTTP MCP transport
- GET /sse, POST /messages: legacy HTTP+SSE MCP transport (optional)

CORS is open to every origin and exposes the mcp-session-id header so
browser clients can read it.
"""
from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastmcp import FastMCP
from mcp.server.streamable_http import MCP_SESSION_ID_HEADER
from starlette.types import Receive, Scope, Send

from bandmate_mcp.config import AppConfig, get_config
from bandmate_mcp.core import BandmateClient, HealthStatus, ServerManifest, get_logger
from bandmate_mcp.server import create_server
from bandmate_mcp.transport import (
    LegacySseManager,
    SessionStore,
    SseSession,
    StreamableSessionManager,
)

logger = get_logger("bandmate-mcp.app")

ASGIHandler = Callable[[Scope, Receive, Send], Awaitable[None]]


class ASGIEndpoint:
    """Wraps a raw ASGI handler so routing passes scope/receive/send through."""

    def __init__(self, handler: ASGIHandler) -> None:
        self.handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.handler(scope, receive, send)


def create_app(
    config: AppConfig | None = None,
    server: FastMCP | None = None,
    client: BandmateClient | None = None,
    session_store: SessionStore | None = None,
    sse_store: SessionStore[SseSession] | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Args:
        config: Application configuration; defaults to the environment
        server: MCP server to bind sessions to; built from client if omitted
        client: Backend client; closed on shutdown
        session_store: Session table for /mcp
        sse_store: Session table for /sse

    Returns:
        FastAPI application ready for uvicorn
    """
    config = config or get_config()
    client = client or BandmateClient(config.backend)
    server = server or create_server(client, config)

    streamable = StreamableSessionManager(
        server._mcp_server,
        store=session_store,
        json_response=config.server.json_response,
    )
    legacy = LegacySseManager(server._mcp_server, store=sse_store) if config.server.legacy_sse else None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        tools = await server.get_tools()
        logger.info(
            "Bandmate MCP server ready",
            tool_count=len(tools),
            legacy_sse=legacy is not None,
        )
        async with streamable.run():
            try:
                yield
            finally:
                await client.aclose()
                logger.info("Bandmate MCP server stopped")

    app = FastAPI(
        title=config.server.name,
        version=config.server.version,
        description=config.server.description,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[MCP_SESSION_ID_HEADER],
    )

    @app.get("/health")
    async def health() -> dict:
        return HealthStatus(service=config.server.name).model_dump()

    endpoints = {"health": "/health", "mcp": "/mcp"}
    if legacy is not None:
        endpoints["sse"] = "/sse"
        endpoints["messages"] = "/messages"

    @app.get("/")
    async def manifest() -> dict:
        return ServerManifest(
            name=config.server.name,
            version=config.server.version,
            description=config.server.description,
            endpoints=endpoints,
        ).model_dump()

    app.add_route("/mcp", ASGIEndpoint(streamable.handle_request), include_in_schema=False)
    if legacy is not None:
        app.add_route("/sse", ASGIEndpoint(legacy.handle_sse), methods=["GET"], include_in_schema=False)
        app.add_route(
            "/messages",
            ASGIEndpoint(legacy.handle_post_message),
            methods=["POST"],
            include_in_schema=False,
        )

    return app
