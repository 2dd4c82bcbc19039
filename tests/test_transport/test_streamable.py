"""
Tests for the Streamable HTTP session manager on /mcp.
"""
from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from bandmate_mcp.app import create_app
from bandmate_mcp.config import AppConfig, ServerConfig
from bandmate_mcp.transport import BAD_REQUEST_MESSAGE, SessionStore, StreamableSessionManager

PROTOCOL_VERSION = "2025-03-26"

HEADERS = {
    "accept": "application/json, text/event-stream",
    "content-type": "application/json",
}

INITIALIZE = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "initialize",
    "params": {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {},
        "clientInfo": {"name": "pytest", "version": "0.0.1"},
    },
}

INITIALIZED = {"jsonrpc": "2.0", "method": "notifications/initialized"}


def session_headers(session_id: str) -> dict[str, str]:
    return {
        **HEADERS,
        "mcp-session-id": session_id,
        "mcp-protocol-version": PROTOCOL_VERSION,
    }


@pytest.fixture
def store() -> SessionStore:
    return SessionStore("streamable")


@pytest.fixture
def http(app_config, client, server, store):
    """Running app (lifespan entered) with an injected session store."""
    app = create_app(app_config, server=server, client=client, session_store=store)
    with TestClient(app) as test_client:
        yield test_client


def open_session(http: TestClient) -> str:
    response = http.post("/mcp", json=INITIALIZE, headers=HEADERS)
    assert response.status_code == 200
    session_id = response.headers["mcp-session-id"]
    ack = http.post("/mcp", json=INITIALIZED, headers=session_headers(session_id))
    assert ack.status_code == 202
    return session_id


class TestSessionCreation:
    """Tests for the uninitialized -> open transition."""

    def test_initialize_stores_session(self, http, store):
        """A successful handshake registers the minted id."""
        response = http.post("/mcp", json=INITIALIZE, headers=HEADERS)
        assert response.status_code == 200
        session_id = response.headers["mcp-session-id"]
        assert session_id in store
        assert len(store) == 1
        assert response.json()["result"]["serverInfo"]["name"] == "bandmate-mcp"

    def test_each_initialize_gets_its_own_session(self, http, store):
        """Two handshakes, two distinct sessions."""
        first = http.post("/mcp", json=INITIALIZE, headers=HEADERS).headers["mcp-session-id"]
        second = http.post("/mcp", json=INITIALIZE, headers=HEADERS).headers["mcp-session-id"]
        assert first != second
        assert len(store) == 2

    def test_empty_session_header_starts_session(self, http, store):
        """An empty mcp-session-id header counts as no session."""
        headers = {**HEADERS, "mcp-session-id": ""}
        response = http.post("/mcp", json=INITIALIZE, headers=headers)
        assert response.status_code == 200
        assert response.headers["mcp-session-id"] in store
        assert len(store) == 1

    def test_rejected_handshake_stores_nothing(self, http, store):
        """A non-initialize POST without a session is refused and not stored."""
        message = {"jsonrpc": "2.0", "id": 2, "method": "tools/list"}
        response = http.post("/mcp", json=message, headers=HEADERS)
        assert response.status_code == 400
        assert len(store) == 0


class TestBadRequests:
    """Tests for requests with no usable session."""

    def test_get_without_session(self, http, store):
        """A bare GET is a 400 and creates nothing."""
        response = http.get("/mcp", headers={"accept": "text/event-stream"})
        assert response.status_code == 400
        assert response.json() == {"error": BAD_REQUEST_MESSAGE}
        assert len(store) == 0

    def test_unknown_session_id(self, http, store):
        """An id that was never issued is a 400."""
        message = {"jsonrpc": "2.0", "id": 2, "method": "tools/list"}
        response = http.post("/mcp", json=message, headers=session_headers("deadbeef"))
        assert response.status_code == 400
        assert response.json() == {"error": BAD_REQUEST_MESSAGE}
        assert len(store) == 0


class TestOpenSession:
    """Tests for requests routed to an open session."""

    def test_list_tools(self, http, store):
        """The open session serves the tool catalogue."""
        session_id = open_session(http)
        message = {"jsonrpc": "2.0", "id": 2, "method": "tools/list"}
        response = http.post("/mcp", json=message, headers=session_headers(session_id))
        assert response.status_code == 200
        names = {tool["name"] for tool in response.json()["result"]["tools"]}
        assert "search_songs" in names
        assert len(names) == 11
        assert len(store) == 1

    def test_call_tool_hits_backend(self, http, backend):
        """A tool call on the session reaches the backend."""
        backend.respond("GET", "/artists", json_body=[{"id": "queen"}])
        session_id = open_session(http)
        message = {
            "jsonrpc": "2.0",
            "id": 3,
            "method": "tools/call",
            "params": {"name": "get_artists", "arguments": {}},
        }
        response = http.post("/mcp", json=message, headers=session_headers(session_id))
        assert response.status_code == 200
        content = response.json()["result"]["content"]
        assert json.loads(content[0]["text"]) == [{"id": "queen"}]


class TestSessionClose:
    """Tests for the open -> closed transition."""

    def test_delete_removes_session(self, http, store):
        """DELETE terminates the transport and drops the entry."""
        session_id = open_session(http)
        response = http.delete("/mcp", headers=session_headers(session_id))
        assert response.status_code == 200
        assert session_id not in store

    def test_stale_id_after_close(self, http, store):
        """A closed session's id is then unknown."""
        session_id = open_session(http)
        http.delete("/mcp", headers=session_headers(session_id))
        message = {"jsonrpc": "2.0", "id": 2, "method": "tools/list"}
        response = http.post("/mcp", json=message, headers=session_headers(session_id))
        assert response.status_code == 400
        assert response.json() == {"error": BAD_REQUEST_MESSAGE}


class TestManagerLifecycle:
    """Tests for run() and its preconditions."""

    @pytest.mark.asyncio
    async def test_handle_request_before_run(self, server):
        """Requests before run() are a programming error."""
        manager = StreamableSessionManager(server._mcp_server)
        with pytest.raises(RuntimeError):
            await manager.handle_request({"type": "http"}, None, None)

    @pytest.mark.asyncio
    async def test_run_is_single_use(self, server):
        """run() cannot be entered twice."""
        manager = StreamableSessionManager(server._mcp_server)
        async with manager.run():
            pass
        with pytest.raises(RuntimeError):
            async with manager.run():
                pass

    def test_shutdown_clears_store(self, app_config, client, server, store):
        """Leaving the lifespan drops every open session."""
        app = create_app(app_config, server=server, client=client, session_store=store)
        with TestClient(app) as http:
            open_session(http)
            assert len(store) == 1
        assert len(store) == 0

    def test_default_store(self, server):
        """Without an injected store the manager makes its own."""
        first = StreamableSessionManager(server._mcp_server)
        second = StreamableSessionManager(server._mcp_server)
        assert first.store is not second.store


def sse_payload(response) -> dict:
    """First JSON-RPC message carried in an event-stream reply."""
    for line in response.text.splitlines():
        if line.startswith("data: "):
            return json.loads(line[len("data: "):])
    raise AssertionError(f"no data line in {response.text!r}")


class TestEventStreamReplies:
    """Tests for the default mode, where POST replies come back as SSE."""

    @pytest.fixture
    def sse_http(self, backend_config, client, server, store):
        config = AppConfig(server=ServerConfig(json_response=False), backend=backend_config)
        app = create_app(config, server=server, client=client, session_store=store)
        with TestClient(app) as test_client:
            yield test_client

    def test_initialize_then_call_tool(self, sse_http, store, backend):
        """Handshake and tool call both answer over an event stream."""
        backend.respond("GET", "/artists", json_body=[{"id": "queen"}])

        response = sse_http.post("/mcp", json=INITIALIZE, headers=HEADERS)
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        session_id = response.headers["mcp-session-id"]
        assert session_id in store
        assert sse_payload(response)["result"]["serverInfo"]["name"] == "bandmate-mcp"

        ack = sse_http.post("/mcp", json=INITIALIZED, headers=session_headers(session_id))
        assert ack.status_code == 202

        message = {
            "jsonrpc": "2.0",
            "id": 2,
            "method": "tools/call",
            "params": {"name": "get_artists", "arguments": {}},
        }
        response = sse_http.post("/mcp", json=message, headers=session_headers(session_id))
        assert response.status_code == 200
        content = sse_payload(response)["result"]["content"]
        assert json.loads(content[0]["text"]) == [{"id": "queen"}]
