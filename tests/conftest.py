"""
Pytest configuration and shared fixtures for Bandmate MCP Server tests.

The Bandmate backend is replaced by an httpx.MockTransport that records
every request and answers from a small route table.
"""
from __future__ import annotations

import json
from collections.abc import Generator
from typing import Any

import httpx
import pytest

from bandmate_mcp.config import AppConfig, AuthPolicy, BackendConfig, ServerConfig, reset_config
from bandmate_mcp.core.client import BandmateClient
from bandmate_mcp.server import create_server

TEST_API_URL = "https://bandmate.test/api"


class MockBackend:
    """Route table + request recorder used as an httpx.MockTransport handler."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], httpx.Response] = {}

    def respond(
        self,
        method: str,
        path: str,
        status: int = 200,
        json_body: Any = None,
        text: str | None = None,
    ) -> None:
        """Register a canned response for METHOD /api<path>."""
        if text is not None:
            response = httpx.Response(status, text=text)
        else:
            response = httpx.Response(status, json=json_body if json_body is not None else {})
        self._routes[(method.upper(), path)] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/api")
        response = self._routes.get((request.method, path))
        if response is None:
            return httpx.Response(404, text=f"no route for {request.method} {path}")
        return response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


@pytest.fixture(autouse=True)
def clean_config() -> Generator[None, None, None]:
    """Never leak the process-wide config between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def backend() -> MockBackend:
    """Mock Bandmate backend."""
    return MockBackend()


@pytest.fixture
def backend_config() -> BackendConfig:
    """Backend config without a token, open policy."""
    return BackendConfig(api_url=TEST_API_URL)


@pytest.fixture
def app_config(backend_config: BackendConfig) -> AppConfig:
    """Application config pointing at the mock backend."""
    return AppConfig(
        server=ServerConfig(json_response=True),
        backend=backend_config,
    )


@pytest.fixture
def make_client(backend: MockBackend):
    """Factory for clients wired to the mock backend."""

    def _make(
        token: str = "",
        policy: AuthPolicy = AuthPolicy.OPEN,
    ) -> BandmateClient:
        config = BackendConfig(api_url=TEST_API_URL, auth_token=token, auth_policy=policy)
        http = httpx.AsyncClient(transport=httpx.MockTransport(backend))
        return BandmateClient(config, http_client=http)

    return _make


@pytest.fixture
def client(make_client) -> BandmateClient:
    """Client without a token."""
    return make_client()


@pytest.fixture
def server(client: BandmateClient, app_config: AppConfig):
    """FastMCP server with all Bandmate tools, backed by the mock."""
    return create_server(client, app_config)


@pytest.fixture
def sample_songs() -> list[dict[str, Any]]:
    """Fixed three-song listing used by the search tests."""
    return [
        {"title": "Foobar", "tags": []},
        {"title": "Baz", "tags": ["foo-rock"]},
        {"title": "Qux", "tags": []},
    ]
