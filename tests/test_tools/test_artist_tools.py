"""
Tests for the artist domain tools.
"""
from __future__ import annotations

import json

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError


class TestArtistTools:
    """Tests for get_artists and upsert_artist."""

    @pytest.mark.asyncio
    async def test_get_artists(self, backend, server):
        """Artists listing is returned as pretty JSON."""
        artists = [{"id": "queen", "name": "Queen"}]
        backend.respond("GET", "/artists", json_body=artists)
        async with Client(server) as mcp:
            result = await mcp.call_tool("get_artists", {})
        assert result.content[0].text == json.dumps(artists, indent=2)

    @pytest.mark.asyncio
    async def test_upsert_artist_posts_name(self, backend, server):
        """The name is posted without normalization."""
        backend.respond("POST", "/artists", json_body={"id": "queen", "name": "Queen"})
        async with Client(server) as mcp:
            await mcp.call_tool("upsert_artist", {"name": "Queen "})
        assert backend.last_json() == {"name": "Queen "}

    @pytest.mark.asyncio
    async def test_upsert_artist_server_error(self, backend, server):
        """Backend failures surface status and body."""
        backend.respond("POST", "/artists", status=500, text="boom")
        async with Client(server) as mcp:
            with pytest.raises(ToolError) as excinfo:
                await mcp.call_tool("upsert_artist", {"name": "Queen"})
        assert "API request failed: 500 - boom" in str(excinfo.value)
