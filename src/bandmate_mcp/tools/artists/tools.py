"""
Bandmate artist domain tool implementations.
"""
from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from ...core.client import BandmateClient
from ...core.formatters import format_json
from ...core.models import ArtistUpsert


def register_artist_tools(mcp: FastMCP, client: BandmateClient) -> None:
    """Register all artist domain tools with the MCP server."""

    @mcp.tool(
        name="get_artists",
        annotations={
            "title": "Get Artists",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def get_artists() -> str:
        """Get all artists from Bandmate."""
        return format_json(await client.list_artists())

    @mcp.tool(
        name="upsert_artist",
        annotations={
            "title": "Create or Update Artist",
            "readOnlyHint": False,
            "destructiveHint": False,
            # backend derives the id from the lowercased, trimmed name
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def upsert_artist(
        name: Annotated[str, Field(description="The artist display name")],
    ) -> str:
        """Create a new artist or update an existing one.

        The artist ID is derived from the name (lowercased and trimmed), so
        upserting with the same name is idempotent.
        """
        return format_json(await client.upsert_artist(ArtistUpsert(name=name)))
