"""
Bandmate list domain tool implementations.
"""
from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from ...core.client import BandmateClient
from ...core.formatters import format_json
from ...core.models import ListUpsert


def register_list_tools(mcp: FastMCP, client: BandmateClient) -> None:
    """Register all list domain tools with the MCP server."""

    @mcp.tool(
        name="get_lists",
        annotations={
            "title": "Get Lists",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def get_lists(
        userId: Annotated[
            str | None, Field(description="Optional user ID to filter lists")
        ] = None,
    ) -> str:
        """Get lists from Bandmate. Returns public lists, or if userId is provided, returns user's lists plus public lists."""
        return format_json(await client.list_lists(userId))

    @mcp.tool(
        name="get_list",
        annotations={
            "title": "Get List",
            "readOnlyHint": True,
            "destructiveHint": False,
            "idempotentHint": True,
            "openWorldHint": True,
        },
    )
    async def get_list(
        id: Annotated[str, Field(description="The list ID to fetch")],
    ) -> str:
        """Get a single list by its ID"""
        return format_json(await client.get_list(id))

    @mcp.tool(
        name="upsert_list",
        annotations={
            "title": "Create or Update List",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def upsert_list(
        id: Annotated[
            str | None,
            Field(description="Optional list ID (for updates). If not provided, a new list is created."),
        ] = None,
        name: Annotated[str | None, Field(description="The list name")] = None,
        isPrivate: Annotated[bool, Field(description="Whether the list is private")] = False,
        songs: Annotated[
            list[str] | None, Field(description="Array of song IDs in the list")
        ] = None,
        userId: Annotated[str | None, Field(description="Owner user ID")] = None,
    ) -> str:
        """Create a new list or update an existing one. Requires authentication.

        The call carries the configured bearer token. Without one it is sent
        unauthenticated, or refused when BANDMATE_AUTH_POLICY=closed.
        """
        song_list = ListUpsert(
            id=id,
            name=name,
            private=isPrivate,
            songs=songs,
            user_uid=userId,
        )
        return format_json(await client.upsert_list(song_list))
