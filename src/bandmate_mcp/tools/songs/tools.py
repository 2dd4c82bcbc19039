"""
Bandmate song domain tool implementations.

Tool parameter names are camelCase because they are the public MCP schema.
"""
from __future__ import annotations

from typing import Annotated

from fastmcp import FastMCP
from pydantic import Field

from ...core.client import BandmateClient
from ...core.formatters import format_json
from ...core.models import SongDetails, SongQuery, SongUpsert
from .search import filter_songs

_READ_ONLY = {
    "readOnlyHint": True,
    "destructiveHint": False,
    "idempotentHint": True,
    "openWorldHint": True,
}


def register_song_tools(mcp: FastMCP, client: BandmateClient) -> None:
    """Register all song domain tools with the MCP server."""

    @mcp.tool(
        name="get_songs",
        annotations={"title": "Get Songs", **_READ_ONLY},
    )
    async def get_songs(
        userId: Annotated[
            str | None, Field(description="Optional user ID to filter songs")
        ] = None,
        ids: Annotated[
            str | None,
            Field(description="Optional comma-separated list of song IDs to fetch specific songs"),
        ] = None,
    ) -> str:
        """Get songs from Bandmate. Returns public songs, or if userId is provided, returns user's songs plus public songs."""
        query = SongQuery(ids=ids, user_id=userId)
        return format_json(await client.list_songs(query))

    @mcp.tool(
        name="get_song",
        annotations={"title": "Get Song", **_READ_ONLY},
    )
    async def get_song(
        id: Annotated[str, Field(description="The song ID to fetch")],
    ) -> str:
        """Get a single song by its ID"""
        return format_json(await client.get_song(id))

    @mcp.tool(
        name="get_songs_by_user",
        annotations={"title": "Get Songs By User", **_READ_ONLY},
    )
    async def get_songs_by_user(
        userId: Annotated[str, Field(description="The user ID to fetch songs for")],
    ) -> str:
        """Get all songs created by a specific user"""
        return format_json(await client.get_songs_by_user(userId))

    @mcp.tool(
        name="get_songs_in_list",
        annotations={"title": "Get Songs In List", **_READ_ONLY},
    )
    async def get_songs_in_list(
        listId: Annotated[str, Field(description="The list ID to fetch songs from")],
    ) -> str:
        """Get all songs contained in a specific list"""
        return format_json(await client.get_songs_in_list(listId))

    @mcp.tool(
        name="upsert_song",
        annotations={
            "title": "Create or Update Song",
            "readOnlyHint": False,
            "destructiveHint": False,
            "idempotentHint": False,
            "openWorldHint": True,
        },
    )
    async def upsert_song(
        title: Annotated[str, Field(description="The song title")],
        chordsText: Annotated[str, Field(description="The chord notation and lyrics")],
        id: Annotated[
            str | None,
            Field(description="Optional song ID (for updates). If not provided, a new song is created."),
        ] = None,
        isPublic: Annotated[
            bool, Field(description="Whether the song is publicly visible")
        ] = False,
        bpm: Annotated[int | float | None, Field(description="Beats per minute")] = None,
        key: Annotated[
            str | None, Field(description="Musical key (e.g., 'C', 'Am', 'G#')")
        ] = None,
        voice: Annotated[str | None, Field(description="Vocal range or type")] = None,
        tags: Annotated[
            list[str] | None, Field(description="Searchable tags for the song")
        ] = None,
        spotifyUrl: Annotated[str | None, Field(description="Spotify link to the song")] = None,
        youtubeUrl: Annotated[str | None, Field(description="YouTube link to the song")] = None,
        userId: Annotated[str | None, Field(description="Creator user ID")] = None,
    ) -> str:
        """Create a new song or update an existing one.

        If id is provided, updates that song; otherwise creates a new one.
        Musical details (bpm, key, voice) are nested under `details` and only
        the ones given are sent.
        """
        song = SongUpsert(
            id=id,
            title=title,
            chords_text=chordsText,
            public=isPublic,
            details=SongDetails(bpm=bpm, key=key, voice=voice),
            tags=tags or [],
            spotify_url=spotifyUrl,
            youtube_url=youtubeUrl,
            user_id=userId,
        )
        return format_json(await client.upsert_song(song))

    @mcp.tool(
        name="search_songs",
        annotations={"title": "Search Songs", **_READ_ONLY},
    )
    async def search_songs(
        query: Annotated[
            str, Field(description="Search query to match against song titles and tags")
        ],
        userId: Annotated[
            str | None,
            Field(description="Optional user ID to include user's private songs in search"),
        ] = None,
    ) -> str:
        """Search for songs by title or tags. Returns matching public songs.

        Matching is a case-insensitive substring test against the title and
        each tag; results keep the backend order.
        """
        payload = await client.list_songs(SongQuery(user_id=userId))
        return format_json(filter_songs(payload, query))
