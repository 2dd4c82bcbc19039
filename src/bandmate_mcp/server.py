"""
Bandmate MCP Server - FastMCP factory

Builds the FastMCP instance that every transport session binds to:
- Song tools (get_songs, get_song, get_songs_by_user, get_songs_in_list,
  upsert_song, search_songs)
- List tools (get_lists, get_list, upsert_list)
- Artist tools (get_artists, upsert_artist)

The server holds no per-session state; one instance serves all sessions.
"""
from __future__ import annotations

from fastmcp import FastMCP

from bandmate_mcp.config import AppConfig, get_config
from bandmate_mcp.core import BandmateClient, get_logger
from bandmate_mcp.tools import (
    register_artist_tools,
    register_list_tools,
    register_song_tools,
)

logger = get_logger("bandmate-mcp.server")

INSTRUCTIONS = """Bandmate MCP Server for managing songs (chords and lyrics),
song lists (setlists), and artists in the Bandmate app.

Use `search_songs` to find songs by title or tag.
Use `get_songs_in_list` to read the songs of a setlist.
Upserts create a record when no id is given and update it otherwise.
"""


def create_server(
    client: BandmateClient | None = None,
    config: AppConfig | None = None,
) -> FastMCP:
    """Create the FastMCP server with all Bandmate tools registered.

    Args:
        client: Backend client shared by every tool; built from config if omitted
        config: Application configuration; defaults to the environment

    Returns:
        Configured FastMCP instance
    """
    config = config or get_config()
    client = client or BandmateClient(config.backend)

    mcp = FastMCP(
        name=config.server.name,
        instructions=INSTRUCTIONS,
    )

    register_song_tools(mcp, client)
    register_list_tools(mcp, client)
    register_artist_tools(mcp, client)

    logger.info(
        "Bandmate tools registered",
        api_url=client.base_url,
        domains=["songs", "lists", "artists"],
    )
    return mcp
