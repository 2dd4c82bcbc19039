"""
Bandmate tool domains.

Each domain exposes a register_<domain>_tools(mcp, client) function that
adds its tools to a FastMCP server.
"""

from .artists import register_artist_tools
from .lists import register_list_tools
from .songs import register_song_tools

__all__ = [
    "register_song_tools",
    "register_list_tools",
    "register_artist_tools",
]
