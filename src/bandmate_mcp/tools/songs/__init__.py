"""
Bandmate Song Tools

Provides tools for reading, searching, and upserting songs:
- Public and per-user song listings
- Songs contained in a list
- Title/tag search over a song listing
"""

from .search import filter_songs
from .tools import register_song_tools

__all__ = ["register_song_tools", "filter_songs"]
