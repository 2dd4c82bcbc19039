"""Bandmate Artist Tools"""

from .tools import register_artist_tools

__all__ = ["register_artist_tools"]
