"""
Local song search.

The backend has no search endpoint, so search_songs fetches a listing and
filters it here.
"""
from __future__ import annotations

from typing import Any


def unwrap_songs(payload: Any) -> list[Any]:
    """Return the song array from a listing payload.

    The backend answers either with a bare array or with an object carrying
    the array under "body".
    """
    if isinstance(payload, dict):
        payload = payload.get("body") or []
    if not isinstance(payload, list):
        return []
    return payload


def _matches(song: Any, needle: str) -> bool:
    if not isinstance(song, dict):
        return False

    title = song.get("title")
    if isinstance(title, str) and needle in title.lower():
        return True

    tags = song.get("tags") or []
    return any(isinstance(tag, str) and needle in tag.lower() for tag in tags)


def filter_songs(payload: Any, query: str) -> list[Any]:
    """Case-insensitive substring match over title and tags, order preserved."""
    needle = query.lower()
    return [song for song in unwrap_songs(payload) if _matches(song, needle)]
