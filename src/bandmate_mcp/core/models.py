"""
Pydantic models for Bandmate wire payloads and server metadata.

Every outbound request body is built from one of these records so the
flat-tool-parameter to nested-wire-shape mapping lives in one place.
"""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    # Wire models
    "WireModel",
    "SongDetails",
    "SongUpsert",
    "SongQuery",
    "ListUpsert",
    "ArtistUpsert",
    # Server metadata
    "HealthStatus",
    "ServerManifest",
]


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and v == "":
        return None
    return v


class WireModel(BaseModel):
    """Base model for request bodies sent to the Bandmate API."""
    model_config = ConfigDict(
        populate_by_name=True,
        validate_assignment=True,
        extra='forbid',
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize with backend field names, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True)


class SongDetails(WireModel):
    """Musical details nested under a song's `details` key."""

    bpm: int | float | None = Field(default=None, description="Beats per minute")
    key: str | None = Field(default=None, description="Musical key (e.g., 'C', 'Am', 'G#')")
    voice: str | None = Field(default=None, description="Vocal range or type")

    @field_validator('key', 'voice', mode='before')
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class SongUpsert(WireModel):
    """Body for POST /songs."""

    title: str = Field(..., description="The song title")
    chords_text: str = Field(
        ...,
        alias="chords-text",
        description="The chord notation and lyrics"
    )
    public: bool = Field(default=False, description="Whether the song is publicly visible")
    details: SongDetails = Field(default_factory=SongDetails)
    tags: list[str] = Field(default_factory=list, description="Searchable tags")
    id: str | None = Field(default=None, description="Song ID for updates")
    spotify_url: str | None = Field(default=None, alias="spotifyUrl")
    youtube_url: str | None = Field(default=None, alias="youtubeUrl")
    user_id: str | None = Field(default=None, description="Creator user ID")

    @field_validator('id', 'spotify_url', 'youtube_url', 'user_id', mode='before')
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class SongQuery(WireModel):
    """Query filters for GET /songs. Only one filter is ever sent."""

    ids: str | None = Field(default=None, description="Comma-separated song IDs")
    user_id: str | None = Field(default=None, alias="userId")

    @field_validator('ids', 'user_id', mode='before')
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)

    def to_params(self) -> dict[str, str]:
        """Query parameters; `ids` takes precedence over `userId`."""
        if self.ids:
            return {"ids": self.ids}
        if self.user_id:
            return {"userId": self.user_id}
        return {}


class ListUpsert(WireModel):
    """Body for POST /lists."""

    private: bool = Field(default=False, description="Whether the list is private")
    id: str | None = Field(default=None, description="List ID for updates")
    name: str | None = Field(default=None, description="The list name")
    songs: list[str] | None = Field(default=None, description="Song IDs in the list")
    user_uid: str | None = Field(default=None, description="Owner user ID")

    @field_validator('id', 'name', 'user_uid', mode='before')
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        return _blank_to_none(v)


class ArtistUpsert(WireModel):
    """Body for POST /artists."""

    name: str = Field(..., description="The artist display name")


class HealthStatus(BaseModel):
    """Liveness payload for GET /health."""

    status: str = Field(default="healthy", description="Always 'healthy' while the process is up")
    service: str = Field(description="Service name")


class ServerManifest(BaseModel):
    """Static service descriptor for GET /."""

    name: str = Field(description="Server identifier")
    version: str = Field(description="Semantic version")
    description: str = Field(description="Brief description")
    endpoints: dict[str, str] = Field(
        default_factory=dict,
        description="Endpoint name to path"
    )
