"""
Core infrastructure modules for the Bandmate MCP server.

This package contains:
- client: httpx wrapper for the Bandmate REST API
- errors: Backend error types and status categories
- formatters: Tool result formatting
- models: Pydantic wire models and server metadata
- observability: structlog configuration
"""

from .client import BandmateClient
from .errors import ApiError, AuthConfigurationError, ErrorCategory, categorize_status
from .formatters import format_json
from .models import (
    ArtistUpsert,
    HealthStatus,
    ListUpsert,
    ServerManifest,
    SongDetails,
    SongQuery,
    SongUpsert,
)
from .observability import configure_logging, get_logger

__all__ = [
    # Client
    "BandmateClient",
    # Errors
    "ApiError",
    "AuthConfigurationError",
    "ErrorCategory",
    "categorize_status",
    # Formatters
    "format_json",
    # Models
    "SongDetails",
    "SongUpsert",
    "SongQuery",
    "ListUpsert",
    "ArtistUpsert",
    "HealthStatus",
    "ServerManifest",
    # Observability
    "configure_logging",
    "get_logger",
]
