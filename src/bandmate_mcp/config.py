"""
Bandmate MCP Server Configuration

Handles environment variables, backend settings, and server settings.
The bearer token is sourced from the environment and never logged.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_API_URL = "https://vertigox.ue.r.appspot.com/api"


class AuthPolicy(str, Enum):
    """What to do when an authenticated call is made without a token."""
    OPEN = "open"
    CLOSED = "closed"


class ServerConfig(BaseModel):
    """HTTP front end configuration."""
    name: str = Field(default="bandmate-mcp", description="Server name")
    version: str = Field(default="1.0.0", description="Server version")
    description: str = Field(
        default="MCP server for Bandmate REST API",
        description="Human-readable service description"
    )
    host: str = Field(default="0.0.0.0", description="Listen address")
    port: int = Field(default=8080, description="HTTP port", ge=1, le=65535)
    log_level: str = Field(default="INFO", description="Logging level")
    log_json: bool = Field(default=False, description="Render log lines as JSON")
    json_response: bool = Field(
        default=False,
        description="Answer /mcp POSTs with plain JSON instead of an SSE stream"
    )
    legacy_sse: bool = Field(default=True, description="Expose /sse and /messages")

    @field_validator('log_level')
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()


class BackendConfig(BaseModel):
    """Bandmate REST API configuration."""
    api_url: str = Field(default=DEFAULT_API_URL, description="Backend base URL")
    auth_token: str = Field(default="", description="Bearer token for authenticated calls")
    auth_policy: AuthPolicy = Field(
        default=AuthPolicy.OPEN,
        description="open: send unauthenticated when no token; closed: refuse the call"
    )

    @field_validator('api_url')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @property
    def has_token(self) -> bool:
        return bool(self.auth_token)


@dataclass
class AppConfig:
    """Application configuration container."""
    server: ServerConfig = field(default_factory=ServerConfig)
    backend: BackendConfig = field(default_factory=BackendConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load configuration from environment variables.

        Environment variables referenced:
        - BANDMATE_API_URL
        - BANDMATE_AUTH_TOKEN
        - BANDMATE_AUTH_POLICY
        - PORT
        - BANDMATE_MCP_HOST
        - BANDMATE_MCP_LOG_LEVEL
        - BANDMATE_MCP_LOG_JSON
        - BANDMATE_MCP_JSON_RESPONSE
        - BANDMATE_MCP_LEGACY_SSE
        """
        load_dotenv()

        return cls(
            server=ServerConfig(
                host=os.getenv("BANDMATE_MCP_HOST", "0.0.0.0"),
                port=int(os.getenv("PORT", "8080")),
                log_level=os.getenv("BANDMATE_MCP_LOG_LEVEL", "INFO"),
                log_json=_env_flag("BANDMATE_MCP_LOG_JSON", False),
                json_response=_env_flag("BANDMATE_MCP_JSON_RESPONSE", False),
                legacy_sse=_env_flag("BANDMATE_MCP_LEGACY_SSE", True),
            ),
            backend=BackendConfig(
                api_url=os.getenv("BANDMATE_API_URL") or DEFAULT_API_URL,
                auth_token=os.getenv("BANDMATE_AUTH_TOKEN", ""),
                auth_policy=AuthPolicy(os.getenv("BANDMATE_AUTH_POLICY", "open").lower()),
            ),
        )


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Global config instance (lazy-loaded)
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
