"""
Error types for Bandmate backend calls.

Backend failures are surfaced verbatim (status and body text). The error
category is derived from the status code for logging; it never changes the
message the MCP client sees.
"""
from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories derived from backend HTTP status."""
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    VALIDATION = "validation"
    SERVICE = "service"
    UNKNOWN = "unknown"


# status_code -> (category, suggestion)
ERROR_MAP: dict[int, tuple[ErrorCategory, str]] = {
    400: (
        ErrorCategory.VALIDATION,
        "Check the tool parameters match what the Bandmate API expects."
    ),
    401: (
        ErrorCategory.AUTHENTICATION,
        "Set BANDMATE_AUTH_TOKEN to a valid bearer token."
    ),
    403: (
        ErrorCategory.AUTHORIZATION,
        "The configured token is not allowed to modify this resource."
    ),
    404: (
        ErrorCategory.NOT_FOUND,
        "Verify the song, list, or user ID exists."
    ),
    422: (
        ErrorCategory.VALIDATION,
        "The backend rejected the payload shape."
    ),
    429: (
        ErrorCategory.RATE_LIMIT,
        "Reduce request frequency and retry later."
    ),
    500: (
        ErrorCategory.SERVICE,
        "Bandmate API internal error. Retry later."
    ),
    502: (
        ErrorCategory.SERVICE,
        "Bandmate API is unreachable behind its gateway."
    ),
    503: (
        ErrorCategory.SERVICE,
        "Bandmate API is temporarily unavailable."
    ),
}


def categorize_status(status: int) -> ErrorCategory:
    """Map an HTTP status to an error category."""
    if status in ERROR_MAP:
        return ERROR_MAP[status][0]
    if 500 <= status < 600:
        return ErrorCategory.SERVICE
    return ErrorCategory.UNKNOWN


class ApiError(Exception):
    """Raised when the Bandmate API answers with a non-2xx status."""

    def __init__(self, status: int, body: str, endpoint: str | None = None) -> None:
        super().__init__(f"API request failed: {status} - {body}")
        self.status = status
        self.body = body
        self.endpoint = endpoint

    @property
    def category(self) -> ErrorCategory:
        return categorize_status(self.status)

    @property
    def suggestion(self) -> str:
        if self.status in ERROR_MAP:
            return ERROR_MAP[self.status][1]
        return "Check the error details and the backend status."

    def to_dict(self) -> dict[str, Any]:
        """Structured form used for log events."""
        return {
            "status": self.status,
            "category": self.category.value,
            "endpoint": self.endpoint,
            "body": self.body,
        }


class AuthConfigurationError(Exception):
    """Raised when an authenticated call is made with no token under the closed policy."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(
            f"Authentication required for {endpoint} but BANDMATE_AUTH_TOKEN is not set"
        )
        self.endpoint = endpoint
