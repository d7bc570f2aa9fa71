"""Errors - Exception taxonomy for the Catapult client.

Every failure a dispatch can produce is one of these. The client never
retries and never swallows them; policy (backoff, surfacing to a user)
belongs to the caller.
"""

from __future__ import annotations

from datetime import datetime


class CatapultError(Exception):
    """Base class for client errors."""


class MissingCredentialsError(CatapultError):
    """Raised when user id, API token or API secret is empty."""

    def __init__(self) -> None:
        super().__init__(
            "Missing auth data. Please use "
            'Client.from_credentials("user-id", "api-token", "api-secret")'
        )


class ConfigError(CatapultError):
    """Raised when configuration loading fails."""


class TransportError(CatapultError):
    """Raised on network failure or an unclassifiable HTTP status.

    status_code is None when the request never produced a response.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeError(CatapultError):
    """Raised when a body that should be JSON cannot be decoded."""


class RateLimitError(CatapultError):
    """Raised for 429 responses. Recoverable by waiting until reset."""

    def __init__(self, reset: datetime) -> None:
        super().__init__(f"RateLimitError: reset at {reset}")
        self.reset = reset


class ApplicationError(CatapultError):
    """The server understood the request and rejected it with a message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
