"""Data models for catapult-client.

Configuration and wire models use Pydantic v2. The per-call request spec and
the classified response variants are plain frozen dataclasses, because they
carry arbitrary caller payloads and live only for one call.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, NoReturn, Self, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, model_validator

from catapult_client.errors import (
    ApplicationError,
    MissingCredentialsError,
    RateLimitError,
    TransportError,
)
from catapult_client.projector import project_model

DEFAULT_ENDPOINT = "https://api.catapult.inetwork.com"


# =============================================================================
# Client Configuration
# =============================================================================


def _leading_slash(path: str) -> str:
    if not path.startswith("/"):
        return "/" + path
    return path


class ClientConfig(BaseModel):
    """Credentials and endpoint for one logical client. Immutable."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    user_id: str = Field(description="Catapult user id (u-...)")
    api_token: str = Field(description="API token, Basic auth username")
    api_secret: str = Field(description="API secret, Basic auth password")
    base_endpoint: str = Field(default=DEFAULT_ENDPOINT, description="API host URL")
    timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")

    @model_validator(mode="after")
    def check_credentials(self) -> Self:
        if not self.user_id or not self.api_token or not self.api_secret:
            raise MissingCredentialsError()
        return self

    def resource_path(self, suffix: str) -> str:
        """Path of a resource owned by this user: /users/{user_id}{suffix}."""
        return f"/users/{self.user_id}{_leading_slash(suffix)}"

    def versioned_url(self, path: str, version: str) -> str:
        """Absolute URL: {base_endpoint}/{version}{path}."""
        return f"{self.base_endpoint}/{version}{_leading_slash(path)}"


# =============================================================================
# Request Models
# =============================================================================


class QueryOptions(BaseModel):
    """Base class for typed request options sent as query parameters.

    Subclasses declare their options as fields with defaults. to_params()
    emits only the fields that differ from their default, keyed by the
    camelCase form of the field name (or the field's alias).

        class CallQuery(QueryOptions):
            page: int = 0
            size: int = 0
            conference_id: str = ""

        CallQuery(size=25, conference_id="c-1").to_params()
        # {"size": "25", "conferenceId": "c-1"}
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_params(self) -> dict[str, str]:
        return project_model(self)


@dataclass(frozen=True)
class RequestSpec:
    """One API call: where it goes, what it carries, how to decode the reply.

    Attributes:
        method: HTTP method.
        path: Path below the version segment, e.g. /users/u-1/calls.
        version: API version segment ("v1" or "v2").
        shape: Type the success body is decoded into. None decodes to a dict.
        payload: Query options, mapping or JSON-serializable body.
        force_query: Send the payload as query parameters even for non-GET.
    """

    method: str
    path: str
    version: str
    shape: Any = None
    payload: Any = None
    force_query: bool = False

    @property
    def sends_query(self) -> bool:
        return self.method.upper() == "GET" or self.force_query


# =============================================================================
# Classified Responses
# =============================================================================


@dataclass(frozen=True)
class Success:
    """2xx/3xx response with its decoded body."""

    value: Any
    headers: httpx.Headers

    def unwrap(self) -> Any:
        return self.value


@dataclass(frozen=True)
class RateLimited:
    """429 response. reset is when the caller may try again (UTC)."""

    reset: datetime

    def unwrap(self) -> NoReturn:
        raise RateLimitError(self.reset)


@dataclass(frozen=True)
class ApplicationFailure:
    """Error response whose body named a message or code."""

    message: str

    def unwrap(self) -> NoReturn:
        raise ApplicationError(self.message)


@dataclass(frozen=True)
class TransportFailure:
    """Error response with nothing usable in its body."""

    status_code: int

    def unwrap(self) -> NoReturn:
        raise TransportError(f"Http code {self.status_code}", status_code=self.status_code)


ClassifiedResponse = Union[Success, RateLimited, ApplicationFailure, TransportFailure]


# =============================================================================
# Resource Models
# =============================================================================


class NumberInfo(BaseModel):
    """CNAM information for a phone number."""

    model_config = ConfigDict(extra="ignore")

    number: str = Field(default="", description="Phone number in E.164 format")
    name: str = Field(default="", description="Caller name registered for the number")
    created: str = Field(default="", description="Creation timestamp")
    updated: str = Field(default="", description="Last update timestamp")
