"""Client - Builds, sends and classifies Catapult API requests.

Every API call goes through Client.send():

    1. Build the versioned URL and authenticated headers from ClientConfig.
    2. Route the payload: GET (or force_query) -> query string via project(),
       anything else -> JSON body.
    3. Send through the shared httpx.Client, reading the body inside a
       streaming context so the response is always released.
    4. Hand status, headers and bytes to classify().

The client keeps no per-call state, so one instance can serve many threads.
It never retries; a RateLimited result carries the reset time for the
caller to wait on.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter

from catapult_client.classifier import classify
from catapult_client.errors import TransportError
from catapult_client.models import ClassifiedResponse, ClientConfig, RequestSpec
from catapult_client.projector import project

VERSION = "0.1.0"
USER_AGENT = f"catapult-client/v{VERSION}"

API_V1 = "v1"
API_V2 = "v2"

logger = logging.getLogger(__name__)


def _json_body(payload: Any) -> Any:
    """Convert a payload into a JSON-serializable value."""
    if isinstance(payload, BaseModel):
        return payload.model_dump(mode="json", by_alias=True, exclude_none=True)
    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return TypeAdapter(type(payload)).dump_python(payload, mode="json", exclude_none=True)
    return payload


class Client:
    """Dispatches requests to the Catapult API for one set of credentials.

    Usage:
        client = Client.from_credentials("u-123", "t-abc", "s-xyz")
        try:
            result = client.make_request("GET", client.config.resource_path("calls"))
        finally:
            client.close()

    Or with context manager:
        with Client(config) as client:
            info = client.make_request("GET", "phoneNumbers/numberInfo/+1919", NumberInfo)
    """

    def __init__(
        self,
        config: ClientConfig,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Credentials and endpoint.
            http_client: Transport to share. When omitted the client creates
                         one and closes it in close().
        """
        self._config = config
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.Client(
            timeout=config.timeout,
            follow_redirects=True,
        )

    @classmethod
    def from_credentials(
        cls,
        user_id: str,
        api_token: str,
        api_secret: str,
        base_endpoint: str | None = None,
    ) -> "Client":
        """Create a client from raw credentials.

        Raises:
            MissingCredentialsError: If any credential is empty.
        """
        kwargs: dict[str, Any] = {
            "user_id": user_id,
            "api_token": api_token,
            "api_secret": api_secret,
        }
        if base_endpoint:
            kwargs["base_endpoint"] = base_endpoint
        return cls(ClientConfig(**kwargs))

    @property
    def config(self) -> ClientConfig:
        return self._config

    def __enter__(self) -> "Client":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_http_client:
            self._http_client.close()

    def _request_kwargs(self, spec: RequestSpec) -> dict[str, Any]:
        """Build httpx request kwargs: URL, headers, auth and routed payload."""
        headers = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        kwargs: dict[str, Any] = {
            "method": spec.method.upper(),
            "url": self._config.versioned_url(spec.path, spec.version),
            "headers": headers,
            "auth": httpx.BasicAuth(self._config.api_token, self._config.api_secret),
        }

        if spec.sends_query:
            params = project(spec.payload)
            if params:
                kwargs["params"] = params
        elif spec.payload is not None:
            headers["Content-Type"] = "application/json"
            kwargs["json"] = _json_body(spec.payload)

        return kwargs

    def send(self, spec: RequestSpec) -> ClassifiedResponse:
        """Execute one request and classify the response.

        Returns:
            Success, RateLimited, ApplicationFailure or TransportFailure.

        Raises:
            TransportError: If the request fails before a response arrives
                            (connection, DNS, timeout).
            DecodeError: If a JSON body is malformed.
        """
        kwargs = self._request_kwargs(spec)
        logger.debug("%s %s", kwargs["method"], kwargs["url"])

        try:
            with self._http_client.stream(**kwargs) as response:
                raw_body = response.read()
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timeout: {e}") from e
        except httpx.ConnectError as e:
            raise TransportError(f"Connection error: {e}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request error: {e}") from e

        logger.debug("%s %s -> %d", kwargs["method"], kwargs["url"], response.status_code)
        return classify(response.status_code, response.headers, raw_body, spec.shape)

    def dispatch(
        self,
        method: str,
        path: str,
        version: str,
        shape: Any = None,
        payload: Any = None,
        *,
        force_query: bool = False,
    ) -> ClassifiedResponse:
        """Send a request to an explicit API version."""
        return self.send(
            RequestSpec(
                method=method,
                path=path,
                version=version,
                shape=shape,
                payload=payload,
                force_query=force_query,
            )
        )

    def make_request(
        self,
        method: str,
        path: str,
        shape: Any = None,
        payload: Any = None,
        *,
        force_query: bool = False,
    ) -> ClassifiedResponse:
        """Send a request to the v1 API."""
        return self.dispatch(method, path, API_V1, shape, payload, force_query=force_query)

    def make_request_v2(
        self,
        method: str,
        path: str,
        shape: Any = None,
        payload: Any = None,
        *,
        force_query: bool = False,
    ) -> ClassifiedResponse:
        """Send a request to the v2 API."""
        return self.dispatch(method, path, API_V2, shape, payload, force_query=force_query)
