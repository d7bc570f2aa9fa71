"""Pytest configuration and fixtures for catapult-client tests.

This file provides:
- RecordingTransport: httpx transport that records requests and replays canned responses
- Fixtures: a ClientConfig and a Client wired to a RecordingTransport
"""

from __future__ import annotations

import json
from typing import Any, Generator

import httpx
import pytest

from catapult_client.client import Client
from catapult_client.models import ClientConfig

TEST_ENDPOINT = "https://api.test.local"


class RecordingTransport(httpx.MockTransport):
    """Mock transport that answers every request with one canned response.

    Usage:
        transport = RecordingTransport(status_code=201, headers={"Location": "/x/c-1"})
        with httpx.Client(transport=transport) as http_client:
            ...
        transport.requests[0].url
    """

    def __init__(
        self,
        status_code: int = 200,
        headers: dict[str, str] | None = None,
        content: bytes = b"",
    ) -> None:
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.headers = headers or {}
        self.content = content
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return httpx.Response(self.status_code, headers=self.headers, content=self.content)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def respond_json(self, body: Any, status_code: int = 200) -> None:
        """Switch the canned response to a JSON body."""
        self.status_code = status_code
        self.headers = {"Content-Type": "application/json"}
        self.content = json.dumps(body).encode("utf-8")


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        user_id="u-123",
        api_token="t-token",
        api_secret="s-secret",
        base_endpoint=TEST_ENDPOINT,
    )


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def client(
    config: ClientConfig, transport: RecordingTransport
) -> Generator[Client, None, None]:
    http_client = httpx.Client(transport=transport)
    try:
        yield Client(config, http_client=http_client)
    finally:
        http_client.close()
