"""Response Classifier - Maps a raw HTTP outcome to one result variant.

    200..399  -> Success(decoded body, headers)
    429       -> RateLimited(reset time from X-RateLimit-Reset)
    other     -> ApplicationFailure(message or code from the JSON body)
                 or TransportFailure(status) when the body names neither

Malformed JSON on a branch that expects JSON raises DecodeError rather
than being folded into one of the variants.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from catapult_client.errors import DecodeError
from catapult_client.models import (
    ApplicationFailure,
    ClassifiedResponse,
    RateLimited,
    Success,
    TransportFailure,
)

RATE_LIMIT_RESET_HEADER = "X-RateLimit-Reset"

_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)

# Signed decimal integer, nothing else (no whitespace or digit separators).
_RESET_PATTERN = re.compile(r"[+-]?[0-9]+")


def reset_time(header_value: str | None) -> datetime:
    """Convert an X-RateLimit-Reset value (epoch milliseconds) to a UTC time.

    The result is floor(ms / 1000) + 1 seconds, i.e. always rounded one
    second past the server's reset. Missing, malformed or out-of-range
    values yield the epoch origin.
    """
    if header_value is None or not _RESET_PATTERN.fullmatch(header_value):
        return _EPOCH
    try:
        return datetime.fromtimestamp(int(header_value) // 1000 + 1, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return _EPOCH


def decode_body(raw_body: bytes, shape: Any = None) -> Any:
    """Decode a JSON body into shape (default: a string-keyed dict).

    Raises:
        DecodeError: If the body is not JSON or does not fit the shape.
    """
    target = dict[str, Any] if shape is None else shape
    try:
        return TypeAdapter(target).validate_json(raw_body)
    except ValidationError as e:
        raise DecodeError(f"Cannot decode response body as {_shape_name(target)}: {e}") from e


def _shape_name(shape: Any) -> str:
    return getattr(shape, "__name__", None) or str(shape)


def _error_message(raw_body: bytes) -> Any:
    if not raw_body:
        return None
    try:
        error_body = json.loads(raw_body)
    except ValueError as e:
        raise DecodeError(f"Cannot decode error body: {e}") from e
    if not isinstance(error_body, dict):
        raise DecodeError(
            f"Error body must be a JSON object, got {type(error_body).__name__}"
        )
    message = error_body.get("message")
    if message is None:
        message = error_body.get("code")
    return message


def classify(
    status_code: int,
    headers: Mapping[str, str],
    raw_body: bytes,
    shape: Any = None,
) -> ClassifiedResponse:
    """Classify one HTTP response.

    Args:
        status_code: HTTP status code.
        headers: Response headers; looked up case-insensitively.
        raw_body: Response body bytes (may be empty).
        shape: Type to decode a success body into. None decodes to a dict.

    Returns:
        Exactly one of Success, RateLimited, ApplicationFailure, TransportFailure.

    Raises:
        DecodeError: If a non-empty body that must be JSON is malformed.
    """
    headers = httpx.Headers(headers)

    if 200 <= status_code < 400:
        if raw_body:
            value = decode_body(raw_body, shape)
        else:
            value = {} if shape is None else None
        return Success(value=value, headers=headers)

    if status_code == 429:
        return RateLimited(reset=reset_time(headers.get(RATE_LIMIT_RESET_HEADER)))

    message = _error_message(raw_body)
    if message is None:
        return TransportFailure(status_code=status_code)
    return ApplicationFailure(message=str(message))
