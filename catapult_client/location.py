"""Resource id extraction from Location headers.

Creation endpoints answer 201 with an empty body and a Location header
pointing at the new resource; the id is its last path segment.
"""

from __future__ import annotations

from collections.abc import Mapping

import httpx


def extract_id(location: str) -> str:
    """Return the last non-empty /-separated segment of location, or ""."""
    segments = [segment for segment in location.split("/") if segment]
    if not segments:
        return ""
    return segments[-1]


def extract_id_from_headers(headers: Mapping[str, str]) -> str:
    """Read the Location header (case-insensitive) and extract its id."""
    return extract_id(httpx.Headers(headers).get("location", ""))
