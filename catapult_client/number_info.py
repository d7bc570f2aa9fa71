"""Number info - CNAM lookup for a phone number."""

from __future__ import annotations

from urllib.parse import quote

from catapult_client.client import Client
from catapult_client.models import NumberInfo

NUMBER_INFO_PATH = "phoneNumbers/numberInfo"


def get_number_info(client: Client, number: str) -> NumberInfo:
    """Return CNAM information for number.

    Raises:
        RateLimitError, ApplicationError, TransportError: When the API
            does not answer with a success.
        DecodeError: If the body does not match NumberInfo.
    """
    path = f"{NUMBER_INFO_PATH}/{quote(number, safe='')}"
    info = client.make_request("GET", path, NumberInfo).unwrap()
    return info if info is not None else NumberInfo()
