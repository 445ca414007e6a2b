"""HTTP headers and constants package"""

from .constants import (
    CLIENT_VERSION,
    USER_AGENT,
    STREAM_HEADERS,
    EVENT_STREAM_RESPONSE_HEADERS,
)

__all__ = [
    "CLIENT_VERSION",
    "USER_AGENT",
    "STREAM_HEADERS",
    "EVENT_STREAM_RESPONSE_HEADERS",
]
