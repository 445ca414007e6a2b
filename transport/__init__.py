"""HTTP transport for reading event streams"""

from .stream_client import (
    EventStreamClient,
    InvalidStreamURL,
    StreamHTTPError,
    StreamTransportError,
    validate_stream_url,
)

__all__ = [
    "EventStreamClient",
    "InvalidStreamURL",
    "StreamHTTPError",
    "StreamTransportError",
    "validate_stream_url",
]
