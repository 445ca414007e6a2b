"""HTTP request headers sent by the stream client"""

from typing import Dict

CLIENT_VERSION = "1.0.0"

# User-Agent string for stream requests
USER_AGENT = f"sse-sync-client/{CLIENT_VERSION}"

# Headers for a long-lived event stream request
STREAM_HEADERS: Dict[str, str] = {
    "Accept": "text/event-stream",
    "Cache-Control": "no-cache",
    "User-Agent": USER_AGENT,
}

# Response headers for the sync server's event stream
EVENT_STREAM_RESPONSE_HEADERS: Dict[str, str] = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}
