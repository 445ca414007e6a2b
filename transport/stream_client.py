"""Blocking HTTP client that yields raw event stream chunks"""

import logging
from typing import Dict, Iterator, Optional, TYPE_CHECKING
from urllib.parse import urlparse

import httpx

from headers import STREAM_HEADERS
import settings

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from stream_debug import StreamTracer

SUPPORTED_SCHEMES = ("http", "https")
BODY_PREVIEW_CHARS = 500


class StreamTransportError(Exception):
    """Base class for transport failures raised by the stream client."""


class InvalidStreamURL(StreamTransportError, ValueError):
    """Raised when the stream URL is not an absolute http(s) URL."""


class StreamHTTPError(StreamTransportError):
    """
    Raised when the server answers with a non-success status. The body is
    read (up to BODY_PREVIEW_CHARS) so the caller can show what went wrong.
    """

    def __init__(self, message: str, status_code: int, body_preview: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body_preview = body_preview


def validate_stream_url(url: str) -> str:
    """Ensure `url` is an absolute http(s) URL and return it unchanged."""
    try:
        parsed = urlparse(url)
        # .port validates the range lazily
        parsed.port
    except ValueError as e:
        raise InvalidStreamURL(f"Malformed stream URL {url!r}: {e}") from e
    if parsed.scheme not in SUPPORTED_SCHEMES or not parsed.netloc:
        raise InvalidStreamURL(f"Unsupported stream URL {url!r}: expected an http:// or https:// URL")
    return url


class EventStreamClient:
    """
    Minimal streaming GET client.

    Rules:
    - One request per iter_chunks() call, no reconnects or retries
    - Chunks are yielded as they arrive; the next read only happens when
      the caller asks for the next chunk
    - httpx errors propagate unchanged to the caller
    """

    def __init__(
        self,
        url: str,
        *,
        client: Optional[httpx.Client] = None,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        verify: Optional[bool] = None,
        follow_redirects: Optional[bool] = None,
        headers: Optional[Dict[str, str]] = None,
        tracer: Optional["StreamTracer"] = None,
    ):
        self.url = validate_stream_url(url)
        self.tracer = tracer

        base_headers = dict(STREAM_HEADERS)
        if headers:
            base_headers.update(headers)
        self._headers = base_headers

        connect_timeout = settings.CONNECT_TIMEOUT if connect_timeout is None else connect_timeout
        read_timeout = settings.READ_TIMEOUT if read_timeout is None else read_timeout

        # Allow caller to supply a client; otherwise own lifecycle
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(connect_timeout, read=read_timeout),
            verify=settings.VERIFY_TLS if verify is None else verify,
            follow_redirects=settings.FOLLOW_REDIRECTS if follow_redirects is None else follow_redirects,
        )
        self._client_owned = client is None

    def iter_chunks(self) -> Iterator[bytes]:
        """Open the stream and yield raw body chunks until the server closes it."""
        logger.debug(f"Opening event stream GET {self.url}")
        if self.tracer:
            self.tracer.note(f"dispatching GET {self.url}")

        with self._client.stream("GET", self.url, headers=self._headers) as response:
            status = response.status_code
            if self.tracer:
                self.tracer.note(f"server responded with status={status}")

            if not response.is_success:
                body_preview = ""
                try:
                    raw = response.read()
                    body_preview = raw.decode("utf-8", errors="replace")[:BODY_PREVIEW_CHARS]
                except httpx.HTTPError:
                    body_preview = "<unreadable>"

                logger.error(f"Event stream request failed [{status}] url={self.url} body={body_preview}")
                if self.tracer:
                    self.tracer.error(f"status={status} body={body_preview}")
                raise StreamHTTPError(
                    f"Server responded with HTTP {status} for {self.url}",
                    status_code=status,
                    body_preview=body_preview,
                )

            content_type = response.headers.get("content-type", "")
            if "text/event-stream" not in content_type:
                logger.debug(f"Unexpected content-type {content_type!r}, reading body as event chunks anyway")
            logger.info(f"Event stream connected ({self.url})")

            for chunk in response.iter_bytes():
                if chunk:
                    yield chunk

        logger.debug(f"Event stream closed by server ({self.url})")

    def close(self) -> None:
        if self._client_owned:
            self._client.close()

    def __enter__(self) -> "EventStreamClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
