"""Stream client application: wires transport, tracing and dispatch together"""

import logging
import uuid
from contextlib import closing
from typing import Optional, TextIO
from urllib.parse import urlparse

import httpx

import settings
from sse_events import EXIT_OK, EventDispatcher, process_stream
from stream_debug import StreamTracer
from transport import EventStreamClient, StreamTransportError, validate_stream_url
from cli.debug_setup import setup_debug_console

logger = logging.getLogger(__name__)


class StreamClientCLI:
    """Reads one event stream and turns its events into output and an exit code"""

    def __init__(
        self,
        debug: bool = False,
        debug_logger: Optional[logging.Logger] = None,
        stream_trace_enabled: bool = False,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        verify: Optional[bool] = None,
        follow_redirects: Optional[bool] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.debug = debug
        self.stream_trace_enabled = stream_trace_enabled
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.verify = verify
        self.follow_redirects = follow_redirects
        self.http_client = http_client
        self.dispatcher = EventDispatcher(stdout=stdout, stderr=stderr)

        self.console = setup_debug_console(
            debug,
            debug_logger,
            stream_trace=stream_trace_enabled,
            read_timeout=read_timeout if read_timeout is not None else settings.READ_TIMEOUT,
        )

        if debug:
            self.console.print(f"[yellow]Debug mode enabled - verbose logging will be written to {settings.DEBUG_LOG_FILE}[/yellow]")
        if stream_trace_enabled:
            self.console.print(f"[yellow]Stream tracing enabled - raw chunks will be logged to {settings.STREAM_TRACE_DIR}[/yellow]")

    def run(self, url: str) -> int:
        """
        Consume the stream at `url` until it ends or an event terminates it.

        Transport failures propagate to the caller.

        Returns:
            Exit code decided by the stream (0 when it ended on its own)
        """
        validate_stream_url(url)

        run_id = str(uuid.uuid4())[:8]
        tracer = None
        if self.stream_trace_enabled:
            tracer = StreamTracer.open(
                settings.STREAM_TRACE_DIR,
                run_id=run_id,
                route=urlparse(url).netloc,
                max_bytes=settings.STREAM_TRACE_MAX_BYTES,
            )
            logger.info(f"[{run_id}] Tracing stream to {tracer.path}")

        try:
            with EventStreamClient(
                url,
                client=self.http_client,
                connect_timeout=self.connect_timeout,
                read_timeout=self.read_timeout,
                verify=self.verify,
                follow_redirects=self.follow_redirects,
                tracer=tracer,
            ) as client:
                with closing(client.iter_chunks()) as chunks:
                    exit_code = process_stream(chunks, self.dispatcher, tracer=tracer)
        except (StreamTransportError, httpx.HTTPError) as e:
            logger.debug(f"[{run_id}] Transport failure: {type(e).__name__}: {e}")
            if tracer:
                tracer.error(f"{type(e).__name__}: {e}")
            raise
        finally:
            if tracer:
                tracer.close()

        if exit_code is None:
            return EXIT_OK
        return exit_code
