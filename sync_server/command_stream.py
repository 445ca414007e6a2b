"""
Runs a command and renders its output as an event stream.

Every stdout line becomes a `stdout` event and every stderr line a `stderr`
event. The stream always ends with an `error` event, whose data is empty on
success and describes the failure otherwise. Clients rely on that final
event to pick their exit code.
"""
import asyncio
import logging
from typing import AsyncIterator, List, Optional

logger = logging.getLogger(__name__)

# Per-line buffer limit for the subprocess pipes
LINE_LIMIT = 1024 * 1024


def format_event(name: str, data: str) -> str:
    """Render one event in the event:/data: framing, terminated by a blank line."""
    return f"event:{name}\ndata:{data}\n\n"


def describe_exit(returncode: int) -> str:
    """Error event data for a finished process; empty on success."""
    if returncode == 0:
        return ""
    if returncode < 0:
        return f"terminated by signal {-returncode}"
    return f"exit status {returncode}"


async def _pump_lines(stream: asyncio.StreamReader, name: str, queue: "asyncio.Queue[Optional[str]]") -> None:
    try:
        while True:
            try:
                line = await stream.readline()
            except ValueError:
                # readline drops the buffered part of an over-long line
                logger.warning(f"{name} line exceeded {LINE_LIMIT} bytes, dropping it")
                queue.put_nowait(format_event("stderr", f"[{name} line longer than {LINE_LIMIT} bytes truncated]"))
                continue
            if not line:
                break
            text = line.decode("utf-8", errors="replace").rstrip("\r\n")
            queue.put_nowait(format_event(name, text))
    finally:
        # One sentinel per reader marks its pipe as drained
        queue.put_nowait(None)


async def run_command_events(argv: List[str]) -> AsyncIterator[str]:
    """
    Start `argv` and yield its output as events until it exits.

    The subprocess is killed if the consumer stops iterating early
    (e.g. the HTTP client disconnected).
    """
    logger.info(f"Starting command: {argv}")
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=LINE_LIMIT,
        )
    except OSError as e:
        logger.error(f"Failed to start command {argv[0]!r}: {e}")
        yield format_event("error", str(e))
        return

    queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
    readers = [
        asyncio.create_task(_pump_lines(process.stdout, "stdout", queue)),
        asyncio.create_task(_pump_lines(process.stderr, "stderr", queue)),
    ]

    try:
        drained = 0
        while drained < len(readers):
            event = await queue.get()
            if event is None:
                drained += 1
                continue
            yield event

        returncode = await process.wait()
        logger.info(f"Command finished with return code {returncode} (pid={process.pid})")
        yield format_event("error", describe_exit(returncode))
    finally:
        for reader in readers:
            reader.cancel()
        for outcome in await asyncio.gather(*readers, return_exceptions=True):
            if isinstance(outcome, Exception):
                logger.error(f"Pipe reader failed: {outcome!r}")
        if process.returncode is None:
            logger.warning(f"Stream consumer went away, killing pid={process.pid}")
            process.kill()
            await process.wait()


class CommandEventStream:
    """Serialises command runs: a second request waits until the first finishes."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._lock.locked()

    async def stream(self, argv: List[str]) -> AsyncIterator[str]:
        if self._lock.locked():
            logger.info("Sync already in progress, queueing request")
        async with self._lock:
            async for event in run_command_events(argv):
                yield event


SYNC_STREAM = CommandEventStream()
