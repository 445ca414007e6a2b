"""
Event dispatch: maps an event name to the action it triggers.

Only two names are special:
- error: terminate. Exit 1 with the data as message, or 0 when data is empty
- stderr: write data to the error channel

Everything else (stdout included) writes data to standard output.
"""
import logging
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Optional, TextIO, Union

from .parser import MalformedChunk, StreamEvent

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_REMOTE_FAILURE = 1


@dataclass(frozen=True)
class WriteStdout:
    text: str


@dataclass(frozen=True)
class WriteStderr:
    text: str


@dataclass(frozen=True)
class Exit:
    """Terminate processing. `message` goes to the error channel first."""
    code: int
    message: Optional[str] = None


Action = Union[WriteStdout, WriteStderr, Exit]


def _error_action(data: str) -> Action:
    if data:
        return Exit(code=EXIT_REMOTE_FAILURE, message=data)
    return Exit(code=EXIT_OK)


ACTIONS: Dict[str, Callable[[str], Action]] = {
    "error": _error_action,
    "stderr": WriteStderr,
}


def resolve_action(event: StreamEvent) -> Action:
    """Pick the action for an event by exact, case-sensitive name match."""
    factory = ACTIONS.get(event.name, WriteStdout)
    return factory(event.data)


class EventDispatcher:
    """Performs event actions against a pair of output streams."""

    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        # Resolved lazily so redirected sys streams are honoured
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def dispatch(self, event: StreamEvent) -> Optional[int]:
        """Run the action for `event`.

        Returns:
            The exit code when the event terminates processing, else None
        """
        return self.perform(resolve_action(event))

    def perform(self, action: Action) -> Optional[int]:
        if isinstance(action, Exit):
            if action.message:
                self._write(self.stderr, action.message)
            logger.debug(f"Terminating stream with exit code {action.code}")
            return action.code
        if isinstance(action, WriteStderr):
            self._write(self.stderr, action.text)
        else:
            self._write(self.stdout, action.text)
        return None

    def report_malformed(self, malformed: MalformedChunk) -> None:
        """Write parse diagnostics for a chunk that did not match the framing."""
        logger.debug(f"Unparsable chunk ({len(malformed.raw)} chars)")
        self._write(self.stderr, "Failed to parse event")
        self._write(self.stderr, repr(malformed.raw))

    @staticmethod
    def _write(stream: TextIO, text: str) -> None:
        stream.write(f"{text}\n")
        stream.flush()
