"""
Event parsing and dispatch for event:/data: chunk streams.
"""

from .parser import (
    StreamEvent,
    MalformedChunk,
    ParseResult,
    parse_chunk,
)
from .dispatcher import (
    EXIT_OK,
    EXIT_REMOTE_FAILURE,
    Action,
    EventDispatcher,
    Exit,
    WriteStderr,
    WriteStdout,
    resolve_action,
)
from .runner import process_stream

__all__ = [
    # Parsing
    "StreamEvent",
    "MalformedChunk",
    "ParseResult",
    "parse_chunk",

    # Dispatch
    "EXIT_OK",
    "EXIT_REMOTE_FAILURE",
    "Action",
    "EventDispatcher",
    "Exit",
    "WriteStderr",
    "WriteStdout",
    "resolve_action",

    # Stream loop
    "process_stream",
]
