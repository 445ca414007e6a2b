"""
Chunk parser for the event:/data: stream framing.

Every transport chunk carries exactly one record:

    event:<name>
    data:<data>

Parsing never raises. Chunks that do not match come back as a
MalformedChunk so the caller can report them and carry on.
"""
import re
from dataclasses import dataclass
from typing import Union

EVENT_PATTERN = re.compile(r"event:(?P<name>.+)\ndata:(?P<data>.*)", re.DOTALL)


@dataclass(frozen=True)
class StreamEvent:
    """A single parsed event."""
    name: str
    data: str


@dataclass(frozen=True)
class MalformedChunk:
    """A chunk that did not match the event framing."""
    raw: str

    def as_event(self) -> StreamEvent:
        """Empty event, routed to the default action by the dispatcher."""
        return StreamEvent(name="", data="")


ParseResult = Union[StreamEvent, MalformedChunk]


def decode_chunk(chunk: Union[bytes, str]) -> str:
    """Decode a raw transport chunk to text."""
    if isinstance(chunk, bytes):
        return chunk.decode("utf-8", errors="replace")
    return chunk


def parse_chunk(chunk: Union[bytes, str]) -> ParseResult:
    """
    Parse one transport chunk.

    Args:
        chunk: Raw bytes or text as delivered by the transport

    Returns:
        StreamEvent with trimmed name and data, or MalformedChunk carrying
        the decoded text when the framing does not match
    """
    text = decode_chunk(chunk)
    match = EVENT_PATTERN.search(text)
    if not match:
        return MalformedChunk(raw=text)
    return StreamEvent(
        name=match.group("name").strip(),
        data=match.group("data").strip(),
    )
