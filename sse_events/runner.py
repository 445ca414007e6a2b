"""
Chunk loop tying the parser to the dispatcher.
"""
import logging
from typing import Iterable, Optional, TYPE_CHECKING, Union

from .dispatcher import EventDispatcher, resolve_action
from .parser import MalformedChunk, decode_chunk, parse_chunk

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from stream_debug import StreamTracer


def process_stream(
    chunks: Iterable[Union[bytes, str]],
    dispatcher: EventDispatcher,
    tracer: Optional["StreamTracer"] = None,
) -> Optional[int]:
    """
    Parse and dispatch chunks one at a time.

    Each chunk is fully handled before the next one is pulled. Iteration
    stops at the first event that yields an exit code.

    Args:
        chunks: Lazy sequence of raw chunks from the transport
        dispatcher: Performs the action for each event
        tracer: Optional stream tracer for debugging

    Returns:
        The exit code requested by the stream, or None if the stream ended
        without a terminating event
    """
    chunk_index = 0
    for chunk in chunks:
        chunk_index += 1
        result = parse_chunk(chunk)
        if tracer:
            tracer.chunk(chunk_index, decode_chunk(chunk), result)

        if isinstance(result, MalformedChunk):
            logger.debug(f"Chunk #{chunk_index} did not match event framing")
            dispatcher.report_malformed(result)
            event = result.as_event()
        else:
            event = result

        action = resolve_action(event)
        logger.debug(f"Chunk #{chunk_index}: event={event.name!r} action={type(action).__name__}")
        if tracer:
            tracer.action(chunk_index, action)

        exit_code = dispatcher.perform(action)
        if exit_code is not None:
            if tracer:
                tracer.note(f"stream terminated by event after {chunk_index} chunk(s), exit code {exit_code}")
            return exit_code

    logger.info(f"Stream ended after {chunk_index} chunk(s) without a terminating event")
    if tracer:
        tracer.note(f"stream ended after {chunk_index} chunk(s)")
    return None
