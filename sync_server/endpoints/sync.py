"""
Sync endpoint: streams a run of the configured sync command.

The response is always 200 once streaming starts. Failures are reported
through the final `error` event:

    event:stdout
    data:hi there

    event:stderr
    data:error

    event:error
    data:exit status 1
"""
import logging
import shlex
from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse

from headers import EVENT_STREAM_RESPONSE_HEADERS
import settings
from ..command_stream import SYNC_STREAM

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/v1/sync")
async def sync():
    """Queue a sync run and stream its output"""
    argv = shlex.split(settings.SYNC_COMMAND)
    if not argv:
        logger.error("SYNC_COMMAND is empty, refusing to start a sync")
        raise HTTPException(status_code=500, detail="Sync command is not configured")

    return StreamingResponse(
        SYNC_STREAM.stream(argv),
        media_type="text/event-stream",
        headers=EVENT_STREAM_RESPONSE_HEADERS,
    )
