"""
Health check endpoint.
"""
import time
from fastapi import APIRouter

from ..command_stream import SYNC_STREAM
from ..models import HealthStatus

router = APIRouter()


@router.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """Health check endpoint"""
    return HealthStatus(status="healthy", timestamp=time.time(), sync_running=SYNC_STREAM.running)
