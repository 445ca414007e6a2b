"""
Pydantic response models for the sync server.
"""
from pydantic import BaseModel


class HealthStatus(BaseModel):
    """Health check response"""
    status: str
    timestamp: float
    sync_running: bool = False
