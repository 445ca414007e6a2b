"""
Sync server package: streams runs of a sync command as server-sent events.
"""
from .server import SyncServer
from .app import app

__all__ = [
    'SyncServer',
    'app',
]
