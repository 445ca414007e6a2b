"""
SyncServer class for CLI control of the FastAPI application.
"""
import logging
import os
from typing import Optional

import uvicorn

import settings
from utils.debug_console import setup_debug_logging
from .app import app

logger = logging.getLogger(__name__)

# First file descriptor passed by systemd socket activation
SD_LISTEN_FDS_START = 3


def systemd_listen_fd() -> Optional[int]:
    """Return the socket-activation fd if systemd handed us one."""
    listen_pid = os.getenv("LISTEN_PID")
    listen_fds = os.getenv("LISTEN_FDS")
    if not listen_pid or not listen_fds:
        return None
    try:
        if int(listen_pid) != os.getpid() or int(listen_fds) < 1:
            return None
    except ValueError:
        logger.warning(f"Ignoring malformed socket activation env LISTEN_PID={listen_pid} LISTEN_FDS={listen_fds}")
        return None
    return SD_LISTEN_FDS_START


class SyncServer:
    """Sync server wrapper for CLI control"""

    def __init__(self, debug: bool = False, bind_address: Optional[str] = None, port: Optional[int] = None):
        self.server = None
        self.config = None
        self.debug = debug
        self.bind_address = bind_address or settings.BIND_ADDRESS
        self.port = port or settings.PORT

        if debug:
            setup_debug_logging(settings.DEBUG_LOG_FILE, console_handler=True)

    def build_config(self) -> uvicorn.Config:
        log_level = "debug" if self.debug else settings.LOG_LEVEL
        fd = systemd_listen_fd()
        if fd is not None:
            logger.info(f"Using systemd socket activation (fd={fd})")
            return uvicorn.Config(app, fd=fd, log_level=log_level, access_log=False)

        logger.info(f"No sockets provided, listening on http://{self.bind_address}:{self.port}")
        return uvicorn.Config(
            app,
            host=self.bind_address,
            port=self.port,
            log_level=log_level,
            access_log=False  # Request middleware logs /v1/ calls
        )

    def run(self):
        """Run the sync server (blocking)"""
        logger.info(f"Sync command: {settings.SYNC_COMMAND}")
        self.config = self.build_config()
        self.server = uvicorn.Server(self.config)
        self.server.run()
