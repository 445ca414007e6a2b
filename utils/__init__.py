"""Shared utilities package"""

from .debug_console import (
    DebugCapturingConsole,
    configure_logging,
    create_console,
    setup_debug_logging,
)

__all__ = [
    "DebugCapturingConsole",
    "configure_logging",
    "create_console",
    "setup_debug_logging",
]
