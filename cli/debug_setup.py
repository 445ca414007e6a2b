"""Debug console setup for CLI"""

import logging
from typing import Optional
from rich.console import Console
from utils.debug_console import create_console


def setup_debug_console(debug: bool, debug_logger: Optional[logging.Logger] = None, **session_info) -> Console:
    """
    Setup the diagnostics console based on debug mode

    Args:
        debug: Whether debug mode is enabled
        debug_logger: Logger returned by setup_debug_logging, if any
        **session_info: Values recorded at session start in the debug log

    Returns:
        Console instance (either regular or debug-enabled), printing to stderr
    """
    if debug and debug_logger:
        console = create_console(debug_logger=debug_logger)
        debug_logger.debug("[CLI] ===== CLI SESSION STARTED =====")
        for key, value in session_info.items():
            debug_logger.debug(f"[CLI] {key}: {value}")
        return console

    return create_console()
