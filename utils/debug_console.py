"""Logging setup and a Rich console that mirrors its output to the debug log.

The client's stderr doubles as a data channel, so diagnostics printed through
the console stay terse while the debug log keeps a plain text copy of
everything together with the regular log records.
"""

import io
import logging
import os
import re
from typing import Optional
from rich.console import Console as RichConsole

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEBUG_CONSOLE_LOGGER = "debug_console"

ANSI_ESCAPE = re.compile(r'\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')


class DebugCapturingConsole(RichConsole):
    """
    Rich Console that also writes a plain text copy of each print to a logger.
    """

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self._log_prefix = "[CONSOLE] "

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger and self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_to_plain_text(*objects, **kwargs)
            if plain_text.strip():
                self.debug_logger.debug(f"{self._log_prefix}{plain_text}")

    def _render_to_plain_text(self, *objects, **kwargs) -> str:
        """Render the objects to plain text without Rich markup."""
        string_buffer = io.StringIO()
        temp_console = RichConsole(
            file=string_buffer,
            force_terminal=False,
            width=self.width,
            legacy_windows=False
        )
        temp_console.print(*objects, **kwargs)
        return ANSI_ESCAPE.sub('', string_buffer.getvalue()).rstrip()


def create_console(debug_logger: Optional[logging.Logger] = None, stderr: bool = True) -> RichConsole:
    """
    Create the console used for CLI diagnostics.

    Args:
        debug_logger: When given, console output is also captured to this logger
        stderr: Print to stderr instead of stdout

    Returns:
        DebugCapturingConsole if a debug logger is given, regular Console otherwise
    """
    if debug_logger:
        return DebugCapturingConsole(debug_logger=debug_logger, stderr=stderr)
    return RichConsole(stderr=stderr)


def configure_logging(level: str) -> None:
    """Default logging: records at `level` and above go to stderr."""
    numeric_level = logging.getLevelName(str(level).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT)


def setup_debug_logging(log_file: str, console_handler: bool = False) -> logging.Logger:
    """
    Route all log records at DEBUG level to `log_file` (append mode).

    Args:
        log_file: Path to debug log file
        console_handler: Also echo records to stderr

    Returns:
        Logger capturing Rich console output into the same file
    """
    log_file = os.path.abspath(log_file)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    if console_handler:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.DEBUG)
        stream_handler.setFormatter(formatter)
        root_logger.addHandler(stream_handler)

    debug_logger = logging.getLogger(DEBUG_CONSOLE_LOGGER)
    debug_logger.setLevel(logging.DEBUG)
    for handler in debug_logger.handlers[:]:
        debug_logger.removeHandler(handler)
    console_file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    console_file_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    debug_logger.addHandler(console_file_handler)
    # Prevent propagation to avoid duplicate logs
    debug_logger.propagate = False

    logging.getLogger(__name__).info(f"Debug logging enabled - appending to {log_file}")
    return debug_logger
