"""CLI entry point and argument parsing for the stream client"""

import sys
import argparse
from typing import List, Optional

import httpx
from rich.markup import escape

import settings
from transport import StreamTransportError
from utils.debug_console import configure_logging, create_console, setup_debug_logging
from cli.client_app import StreamClientCLI

# Exit codes reserved for failures outside the event stream itself
EXIT_TRANSPORT_FAILURE = 2
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Stream server-sent events from URL to stdout/stderr")
    parser.add_argument("url", help="http(s) URL of the event stream")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--stream-trace",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable raw stream tracing log capture (implied by --debug unless explicitly disabled)"
    )
    parser.add_argument(
        "--connect-timeout",
        type=float,
        default=None,
        help="Seconds to establish the connection (default: from config)"
    )
    parser.add_argument(
        "--read-timeout",
        type=float,
        default=None,
        help="Seconds to wait between chunks (default: from config)"
    )
    parser.add_argument("--insecure", "-k", action="store_true", help="Skip TLS certificate verification")
    parser.add_argument("--follow-redirects", "-L", action="store_true", help="Follow HTTP redirects")
    return parser


def main(argv: Optional[List[str]] = None):
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)

    # Determine stream tracing preference (config default -> CLI overrides)
    stream_trace_setting = settings.STREAM_TRACE_ENABLED
    if args.stream_trace is None:
        if args.debug:
            stream_trace_setting = True
    else:
        stream_trace_setting = args.stream_trace

    debug_logger = None
    if args.debug:
        debug_logger = setup_debug_logging(settings.DEBUG_LOG_FILE)
    else:
        configure_logging(settings.LOG_LEVEL)

    console = create_console(debug_logger=debug_logger)

    try:
        cli = StreamClientCLI(
            debug=args.debug,
            debug_logger=debug_logger,
            stream_trace_enabled=stream_trace_setting,
            connect_timeout=args.connect_timeout,
            read_timeout=args.read_timeout,
            verify=False if args.insecure else None,
            follow_redirects=True if args.follow_redirects else None,
        )
        exit_code = cli.run(args.url)

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        exit_code = EXIT_INTERRUPTED
    except (StreamTransportError, httpx.HTTPError) as e:
        console.print(f"[red]Transport error:[/red] {escape(str(e) or type(e).__name__)}")
        if args.debug:
            import traceback
            traceback.print_exc()
        exit_code = EXIT_TRANSPORT_FAILURE

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
