"""CLI entry point for the sync server"""

import argparse
from typing import List, Optional

import settings
from utils.debug_console import configure_logging, create_console
from sync_server import SyncServer


def main(argv: Optional[List[str]] = None):
    """Entry point for the sync server"""
    parser = argparse.ArgumentParser(description="Serve sync command runs as an event stream")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--bind", "-b", default=None, help="Override bind address (default: from config)")
    parser.add_argument("--port", "-p", type=int, default=None, help="Override port (default: from config)")
    args = parser.parse_args(argv)

    if not args.debug:
        configure_logging(settings.LOG_LEVEL)

    console = create_console(stderr=False)
    server = SyncServer(debug=args.debug, bind_address=args.bind, port=args.port)

    console.print("[bold]SSE Sync Server[/bold]")
    console.print("  Endpoint: /v1/sync")
    try:
        server.run()
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")


if __name__ == "__main__":
    main()
