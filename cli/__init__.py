"""CLI package for the SSE sync client

Provides the stream client entry point (cli.main) and the sync server
launcher (cli.serve).
"""

from cli.client_app import StreamClientCLI

__all__ = [
    "StreamClientCLI",
]
