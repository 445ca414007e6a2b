from typing import Callable, Iterable, List

import httpx
import pytest


@pytest.fixture
def mock_stream_client() -> Callable[..., httpx.Client]:
    """Build an httpx.Client whose GET responses stream the given chunks."""

    clients: List[httpx.Client] = []

    def factory(chunks: Iterable[bytes] = (), status_code: int = 200, handler=None) -> httpx.Client:
        def default_handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                status_code,
                headers={"content-type": "text/event-stream"},
                content=iter(list(chunks)),
            )

        client = httpx.Client(transport=httpx.MockTransport(handler or default_handler))
        clients.append(client)
        return client

    yield factory

    for client in clients:
        client.close()
