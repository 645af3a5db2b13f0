from typing import Any, Callable, List, Optional

import requests
from starlette.testclient import TestClient

from keeper_lib.services.container import ServiceContainer


def register_service_on_client(client: TestClient, name: str, instance: Any) -> None:
    """Register a service instance into the app's DI container for tests.

    Usage in tests:
        from tests.helpers import register_service_on_client
        register_service_on_client(client, 'document_store', fake_store)
    """
    container = getattr(client.app.state, 'container', None)
    if container is None:
        container = ServiceContainer()
        client.app.state.container = container

    container.register_singleton(name, instance)


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    """Streams `body` (or the explicit `chunks`) through `iter_content`.

    `on_chunk` runs before each chunk is handed out, so a test can advance
    a FakeClock mid-body.
    """

    def __init__(self, body: bytes = b'', status_code: int = 200, read_error: Optional[Exception] = None,
                 chunks: Optional[List[bytes]] = None, on_chunk: Optional[Callable[[], None]] = None):
        self._chunks = chunks if chunks is not None else [body]
        self.status_code = status_code
        self._read_error = read_error
        self._on_chunk = on_chunk
        self.closed = False

    def iter_content(self, chunk_size: int = 1):
        if self._read_error is not None:
            raise self._read_error
        for chunk in self._chunks:
            if self._on_chunk is not None:
                self._on_chunk()
            yield chunk

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Stands in for `requests.Session`; records every GET."""

    def __init__(self, response: Optional[FakeResponse] = None, error: Optional[Exception] = None):
        self.response = response or FakeResponse(b'<html>sheet</html>')
        self.error = error
        self.calls = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self) -> None:
        self.closed = True


def connection_refused() -> requests.ConnectionError:
    return requests.ConnectionError('connection refused')
