from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from app import create_app
from core.config import Config

Responder = Callable[[httpx.Request], httpx.Response]


class RecordingUpstream:
    """httpx handler that records every outbound request it receives."""

    def __init__(self, responder: Responder | None = None):
        self.requests: list[httpx.Request] = []
        self._responder = responder or (lambda request: httpx.Response(200, content=b"ok"))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


class RecordingObserver:
    """Observer that keeps (phase, args) tuples in call order."""

    def __init__(self):
        self.events: list[tuple] = []

    def target_resolved(self, method, raw, target):
        self.events.append(("target_resolved", method, raw, target))

    def request_issued(self, method, target, headers):
        self.events.append(("request_issued", method, target))

    def response_relayed(self, method, target, status, size, *, elapsed=0.0):
        self.events.append(("response_relayed", method, target, status, size))

    def relay_failed(self, method, target, status, message):
        self.events.append(("relay_failed", method, target, status))

    def phases(self) -> list[str]:
        return [event[0] for event in self.events]


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def make_client(observer):
    """Build a TestClient whose upstream is a RecordingUpstream."""
    clients: list[TestClient] = []

    def _make(responder: Responder | None = None, **relay_overrides):
        config = Config()
        config.relay = config.relay.model_copy(update=relay_overrides)
        upstream = RecordingUpstream(responder)
        app = create_app(config, observer, transport=upstream.transport)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client, upstream

    yield _make

    for client in clients:
        client.__exit__(None, None, None)
