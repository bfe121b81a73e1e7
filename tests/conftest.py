import httpx
import pytest

from core.config import BackendSettings, Config


class RecordingLogger:
    """RequestLogger that keeps every event in memory."""

    def __init__(self):
        self.forwards = []
        self.responses = []
        self.errors = []

    def log_forward(self, route, method, path, url, headers):
        self.forwards.append((route, method, path, url))

    def log_response(self, route, status):
        self.responses.append((route, status))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


class StubBackend:
    """httpx.MockTransport handler that records every request it gets."""

    def __init__(self, status_code=200, json=None, content=None, headers=None, error=None):
        self.status_code = status_code
        self.json = json
        self.content = content
        self.headers = headers
        self.error = error
        self.requests: list[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.json is not None:
            return httpx.Response(self.status_code, json=self.json, headers=self.headers)
        return httpx.Response(self.status_code, content=self.content or b"", headers=self.headers)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def config():
    return Config(backend=BackendSettings(url="https://api.example.com"))


@pytest.fixture
def backend():
    return StubBackend(json={"ok": True})
