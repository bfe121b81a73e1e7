import httpx
import pytest
from fastapi.testclient import TestClient

from api import handlers
from app import create_app
from core.config import BackendSettings, Config

from conftest import StubBackend


@pytest.fixture
def make_client(logger):
    def _make(backend, config):
        app = create_app(config, logger, transport=backend.transport())
        return TestClient(app)

    return _make


def test_generic_route_forwards_json_post(make_client, backend, config):
    with make_client(backend, config) as client:
        response = client.post(
            "/api/proxy/reviews",
            params={"draft": "true"},
            json={"rating": 5},
            headers={"Authorization": "Bearer abc", "Cookie": "a=b"},
        )

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert response.headers["access-control-allow-origin"] == "*"
    sent = backend.requests[0]
    assert str(sent.url) == "https://api.example.com/api/reviews?draft=true"
    assert sent.content == b'{"rating":5}'
    assert sent.headers["authorization"] == "Bearer abc"
    assert "cookie" not in sent.headers


def test_routing_query_param_from_rewrite(make_client, backend, config):
    with make_client(backend, config) as client:
        client.get("/api/proxy", params={"path": "landlords/3", "page": "1"})

    assert str(backend.requests[0].url) == "https://api.example.com/api/landlords/3?page=1"


def test_options_preflight_has_empty_body(make_client, backend, config):
    with make_client(backend, config) as client:
        response = client.options("/api/proxy/anything")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS, PUT, DELETE"
    assert response.headers["access-control-allow-headers"] == "Authorization, Content-Type"
    assert backend.calls == 0


def test_missing_backend_url_returns_500(make_client, backend):
    with make_client(backend, Config(backend=BackendSettings(url=""))) as client:
        response = client.get("/api/proxy/x")

    assert response.status_code == 500
    assert "BACKEND_URL" in response.json()["error"]
    assert backend.calls == 0


def test_backend_404_is_relayed(make_client, config):
    backend = StubBackend(status_code=404, json={"error": "not found"})
    with make_client(backend, config) as client:
        response = client.get("/api/proxy/landlords/999")

    assert response.status_code == 404
    assert response.json() == {"error": "not found"}


def test_non_json_body_is_forwarded_raw(make_client, backend, config):
    with make_client(backend, config) as client:
        client.put(
            "/api/proxy/notes/1",
            content=b"plain words",
            headers={"Content-Type": "text/plain"},
        )

    sent = backend.requests[0]
    assert sent.content == b"plain words"
    assert sent.headers["content-type"] == "text/plain"


def test_reviews_route(make_client, backend, config):
    with make_client(backend, config) as client:
        ok = client.get("/api/proxy-reviews", params={"id": "42"})
        missing = client.get("/api/proxy-reviews")

    assert ok.status_code == 200
    assert ok.headers["access-control-allow-methods"] == "GET, OPTIONS"
    assert str(backend.requests[0].url) == "https://api.example.com/api/reviews/landlord/42"
    assert missing.status_code == 400
    assert missing.json() == {"error": "Landlord ID is required"}
    assert backend.calls == 1


def test_reviews_route_rejects_post(make_client, backend, config):
    with make_client(backend, config) as client:
        response = client.post("/api/proxy-reviews", params={"id": "1"})

    assert response.status_code == 405
    assert backend.calls == 0


def test_backend_redirect_is_followed(logger, config):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        if request.url.path == "/api/old":
            return httpx.Response(302, headers={"location": "https://api.example.com/api/other"})
        return httpx.Response(200, json={"moved": True})

    app = create_app(config, logger, transport=httpx.MockTransport(handler))
    with TestClient(app) as client:
        response = client.get("/api/proxy/old")

    assert response.status_code == 200
    assert response.json() == {"moved": True}
    assert seen == ["https://api.example.com/api/old", "https://api.example.com/api/other"]


def test_oversized_body_is_rejected_before_forwarding(make_client, backend, config, monkeypatch):
    monkeypatch.setattr(handlers, "MAX_BODY_SIZE", 10)

    with make_client(backend, config) as client:
        response = client.post(
            "/api/proxy/upload",
            content=b"x" * 20,
            headers={"Content-Type": "application/octet-stream"},
        )

    assert response.status_code == 413
    assert response.json() == {"error": "Request body too large"}
    assert response.headers["access-control-allow-origin"] == "*"
    assert response.headers["access-control-allow-methods"] == "GET, POST, OPTIONS, PUT, DELETE"
    assert backend.calls == 0


def test_json_string_body_keeps_its_quotes(make_client, backend, config):
    with make_client(backend, config) as client:
        client.post(
            "/api/proxy/notes",
            content=b'"hello"',
            headers={"Content-Type": "application/json"},
        )

    assert backend.requests[0].content == b'"hello"'


def test_nan_backend_body_still_gets_cors(make_client, config):
    backend = StubBackend(content=b'{"x": NaN}', headers={"content-type": "application/json"})
    with make_client(backend, config) as client:
        response = client.get("/api/proxy/stats")

    assert response.status_code == 200
    assert response.json() == {}
    assert response.headers["access-control-allow-origin"] == "*"
