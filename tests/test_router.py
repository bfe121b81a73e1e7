from core.request_types import InboundRequest
from core.router import RouteResolver


def resolver():
    return RouteResolver("/api/proxy")


def test_mount_prefix_is_stripped():
    request = InboundRequest(method="GET", path="/api/proxy/listings/3")
    assert resolver().resolve_path(request) == "/listings/3"


def test_bare_mount_prefix_resolves_to_root():
    request = InboundRequest(method="GET", path="/api/proxy")
    assert resolver().resolve_path(request) == "/"


def test_path_outside_mount_prefix_is_kept():
    request = InboundRequest(method="GET", path="/api/proxyish/x")
    assert resolver().resolve_path(request) == "/api/proxyish/x"


def test_routing_param_is_normalized_to_one_leading_slash():
    request = InboundRequest(method="GET", path="/api/proxy", query={"path": "//users/1"})
    assert resolver().resolve_path(request) == "/users/1"


def test_empty_routing_param_falls_back_to_request_path():
    request = InboundRequest(method="GET", path="/api/proxy/users", query={"path": ""})
    assert resolver().resolve_path(request) == "/users"


def test_query_is_omitted_when_only_routing_param_present():
    request = InboundRequest(method="GET", path="/api/proxy", query={"path": "users"})
    decision = resolver().decide(request, "https://api.example.com")
    assert decision.url == "https://api.example.com/api/users"


def test_query_values_are_encoded():
    request = InboundRequest(method="GET", path="/api/proxy/search", query={"q": "two words&more"})
    decision = resolver().decide(request, "https://api.example.com")
    assert decision.url == "https://api.example.com/api/search?q=two+words%26more"


def test_routing_path_with_own_query_suppresses_reserialized_query():
    request = InboundRequest(
        method="GET",
        path="/api/proxy",
        query={"path": "users?sort=name", "page": "2"},
    )
    decision = resolver().decide(request, "https://api.example.com")
    assert decision.url == "https://api.example.com/api/users?sort=name"


def test_fixed_backend_path_excludes_given_params():
    request = InboundRequest(method="GET", path="/api/proxy-reviews", query={"id": "5", "limit": "3"})
    decision = RouteResolver("/api/proxy-reviews", None).decide(
        request,
        "http://127.0.0.1:8080",
        backend_path="/api/reviews/landlord/5",
        excluded=("id",),
    )
    assert decision.path == "/api/reviews/landlord/5"
    assert decision.url == "http://127.0.0.1:8080/api/reviews/landlord/5?limit=3"
