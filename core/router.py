"""Backend URL resolution from the inbound path and query."""

from dataclasses import dataclass
from urllib.parse import urlencode

from core.request_types import InboundRequest


@dataclass(frozen=True)
class RouteDecision:
    """Where a request should be forwarded."""

    path: str
    url: str


class RouteResolver:
    """Rewrite an inbound request path against a backend origin."""

    def __init__(self, mount_prefix: str, routing_param: str | None = "path"):
        self.mount_prefix = mount_prefix.rstrip("/")
        self.routing_param = routing_param

    def resolve_path(self, request: InboundRequest) -> str:
        """Return the backend sub-path with exactly one leading slash."""
        explicit = request.query.get(self.routing_param) if self.routing_param else None
        path = explicit or self._strip_mount_prefix(request.path)
        return "/" + path.lstrip("/")

    def decide(
        self,
        request: InboundRequest,
        origin: str,
        backend_path: str | None = None,
        excluded: tuple[str, ...] = (),
    ) -> RouteDecision:
        """Compose the outbound URL.

        Without a fixed ``backend_path`` the resolved path is appended to
        ``origin + "/api"``, even when the path already starts with ``/api``.
        """
        if backend_path is None:
            path = self.resolve_path(request)
            url = f"{origin}/api{path}"
        else:
            path = backend_path
            url = f"{origin}{backend_path}"

        # An explicit routing path carrying its own query wins
        if "?" in path:
            return RouteDecision(path=path, url=url)

        query = self.build_query(request.query, excluded)
        if query:
            url = f"{url}?{query}"
        return RouteDecision(path=path, url=url)

    def build_query(self, params: dict[str, str], excluded: tuple[str, ...] = ()) -> str:
        """Re-serialize query params without the routing-only ones."""
        skip = {self.routing_param, *excluded}
        return urlencode([(k, v) for k, v in params.items() if k not in skip])

    def _strip_mount_prefix(self, raw_path: str) -> str:
        if raw_path == self.mount_prefix:
            return ""
        if raw_path.startswith(self.mount_prefix + "/"):
            return raw_path[len(self.mount_prefix):]
        return raw_path
