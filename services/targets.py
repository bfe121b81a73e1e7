"""Handler variants: the generic proxy and the landlord reviews proxy."""

from dataclasses import dataclass
from urllib.parse import quote

from core.exceptions import InvalidRequestError
from core.headers import FULL_METHODS, READ_ONLY_METHODS, HeaderBuilder
from core.request_types import InboundRequest, OutboundRequest
from core.router import RouteDecision, RouteResolver
from core.transform import RequestTransformer


@dataclass(frozen=True)
class ProxyTarget:
    """Declarative description of one mounted handler."""

    name: str
    mount_prefix: str
    methods: tuple[str, ...]
    allow_methods: str
    routing_param: str | None = "path"
    required_param: str | None = None
    required_message: str = ""
    # Fixed backend path, formatted with the required param
    backend_path: str | None = None


GENERIC_TARGET = ProxyTarget(
    name="proxy",
    mount_prefix="/api/proxy",
    methods=("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"),
    allow_methods=FULL_METHODS,
)

REVIEWS_TARGET = ProxyTarget(
    name="proxy-reviews",
    mount_prefix="/api/proxy-reviews",
    methods=("GET", "OPTIONS"),
    allow_methods=READ_ONLY_METHODS,
    routing_param=None,
    required_param="id",
    required_message="Landlord ID is required",
    backend_path="/api/reviews/landlord/{}",
)


class TargetPreparer:
    """Turn an inbound request into an outbound one for a given target."""

    def __init__(
        self,
        target: ProxyTarget,
        header_builder: HeaderBuilder,
        transformer: RequestTransformer,
    ) -> None:
        self.target = target
        self._headers = header_builder
        self._transformer = transformer
        self._resolver = RouteResolver(target.mount_prefix, target.routing_param)

    def validate(self, request: InboundRequest) -> None:
        """Raise when the target's required parameter is missing."""
        param = self.target.required_param
        if param and not request.query.get(param):
            raise InvalidRequestError(self.target.required_message or f"{param} is required")

    def route(self, request: InboundRequest, origin: str) -> RouteDecision:
        backend_path = None
        excluded: tuple[str, ...] = ()
        if self.target.backend_path is not None:
            param = self.target.required_param
            value = request.query.get(param, "") if param else ""
            backend_path = self.target.backend_path.format(quote(value, safe=""))
            if param:
                excluded = (param,)
        return self._resolver.decide(request, origin, backend_path, excluded)

    def prepare(self, request: InboundRequest, decision: RouteDecision) -> OutboundRequest:
        return OutboundRequest(
            method=request.method.upper(),
            url=decision.url,
            headers=self._headers.build_backend_headers(request.headers),
            content=self._transformer.encode_body(request.method, request.body),
        )
