"""Forwarding orchestration for proxy requests."""

from core.config import Config
from core.exceptions import ProxyError, TransportError, UpstreamError, describe_error
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.request_types import InboundRequest, Outcome
from core.transform import RequestTransformer
from services.targets import ProxyTarget, TargetPreparer
from services.upstream import UpstreamClient


class Forwarder:
    """Relay one inbound request to the backend and translate the answer.

    Holds no per-request state; two calls with the same input and backend
    produce the same outcome.
    """

    def __init__(
        self,
        target: ProxyTarget,
        config: Config,
        logger: RequestLogger,
        upstream: UpstreamClient,
        header_builder: HeaderBuilder | None = None,
        transformer: RequestTransformer | None = None,
    ) -> None:
        self._config = config
        self._logger = logger
        self._upstream = upstream
        self._headers = header_builder or HeaderBuilder()
        self._preparer = TargetPreparer(
            target, self._headers, transformer or RequestTransformer()
        )
        self.target = target

    async def forward(self, request: InboundRequest) -> Outcome:
        """Forward ``request`` and return the outcome for the caller."""
        cors = self._headers.build_cors_headers(self.target.allow_methods)

        if request.method.upper() == "OPTIONS":
            return Outcome(status_code=200, headers=cors, media_type=None)

        try:
            origin = self._config.backend.resolve_origin()
            self._preparer.validate(request)
            decision = self._preparer.route(request, origin)
            outbound = self._preparer.prepare(request, decision)

            self._logger.log_forward(
                self.target.name,
                outbound.method,
                decision.path,
                decision.url,
                outbound.headers,
            )
            backend = await self._upstream.send(outbound)
            self._logger.log_response(self.target.name, backend.status_code)

            if not backend.ok:
                raise UpstreamError(
                    f"Backend returned {backend.status_code}",
                    status_code=backend.status_code,
                    body=backend.body,
                    content_type=self._media_type(backend.is_json, backend.content_type),
                )
        except ProxyError as e:
            return self._error_outcome(e, cors)
        except Exception as e:
            return self._error_outcome(TransportError(str(e) or type(e).__name__), cors)

        return Outcome(
            status_code=200,
            headers=cors,
            body=backend.body,
            media_type=self._media_type(backend.is_json, backend.content_type),
        )

    def _error_outcome(self, error: ProxyError, cors: dict[str, str]) -> Outcome:
        status, body = describe_error(error)
        if isinstance(error, UpstreamError):
            # Backend status already logged by log_response
            return Outcome(status, cors, body, error.content_type)

        self._logger.log_error(self.target.name, status, str(error))
        return Outcome(status_code=status, headers=cors, body=body)

    @staticmethod
    def _media_type(is_json: bool, content_type: str) -> str:
        if is_json:
            return "application/json"
        return content_type or "text/plain"
