"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request

from api.handlers import handle_forward
from core.config import Config
from core.headers import HeaderBuilder
from core.protocols import RequestLogger
from core.transform import RequestTransformer
from services.forwarder import Forwarder
from services.targets import GENERIC_TARGET, REVIEWS_TARGET
from services.upstream import UpstreamClient


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.http.max_connections,
            max_keepalive_connections=config.http.max_keepalive_connections,
        )
        client = httpx.AsyncClient(
            timeout=config.http.timeout,
            limits=limits,
            transport=transport,
            follow_redirects=True,
        )
        upstream = UpstreamClient(client)
        header_builder = HeaderBuilder()
        transformer = RequestTransformer()
        app.state.forwarders = {
            target.name: Forwarder(
                target, config, logger, upstream, header_builder, transformer
            )
            for target in (GENERIC_TARGET, REVIEWS_TARGET)
        }
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="Backend Relay", version="0.1.0", lifespan=lifespan)

    # Registered before the generic prefix so it is never shadowed
    @app.api_route(REVIEWS_TARGET.mount_prefix, methods=list(REVIEWS_TARGET.methods))
    async def proxy_reviews(request: Request):
        return await handle_forward(request, request.app.state.forwarders[REVIEWS_TARGET.name])

    @app.api_route(GENERIC_TARGET.mount_prefix, methods=list(GENERIC_TARGET.methods))
    @app.api_route(
        GENERIC_TARGET.mount_prefix + "/{path:path}",
        methods=list(GENERIC_TARGET.methods),
    )
    async def proxy(request: Request):
        return await handle_forward(request, request.app.state.forwarders[GENERIC_TARGET.name])

    return app
