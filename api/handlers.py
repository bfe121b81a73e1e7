"""FastAPI route handlers."""

import json
from json import JSONDecodeError
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse

from core.exceptions import RequestTooLarge, describe_error
from core.headers import HeaderBuilder
from core.request_types import InboundRequest, Outcome
from services.forwarder import Forwarder

MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB
FORWARDED_HEADERS = ("authorization", "content-type")


async def build_inbound(request: Request) -> InboundRequest:
    """Convert a Starlette request into an InboundRequest."""
    raw_body = await request.body()
    if len(raw_body) > MAX_BODY_SIZE:
        raise RequestTooLarge("Request body too large")

    headers = {
        name: request.headers[name]
        for name in FORWARDED_HEADERS
        if name in request.headers
    }
    return InboundRequest(
        method=request.method,
        path=request.url.path,
        query=dict(request.query_params),
        headers=headers,
        body=_decode_body(raw_body, headers.get("content-type", "")),
    )


def _decode_body(raw_body: bytes, content_type: str) -> Any:
    """Decode JSON bodies; keep everything else raw."""
    if not raw_body:
        return None
    if "json" not in content_type.lower():
        return raw_body

    text_body = raw_body.decode("utf-8", errors="replace")
    try:
        decoded = json.loads(text_body)
    except (JSONDecodeError, ValueError):
        return text_body
    # A bare JSON string must stay quoted on the way out
    return text_body if isinstance(decoded, str) else decoded


def render_outcome(outcome: Outcome) -> Response:
    """Convert an Outcome into a FastAPI response."""
    if outcome.is_empty:
        return Response(status_code=outcome.status_code, headers=outcome.headers)
    if outcome.media_type == "application/json":
        return JSONResponse(
            content=outcome.body,
            status_code=outcome.status_code,
            headers=outcome.headers,
        )
    return Response(
        content=outcome.body,
        status_code=outcome.status_code,
        headers=outcome.headers,
        media_type=outcome.media_type,
    )


async def handle_forward(request: Request, forwarder: Forwarder) -> Response:
    """Handle any request mounted on a forwarding target."""
    try:
        inbound = await build_inbound(request)
    except RequestTooLarge as e:
        status, body = describe_error(e)
        cors = HeaderBuilder().build_cors_headers(forwarder.target.allow_methods)
        return render_outcome(Outcome(status_code=status, headers=cors, body=body))

    outcome = await forwarder.forward(inbound)
    return render_outcome(outcome)
