"""HTTP client wrapper for backend requests."""

import json
from json import JSONDecodeError
from typing import Any

import httpx

from core.exceptions import TransportError
from core.request_types import BackendResponse, OutboundRequest


class UpstreamClient:
    """Send one request to the backend and parse its answer."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, outbound: OutboundRequest) -> BackendResponse:
        """Execute the request; network failures become TransportError."""
        try:
            response = await self._client.request(
                outbound.method,
                outbound.url,
                headers=outbound.headers,
                content=outbound.content,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or type(e).__name__) from e

        content_type = response.headers.get("content-type", "")
        return BackendResponse(
            status_code=response.status_code,
            content_type=content_type,
            body=self._parse_body(response, content_type),
        )

    @staticmethod
    def _parse_body(response: httpx.Response, content_type: str) -> Any:
        """Decode JSON bodies leniently; anything else is text."""
        if "json" in content_type.lower():
            try:
                return json.loads(response.content, parse_constant=_reject_constant)
            except (JSONDecodeError, UnicodeDecodeError, ValueError):
                return {}
        try:
            return response.text
        except (UnicodeDecodeError, LookupError):
            return ""


def _reject_constant(name: str) -> Any:
    # NaN and Infinity cannot be re-encoded as strict JSON
    raise ValueError(f"Non-finite JSON constant: {name}")
