"""Custom exception hierarchy for the backend relay."""

from typing import Any


class ProxyError(Exception):
    """Base exception for all proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when configuration is missing or invalid."""


class InvalidRequestError(ProxyError):
    """Raised when the inbound request lacks a required parameter."""


class UpstreamError(ProxyError):
    """Raised when the backend answers with a non-2xx status.

    Attributes:
        message: Error message
        status_code: HTTP status code from the backend
        body: Parsed backend body, relayed verbatim
        content_type: Backend content-type
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        body: Any = None,
        content_type: str = "application/json",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body
        self.content_type = content_type


class TransportError(ProxyError):
    """Raised when the backend could not be reached."""


class RequestTooLarge(ProxyError):
    """Request body exceeds size limit."""


def describe_error(error: ProxyError) -> tuple[int, Any]:
    """Map an error to the (status, body) pair sent back to the caller."""
    if isinstance(error, UpstreamError):
        return error.status_code, error.body
    if isinstance(error, InvalidRequestError):
        return 400, {"error": str(error)}
    if isinstance(error, RequestTooLarge):
        return 413, {"error": str(error)}
    if isinstance(error, ConfigurationError):
        return 500, {"error": str(error)}
    return 500, {
        "error": "Failed to proxy request to backend",
        "details": str(error),
    }
