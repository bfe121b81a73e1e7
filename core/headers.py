"""Header construction for backend requests and caller responses."""

from typing import Any

FULL_METHODS = "GET, POST, OPTIONS, PUT, DELETE"
READ_ONLY_METHODS = "GET, OPTIONS"
ALLOWED_HEADERS = "Authorization, Content-Type"


class HeaderBuilder:
    """Build outbound and CORS headers."""

    def build_backend_headers(self, headers: dict[str, Any]) -> dict[str, str]:
        """Pass through authorization and content-type only."""
        upstream: dict[str, str] = {"Content-Type": "application/json"}
        for key, value in headers.items():
            key_lower = key.lower()
            if key_lower == "content-type" and value:
                upstream["Content-Type"] = str(value)
            elif key_lower == "authorization" and value:
                upstream["Authorization"] = str(value)
        return upstream

    def build_cors_headers(self, allow_methods: str = FULL_METHODS) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": allow_methods,
            "Access-Control-Allow-Headers": ALLOWED_HEADERS,
        }
