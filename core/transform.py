"""Request body encoding for the backend."""

import json
from typing import Any

BODYLESS_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


class RequestTransformer:
    """Transform inbound bodies into outbound request content."""

    def encode_body(self, method: str, body: Any) -> str | bytes | None:
        """Return the outbound body, or None when none should be sent.

        POST always carries a body; an absent one becomes ``{}``.
        """
        method = method.upper()
        if method in BODYLESS_METHODS:
            return None

        if self._is_absent(body):
            return "{}" if method == "POST" else None

        if isinstance(body, (str, bytes)):
            return body
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False)

    @staticmethod
    def _is_absent(body: Any) -> bool:
        return body is None or (isinstance(body, (str, bytes)) and len(body) == 0)
