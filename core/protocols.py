"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard, ConsoleLogger)."""

    def log_forward(
        self,
        route: str,
        method: str,
        path: str,
        url: str,
        headers: dict[str, str],
    ) -> None: ...
    def log_response(self, route: str, status: int) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
