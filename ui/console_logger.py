"""Line-oriented request logger for serverless hosts."""

from rich.console import Console
from rich.markup import escape

from core.config import LoggingSettings
from ui.log_utils import LogFiles


class ConsoleLogger:
    """Print one line per forwarding event."""

    def __init__(
        self,
        settings: LoggingSettings | None = None,
        console: Console | None = None,
    ) -> None:
        self._console = console or Console(stderr=True, highlight=False)
        self._files = LogFiles(settings or LoggingSettings())

    def log_forward(
        self,
        route: str,
        method: str,
        path: str,
        url: str,
        headers: dict[str, str],
    ) -> None:
        self._console.print(f"[cyan]{route}[/cyan] {method} {escape(path)} -> {escape(url)}")
        self._files.forward(route, method, path, url, headers)

    def log_response(self, route: str, status: int) -> None:
        style = "green" if status < 400 else "red"
        self._console.print(f"[cyan]{route}[/cyan] backend status [{style}]{status}[/{style}]")
        self._files.line("RESPONSE", str(status), route=route)

    def log_error(self, route: str, status: int, message: str) -> None:
        self._console.print(f"[red]{route} {status}:[/red] {escape(message)}")
        self._files.line("ERROR", message[:200], route=route, status=status)
