"""Real-time CLI dashboard for proxy monitoring."""

from collections import Counter
from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import LogFiles

console = Console()


class ForwardInfo:
    """Info about a single forwarded request."""

    def __init__(self, route: str, method: str, url: str, timestamp: datetime):
        self.route = route
        self.method = method
        self.url = url[:80] + "..." if len(url) > 80 else url
        self.status: int | None = None
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing recent forwards and status counters."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[ForwardInfo] = []
        self._max_recent = 10
        self._status_count: Counter[str] = Counter()
        self._errors: list[str] = []
        self._live: Live | None = None
        self._files = LogFiles(config.logging)

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_forward(
        self,
        route: str,
        method: str,
        path: str,
        url: str,
        headers: dict[str, str],
    ) -> None:
        """Log a request about to be sent to the backend."""
        with self._lock:
            self._recent.insert(0, ForwardInfo(route, method, url, datetime.now()))
            self._recent = self._recent[: self._max_recent]
            self._refresh()
            self._files.forward(route, method, path, url, headers)

    def log_response(self, route: str, status: int) -> None:
        """Attach the backend status to the latest forward on this route."""
        with self._lock:
            pending = next(
                (f for f in self._recent if f.route == route and f.status is None),
                None,
            )
            if pending:
                pending.status = status
            self._status_count[f"{status // 100}xx"] += 1
            self._refresh()
            self._files.line("RESPONSE", str(status), route=route)

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            truncated = message[:50] + "..." if len(message) > 50 else message
            self._errors.insert(0, f"{route} {status}: {truncated}")
            self._errors = self._errors[:3]
            self._status_count["errors"] += 1
            self._refresh()
            self._files.line("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=4),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_recent_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        stats = Text()
        stats.append("Backend Relay", style="bold cyan")
        for label, style in (("2xx", "green"), ("4xx", "yellow"), ("5xx", "red")):
            stats.append("  |  ")
            stats.append(f"{label}: {self._status_count[label]}", style=style)
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_recent_panel(self) -> Panel:
        """Build recent forwards panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Route", width=14)
            table.add_column("Method", width=7)
            table.add_column("URL", ratio=3)
            table.add_column("Status", width=6)

            for fwd in self._recent:
                table.add_row(
                    fwd.timestamp.strftime("%H:%M:%S"),
                    fwd.route,
                    fwd.method,
                    Text(fwd.url),
                    _status_text(fwd.status),
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[blue]Recent forwards[/blue]", border_style="blue")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            backend = self.config.backend.url or f"{self.config.backend.fallback_url} (fallback)"
            content = Text(f"Forwarding to {backend}", style="dim")

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")


def _status_text(status: int | None) -> Text:
    if status is None:
        return Text("...", style="dim")
    style = "green" if status < 400 else "yellow" if status < 500 else "red"
    return Text(str(status), style=style)
