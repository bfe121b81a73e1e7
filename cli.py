"""CLI entry point for backend-relay."""

import sys
from datetime import datetime

from rich.console import Console

from app import create_app
from core.config import CONFIG_FILE, Config, load_config
from core.exceptions import ConfigurationError
from ui.dashboard import Dashboard
from ui.log_utils import LogFiles, clear_logs

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--check":
            print_backend_status(config)
            return

        if arg == "--config":
            console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    # Requests still get a configuration error response; warn early
    if not print_backend_status(config):
        console.print("[yellow]Warning:[/yellow] requests will fail until BACKEND_URL is set")

    files = LogFiles(config.logging)
    if files.enabled:
        clear_logs(files.log_root)
    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    # Run with dashboard
    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="debug" if config.proxy.debug else "warning",
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    files.line("STARTUP", "Proxy started", port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        files.line("SHUTDOWN", "Proxy stopped", duration=str(duration))
        dashboard.stop()


def print_backend_status(config: Config) -> bool:
    """Print the resolved backend origin; return False when it is missing."""
    try:
        origin = config.backend.resolve_origin()
    except ConfigurationError as e:
        console.print(f"[red]Backend not configured:[/red] {e}")
        return False

    suffix = "" if config.backend.url else " [dim](fallback)[/dim]"
    console.print(f"[green]Backend:[/green] {origin}{suffix}")
    return True


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]Backend Relay[/bold cyan]

Forwards /api/proxy/* and /api/proxy-reviews to the configured backend.

[bold]Usage:[/bold]
    backend-relay              Start with live dashboard
    backend-relay --check      Show the resolved backend origin
    backend-relay --config     Show config location
    backend-relay --help       Show this help

[bold]Environment:[/bold]
    BACKEND_URL                Backend origin, e.g. https://api.example.com
    BACKEND_URL_REQUIRED       false to fall back to BACKEND_FALLBACK_URL
    PROXY_TIMEOUT              Backend timeout in seconds (default: none)
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
