"""Shared logging utilities."""

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import Any
from uuid import uuid4

from core.config import LoggingSettings

LOG_ROOT = Path.cwd() / "logs"
CLI_LOG_NAME = "proxy.log"


class LogFiles:
    """Best-effort file logging shared by the console loggers."""

    def __init__(self, settings: LoggingSettings) -> None:
        self.enabled = settings.write_files
        self.log_root = Path(settings.log_dir)
        if not self.log_root.is_absolute():
            self.log_root = Path.cwd() / self.log_root

    def forward(
        self,
        route: str,
        method: str,
        path: str,
        url: str,
        headers: dict[str, str],
    ) -> None:
        if not self.enabled:
            return
        try:
            write_forward_log(route, method, path, url, headers, log_root=self.log_root)
            write_cli_log("FORWARD", f"{method} {url}", log_root=self.log_root, route=route)
        except OSError:
            # Read-only filesystems are common on serverless hosts
            self.enabled = False

    def line(self, level: str, message: str, **extra: Any) -> None:
        if not self.enabled:
            return
        try:
            write_cli_log(level, message, log_root=self.log_root, **extra)
        except OSError:
            self.enabled = False


def write_forward_log(
    route: str,
    method: str,
    path: str,
    url: str,
    headers: dict[str, str],
    *,
    log_root: Path = LOG_ROOT,
) -> Path:
    """Write a single forwarded request log entry."""
    payload = {
        "timestamp": _utc_now(),
        "route": route,
        "method": method,
        "path": path,
        "url": url,
        "headers": redact_headers(headers),
    }
    return _write_json(log_root / "forwarded" / route, payload)


def write_cli_log(
    level: str,
    message: str,
    *,
    log_root: Path = LOG_ROOT,
    **extra: Any,
) -> None:
    """Append a line to the rolling CLI log file."""
    log_file = log_root / CLI_LOG_NAME
    log_file.parent.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S")
    extra_str = " ".join(f"{k}={v}" for k, v in extra.items()) if extra else ""
    line = f"[{timestamp}] {level}: {message}"
    if extra_str:
        line += f" {extra_str}"
    line += "\n"
    with log_file.open("a") as f:
        f.write(line)


def clear_logs(log_root: Path = LOG_ROOT) -> int:
    """Delete JSON request logs from previous runs."""
    deleted = 0
    for old_file in (log_root / "forwarded").glob("**/*.json"):
        try:
            old_file.unlink()
            deleted += 1
        except OSError:
            pass
    return deleted


def redact_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    redacted = {}
    for key, value in headers.items():
        if "key" in key.lower() or "authorization" in key.lower():
            redacted[key] = _mask(value)
        else:
            redacted[key] = value
    return redacted


def _write_json(folder: Path, payload: dict[str, Any]) -> Path:
    """Write payload to a unique JSON file in the given folder."""
    folder.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now(UTC).strftime("%Y%m%dT%H%M%S.%fZ")
    file_path = folder / f"{timestamp}_{uuid4().hex}.json"
    file_path.write_text(json.dumps(payload, indent=2, default=str))
    return file_path


def _mask(value: str) -> str:
    if len(value) <= 10:
        return "***"
    return value[:6] + "..." + value[-4:]


def _utc_now() -> str:
    return datetime.now(UTC).isoformat()
