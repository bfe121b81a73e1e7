"""Configuration models and loading."""

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from core.exceptions import ConfigurationError

CONFIG_DIR = Path.home() / ".config" / "backend-relay"
CONFIG_FILE = CONFIG_DIR / "config.json"

MISSING_BACKEND_MESSAGE = (
    "BACKEND_URL environment variable is not set. "
    "Please configure it in the deployment settings."
)

# Environment variable -> (section, field)
ENV_OVERRIDES = {
    "BACKEND_URL": ("backend", "url"),
    "BACKEND_URL_REQUIRED": ("backend", "required"),
    "BACKEND_FALLBACK_URL": ("backend", "fallback_url"),
    "PROXY_TIMEOUT": ("http", "timeout"),
    "PROXY_PORT": ("proxy", "port"),
    "PROXY_LOG_FILES": ("logging", "write_files"),
}


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = True


class BackendSettings(BaseModel):
    url: str = ""
    required: bool = True
    fallback_url: str = "http://127.0.0.1:8080"

    def resolve_origin(self) -> str:
        """Return the backend origin, or raise if it is required and unset."""
        origin = self.url.strip()
        if not origin:
            if self.required:
                raise ConfigurationError(MISSING_BACKEND_MESSAGE)
            origin = self.fallback_url
        return origin.rstrip("/")


class HttpSettings(BaseModel):
    # None leaves the limit to the hosting platform
    timeout: float | None = None
    max_connections: int = 100
    max_keepalive_connections: int = 20


class LoggingSettings(BaseModel):
    write_files: bool = False
    log_dir: str = "logs"


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def load_config(
    environ: Mapping[str, str] | None = None,
    config_file: Path = CONFIG_FILE,
) -> Config:
    """Load configuration from the optional JSON file, then the environment."""
    environ = os.environ if environ is None else environ
    data = _read_config_file(config_file)

    for var, (section, field) in ENV_OVERRIDES.items():
        value = environ.get(var)
        if value is None or value == "":
            continue
        data.setdefault(section, {})[field] = value

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


def _read_config_file(config_file: Path) -> dict[str, Any]:
    if not config_file.exists():
        return {}

    try:
        data = json.loads(config_file.read_text())
        Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and fall back to defaults
        config_file.rename(config_file.with_suffix(".json.bak"))
        return {}
    return data
