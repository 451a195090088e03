"""Application configuration.

Hides where settings come from. Precedence, highest first:
command-line options, environment variables (``HANK_HOST``,
``HANK_PORT``), the YAML config file, built-in defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

APP_DIR_NAME = "hank-tui"
CONFIG_FILE_NAME = "config.yaml"
HISTORY_FILE_NAME = "history.json"

# Input history configuration
INPUT_HISTORY_MAX_SIZE = 100  # Maximum entries in sent-message history

# Transcript persistence
TRANSCRIPT_SAVE_LIMIT = 100  # Newest messages kept in the history file

# Remote store timing (seconds)
DEFAULT_POLL_INTERVAL = 2.0
DEFAULT_FETCH_TIMEOUT = 2.0
DEFAULT_SEND_TIMEOUT = 120.0

HOST_ENV_VAR = "HANK_HOST"
PORT_ENV_VAR = "HANK_PORT"


class Settings(BaseModel):
    """Resolved client settings."""

    host: str = Field(default="localhost", description="Chat server host")
    port: int = Field(default=8080, ge=1, le=65535, description="Chat server port")
    history_enabled: bool = Field(default=True, description="Load and save transcript history")
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    fetch_timeout: float = Field(default=DEFAULT_FETCH_TIMEOUT, gt=0)
    send_timeout: float = Field(default=DEFAULT_SEND_TIMEOUT, gt=0)
    assistant_name: str = Field(default="Hank", description="Label for assistant messages")

    @property
    def server_url(self) -> str:
        return f"http://{self.host}:{self.port}"


def config_dir() -> Path:
    """Return the per-user configuration directory for hank-tui."""
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / APP_DIR_NAME


def config_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def history_path() -> Path:
    return config_dir() / HISTORY_FILE_NAME


def load_config(path: Path | None = None) -> Settings:
    """Load settings from the YAML config file.

    A missing, unreadable or invalid file yields the defaults.
    """
    path = path or config_path()
    if not path.exists():
        return Settings()
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        if not isinstance(data, dict):
            raise ValueError("config root must be a mapping")
        return Settings(**data)
    except (OSError, yaml.YAMLError, ValueError, ValidationError) as e:
        logger.warning("Ignoring config file %s: %s", path, e)
        return Settings()


def save_config(settings: Settings, path: Path | None = None) -> None:
    """Write host and port back to the config file for the next start.

    Raises:
        OSError: If the file cannot be written
    """
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    data: dict[str, Any] = {}
    if path.exists():
        with path.open("r", encoding="utf-8") as handle:
            existing = yaml.safe_load(handle)
        if isinstance(existing, dict):
            data.update(existing)
    data["host"] = settings.host
    data["port"] = settings.port
    with path.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(data, handle, sort_keys=True)


def _env_port() -> int | None:
    raw = os.environ.get(PORT_ENV_VAR)
    if not raw:
        return None
    try:
        port = int(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", PORT_ENV_VAR, raw)
        return None
    if not 1 <= port <= 65535:
        logger.warning("Ignoring out-of-range %s=%d", PORT_ENV_VAR, port)
        return None
    return port


def resolve_settings(
    host: str | None = None,
    port: int | None = None,
    no_history: bool = False,
    path: Path | None = None,
) -> Settings:
    """Merge command-line values, environment and config file into Settings."""
    settings = load_config(path)
    updates: dict[str, Any] = {}

    resolved_host = host or os.environ.get(HOST_ENV_VAR)
    if resolved_host:
        updates["host"] = resolved_host

    resolved_port = port if port is not None else _env_port()
    if resolved_port is not None:
        updates["port"] = resolved_port

    if no_history:
        updates["history_enabled"] = False

    return Settings(**{**settings.model_dump(), **updates})
