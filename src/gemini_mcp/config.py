"""gemini-mcp configuration.

Environment variables:
    GEMINI_BIN: gemini executable name or path
        - default "gemini"

    GEMINI_MCP_CONFIG_PATH: path of the JSON config file
        - unset/blank = ./gemini-mcp.config.json in the current directory

    GEMINI_MCP_LOG_DEBUG: debug log mode
        - true/1/yes = on (DEBUG log written to a temp file)
        - false/0/no = off (default, INFO log to stderr)

Config file (JSON):
    {
        "additional_args": ["--model", "gemini-2.5-pro"],
        "timeout_secs": 900
    }

    additional_args: extra arguments passed to every gemini invocation
    timeout_secs: deadline per invocation, clamped to MAX_TIMEOUT_SECS;
        missing or non-positive falls back to DEFAULT_TIMEOUT_SECS

A missing file means defaults. A malformed file is logged and ignored.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

__all__ = [
    "Config",
    "ConfigFile",
    "load_config",
    "get_config",
    "reload_config",
    "resolve_config_path",
    "resolve_timeout",
    "DEFAULT_TIMEOUT_SECS",
    "MAX_TIMEOUT_SECS",
]

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_BIN = "gemini"
DEFAULT_CONFIG_FILE = "gemini-mcp.config.json"
DEFAULT_TIMEOUT_SECS = 600.0  # 10 minutes
MAX_TIMEOUT_SECS = 3600.0  # 1 hour


class ConfigFile(BaseModel):
    """Schema of gemini-mcp.config.json."""

    model_config = ConfigDict(extra="ignore")

    additional_args: list[str] = Field(default_factory=list)
    timeout_secs: float | None = None

    @field_validator("timeout_secs", mode="before")
    @classmethod
    def _numeric_timeout(cls, value: object) -> object:
        # Non-numeric -> default
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            if value is not None:
                logger.warning(f"Ignoring non-numeric timeout_secs: {value!r}")
            return None
        return value


@dataclass(frozen=True)
class Config:
    """gemini-mcp configuration.

    Attributes:
        gemini_bin: gemini executable name or path
        additional_args: extra CLI arguments for every invocation
        timeout_secs: per-invocation deadline in seconds
        config_path: config file that was consulted (may not exist)
        log_debug: debug log mode (log to temp file)
        log_file: log file path (set when log_debug=True)
    """

    gemini_bin: str = DEFAULT_GEMINI_BIN
    additional_args: tuple[str, ...] = field(default_factory=tuple)
    timeout_secs: float = DEFAULT_TIMEOUT_SECS
    config_path: Path | None = None
    log_debug: bool = False
    log_file: str | None = None

    def __repr__(self) -> str:
        return (
            f"Config(gemini_bin={self.gemini_bin}, "
            f"additional_args={list(self.additional_args)}, "
            f"timeout_secs={self.timeout_secs:g}, "
            f"config_path={self.config_path}, "
            f"log_debug={self.log_debug}, "
            f"log_file={self.log_file})"
        )


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """Parse a boolean environment variable."""
    if value is None:
        return default
    return value.lower() in ("true", "1", "yes", "on")


def resolve_timeout(value: float | None) -> float:
    """Clamp a configured timeout.

    0 < t <= MAX -> t, t > MAX -> MAX, anything else -> default.
    """
    if value is None or value <= 0:
        return DEFAULT_TIMEOUT_SECS
    return min(float(value), MAX_TIMEOUT_SECS)


def resolve_config_path() -> Path | None:
    """Locate the config file: $GEMINI_MCP_CONFIG_PATH, else ./gemini-mcp.config.json."""
    env_path = os.environ.get("GEMINI_MCP_CONFIG_PATH", "").strip()
    if env_path:
        return Path(env_path)
    try:
        return Path.cwd() / DEFAULT_CONFIG_FILE
    except OSError:
        return None


def _read_config_file(path: Path | None) -> ConfigFile:
    """Load the config file, falling back to defaults on any problem."""
    if path is None or not path.is_file():
        return ConfigFile()

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.warning(f"Failed to read config {path}: {e}")
        return ConfigFile()

    try:
        parsed = ConfigFile.model_validate_json(raw)
    except ValidationError as e:
        logger.warning(f"Failed to parse config {path}: {e}")
        return ConfigFile()

    parsed.additional_args = [a.strip() for a in parsed.additional_args if a.strip()]
    return parsed


def _generate_log_file_path() -> str:
    """Build a timestamped log file path under the temp directory."""
    log_dir = Path(tempfile.gettempdir()) / "gemini-mcp"
    log_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = log_dir / f"gemini_mcp_debug_{timestamp}.log"

    return str(log_file.resolve())


def load_config() -> Config:
    """Load configuration from the environment and the config file."""
    config_path = resolve_config_path()
    file_config = _read_config_file(config_path)

    log_debug = _parse_bool(os.environ.get("GEMINI_MCP_LOG_DEBUG"), default=False)
    log_file = _generate_log_file_path() if log_debug else None

    gemini_bin = os.environ.get("GEMINI_BIN", "").strip() or DEFAULT_GEMINI_BIN

    return Config(
        gemini_bin=gemini_bin,
        additional_args=tuple(file_config.additional_args),
        timeout_secs=resolve_timeout(file_config.timeout_secs),
        config_path=config_path,
        log_debug=log_debug,
        log_file=log_file,
    )


# Process-wide config instance (lazily loaded)
_config: Config | None = None


def get_config() -> Config:
    """Return the cached process-wide config, loading it on first use."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """Reload configuration (used by tests)."""
    global _config
    _config = load_config()
    return _config
