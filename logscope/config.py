"""
Configuration management for the Logscope console engine.

This module centralizes all settings so the buffer, filter, scroll and export
components can be tuned from the environment without touching engine code.
Configuration is read once at construction; there is no live reconfiguration.
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Optional

from .errors import ConfigurationError
from .models import ALL_LEVELS, LogLevel, parse_level


@dataclass
class BufferConfig:
    """Configuration for the ring buffer."""

    capacity: int = 1000


@dataclass
class FilterConfig:
    """Initial filter state for the console."""

    levels: FrozenSet[LogLevel] = field(default_factory=lambda: frozenset(ALL_LEVELS))
    search_term: str = ""


@dataclass
class ScrollConfig:
    """Initial scroll/follow state."""

    auto_follow: bool = True


@dataclass
class ExportConfig:
    """Configuration for exported log files."""

    app_name: str = "logscope"
    export_dir: str = "."


@dataclass
class ServerConfig:
    """Configuration for the FastAPI control surface."""

    host: str = "127.0.0.1"
    port: int = 5000
    log_level: str = "info"
    access_log: bool = False


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def parse_levels(value: str) -> FrozenSet[LogLevel]:
    """
    Parse a comma-separated list of level names.

    Args:
        value: Level names such as ``"ERROR,WARN"``; an empty string means no levels

    Returns:
        FrozenSet[LogLevel]: The parsed levels

    Raises:
        ConfigurationError: If a name is not one of the five severities
    """
    levels = set()
    for name in value.split(","):
        if not name.strip():
            continue
        try:
            levels.add(parse_level(name))
        except ValueError:
            raise ConfigurationError(f"Unknown log level in configuration: {name.strip()}")
    return frozenset(levels)


class Config:
    """Main configuration class that loads settings from environment variables."""

    def __init__(self, environ: Optional[dict] = None):
        self._environ = os.environ if environ is None else environ
        self.buffer = self._load_buffer_config()
        self.filter = self._load_filter_config()
        self.scroll = self._load_scroll_config()
        self.export = self._load_export_config()
        self.server = self._load_server_config()

    def _get(self, name: str, default: str) -> str:
        return self._environ.get(name, default)

    def _load_buffer_config(self) -> BufferConfig:
        """Load ring buffer configuration from environment variables."""
        capacity = _parse_int("LOGSCOPE_CAPACITY", self._get("LOGSCOPE_CAPACITY", "1000"))
        if capacity < 1:
            raise ConfigurationError(f"LOGSCOPE_CAPACITY must be at least 1, got {capacity}")
        return BufferConfig(capacity=capacity)

    def _load_filter_config(self) -> FilterConfig:
        """Load the initial filter state from environment variables."""
        raw_levels = self._environ.get("LOGSCOPE_LEVELS")
        levels = frozenset(ALL_LEVELS) if raw_levels is None else parse_levels(raw_levels)
        return FilterConfig(
            levels=levels,
            search_term=self._get("LOGSCOPE_SEARCH", "")
        )

    def _load_scroll_config(self) -> ScrollConfig:
        """Load the initial scroll state from environment variables."""
        return ScrollConfig(
            auto_follow=_parse_bool(self._get("LOGSCOPE_AUTO_FOLLOW", "true"))
        )

    def _load_export_config(self) -> ExportConfig:
        """Load export configuration from environment variables."""
        return ExportConfig(
            app_name=self._get("LOGSCOPE_APP_NAME", "logscope"),
            export_dir=self._get("LOGSCOPE_EXPORT_DIR", ".")
        )

    def _load_server_config(self) -> ServerConfig:
        """Load server configuration from environment variables."""
        return ServerConfig(
            host=self._get("LOGSCOPE_HOST", "127.0.0.1"),
            port=_parse_int("LOGSCOPE_PORT", self._get("LOGSCOPE_PORT", "5000")),
            log_level=self._get("LOGSCOPE_LOG_LEVEL", "info").lower(),
            access_log=_parse_bool(self._get("LOGSCOPE_ACCESS_LOG", "false"))
        )

    def get_capacity(self) -> int:
        """Get the configured ring buffer capacity."""
        return self.buffer.capacity

    def get_app_name(self) -> str:
        """Get the application name used in export filenames."""
        return self.export.app_name
