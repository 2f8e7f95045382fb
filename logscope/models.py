"""
Pydantic models for the Logscope console engine.

This module defines the data models used throughout the engine: the five
severities, the immutable log entry, the raw record accepted from the
telemetry emitter, the filter and scroll state values, and the payloads of
the HTTP control surface.
"""

import math
from datetime import datetime, timedelta, timezone
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class LogLevel(str, Enum):
    """The five fixed log severities."""

    ERROR = "ERROR"
    WARN = "WARN"
    INFO = "INFO"
    DEBUG = "DEBUG"
    TRACE = "TRACE"


# Display order used by the console's level picker and footer counts
ALL_LEVELS = (LogLevel.ERROR, LogLevel.WARN, LogLevel.INFO, LogLevel.DEBUG, LogLevel.TRACE)

LEVEL_ALIASES = {"WARNING": LogLevel.WARN}

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_level(value: Any) -> LogLevel:
    """
    Map a level name onto one of the five severities.

    Args:
        value: Level name, matched case-insensitively

    Returns:
        LogLevel: The matching severity

    Raises:
        ValueError: If the value is empty or not a known severity
    """
    if isinstance(value, LogLevel):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValueError("level must be a non-empty string")
    name = value.strip().upper()
    if name in LEVEL_ALIASES:
        return LEVEL_ALIASES[name]
    try:
        return LogLevel(name)
    except ValueError:
        raise ValueError(f"unknown log level: {value}")


def millis_to_iso(millis: int) -> str:
    """Render epoch milliseconds as ISO-8601 UTC, e.g. ``2024-05-01T12:00:00.123Z``."""
    moment = _EPOCH + timedelta(milliseconds=millis)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_to_millis(value: str) -> int:
    """Convert an ISO-8601 string to epoch milliseconds; naive values are read as UTC."""
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def coerce_millis(value: Any) -> int:
    """Accept epoch milliseconds (int, float or digit string) or an ISO-8601 string."""
    if isinstance(value, bool) or value is None:
        raise ValueError("timestamp must be epoch milliseconds or an ISO-8601 string")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("timestamp must be finite")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if text.lstrip("-").isdigit():
            return int(text)
        return iso_to_millis(text)
    raise ValueError(f"unsupported timestamp type: {type(value).__name__}")


class LogEntry(BaseModel):
    """Model representing one immutable ingested log record."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier for the log entry")
    timestamp: int = Field(..., description="Epoch milliseconds when the event was emitted")
    level: LogLevel = Field(..., description="Log severity")
    target: str = Field(default="", description="Hierarchical namespace of the emitter")
    message: str = Field(..., description="The log message")
    fields: Mapping[str, str] = Field(
        default_factory=dict, validate_default=True, description="Structured fields in emission order"
    )

    @field_validator("fields", mode="after")
    @classmethod
    def freeze_fields(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("fields")
    def serialize_fields(self, value: Mapping[str, str]) -> Dict[str, str]:
        return dict(value)

    @property
    def iso_timestamp(self) -> str:
        """The timestamp as ISO-8601 UTC with millisecond precision."""
        return millis_to_iso(self.timestamp)

    @property
    def short_target(self) -> str:
        """The last two ``::`` segments of the target."""
        return "::".join(self.target.split("::")[-2:])


class RawLogRecord(BaseModel):
    """Model for records arriving from the external telemetry emitter."""

    model_config = ConfigDict(extra="ignore")

    timestamp: int
    level: LogLevel
    target: str = ""
    message: str
    fields: Dict[str, str] = Field(default_factory=dict)

    @field_validator("timestamp", mode="before")
    @classmethod
    def normalize_timestamp(cls, value: Any) -> int:
        millis = coerce_millis(value)
        try:
            millis_to_iso(millis)
        except OverflowError:
            raise ValueError(f"timestamp out of range: {value}")
        return millis

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, value: Any) -> LogLevel:
        return parse_level(value)

    @field_validator("target", mode="before")
    @classmethod
    def default_target(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("fields", mode="before")
    @classmethod
    def stringify_fields(cls, value: Any) -> Dict[str, str]:
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("fields must be a mapping")
        return {str(key): "" if item is None else str(item) for key, item in value.items()}


class FilterState(BaseModel):
    """The enabled severities and the search term."""

    model_config = ConfigDict(frozen=True)

    levels: FrozenSet[LogLevel] = Field(default_factory=lambda: frozenset(ALL_LEVELS))
    search_term: str = ""

    def with_levels(self, levels) -> "FilterState":
        return FilterState(levels=frozenset(parse_level(level) for level in levels),
                           search_term=self.search_term)

    def with_search_term(self, search_term: str) -> "FilterState":
        return FilterState(levels=self.levels, search_term=search_term)

    def with_level_toggled(self, level) -> "FilterState":
        """Return a copy with ``level`` switched on or off."""
        level = parse_level(level)
        if level in self.levels:
            levels = self.levels - {level}
        else:
            levels = self.levels | {level}
        return FilterState(levels=levels, search_term=self.search_term)


class ScrollState(BaseModel):
    """Whether the view follows new entries."""

    model_config = ConfigDict(frozen=True)

    auto_follow: bool = True


# --- HTTP control surface payloads ---

class LevelsUpdate(BaseModel):
    """Request body replacing the enabled level set."""

    levels: List[str] = Field(..., description="Enabled severities; empty hides everything")


class SearchUpdate(BaseModel):
    """Request body replacing the search term."""

    term: str = Field(default="", description="Case-insensitive search term")


class ScrollPosition(BaseModel):
    """Request body reporting whether the view is at the bottom threshold."""

    at_bottom: bool = Field(..., description="True when the view is within the bottom threshold")


class AutoScrollUpdate(BaseModel):
    """Request body for the pause/resume toggle."""

    enabled: bool = Field(..., description="Whether the view should follow new entries")


class LogsResponse(BaseModel):
    """Model for visible-set responses."""

    logs: List[LogEntry] = Field(..., description="Visible log entries, oldest first")
    visible: int = Field(..., description="Number of visible entries")
    total: int = Field(..., description="Number of retained entries")


class IngestResponse(BaseModel):
    """Model for ingestion responses."""

    status: str = Field(..., description="accepted or dropped")
    entry: Optional[LogEntry] = Field(default=None, description="The created entry, when accepted")


class ConsoleStateResponse(BaseModel):
    """Model describing the current filter and scroll state."""

    levels: List[LogLevel] = Field(..., description="Enabled severities in display order")
    search_term: str = Field(..., description="Current search term")
    auto_follow: bool = Field(..., description="Whether the view follows new entries")


class StatsResponse(BaseModel):
    """Model for buffer statistics."""

    count: int = Field(..., description="Retained entries")
    capacity: int = Field(..., description="Maximum retained entries")
    is_full: bool = Field(..., description="Whether the buffer is at capacity")
    evicted: int = Field(..., description="Entries evicted since start")
    dropped: int = Field(..., description="Malformed records dropped since start")
    level_counts: Dict[str, int] = Field(..., description="Retained entries per severity")
    auto_follow: bool = Field(..., description="Whether the view follows new entries")


class CopyResponse(BaseModel):
    """Model for clipboard copy responses."""

    success: bool = Field(..., description="Whether the clipboard accepted the text")
    count: int = Field(..., description="Number of entries copied")


class ExportResponse(BaseModel):
    """Model for export responses."""

    filename: str = Field(..., description="Destination the export was written to")
    count: int = Field(..., description="Number of entries exported")


class HealthResponse(BaseModel):
    """Model for health check responses."""

    status: str = Field(..., description="Health status of the service")
    service: str = Field(..., description="Name of the service")
    timestamp: str = Field(..., description="ISO format timestamp of the health check")
    log_count: int = Field(..., description="Retained entries")
    dropped: int = Field(..., description="Malformed records dropped since start")


class ApiResponse(BaseModel):
    """Generic API response model."""

    status: str = Field(..., description="Response status (success, error)")
    message: str = Field(..., description="Response message")
