"""
Ingestion of raw telemetry records into the console.

The adapter is the only writer into the console's buffer. It normalizes each
raw record into an immutable LogEntry, drops anything malformed, and keeps
arrival order exactly as received.
"""

import json
import logging
import threading
import uuid
from typing import Any, Callable, Iterable, List, Mapping, Optional, Protocol

from pydantic import ValidationError

from .console import LogConsole
from .errors import IngestionParseError
from .models import LogEntry, RawLogRecord

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    """An external event stream that pushes raw records to a callback."""

    def subscribe(self, callback: Callable[[Any], None]) -> Callable[[], None]:
        ...


def normalize_record(raw: Any) -> LogEntry:
    """
    Turn a raw record into a LogEntry.

    Args:
        raw: A mapping, or a JSON object encoded as str or bytes

    Returns:
        LogEntry: A new entry with a fresh UUID

    Raises:
        IngestionParseError: If the record is missing level, timestamp or
            message, carries an unknown level, or is not an object
    """
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise IngestionParseError(f"record is not valid UTF-8: {e}") from e
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise IngestionParseError(f"record is not valid JSON: {e}") from e
    if not isinstance(raw, Mapping):
        raise IngestionParseError(f"record must be an object, got {type(raw).__name__}")

    try:
        record = RawLogRecord.model_validate(dict(raw))
    except (ValidationError, RecursionError) as e:
        raise IngestionParseError(str(e)) from e

    return LogEntry(
        id=str(uuid.uuid4()),
        timestamp=record.timestamp,
        level=record.level,
        target=record.target,
        message=record.message,
        fields=record.fields
    )


class IngestionAdapter:
    """Feeds normalized entries from an external stream into a console."""

    def __init__(self, console: LogConsole):
        self.console = console
        self._dropped = 0
        self._accepted = 0
        self._counter_lock = threading.Lock()
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def dropped_count(self) -> int:
        """Malformed records dropped since construction."""
        return self._dropped

    @property
    def accepted_count(self) -> int:
        return self._accepted

    def _drop(self, error: IngestionParseError) -> None:
        with self._counter_lock:
            self._dropped += 1
        logger.debug(f"Dropped malformed log record: {error}")

    def ingest(self, raw: Any) -> Optional[LogEntry]:
        """
        Ingest one raw record.

        Returns:
            Optional[LogEntry]: The appended entry, or None if the record was dropped
        """
        try:
            entry = normalize_record(raw)
        except IngestionParseError as e:
            self._drop(e)
            return None
        self.console.append(entry)
        with self._counter_lock:
            self._accepted += 1
        return entry

    def ingest_many(self, records: Iterable[Any]) -> List[LogEntry]:
        """Ingest a batch of raw records, notifying the console once."""
        entries = []
        with self.console.batch():
            for raw in records:
                entry = self.ingest(raw)
                if entry is not None:
                    entries.append(entry)
        return entries

    def attach(self, source: EventSource) -> None:
        """Subscribe to an external event source, replacing any previous one."""
        self.detach()
        self._unsubscribe = source.subscribe(self.ingest)
        logger.info("Ingestion adapter attached to event source")

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
            logger.info("Ingestion adapter detached from event source")

    @property
    def attached(self) -> bool:
        return self._unsubscribe is not None
