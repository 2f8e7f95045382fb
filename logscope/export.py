"""
Clipboard and file export of the visible log set.

Both operations work on whatever the caller passes in, which is always the
currently filtered set; the full buffer is never exported.
"""

import json
import logging
from datetime import date, datetime, timezone
from typing import Iterable, Optional

from .capabilities import ClipboardWriter, FileWriter
from .errors import ExportWriteError
from .models import LogEntry

logger = logging.getLogger(__name__)


def format_text_line(entry: LogEntry) -> str:
    """Format one entry as ``[ts] [LEVEL] [target] message k=v ...``."""
    fields = " ".join(f"{key}={value}" for key, value in entry.fields.items())
    line = f"[{entry.iso_timestamp}] [{entry.level.value}] [{entry.target}] {entry.message} {fields}"
    return line.rstrip()


def format_text(entries: Iterable[LogEntry]) -> str:
    return "\n".join(format_text_line(entry) for entry in entries)


def format_json_line(entry: LogEntry) -> str:
    """Serialize one entry as a single JSON object with an ISO-8601 timestamp."""
    return json.dumps({
        "id": entry.id,
        "timestamp": entry.iso_timestamp,
        "level": entry.level.value,
        "target": entry.target,
        "message": entry.message,
        "fields": dict(entry.fields)
    }, ensure_ascii=False)


def format_json_lines(entries: Iterable[LogEntry]) -> str:
    return "\n".join(format_json_line(entry) for entry in entries)


def export_filename(app_name: str, on_date: Optional[date] = None) -> str:
    """Build the ``<app-name>-logs-<YYYY-MM-DD>.jsonl`` destination name."""
    if on_date is None:
        on_date = datetime.now(timezone.utc).date()
    return f"{app_name}-logs-{on_date.isoformat()}.jsonl"


class ExportFormatter:
    """Hands formatted visible entries to the injected clipboard and file writer."""

    def __init__(self, clipboard: ClipboardWriter, file_writer: FileWriter, app_name: str = "logscope"):
        """
        Initialize the formatter.

        Args:
            clipboard: Capability with ``write(text) -> bool``
            file_writer: Capability with ``write(name, content) -> bool``
            app_name: Prefix of exported filenames
        """
        self.clipboard = clipboard
        self.file_writer = file_writer
        self.app_name = app_name

    def copy_as_text(self, visible_entries: Iterable[LogEntry]) -> bool:
        """
        Copy the entries to the clipboard as plain text.

        Returns:
            bool: Whether the clipboard accepted the text; failures are not retried
        """
        text = format_text(visible_entries)
        try:
            success = bool(self.clipboard.write(text))
        except Exception as e:
            logger.warning(f"Clipboard capability raised: {e}")
            return False
        if success:
            logger.info("Copied logs to clipboard")
        else:
            logger.warning("Clipboard rejected copied logs")
        return success

    def export_as_lines(self, visible_entries: Iterable[LogEntry], on_date: Optional[date] = None) -> str:
        """
        Write the entries as newline-delimited JSON.

        Args:
            visible_entries: The filtered entries to export
            on_date: Date used in the filename, today (UTC) by default

        Returns:
            str: The destination filename

        Raises:
            ExportWriteError: If the file writer fails; the caller must re-trigger
        """
        filename = export_filename(self.app_name, on_date)
        content = format_json_lines(visible_entries).encode("utf-8")
        try:
            success = self.file_writer.write(filename, content)
        except Exception as e:
            logger.warning(f"File writer raised while exporting {filename}: {e}")
            raise ExportWriteError(filename, str(e)) from e
        if not success:
            logger.warning(f"File writer rejected export {filename}")
            raise ExportWriteError(filename)
        logger.info(f"Exported logs to {filename}")
        return filename
