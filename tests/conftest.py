"""
Shared pytest fixtures.

Consoles are built with in-memory clipboard and file writers so tests never
touch the real clipboard or the filesystem.
"""

import itertools

import pytest

from logscope.capabilities import MemoryClipboard, MemoryFileWriter
from logscope.console import LogConsole
from logscope.export import ExportFormatter
from logscope.ingestion import IngestionAdapter
from logscope.models import LogEntry, LogLevel

_ids = itertools.count(1)


def make_entry(message="hello", level=LogLevel.INFO, target="app::core", fields=None, timestamp=None):
    """Build a LogEntry directly, bypassing ingestion."""
    n = next(_ids)
    return LogEntry(
        id=f"entry-{n}",
        timestamp=1714564800000 + n if timestamp is None else timestamp,
        level=level,
        target=target,
        message=message,
        fields=fields or {}
    )


def raw_record(message="hello", level="INFO", target="app::core", fields=None, timestamp=1714564800123):
    return {
        "timestamp": timestamp,
        "level": level,
        "target": target,
        "message": message,
        "fields": fields or {}
    }


@pytest.fixture
def clipboard():
    return MemoryClipboard()


@pytest.fixture
def file_writer():
    return MemoryFileWriter()


@pytest.fixture
def scroll_calls():
    return []


@pytest.fixture
def console(clipboard, file_writer, scroll_calls):
    formatter = ExportFormatter(clipboard, file_writer, app_name="testapp")
    return LogConsole(
        capacity=5,
        formatter=formatter,
        scroll_to_bottom=lambda: scroll_calls.append(True)
    )


@pytest.fixture
def adapter(console):
    return IngestionAdapter(console)
