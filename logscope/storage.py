"""
Bounded log storage for the Logscope console engine.

This module keeps the retained window of log entries. The buffer has a fixed
capacity and evicts the oldest entry first; every mutation and every snapshot
happens under one lock so readers never see a half-evicted buffer.
"""

import logging
import threading
from collections import deque
from typing import Deque, Dict, Optional, Tuple

from .errors import ConfigurationError
from .models import LogEntry

logger = logging.getLogger(__name__)


class RingBufferStore:
    """Fixed-capacity, FIFO-evicting, ordered container of log entries."""

    def __init__(self, capacity: int):
        """
        Initialize the buffer.

        Args:
            capacity: Maximum number of retained entries, at least 1

        Raises:
            ConfigurationError: If capacity is not a positive integer
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ConfigurationError(f"Buffer capacity must be a positive integer, got {capacity!r}")
        self._capacity = capacity
        self._entries: Deque[LogEntry] = deque()
        self._lock = threading.Lock()
        self._evicted = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def evicted_count(self) -> int:
        """Total entries evicted by capacity since construction."""
        return self._evicted

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def append(self, entry: LogEntry) -> Optional[LogEntry]:
        """
        Add an entry in arrival order, evicting the oldest when over capacity.

        Args:
            entry: The entry to retain

        Returns:
            Optional[LogEntry]: The evicted entry, if the buffer was full
        """
        evicted = None
        with self._lock:
            self._entries.append(entry)
            while len(self._entries) > self._capacity:
                evicted = self._entries.popleft()
                self._evicted += 1
        return evicted

    def clear(self) -> int:
        """
        Remove every retained entry.

        Returns:
            int: Number of entries removed
        """
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
        logger.info(f"Cleared {removed} log entries")
        return removed

    def snapshot(self) -> Tuple[LogEntry, ...]:
        """Return the retained entries, oldest first."""
        with self._lock:
            return tuple(self._entries)

    def get_storage_info(self) -> Dict[str, int]:
        """
        Get information about the storage state.

        Returns:
            Dict containing count, capacity, fullness and eviction total
        """
        with self._lock:
            count = len(self._entries)
        return {
            'count': count,
            'capacity': self._capacity,
            'is_full': count == self._capacity,
            'evicted': self._evicted
        }
