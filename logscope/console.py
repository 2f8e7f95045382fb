"""
The console store: one explicit object that owns the ring buffer, the filter
state and the follow controller, and tells registered listeners about every
change.

Listeners are called synchronously, in registration order, after each
mutation. Inside ``batch()`` notifications are held back and delivered as a
single BATCH event when the outermost batch closes, so the follow effect fires
at most once per batch.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Set, Tuple

from .config import Config
from .export import ExportFormatter
from .filtering import compute_visible, count_by_level
from .models import ALL_LEVELS, FilterState, LogEntry, LogLevel, ScrollState
from .scroll import ScrollFollowController
from .storage import RingBufferStore

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    APPENDED = "appended"
    CLEARED = "cleared"
    FILTER_CHANGED = "filter_changed"
    SEARCH_CHANGED = "search_changed"
    SCROLL_CHANGED = "scroll_changed"
    BATCH = "batch"


# Changes that alter the visible set and so may move a following view
CONTENT_KINDS = frozenset({
    EventKind.APPENDED, EventKind.CLEARED, EventKind.FILTER_CHANGED, EventKind.SEARCH_CHANGED
})


@dataclass(frozen=True)
class ConsoleEvent:
    """What changed. ``kinds`` lists every change folded into a BATCH event."""

    kind: EventKind
    entry: Optional[LogEntry] = None
    kinds: FrozenSet[EventKind] = field(default_factory=frozenset)


Listener = Callable[[ConsoleEvent], None]


class LogConsole:
    """Bounded log console with live filtering, follow state and export."""

    def __init__(
        self,
        capacity: int = 1000,
        filter_state: Optional[FilterState] = None,
        auto_follow: bool = True,
        formatter: Optional[ExportFormatter] = None,
        scroll_to_bottom: Optional[Callable[[], None]] = None
    ):
        """
        Initialize the console.

        Args:
            capacity: Ring buffer capacity; below 1 raises ConfigurationError
            filter_state: Initial levels and search term, all levels by default
            auto_follow: Whether the view starts in FOLLOWING
            formatter: Export formatter used by copy_visible/export_visible
            scroll_to_bottom: Effect that moves the view to the latest entry
        """
        self.store = RingBufferStore(capacity)
        self.scroll = ScrollFollowController(scroll_to_bottom, auto_follow=auto_follow)
        self.formatter = formatter
        self._filter_state = filter_state or FilterState()
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self._batch_depth = 0
        self._pending: Set[EventKind] = set()
        self._effect_pending = False

    @classmethod
    def from_config(
        cls,
        config: Config,
        formatter: Optional[ExportFormatter] = None,
        scroll_to_bottom: Optional[Callable[[], None]] = None
    ) -> "LogConsole":
        """Build a console from loaded configuration."""
        return cls(
            capacity=config.buffer.capacity,
            filter_state=FilterState(levels=config.filter.levels, search_term=config.filter.search_term),
            auto_follow=config.scroll.auto_follow,
            formatter=formatter,
            scroll_to_bottom=scroll_to_bottom
        )

    # --- observers ---

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """
        Register a change listener.

        Returns:
            Callable that unregisters the listener
        """
        with self._lock:
            self._listeners.append(listener)

        def remove() -> None:
            self.remove_listener(listener)

        return remove

    def remove_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _dispatch(self, event: ConsoleEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Console listener failed on {event.kind.value} event")

    def _notify(self, kind: EventKind, entry: Optional[LogEntry] = None) -> None:
        if self._batch_depth:
            self._pending.add(kind)
            return
        self._dispatch(ConsoleEvent(kind=kind, entry=entry, kinds=frozenset({kind})))
        if kind in CONTENT_KINDS:
            self.scroll.notify_content_changed()

    @contextmanager
    def batch(self) -> Iterator["LogConsole"]:
        """Group several commands into one notification."""
        with self._lock:
            self._batch_depth += 1
            try:
                yield self
            finally:
                self._batch_depth -= 1
                if self._batch_depth == 0:
                    self._flush_batch()

    def _flush_batch(self) -> None:
        kinds = frozenset(self._pending)
        self._pending.clear()
        effect = self._effect_pending or bool(kinds & CONTENT_KINDS)
        self._effect_pending = False
        if kinds:
            self._dispatch(ConsoleEvent(kind=EventKind.BATCH, kinds=kinds))
        if effect:
            self.scroll.notify_content_changed()

    # --- commands ---

    def append(self, entry: LogEntry) -> None:
        with self._lock:
            self.store.append(entry)
            self._notify(EventKind.APPENDED, entry)

    def clear(self) -> None:
        """Empty the buffer; filter, search and follow state are kept."""
        with self._lock:
            self.store.clear()
            self._notify(EventKind.CLEARED)

    def set_filter(self, levels: Iterable) -> None:
        with self._lock:
            new_state = self._filter_state.with_levels(levels)
            if new_state == self._filter_state:
                return
            self._filter_state = new_state
            self._notify(EventKind.FILTER_CHANGED)

    def toggle_level(self, level) -> None:
        with self._lock:
            self._filter_state = self._filter_state.with_level_toggled(level)
            self._notify(EventKind.FILTER_CHANGED)

    def set_search_term(self, term: str) -> None:
        with self._lock:
            if term == self._filter_state.search_term:
                return
            self._filter_state = self._filter_state.with_search_term(term)
            self._notify(EventKind.SEARCH_CHANGED)

    def set_auto_scroll(self, enabled: bool) -> None:
        with self._lock:
            if self.scroll.set_auto_follow(enabled, fire=not self._batch_depth):
                if enabled and self._batch_depth:
                    self._effect_pending = True
                self._notify(EventKind.SCROLL_CHANGED)

    def report_at_bottom(self, at_bottom: bool) -> None:
        with self._lock:
            if self.scroll.report_at_bottom(at_bottom):
                self._notify(EventKind.SCROLL_CHANGED)

    def jump_to_latest(self) -> None:
        with self._lock:
            was_following = self.scroll.auto_follow
            self.scroll.jump_to_latest(fire=not self._batch_depth)
            if self._batch_depth:
                self._effect_pending = True
            if not was_following:
                self._notify(EventKind.SCROLL_CHANGED)

    # --- queries ---

    @property
    def filter_state(self) -> FilterState:
        return self._filter_state

    @property
    def scroll_state(self) -> ScrollState:
        return self.scroll.scroll_state

    def snapshot(self) -> Tuple[LogEntry, ...]:
        return self.store.snapshot()

    def visible(self) -> List[LogEntry]:
        """The entries passing the current level set and search term."""
        return compute_visible(self.store.snapshot(), self._filter_state)

    def counts(self) -> Dict[str, int]:
        """Visible and total entry counts, taken from one snapshot."""
        entries = self.store.snapshot()
        return {
            'visible': len(compute_visible(entries, self._filter_state)),
            'total': len(entries)
        }

    def level_counts(self) -> Dict[LogLevel, int]:
        """Retained entries per severity, over the whole buffer."""
        return count_by_level(self.store.snapshot())

    def enabled_levels(self) -> List[LogLevel]:
        """Enabled severities in display order."""
        return [level for level in ALL_LEVELS if level in self._filter_state.levels]

    # --- export ---

    def _require_formatter(self) -> ExportFormatter:
        if self.formatter is None:
            raise RuntimeError("No export formatter configured for this console")
        return self.formatter

    def copy_visible(self) -> bool:
        """Copy the visible entries to the clipboard."""
        return self._require_formatter().copy_as_text(self.visible())

    def export_visible(self) -> str:
        """
        Export the visible entries as JSON lines.

        Raises:
            ExportWriteError: If the file writer fails
        """
        return self._require_formatter().export_as_lines(self.visible())
