"""
Level and search filtering for the Logscope console engine.

The visible set is always recomputed from scratch: given the same entries and
the same filter state the result is identical and in the same order.
"""

from typing import Dict, Iterable, List

from .models import ALL_LEVELS, FilterState, LogEntry, LogLevel


def matches(entry: LogEntry, filter_state: FilterState) -> bool:
    """
    Check whether an entry passes the level set and the search term.

    The search term matches case-insensitively against the message, the
    target, and every field value. Field keys are not searched.
    """
    if entry.level not in filter_state.levels:
        return False
    if not filter_state.search_term:
        return True
    term = filter_state.search_term.lower()
    if term in entry.message.lower() or term in entry.target.lower():
        return True
    return any(term in value.lower() for value in entry.fields.values())


def compute_visible(entries: Iterable[LogEntry], filter_state: FilterState) -> List[LogEntry]:
    """
    Compute the visible subsequence of ``entries``.

    Args:
        entries: Retained entries, oldest first
        filter_state: Enabled levels and search term

    Returns:
        List[LogEntry]: Matching entries in their original order; always
        empty when no level is enabled
    """
    if not filter_state.levels:
        return []
    return [entry for entry in entries if matches(entry, filter_state)]


def count_by_level(entries: Iterable[LogEntry]) -> Dict[LogLevel, int]:
    """Count entries per severity, covering all five levels in display order."""
    counts = {level: 0 for level in ALL_LEVELS}
    for entry in entries:
        counts[entry.level] += 1
    return counts
