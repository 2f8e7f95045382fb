"""
Logscope - Bounded real-time log console engine

This package provides the state engine behind an in-process debug console:
a fixed-capacity ring buffer of structured log entries, live level and text
filtering, an auto-follow state machine, and clipboard/JSON-lines export of
the visible set.
"""

__version__ = "0.1.0"
__author__ = "Logscope Team"
