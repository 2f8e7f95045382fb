"""
Exception types for the Logscope console engine.
"""


class LogscopeError(Exception):
    """Base class for all Logscope errors."""
    pass


class ConfigurationError(LogscopeError):
    """Raised when the engine is constructed with invalid settings."""
    pass


class IngestionParseError(LogscopeError):
    """Raised when a raw record cannot be normalized into a log entry."""
    pass


class ClipboardWriteError(LogscopeError):
    """Raised when the clipboard capability cannot accept text."""
    pass


class ExportWriteError(LogscopeError):
    """Raised when the file-write capability rejects an export."""

    def __init__(self, filename: str, reason: str = "file writer reported failure"):
        super().__init__(f"Failed to export logs to {filename}: {reason}")
        self.filename = filename
        self.reason = reason
