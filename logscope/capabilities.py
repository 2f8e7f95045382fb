"""
Clipboard and file-write capabilities.

The export formatter never touches the OS directly; it is handed objects that
satisfy these small protocols. Real adapters live here next to in-memory
stand-ins for embedding and tests.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Sequence, Union

from .errors import ClipboardWriteError
from .shell import ShellError, check_command_exists, run_command

logger = logging.getLogger(__name__)


class ClipboardWriter(Protocol):
    def write(self, text: str) -> bool:
        ...


class FileWriter(Protocol):
    def write(self, name: str, content: bytes) -> bool:
        ...


# Tried in order; the first one found in PATH is used
CLIPBOARD_COMMANDS: Sequence[List[str]] = (
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
)


class CommandClipboard:
    """Clipboard backed by the platform's copy command."""

    def __init__(self, command: Optional[List[str]] = None):
        self.command = command or self._detect_command()

    @staticmethod
    def _detect_command() -> Optional[List[str]]:
        for candidate in CLIPBOARD_COMMANDS:
            if check_command_exists(candidate[0]):
                return list(candidate)
        return None

    def _copy(self, text: str) -> None:
        if not self.command:
            raise ClipboardWriteError("No clipboard command available")
        try:
            run_command(self.command, input_text=text)
        except ShellError as e:
            raise ClipboardWriteError(str(e)) from e

    def write(self, text: str) -> bool:
        try:
            self._copy(text)
        except ClipboardWriteError as e:
            logger.warning(f"Clipboard write failed: {e}")
            return False
        return True


class MemoryClipboard:
    """Clipboard that keeps the last written text in memory."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.text: Optional[str] = None
        self.writes = 0

    def write(self, text: str) -> bool:
        self.writes += 1
        if not self.succeed:
            return False
        self.text = text
        return True


class DirectoryFileWriter:
    """Writes exports into a directory on disk."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def write(self, name: str, content: bytes) -> bool:
        # Exports carry a bare filename, never a path
        target = self.directory / Path(name).name
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.warning(f"Could not write export {target}: {e}")
            return False
        logger.info(f"Wrote {len(content)} bytes to {target}")
        return True


class MemoryFileWriter:
    """File writer that keeps written files in a dict."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.files: Dict[str, bytes] = {}

    def write(self, name: str, content: bytes) -> bool:
        if not self.succeed:
            return False
        self.files[name] = content
        return True
