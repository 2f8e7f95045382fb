"""
Subprocess helpers used by the OS-backed capabilities.
"""

import logging
import shlex
import shutil
import subprocess
from typing import List, Optional, Union

from .errors import LogscopeError

logger = logging.getLogger(__name__)


class ShellError(LogscopeError):
    """Exception raised when a shell command fails."""
    pass


def run_command(
    command: Union[str, List[str]],
    input_text: Optional[str] = None,
    check: bool = True,
    timeout: Optional[int] = 5
) -> subprocess.CompletedProcess:
    """
    Run a command, optionally feeding text to its stdin.

    Args:
        command: Command to run (string or list)
        input_text: Text written to the command's stdin
        check: Whether to raise on a non-zero exit
        timeout: Command timeout in seconds

    Returns:
        CompletedProcess object

    Raises:
        ShellError: If the command cannot run, fails with check=True, or times out
    """
    if isinstance(command, str):
        command = shlex.split(command)

    logger.debug(f"Running command: {' '.join(command)}")

    try:
        return subprocess.run(
            command,
            input=input_text,
            capture_output=True,
            check=check,
            timeout=timeout,
            text=True
        )
    except FileNotFoundError as e:
        raise ShellError(f"Command not found: {command[0]}") from e
    except subprocess.CalledProcessError as e:
        error_msg = f"Command failed with exit code {e.returncode}: {' '.join(command)}"
        if e.stderr:
            error_msg += f"\nStderr: {e.stderr}"
        logger.error(error_msg)
        raise ShellError(error_msg) from e
    except subprocess.TimeoutExpired as e:
        error_msg = f"Command timed out after {timeout} seconds: {' '.join(command)}"
        logger.error(error_msg)
        raise ShellError(error_msg) from e


def check_command_exists(command: str) -> bool:
    """Check if a command exists in PATH."""
    return shutil.which(command) is not None
