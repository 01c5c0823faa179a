"""Subprocess helpers for running external tools such as npm.

Commands always run with captured text output; callers decide what a
non-zero exit means.
"""

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured result of one finished command.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0

    @property
    def error_message(self) -> str:
        """Best available description of a failed command."""
        return self.stderr.strip() or self.stdout.strip() or f"exit code {self.returncode}"

    @property
    def last_line(self) -> str | None:
        """Last non-blank line of stdout, or None if there is none."""
        lines = [line.strip() for line in self.stdout.splitlines() if line.strip()]
        return lines[-1] if lines else None


def run_command(
    args: list[str],
    *,
    timeout: float | None = 60.0,
    cwd: Path | str | None = None,
) -> CommandResult:
    """Run a command to completion and capture its output.

    Args:
        args: Executable followed by its arguments.
        timeout: Seconds to wait before giving up. None waits forever.
        cwd: Working directory. None uses the current directory.

    Returns:
        CommandResult, whatever the exit code.

    Raises:
        subprocess.TimeoutExpired: If the command exceeds the timeout.
        FileNotFoundError: If the executable is not found.
    """
    logger.debug("Running %s in %s", args, cwd or ".")
    result = subprocess.run(
        args,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
        cwd=str(cwd) if cwd is not None else None,
    )
    return CommandResult(
        stdout=result.stdout,
        stderr=result.stderr,
        returncode=result.returncode,
    )


def command_exists(name: str) -> bool:
    """Check if an executable is on PATH."""
    return shutil.which(name) is not None
