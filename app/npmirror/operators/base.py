"""Base class for npm-backed operators.

This module defines the shared plumbing for operators that shell out to
the npm CLI.
"""

import logging
import subprocess
from pathlib import Path

from npmirror.models.outcome import OutcomeStatus, PackageOutcome
from npmirror.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)

NPM_EXECUTABLE = "npm"


class NpmOperator:
    """Runs npm commands one at a time.

    Attributes:
        dry_run: If True, npm is asked to simulate instead of write.

    Example:
        >>> operator = ArchiveCreator(dry_run=True)
        >>> if operator.is_available():
        ...     outcome = operator.create(PackageIdentity("left-pad", "1.3.0"), Path("pkg"))
    """

    def __init__(self, dry_run: bool = False) -> None:
        """Initialize the operator.

        Args:
            dry_run: If True, only simulate actions without executing them.
        """
        self._dry_run = dry_run

    @property
    def dry_run(self) -> bool:
        """Check if operator is in dry-run mode."""
        return self._dry_run

    def is_available(self) -> bool:
        """Check if the npm executable is on PATH."""
        return command_exists(NPM_EXECUTABLE)

    def _run_npm(
        self,
        subject: str,
        args: list[str],
        *,
        timeout: float | None,
        cwd: Path | None = None,
        simulate: bool = True,
    ) -> CommandResult | PackageOutcome:
        """Run ``npm <args>``, converting execution errors into a failed outcome.

        Args:
            subject: What the command operates on, for the outcome.
            args: Arguments after ``npm``.
            timeout: Seconds to wait, or None to wait forever.
            cwd: Working directory for the command.
            simulate: Append ``--dry-run`` when the operator is in dry-run mode.

        Returns:
            The CommandResult when npm ran, even with a non-zero exit, or a
            FAILED outcome when it could not run to completion.
        """
        command = [NPM_EXECUTABLE, *args]
        if simulate and self._dry_run:
            command.append("--dry-run")

        logger.info("Executing %s (dry_run=%s)", " ".join(command), self._dry_run)

        try:
            result = run_command(command, timeout=timeout, cwd=cwd)
        except subprocess.TimeoutExpired as e:
            limit = timeout if timeout is not None else e.timeout
            return PackageOutcome(
                subject=subject,
                status=OutcomeStatus.FAILED,
                reason=f"npm {args[0]} timed out after {limit:g}s",
            )
        except OSError as e:
            return PackageOutcome(
                subject=subject,
                status=OutcomeStatus.FAILED,
                reason=f"Could not run npm: {e}",
            )
        return result
