"""Archive creation via ``npm pack``."""

import logging
from pathlib import Path

from npmirror.core.codec import ARCHIVE_EXTENSION, candidate_filenames
from npmirror.core.config import DEFAULT_PACK_TIMEOUT
from npmirror.models.outcome import OutcomeStatus, PackageOutcome
from npmirror.models.package import PackageIdentity
from npmirror.operators.base import NpmOperator

logger = logging.getLogger(__name__)


def find_existing_archive(
    identity: PackageIdentity,
    output_dir: Path,
    extension: str = ARCHIVE_EXTENSION,
) -> Path | None:
    """Return the first candidate archive for a package that exists on disk."""
    for filename in candidate_filenames(identity, extension):
        path = output_dir / filename
        if path.exists():
            return path
    return None


def archive_exists(
    identity: PackageIdentity,
    output_dir: Path,
    extension: str = ARCHIVE_EXTENSION,
) -> bool:
    """Check if any candidate archive for a package is already present."""
    return find_existing_archive(identity, output_dir, extension) is not None


class ArchiveCreator(NpmOperator):
    """Fetches a package version from the registry into a ``.tgz`` file.

    ``npm pack <name>@<version>`` is run inside the output directory so
    the archive lands there.
    """

    def __init__(self, timeout: float = DEFAULT_PACK_TIMEOUT, dry_run: bool = False) -> None:
        """Initialize the creator.

        Args:
            timeout: Seconds allowed for each npm pack call.
            dry_run: If True, run ``npm pack --dry-run``.
        """
        super().__init__(dry_run=dry_run)
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        """Seconds allowed for each npm pack call."""
        return self._timeout

    def create(self, identity: PackageIdentity, output_dir: Path) -> PackageOutcome:
        """Create the archive for one package.

        Args:
            identity: Package version to pack.
            output_dir: Directory that receives the archive.

        Returns:
            SUCCESS with the produced filename, or FAILED with the error.
        """
        result = self._run_npm(
            identity.key,
            ["pack", identity.key],
            timeout=self._timeout,
            cwd=output_dir,
        )
        if isinstance(result, PackageOutcome):
            return result

        if not result.success:
            return PackageOutcome(
                subject=identity.key,
                status=OutcomeStatus.FAILED,
                reason=result.error_message,
            )

        # npm pack prints the archive name as the last line of stdout
        return PackageOutcome(subject=identity.key, status=OutcomeStatus.SUCCESS, reason=result.last_line)
