"""Registry queries and publishing via ``npm view`` and ``npm publish``."""

import logging
from pathlib import Path

from npmirror.core.config import DEFAULT_REGISTRY
from npmirror.models.outcome import OutcomeStatus, PackageOutcome
from npmirror.operators.base import NpmOperator

logger = logging.getLogger(__name__)


class RegistryClient(NpmOperator):
    """Talks to one npm registry.

    Attributes:
        registry: Registry URL every command is pointed at.
    """

    def __init__(
        self,
        registry: str = DEFAULT_REGISTRY,
        timeout: float | None = None,
        dry_run: bool = False,
    ) -> None:
        """Initialize the client.

        Args:
            registry: Registry URL.
            timeout: Seconds allowed per npm call. None waits forever.
            dry_run: If True, run ``npm publish --dry-run``.
        """
        super().__init__(dry_run=dry_run)
        self._registry = registry
        self._timeout = timeout

    @property
    def registry(self) -> str:
        """Registry URL every command is pointed at."""
        return self._registry

    def is_published(self, name: str, version: str) -> bool:
        """Check whether an exact version exists on the registry.

        Any failure, whether "not found", a network error or missing auth,
        counts as "not published": npm does not tell them apart reliably.

        Args:
            name: Package name.
            version: Exact version.

        Returns:
            True only if the registry reports exactly this version.
        """
        result = self._run_npm(
            f"{name}@{version}",
            ["view", f"{name}@{version}", "version", f"--registry={self._registry}"],
            timeout=self._timeout,
            simulate=False,
        )
        if isinstance(result, PackageOutcome):
            logger.debug("npm view %s@%s failed: %s", name, version, result.reason)
            return False

        if not result.success:
            logger.debug("npm view %s@%s exited %d", name, version, result.returncode)
            return False
        return result.stdout.strip() == version

    def publish(self, archive: Path) -> PackageOutcome:
        """Publish one archive.

        Args:
            archive: Path to the ``.tgz`` file.

        Returns:
            SUCCESS, or FAILED with npm's error message.
        """
        result = self._run_npm(
            archive.name,
            ["publish", str(archive), "--provenance=false", f"--registry={self._registry}"],
            timeout=self._timeout,
        )
        if isinstance(result, PackageOutcome):
            return result

        if not result.success:
            return PackageOutcome(
                subject=archive.name,
                status=OutcomeStatus.FAILED,
                reason=result.error_message,
            )
        return PackageOutcome(subject=archive.name, status=OutcomeStatus.SUCCESS)
