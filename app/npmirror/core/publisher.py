"""Batch publish orchestration.

Publishes every archive in a directory to a registry, skipping versions
the registry already has. Everything printed during a run is mirrored
into the run log.
"""

import getpass
import logging
from dataclasses import dataclass, field
from pathlib import Path

from npmirror.core.codec import decode_archive_filename
from npmirror.core.config import PublishConfig
from npmirror.core.runlog import RunLog, timestamp
from npmirror.models.outcome import OutcomeStatus, PackageOutcome, RunTally
from npmirror.operators.registry import RegistryClient

logger = logging.getLogger(__name__)

_SEPARATOR = "-" * 50


class PublishDirectoryError(Exception):
    """Raised when the archive directory is missing or not a directory."""


@dataclass(slots=True)
class PublishReport:
    """Everything a publish run produced.

    Attributes:
        tally: Final counts.
        outcomes: Per-archive outcomes in processing order.
    """

    tally: RunTally
    outcomes: list[PackageOutcome] = field(default_factory=list)


def list_archives(directory: Path, extension: str) -> list[Path]:
    """List archive files in a directory, sorted by name.

    Raises:
        PublishDirectoryError: If the directory does not exist.
    """
    if not directory.is_dir():
        msg = f"Archive directory does not exist: {directory}"
        raise PublishDirectoryError(msg)
    return sorted(p for p in directory.iterdir() if p.is_file() and p.name.endswith(extension))


def _current_user() -> str:
    """Best-effort login name for the log header."""
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


class BatchPublisher:
    """Publishes a directory of archives to a registry, one at a time.

    Attributes:
        config: Directory, registry and log settings for the run.
    """

    def __init__(
        self,
        config: PublishConfig,
        *,
        client: RegistryClient | None = None,
        run_log: RunLog | None = None,
    ) -> None:
        """Initialize the publisher.

        Args:
            config: Directory, registry and log settings for the run.
            client: Registry client. Built from the config if omitted.
            run_log: Log sink. Defaults to ``config.log_file``.
        """
        self.config = config
        self._client = client or RegistryClient(
            config.registry,
            timeout=config.publish_timeout,
            dry_run=config.dry_run,
        )
        self._log = run_log or RunLog(config.log_file)

    def run(self) -> PublishReport:
        """Publish every archive that the registry does not have yet.

        Returns:
            PublishReport with counts and outcomes.

        Raises:
            PublishDirectoryError: If the archive directory does not exist.
        """
        self._log.reset(
            f"Batch publish started - {timestamp()}\n"
            f"User: {_current_user()}\n"
            f"Registry: {self.config.registry}\n"
        )

        try:
            archives = list_archives(self.config.archive_dir, self.config.extension)
        except PublishDirectoryError as e:
            self._log.error(str(e), echo=False)
            raise

        report = PublishReport(tally=RunTally(total=len(archives)))
        if not archives:
            self._log.write(
                f"Warning: no {self.config.extension} files found in {self.config.archive_dir}",
                style="warning",
            )
            return report

        self._log.write(f"Publishing {len(archives)} packages to {self.config.registry}")
        self._log.write(_SEPARATOR, style="dim")

        for index, archive in enumerate(archives, start=1):
            outcome = self.publish_archive(archive, f"[{index}/{len(archives)}]")
            report.outcomes.append(outcome)
            report.tally.record(outcome)

        self._log.write("\nPublish summary:", style="bold_header")
        for line in report.tally.summary_lines():
            self._log.write(line)
        self._log.write(f"\nDone. Full log saved to {self._log.path}", style="success")
        return report

    def publish_archive(self, archive: Path, progress: str = "") -> PackageOutcome:
        """Publish one archive unless its version is already on the registry.

        Args:
            archive: Path to the archive file.
            progress: Prefix for log lines, e.g. ``[3/10]``.

        Returns:
            SUCCESS, SKIPPED or FAILED.
        """
        decoded = decode_archive_filename(archive.name, self.config.extension)
        if decoded is None:
            self._log.write(f"{progress} Cannot parse package name/version: {archive.name}", style="warning")
            return PackageOutcome(
                subject=archive.name,
                status=OutcomeStatus.FAILED,
                reason="unparsable archive filename",
            )

        identity = decoded.identity
        self._log.write(f"{progress} Processing {identity.key}")

        for name in decoded.lookup_names:
            if self._client.is_published(name, identity.version):
                self._log.write(
                    f"{progress} Skipping {name}@{identity.version} - version already exists",
                    style="skipped",
                )
                self._log.write(_SEPARATOR, style="dim")
                return PackageOutcome(subject=identity.key, status=OutcomeStatus.SKIPPED)

        self._log.write(f"{progress} Publishing {identity.key}...", style="progress")
        outcome = self._client.publish(archive)
        if outcome.failed:
            self._log.write(f"{progress} Publish failed: {identity.key}", style="error")
            self._log.write(f"    Error: {outcome.reason}", echo=False)
        else:
            self._log.write(f"{progress} Published {identity.key}", style="success")
        self._log.write(_SEPARATOR, style="dim")
        return PackageOutcome(subject=identity.key, status=outcome.status, reason=outcome.reason)
