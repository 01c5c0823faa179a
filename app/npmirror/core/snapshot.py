"""Dependency snapshot orchestration.

Walks the project's node_modules, writes packages-summary.json and
makes sure every unique package has an archive in the output directory.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from npmirror.core.config import SnapshotConfig
from npmirror.core.runlog import RunLog, timestamp
from npmirror.models.outcome import OutcomeStatus, PackageOutcome, RunTally
from npmirror.models.package import PackageIdentity
from npmirror.models.summary import SummaryRecord
from npmirror.operators.pack import ArchiveCreator, find_existing_archive
from npmirror.scanners.manifest import read_project_dependencies
from npmirror.scanners.node_modules import DependencyTreeWalker
from npmirror.utils.formatting import console, err_console, print_info, print_warning

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SnapshotReport:
    """Everything a snapshot run produced.

    Attributes:
        summary: The record written to packages-summary.json.
        tally: Final counts (skipped packages also count as successes).
        outcomes: Per-package outcomes in processing order.
    """

    summary: SummaryRecord
    tally: RunTally
    outcomes: list[PackageOutcome] = field(default_factory=list)


class Snapshotter:
    """Mirrors a node_modules tree into a directory of archives.

    Attributes:
        config: Paths and limits for the run.
    """

    def __init__(
        self,
        config: SnapshotConfig,
        *,
        walker: DependencyTreeWalker | None = None,
        creator: ArchiveCreator | None = None,
        error_log: RunLog | None = None,
    ) -> None:
        """Initialize the snapshotter.

        Args:
            config: Paths and limits for the run.
            walker: Tree walker. Built from the config if omitted.
            creator: Archive creator. Built from the config if omitted.
            error_log: Error sink. Defaults to error.log in the project dir.
        """
        self.config = config
        self._error_log = error_log or RunLog(config.error_log_path, console=err_console)
        self._walker = walker or DependencyTreeWalker(config.max_depth, error_log=self._error_log)
        self._creator = creator or ArchiveCreator(timeout=config.pack_timeout, dry_run=config.dry_run)

    def run(self) -> SnapshotReport:
        """Execute a full snapshot run.

        Returns:
            SnapshotReport with the summary, counts and outcomes.

        Raises:
            OSError: If the output directory or summary file cannot be written.
        """
        output_dir = self.config.archive_dir
        output_dir.mkdir(parents=True, exist_ok=True)
        self._error_log.reset()

        console.print("[bold_header]===== npm archive snapshot =====[/]")
        console.print(f"Started: {timestamp()}", highlight=False)

        project = read_project_dependencies(self.config.project_dir, self._error_log)
        print_info(
            f"Direct dependencies: {len(project.dependencies)} regular, "
            f"{len(project.dev_dependencies)} dev"
        )

        print_info("Reading every package in node_modules, including nested dependencies...")
        packages = self._walker.walk(self.config.node_modules_dir).sorted()
        if not packages:
            print_warning("No packages found; check that node_modules exists and is populated")

        summary = SummaryRecord.create(packages, project)
        self.write_summary(summary, self.config.summary_path)
        print_info(f"Wrote {self.config.summary_path.name} ({len(packages)} packages)")

        report = SnapshotReport(
            summary=summary,
            tally=RunTally(total=len(packages), count_skipped_as_success=True),
        )

        if packages:
            console.print(f"\nCreating archives for {len(packages)} packages...", highlight=False)
        for index, identity in enumerate(packages, start=1):
            outcome = self.ensure_archive(identity, output_dir, f"[{index}/{len(packages)}]")
            report.outcomes.append(outcome)
            report.tally.record(outcome)

        self._print_tally(report.tally)
        return report

    def ensure_archive(self, identity: PackageIdentity, output_dir: Path, progress: str = "") -> PackageOutcome:
        """Create a package's archive unless one is already present.

        Args:
            identity: Package to mirror.
            output_dir: Archive directory.
            progress: Prefix for console lines, e.g. ``[3/10]``.

        Returns:
            SKIPPED if an archive exists, otherwise the creator's outcome.
        """
        existing = find_existing_archive(identity, output_dir)
        if existing is not None:
            console.print(
                f"{progress} Skipping {identity.key} - already exists",
                style="skipped",
                markup=False,
                highlight=False,
            )
            return PackageOutcome(subject=identity.key, status=OutcomeStatus.SKIPPED, reason=existing.name)

        console.print(f"{progress} Packing {identity.key}", style="progress", markup=False, highlight=False)
        outcome = self._creator.create(identity, output_dir)
        if outcome.failed:
            self._error_log.error(f"{progress} Failed to create archive for {identity.key}: {outcome.reason}")
        else:
            console.print(
                f"{progress} Created {outcome.reason or identity.key}",
                style="success",
                markup=False,
                highlight=False,
            )
        return outcome

    @staticmethod
    def write_summary(summary: SummaryRecord, path: Path) -> None:
        """Write the summary record as indented JSON, replacing any previous one."""
        path.write_text(json.dumps(summary.to_dict(), indent=2) + "\n", encoding="utf-8")
        logger.debug("Wrote summary for %d packages to %s", summary.total_packages, path)

    def _print_tally(self, tally: RunTally) -> None:
        """Print the end-of-run counts."""
        console.print("\n[bold_header]===== Summary =====[/]")
        for line in tally.summary_lines():
            console.print(line, markup=False, highlight=False)
        if tally.failed:
            print_warning(f"See {self._error_log.path} for error details")
        console.print(f"\nFinished: {timestamp()}", highlight=False)
