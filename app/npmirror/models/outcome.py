"""Per-package outcomes and run tallies.

Both pipelines process packages one at a time; every package ends in
exactly one outcome, and the outcomes are folded into a RunTally.
"""

from dataclasses import dataclass
from enum import Enum


class OutcomeStatus(Enum):
    """Result of processing a single package.

    Attributes:
        SUCCESS: The archive was created or the package was published.
        SKIPPED: Nothing to do, the archive or published version already exists.
        FAILED: Parsing or the external command failed.
    """

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class PackageOutcome:
    """Outcome of processing one package.

    Attributes:
        subject: What was processed (``name@version`` or an archive filename).
        status: Final status.
        reason: Error message for failures, or a short note otherwise.
    """

    subject: str
    status: OutcomeStatus
    reason: str | None = None

    @property
    def failed(self) -> bool:
        """Check if processing failed."""
        return self.status == OutcomeStatus.FAILED


@dataclass(slots=True)
class RunTally:
    """Running counts for a pipeline run.

    Attributes:
        total: Number of packages the run set out to process.
        success: Packages that ended successfully.
        skipped: Packages that needed no work.
        failed: Packages that failed.
        count_skipped_as_success: Also count skipped packages as successes.
    """

    total: int = 0
    success: int = 0
    skipped: int = 0
    failed: int = 0
    count_skipped_as_success: bool = False

    def record(self, outcome: PackageOutcome) -> None:
        """Fold an outcome into the counts."""
        if outcome.status == OutcomeStatus.SUCCESS:
            self.success += 1
        elif outcome.status == OutcomeStatus.SKIPPED:
            self.skipped += 1
            if self.count_skipped_as_success:
                self.success += 1
        else:
            self.failed += 1

    def summary_lines(self) -> list[str]:
        """Render the tally as display lines."""
        return [
            f"  Total: {self.total}",
            f"  Success: {self.success}",
            f"  Skipped: {self.skipped}",
            f"  Failed: {self.failed}",
        ]
