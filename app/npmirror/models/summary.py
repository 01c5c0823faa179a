"""Summary record written after each snapshot run."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from npmirror.models.package import PackageIdentity


@dataclass(frozen=True, slots=True)
class ProjectDependencies:
    """Dependency maps declared in the project's own package.json.

    Attributes:
        dependencies: Runtime dependencies (name -> version range).
        dev_dependencies: Development-only dependencies.
        peer_dependencies: Peer dependencies.
        optional_dependencies: Optional dependencies.
    """

    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    peer_dependencies: dict[str, str] = field(default_factory=dict)
    optional_dependencies: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SummaryRecord:
    """Snapshot of every unique package found in node_modules.

    Attributes:
        total_packages: Number of unique packages.
        direct_dependency_count: Entries in the project's ``dependencies``.
        dev_dependency_count: Entries in the project's ``devDependencies``.
        generated_at: ISO format timestamp of the run.
        packages: Packages sorted by name.
    """

    total_packages: int
    direct_dependency_count: int
    dev_dependency_count: int
    generated_at: str
    packages: list[PackageIdentity]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "totalPackages": self.total_packages,
            "directDependencyCount": self.direct_dependency_count,
            "devDependencyCount": self.dev_dependency_count,
            "generatedAt": self.generated_at,
            "packages": [pkg.to_dict() for pkg in self.packages],
        }

    @classmethod
    def create(
        cls,
        packages: list[PackageIdentity],
        project: ProjectDependencies,
    ) -> "SummaryRecord":
        """Create a SummaryRecord stamped with the current time.

        Args:
            packages: Unique packages, already sorted.
            project: Dependencies declared by the project.

        Returns:
            SummaryRecord with populated counts.
        """
        return cls(
            total_packages=len(packages),
            direct_dependency_count=len(project.dependencies),
            dev_dependency_count=len(project.dev_dependencies),
            generated_at=datetime.now(UTC).isoformat(),
            packages=packages,
        )
