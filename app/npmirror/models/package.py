"""Package identity models.

This module defines how an installed npm package is identified and how
a walk over node_modules accumulates unique packages.
"""

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PackageIdentity:
    """A single package version, as named in its package.json.

    Attributes:
        name: Package name, optionally scoped (e.g. 'left-pad', '@babel/core').
        version: Version string (e.g. '1.0.0', '2.0.0-beta.1').
    """

    name: str
    version: str

    def __post_init__(self) -> None:
        """Validate identity data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if not self.version:
            msg = "Package version cannot be empty"
            raise ValueError(msg)

    @property
    def key(self) -> str:
        """Composite ``name@version`` key used for deduplication."""
        return f"{self.name}@{self.version}"

    @property
    def is_scoped(self) -> bool:
        """Check if the package lives under an ``@scope/`` namespace."""
        return self.name.startswith("@") and "/" in self.name

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"name": self.name, "version": self.version}


class DiscoveredPackageSet:
    """Insertion-ordered set of packages, unique by composite key.

    Serves as the visited set while walking a dependency tree: a package
    is only recorded (and descended into) the first time its key is seen.
    """

    def __init__(self) -> None:
        self._packages: dict[str, PackageIdentity] = {}

    def add(self, identity: PackageIdentity) -> bool:
        """Record a package.

        Args:
            identity: Package to record.

        Returns:
            True if the package was new, False if its key was already present.
        """
        if identity.key in self._packages:
            return False
        self._packages[identity.key] = identity
        return True

    def __contains__(self, item: object) -> bool:
        if isinstance(item, PackageIdentity):
            return item.key in self._packages
        return item in self._packages

    def __iter__(self) -> Iterator[PackageIdentity]:
        return iter(self._packages.values())

    def __len__(self) -> int:
        return len(self._packages)

    def sorted(self) -> list[PackageIdentity]:
        """Return packages sorted by name (stable for equal names)."""
        return sorted(self._packages.values(), key=lambda p: p.name)
