"""node_modules dependency tree walker.

Enumerates every installed package under a node_modules directory,
including nested copies in ``<pkg>/node_modules``, by reading each
package's package.json.
"""

import logging
from pathlib import Path

from npmirror.core.config import DEFAULT_MAX_DEPTH, NODE_MODULES_DIRNAME
from npmirror.core.runlog import RunLog
from npmirror.models.package import DiscoveredPackageSet, PackageIdentity
from npmirror.scanners.manifest import MANIFEST_FILENAME, read_package_identity
from npmirror.utils.formatting import print_info, print_warning

logger = logging.getLogger(__name__)

# Entries in node_modules that never hold a package
_IGNORED_ENTRIES: frozenset[str] = frozenset({".bin", ".cache", ".package-lock.json"})

_SCOPE_PREFIX = "@"


class DependencyTreeWalker:
    """Walks a node_modules tree and collects unique packages.

    A package is descended into only the first time its ``name@version``
    key is seen, and nesting stops below ``max_depth``, so the walk ends
    even on symlink cycles.

    Example:
        >>> walker = DependencyTreeWalker(max_depth=5)
        >>> for pkg in walker.walk(Path("node_modules")).sorted():
        ...     print(pkg.key)
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, error_log: RunLog | None = None) -> None:
        """Initialize the walker.

        Args:
            max_depth: Deepest nesting level that is still read (root is 0).
            error_log: Where directory read failures are recorded.
        """
        self._max_depth = max_depth
        self._error_log = error_log
        self._depth_reported = False

    @property
    def max_depth(self) -> int:
        """Deepest nesting level that is still read."""
        return self._max_depth

    def walk(self, root: Path) -> DiscoveredPackageSet:
        """Collect every unique package below a node_modules directory.

        Args:
            root: The top-level node_modules directory.

        Returns:
            DiscoveredPackageSet in discovery order; empty if root is missing.
        """
        self._depth_reported = False
        discovered = DiscoveredPackageSet()
        self.collect(root, discovered, depth=0)
        return discovered

    def collect(
        self,
        directory: Path,
        discovered: DiscoveredPackageSet,
        depth: int = 0,
    ) -> list[PackageIdentity]:
        """Collect packages from one node_modules directory, recursively.

        Args:
            directory: node_modules directory to read.
            discovered: Packages seen so far; updated in place.
            depth: Nesting level of ``directory``.

        Returns:
            Packages newly recorded by this call and its descendants.
        """
        if depth > self._max_depth:
            if not self._depth_reported:
                print_info(f"Reached maximum depth ({self._max_depth}), not descending further")
                self._depth_reported = True
            return []

        if not directory.is_dir():
            if depth == 0:
                print_warning(f"node_modules directory not found: {directory}")
            return []

        try:
            entries = sorted(directory.iterdir())
        except OSError as e:
            self._report(f"Failed to read directory {directory}: {e}")
            return []

        found: list[PackageIdentity] = []
        for entry in entries:
            if entry.name in _IGNORED_ENTRIES:
                continue
            try:
                if not entry.is_dir():
                    continue
                if entry.name.startswith(_SCOPE_PREFIX):
                    found.extend(self._collect_scope(entry, discovered, depth))
                else:
                    found.extend(self._collect_package(entry, discovered, depth))
            except OSError as e:
                self._report(f"Failed to read {entry}: {e}")
        return found

    def _collect_scope(
        self,
        scope_dir: Path,
        discovered: DiscoveredPackageSet,
        depth: int,
    ) -> list[PackageIdentity]:
        """Collect packages from an ``@scope`` directory."""
        try:
            entries = sorted(scope_dir.iterdir())
        except OSError as e:
            self._report(f"Failed to read scope {scope_dir}: {e}")
            return []

        found: list[PackageIdentity] = []
        for entry in entries:
            try:
                if entry.is_dir():
                    found.extend(self._collect_package(entry, discovered, depth))
            except OSError as e:
                self._report(f"Failed to read {entry}: {e}")
        return found

    def _collect_package(
        self,
        package_dir: Path,
        discovered: DiscoveredPackageSet,
        depth: int,
    ) -> list[PackageIdentity]:
        """Record one package directory and descend into its node_modules."""
        identity = read_package_identity(package_dir / MANIFEST_FILENAME)
        if identity is None or not discovered.add(identity):
            return []

        logger.debug("Found %s at depth %d", identity.key, depth)
        found = [identity]
        nested = package_dir / NODE_MODULES_DIRNAME
        if nested.is_dir():
            found.extend(self.collect(nested, discovered, depth + 1))
        return found

    def _report(self, message: str) -> None:
        """Record a recoverable read failure."""
        if self._error_log is not None:
            self._error_log.error(message)
        else:
            logger.warning(message)
