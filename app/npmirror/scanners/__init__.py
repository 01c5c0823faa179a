"""Readers for installed npm packages."""

from npmirror.scanners.manifest import read_package_identity, read_project_dependencies
from npmirror.scanners.node_modules import DependencyTreeWalker

__all__ = ["DependencyTreeWalker", "read_package_identity", "read_project_dependencies"]
