"""npm operators.

This module exports the classes that shell out to the npm CLI.
"""

from npmirror.operators.base import NpmOperator
from npmirror.operators.pack import ArchiveCreator, archive_exists
from npmirror.operators.registry import RegistryClient

__all__ = ["ArchiveCreator", "NpmOperator", "RegistryClient", "archive_exists"]
