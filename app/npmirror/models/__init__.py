"""Data models for npmirror.

This module exports the core data structures used throughout the application.
"""

from npmirror.models.outcome import OutcomeStatus, PackageOutcome, RunTally
from npmirror.models.package import DiscoveredPackageSet, PackageIdentity
from npmirror.models.summary import ProjectDependencies, SummaryRecord

__all__ = [
    "DiscoveredPackageSet",
    "OutcomeStatus",
    "PackageIdentity",
    "PackageOutcome",
    "ProjectDependencies",
    "RunTally",
    "SummaryRecord",
]
