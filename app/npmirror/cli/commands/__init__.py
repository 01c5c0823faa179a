"""CLI commands for npmirror.

This package contains all subcommand implementations.
"""

from npmirror.cli.commands import publish, snapshot

__all__ = ["publish", "snapshot"]
