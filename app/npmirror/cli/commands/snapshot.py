"""Snapshot command implementation.

Mirrors the project's node_modules tree into a directory of archives.
"""

from pathlib import Path
from typing import Annotated

import typer

from npmirror.core.config import ConfigError, SnapshotConfig, build_config
from npmirror.core.snapshot import Snapshotter
from npmirror.operators.base import NPM_EXECUTABLE
from npmirror.operators.pack import ArchiveCreator
from npmirror.utils.formatting import print_error, print_warning

app = typer.Typer(
    name="npm-snapshot",
    help="Mirror node_modules into a directory of .tgz archives.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def snapshot(
    project_dir: Annotated[
        Path | None,
        typer.Option(
            "--project-dir",
            "-p",
            help="Project holding package.json and node_modules. [default: current directory]",
            file_okay=False,
        ),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option(
            "--output-dir",
            "-o",
            help="Directory for archives. [default: <project>/pkg]",
            file_okay=False,
        ),
    ] = None,
    max_depth: Annotated[
        int | None,
        typer.Option(
            "--max-depth",
            "-d",
            help="Deepest nested node_modules level to read. [default: 10]",
            min=0,
        ),
    ] = None,
    timeout: Annotated[
        float | None,
        typer.Option(
            "--timeout",
            "-t",
            help="Seconds allowed per npm pack call. [default: 60]",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Run npm pack --dry-run instead of writing archives.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="TOML file with a [snapshot] table.",
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """Pack every installed package into the output directory.

    Reads package.json and node_modules in the project directory, writes
    packages-summary.json, then runs ``npm pack`` for each unique
    package that has no archive yet. Errors are collected in error.log.

    Examples:
        npmirror snapshot                      # Mirror ./node_modules into ./pkg
        npmirror snapshot -o /srv/mirror       # Custom archive directory
        npmirror snapshot --max-depth 3        # Limit nested lookups
        npmirror snapshot --dry-run            # Don't write archives
    """
    try:
        config = build_config(
            SnapshotConfig,
            config_path,
            "snapshot",
            {
                "project_dir": project_dir.resolve() if project_dir is not None else None,
                "output_dir": output_dir.resolve() if output_dir is not None else None,
                "max_depth": max_depth,
                "pack_timeout": timeout,
                "dry_run": dry_run or None,
            },
        )
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    creator = ArchiveCreator(timeout=config.pack_timeout, dry_run=config.dry_run)
    if not creator.is_available():
        print_warning(f"'{NPM_EXECUTABLE}' was not found on PATH; npm calls will fail.")

    try:
        Snapshotter(config, creator=creator).run()
    except OSError as e:
        print_error(f"Snapshot failed: {e}")
        raise typer.Exit(code=1) from e


app.command()(snapshot)
