"""Publish command implementation.

Publishes a directory of archives to a registry, skipping versions that
are already there.
"""

from pathlib import Path
from typing import Annotated

import typer

from npmirror.core.config import ConfigError, PublishConfig, build_config
from npmirror.core.publisher import BatchPublisher, PublishDirectoryError
from npmirror.operators.base import NPM_EXECUTABLE
from npmirror.operators.registry import RegistryClient
from npmirror.utils.formatting import print_error, print_warning

app = typer.Typer(
    name="npm-batch-publish",
    help="Publish a directory of .tgz archives to an npm registry.",
    context_settings={"help_option_names": ["-h", "--help"]},
)

USAGE = "Usage: npm-batch-publish <archive_dir> [registry]"


def publish(
    archive_dir: Annotated[
        Path | None,
        typer.Argument(
            help="Directory holding the .tgz archives.",
            show_default=False,
        ),
    ] = None,
    registry: Annotated[
        str | None,
        typer.Argument(
            help="Registry URL. [default: http://127.0.0.1:4873]",
            show_default=False,
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option(
            "--log-file",
            "-l",
            help="Run log, truncated at start. [default: publish-log.txt]",
            dir_okay=False,
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Run npm publish --dry-run instead of publishing.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="TOML file with a [publish] table.",
            dir_okay=False,
        ),
    ] = None,
) -> None:
    """Publish every archive the registry does not have yet.

    Each filename is decoded back into name and version; versions that
    ``npm view`` reports as present are skipped. Progress and a final
    tally are written to the console and to the run log.

    Examples:
        npmirror publish ./pkg                                # Local registry
        npmirror publish ./pkg https://npm.example.com/       # Custom registry
        npmirror publish ./pkg --dry-run                      # Simulate only
    """
    if archive_dir is None:
        print_error(USAGE)
        raise typer.Exit(code=1)

    try:
        config = build_config(
            PublishConfig,
            config_path,
            "publish",
            {
                "archive_dir": archive_dir.resolve(),
                "registry": registry,
                "log_file": log_file,
                "dry_run": dry_run or None,
            },
        )
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    client = RegistryClient(config.registry, timeout=config.publish_timeout, dry_run=config.dry_run)
    if not client.is_available():
        print_warning(f"'{NPM_EXECUTABLE}' was not found on PATH; npm calls will fail.")

    try:
        BatchPublisher(config, client=client).run()
    except PublishDirectoryError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except OSError as e:
        print_error(f"Publish failed: {e}")
        raise typer.Exit(code=1) from e


app.command()(publish)
