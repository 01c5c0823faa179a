"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer

from npmirror import __version__
from npmirror.cli.commands import publish, snapshot
from npmirror.utils.formatting import console

# Create main Typer app
app = typer.Typer(
    name="npmirror",
    help="Mirror node_modules into archives and publish them to a registry.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"npmirror version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """npmirror - Mirror node_modules into archives and publish them.

    Snapshot an installed dependency tree into .tgz files, then
    publish those files to another registry.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s:%(name)s:%(message)s")
    # Errors and warnings still go to stderr
    console.quiet = quiet


# Register commands
app.command(name="snapshot")(snapshot.snapshot)
app.command(name="publish")(publish.publish)


if __name__ == "__main__":
    app()
