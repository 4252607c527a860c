"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from appvault import __version__
from appvault.cli.commands import catalog, config, credential, import_app, libraries
from appvault.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="appvault",
    help="Import, store and catalog signed iOS application archives.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"appvault version {__version__}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    """Route package log records to stderr through Rich."""
    package_logger = logging.getLogger("appvault")
    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)
    package_logger.addHandler(RichHandler(console=err_console, show_path=False))
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


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
) -> None:
    """appvault - Import, store and catalog signed iOS application archives."""
    _configure_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Register commands
app.command(name="import")(import_app.import_archive)
app.add_typer(catalog.app, name="catalog")
app.add_typer(credential.app, name="credential")
app.add_typer(libraries.app, name="libraries")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
