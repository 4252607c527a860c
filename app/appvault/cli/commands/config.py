"""Settings commands."""

from typing import Annotated

import typer

from appvault.cli.context import require_settings
from appvault.core.config import ConfigError, update_setting
from appvault.core.paths import get_config_path
from appvault.utils.formatting import console, create_table, print_error, print_success

app = typer.Typer(
    help="View and change settings.",
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show effective settings."""
    settings = require_settings()
    table = create_table("Settings", "Key", "Value")
    table.add_row("data_dir", str(settings.effective_data_dir))
    table.add_row("libraries_dir", str(settings.effective_libraries_dir))
    table.add_row("temp_dir", str(settings.effective_temp_dir))
    table.add_row("inject_default_libraries", str(settings.inject_default_libraries).lower())
    console.print(table)


@app.command("set")
def set_value(
    key: Annotated[str, typer.Argument(help="Setting name.")],
    value: Annotated[str, typer.Argument(help="New value ('default' to reset).")],
) -> None:
    """Change a setting."""
    try:
        update_setting(key, value)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    print_success(f"Set {key}.")


@app.command()
def path() -> None:
    """Print the settings file path."""
    typer.echo(str(get_config_path()))
