"""Default library commands.

Manages the .dylib and .deb files injected into every imported application.
"""

from pathlib import Path
from typing import Annotated

import typer

from appvault.cli.context import get_library_store, require_settings
from appvault.libraries.store import LibraryStoreError
from appvault.utils.formatting import (
    console,
    create_table,
    format_size,
    print_error,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Manage default libraries injected into imports.",
    no_args_is_help=True,
)


@app.command("list")
def list_libraries() -> None:
    """List default libraries."""
    store = get_library_store(require_settings())
    libraries = store.list()
    if not libraries:
        print_info(f"No default libraries in {store.directory}")
        return

    table = create_table("Default Libraries", "Name", "Type", "Size")
    for library in libraries:
        table.add_row(library.name, library.suffix.lstrip("."), format_size(library.stat().st_size))
    console.print(table)


@app.command()
def add(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help=".dylib or .deb file to add."),
    ],
) -> None:
    """Add a default library."""
    store = get_library_store(require_settings())
    try:
        stored = store.add(file)
    except LibraryStoreError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    print_success(f"Added default library: {stored.name}")


@app.command()
def remove(
    name: Annotated[str, typer.Argument(help="File name of the library to remove.")],
) -> None:
    """Remove a default library."""
    store = get_library_store(require_settings())
    try:
        store.remove(name)
    except LibraryStoreError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None
    print_success(f"Removed default library: {name}")
