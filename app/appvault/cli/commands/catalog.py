"""Catalog commands for viewing stored applications."""

import json
from datetime import datetime
from enum import Enum
from typing import Annotated

import typer

from appvault.cli.context import get_catalog
from appvault.models.catalog import CatalogEntry, CatalogKind
from appvault.utils.formatting import console, create_table, print_error, print_info

app = typer.Typer(
    help="View imported and signed applications.",
    no_args_is_help=True,
)


class KindChoice(str, Enum):
    """Catalog kind filter."""

    IMPORTED = "imported"
    SIGNED = "signed"
    ALL = "all"


def _kind(choice: KindChoice) -> CatalogKind | None:
    return None if choice == KindChoice.ALL else CatalogKind(choice.value)


@app.command("list")
def list_entries(
    kind: Annotated[
        KindChoice,
        typer.Option("--kind", "-k", help="Filter by kind.", case_sensitive=False),
    ] = KindChoice.ALL,
    limit: Annotated[
        int | None,
        typer.Option("--limit", "-n", help="Maximum number of entries to show."),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """List catalog entries, newest first."""
    entries = get_catalog().all(_kind(kind))
    if limit is not None:
        entries = entries[:limit]

    if not entries:
        print_info("No applications in the catalog.")
        return

    if json_output:
        console.print_json(json.dumps([e.to_dict() for e in entries]))
        return

    table = create_table("Catalog", "UUID", "Date", "Kind", "Name", "Identifier", "Version")
    for entry in entries:
        table.add_row(
            entry.uuid[:8],
            _format_timestamp(entry.date),
            entry.kind.value,
            entry.name or "[muted]-[/]",
            f"[identifier]{entry.identifier}[/]" if entry.identifier else "[muted]-[/]",
            entry.version or "[muted]-[/]",
        )
    console.print(table)


@app.command()
def latest(
    kind: Annotated[
        KindChoice,
        typer.Option("--kind", "-k", help="Filter by kind.", case_sensitive=False),
    ] = KindChoice.IMPORTED,
) -> None:
    """Show the most recently stored application."""
    entry = get_catalog().latest(_kind(kind))
    if entry is None:
        print_info("No applications in the catalog.")
        return
    _print_entry(entry)


@app.command()
def show(
    uuid: Annotated[str, typer.Argument(help="Full catalog UUID.")],
) -> None:
    """Show a single catalog entry."""
    entry = get_catalog().get(uuid)
    if entry is None:
        print_error(f"No catalog entry with UUID {uuid}")
        raise typer.Exit(code=1)
    _print_entry(entry)


def _print_entry(entry: CatalogEntry) -> None:
    table = create_table(entry.display_name, "Field", "Value")
    for key, value in entry.to_dict().items():
        table.add_row(key, str(value))
    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format an ISO timestamp as YYYY-MM-DD HH:MM."""
    try:
        dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    except ValueError:
        return iso_timestamp
    return dt.strftime("%Y-%m-%d %H:%M")
