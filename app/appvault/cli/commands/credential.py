"""Credential commands for inspecting signing credential files."""

import json
from pathlib import Path
from typing import Annotated

import typer

from appvault.credentials import CredentialDecoder
from appvault.models.credential import SigningCredential
from appvault.utils.formatting import console, create_table, print_error

app = typer.Typer(
    help="Inspect signing credentials.",
    no_args_is_help=True,
)


@app.command()
def inspect(
    file: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, help="Credential file (.mobileprovision)."),
    ],
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON."),
    ] = False,
) -> None:
    """Decode a signing credential and show its fields."""
    credential = CredentialDecoder().decode(file)
    if credential is None:
        print_error(f"Could not decode credential: {file}")
        raise typer.Exit(code=1)

    if json_output:
        console.print_json(json.dumps(credential.summary()))
        return

    _print_credential(credential)


def _print_credential(credential: SigningCredential) -> None:
    days = credential.days_remaining()
    if credential.is_expired():
        status = "[expired]Expired[/]"
    else:
        status = f"[valid]Valid[/] ({days} days left)"

    table = create_table(credential.name, "Field", "Value")
    table.add_row("App ID", credential.app_id_name or "-")
    table.add_row("Identifier", f"[identifier]{credential.application_identifier or '-'}[/]")
    table.add_row("Team", f"{credential.team_name} ({', '.join(credential.team_identifier)})")
    table.add_row("Platform", ", ".join(credential.platform) or "-")
    table.add_row("Created", credential.creation_date.strftime("%Y-%m-%d"))
    table.add_row("Expires", credential.expiration_date.strftime("%Y-%m-%d"))
    table.add_row("Status", status)
    if credential.provisions_all_devices:
        table.add_row("Devices", "all")
    else:
        table.add_row("Devices", str(len(credential.provisioned_devices or [])))
    table.add_row("PPQ", "yes" if credential.ppq_check else "no")
    console.print(table)
