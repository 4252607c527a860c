"""Import command.

Imports an application archive into managed storage, showing extraction
progress while the import runs in the background.
"""

import json
from concurrent.futures import Future, wait
from pathlib import Path
from typing import Annotated

import typer
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from appvault.cli.context import get_catalog, get_library_store, get_storage, require_settings
from appvault.importer import (
    ArchiveExtractor,
    ImportOrchestrator,
    ImportPipelineError,
    ImportResult,
    ProgressChannel,
)
from appvault.utils.formatting import (
    console,
    create_table,
    print_error,
    print_success,
    print_warning,
)

_POLL_INTERVAL = 0.1


def import_archive(
    archive: Annotated[
        Path,
        typer.Argument(
            exists=True,
            dir_okay=False,
            readable=True,
            help="Application archive (.ipa or .tipa).",
        ),
    ],
    install: Annotated[
        bool,
        typer.Option("--install", help="Mark the import for installation."),
    ] = False,
    no_libraries: Annotated[
        bool,
        typer.Option("--no-libraries", help="Skip default library injection."),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output the result as JSON."),
    ] = False,
) -> None:
    """Import an application archive into managed storage."""
    settings = require_settings()

    libraries = None
    if settings.inject_default_libraries and not no_libraries:
        libraries = get_library_store(settings)

    channel = ProgressChannel()
    orchestrator = ImportOrchestrator(
        archive,
        catalog=get_catalog(),
        storage=get_storage(settings),
        extractor=ArchiveExtractor(libraries=libraries),
        install=install,
        progress=channel,
        work_root=settings.effective_temp_dir,
    )

    future = orchestrator.start()
    try:
        _wait_with_progress(future, channel, archive.name, quiet=json_output)
    except KeyboardInterrupt:
        orchestrator.cancel()
        print_warning("Cancelling import...")
        wait([future])

    try:
        result = future.result()
    except ImportPipelineError as e:
        print_error(f"Import failed at stage '{e.stage.value}': {e}")
        raise typer.Exit(code=1) from None

    if json_output:
        console.print_json(json.dumps(_result_to_dict(result)))
        return

    _print_result(result)


def _wait_with_progress(
    future: Future[ImportResult],
    channel: ProgressChannel,
    name: str,
    quiet: bool,
) -> None:
    """Poll the progress channel on this thread until the import finishes."""
    if quiet:
        wait([future])
        return

    progress = Progress(
        SpinnerColumn(),
        TextColumn("{task.description}"),
        BarColumn(bar_width=None),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )
    with progress:
        task_id = progress.add_task(f"Unpacking {name}", total=1.0)
        while True:
            done, _ = wait([future], timeout=_POLL_INTERVAL)
            progress.update(task_id, completed=channel.drain())
            if done:
                break


def _result_to_dict(result: ImportResult) -> dict[str, object]:
    return {
        "uuid": result.session_id,
        "storage_path": str(result.storage_path),
        "name": result.metadata.name,
        "identifier": result.metadata.identifier,
        "version": result.metadata.version,
        "icon": result.metadata.icon,
        "cataloged": result.cataloged,
        "install": result.install,
        "libraries_injected": result.injection.success_count,
        "libraries_failed": [o.source.name for o in result.injection.failed],
    }


def _print_result(result: ImportResult) -> None:
    table = create_table("Imported Application", "Field", "Value")
    table.add_row("Name", result.metadata.name or "[muted]unknown[/]")
    table.add_row("Identifier", f"[identifier]{result.metadata.identifier or 'unknown'}[/]")
    table.add_row("Version", result.metadata.version or "[muted]unknown[/]")
    table.add_row("UUID", result.session_id)
    table.add_row("Stored at", str(result.storage_path))
    if result.injection.outcomes:
        table.add_row("Libraries", f"{result.injection.success_count} injected")
    console.print(table)

    for outcome in result.injection.failed:
        print_warning(f"Could not inject {outcome.source.name}: {outcome.error}")

    if not result.cataloged:
        print_warning("Stored, but the catalog entry could not be written.")

    print_success(f"Imported {result.metadata.name or result.session_id}.")
