"""Shared Rich display functions for the catalog and run results.

Provides table builders and a progress bar used by the run and status
commands.
"""

from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pkgstrap.core.orchestrator import InstallationOrchestrator
from pkgstrap.models.catalog import PackageCatalog
from pkgstrap.models.progress import InstallProgress
from pkgstrap.models.report import EntryOutcome
from pkgstrap.utils.formatting import console


def entry_status(index: int, progress: InstallProgress) -> str:
    """Classify a catalog entry against persisted progress.

    Args:
        index: Position of the entry in the catalog.
        progress: Persisted installation progress.

    Returns:
        "done" for entries already handled by an interrupted run,
        "pending" otherwise.
    """
    if progress.is_installing and index < progress.current_index:
        return "done"
    return "pending"


def create_catalog_table(
    catalog: PackageCatalog,
    progress: InstallProgress,
    dependencies: dict[str, str] | None = None,
) -> Table:
    """Create a Rich table listing the catalog.

    Args:
        catalog: Package catalog to display.
        progress: Persisted progress used for the status column.
        dependencies: Manifest dependency map. When given, an extra column
            shows whether the manifest already depends on each entry.

    Returns:
        Rich Table configured for catalog display.
    """
    table = Table(
        title="Package Catalog",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", style="muted")
    table.add_column("Status", width=8)
    table.add_column("Package", no_wrap=True)
    table.add_column("Source", style="muted")
    if dependencies is not None:
        table.add_column("Manifest", width=10)

    for index, package in enumerate(catalog):
        status = entry_status(index, progress)
        source = package.source_kind.value
        if package.large:
            source += " (large)"
        row = [
            str(index + 1),
            f"[{status}]{status}[/{status}]",
            package.identifier,
            source,
        ]
        if dependencies is not None:
            if is_declared(package.identifier, dependencies):
                row.append("[success]present[/success]")
            else:
                row.append("[muted]absent[/muted]")
        table.add_row(*row)

    return table


def is_declared(identifier: str, dependencies: dict[str, str]) -> bool:
    """Check if the manifest already depends on a package.

    Registry packages are keyed by name; URL packages appear as the
    dependency value.
    """
    if identifier in dependencies:
        return True
    return identifier.rstrip("/") in {value.rstrip("/") for value in dependencies.values()}


def create_failures_table(failures: list[EntryOutcome]) -> Table:
    """Create a Rich table of entries that failed or timed out."""
    table = Table(
        title="Failed Packages",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", style="muted")
    table.add_column("Package", no_wrap=True)
    table.add_column("Result", width=10)
    table.add_column("Error")

    for outcome in failures:
        table.add_row(
            str(outcome.index + 1),
            outcome.package.identifier,
            f"[failed]{outcome.state.value}[/failed]",
            f"[muted]{outcome.error or ''}[/muted]",
        )

    return table


def create_run_progress() -> Progress:
    """Create the progress bar shown while a run is driven."""
    return Progress(
        SpinnerColumn(),
        TextColumn("[info]{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        console=console,
        transient=True,
    )


def describe_tick(orchestrator: InstallationOrchestrator) -> str:
    """Describe what the orchestrator is doing for the progress bar."""
    package = orchestrator.current_package
    if package is not None:
        return f"Installing {package.identifier}"
    if orchestrator.is_busy and orchestrator.current_index >= orchestrator.total_count:
        return "Removing installer"
    return "Waiting"


def print_failures(failures: list[EntryOutcome]) -> None:
    """Print the failures table if there are any failures."""
    if failures:
        console.print(create_failures_table(failures))
