"""Status command implementation.

Shows the package catalog with the progress of an interrupted run.
"""

from pathlib import Path
from typing import Annotated

import typer

from pkgstrap.cli.display import create_catalog_table, is_declared
from pkgstrap.cli.types import ConfigOption, ProjectOption, require_config
from pkgstrap.core.installer import build_progress_store, read_installed
from pkgstrap.core.manifest import ManifestError
from pkgstrap.services.base import ServiceError
from pkgstrap.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Show the catalog and installation progress.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def show_status(
    ctx: typer.Context,
    project: ProjectOption = Path("."),
    config_path: ConfigOption = None,
    check: Annotated[
        bool,
        typer.Option(
            "--check",
            help="Also report which packages the project already has.",
        ),
    ] = False,
) -> None:
    """Show the package catalog and the progress of an interrupted run."""
    if ctx.invoked_subcommand is not None:
        return

    config = require_config(project, config_path)
    catalog = config.build_catalog()
    progress = build_progress_store(config).load()

    if len(catalog) == 0:
        print_info("The catalog is empty.")
        return

    dependencies: dict[str, str] | None = None
    if check:
        try:
            dependencies = read_installed(config, project)
        except (ManifestError, ServiceError) as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e

    console.print(create_catalog_table(catalog, progress, dependencies))

    if not progress.is_installing:
        console.print("\n[muted]No interrupted run recorded.[/muted]")
    elif progress.is_valid_for(len(catalog)):
        console.print(
            f"\n[info]Interrupted run: {progress.current_index} of "
            f"{progress.total_count} handled. Run 'pkgstrap run' to resume.[/info]"
        )
    else:
        console.print(
            f"\n[warning]Recorded progress ({progress.current_index}/{progress.total_count}) "
            f"does not match the catalog; the next run starts over.[/warning]"
        )

    if dependencies is not None:
        declared = sum(1 for package in catalog if is_declared(package.identifier, dependencies))
        console.print(f"[muted]{declared} of {len(catalog)} already in the project.[/muted]")
