"""Reset command implementation.

Clears persisted installation progress so the next run starts fresh.
"""

from pathlib import Path
from typing import Annotated

import typer

from pkgstrap.cli.types import ConfigOption, ProjectOption, require_config
from pkgstrap.core.installer import build_progress_store
from pkgstrap.core.preferences import PreferencesError
from pkgstrap.utils.formatting import print_error, print_info, print_success

app = typer.Typer(
    help="Clear persisted installation progress.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def reset_progress(
    ctx: typer.Context,
    project: ProjectOption = Path("."),
    config_path: ConfigOption = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
) -> None:
    """Clear persisted installation progress.

    The next run starts from the first package and registers the scoped
    registry again. Packages already installed stay installed.
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config(project, config_path)
    store = build_progress_store(config)
    progress = store.load()

    if progress.is_installing:
        print_info(
            f"Interrupted run at package {progress.current_index + 1} "
            f"of {progress.total_count}."
        )
    else:
        print_info("No interrupted run recorded.")

    if not yes:
        confirmed = typer.confirm("Clear installation progress?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    try:
        store.clear()
    except PreferencesError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success("Installation progress cleared.")
