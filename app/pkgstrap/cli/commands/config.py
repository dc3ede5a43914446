"""Config command implementation.

Shows the effective installer configuration and writes a default
``pkgstrap.toml``.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer

from pkgstrap.cli.types import ConfigOption, ProjectOption, require_config
from pkgstrap.core.config import ConfigError, InstallerConfig, config_to_dict, save_config
from pkgstrap.core.paths import get_project_config_path
from pkgstrap.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="Show or create the installer configuration.",
    no_args_is_help=True,
)


@app.command()
def show(
    project: ProjectOption = Path("."),
    config_path: ConfigOption = None,
) -> None:
    """Print the effective configuration as TOML."""
    config = require_config(project, config_path)
    console.print(tomli_w.dumps(config_to_dict(config)), markup=False, highlight=False)


@app.command()
def init(
    project: ProjectOption = Path("."),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a default pkgstrap.toml into the project."""
    path = get_project_config_path(project)
    if path.exists() and not force:
        print_error(f"Config already exists: {path}")
        console.print("[muted]Use --force to overwrite.[/muted]")
        raise typer.Exit(code=1)

    try:
        save_config(InstallerConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {path}")
