"""Shared options and helpers for CLI commands.

This module provides the project and config options and the config
loading used across multiple CLI command modules.
"""

from pathlib import Path
from typing import Annotated

import typer

from pkgstrap.core.config import ConfigError, InstallerConfig, load_project_config
from pkgstrap.utils.formatting import print_error

ProjectOption = Annotated[
    Path,
    typer.Option(
        "--project",
        "-p",
        help="Root directory of the host project.",
        file_okay=False,
        resolve_path=True,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Installer config file (default: <project>/pkgstrap.toml).",
        dir_okay=False,
    ),
]


def require_config(project_dir: Path, config_path: Path | None = None) -> InstallerConfig:
    """Load the project configuration or exit with an error.

    Args:
        project_dir: Root directory of the host project.
        config_path: Optional explicit config file.

    Returns:
        Validated InstallerConfig object.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    try:
        return load_project_config(project_dir, config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
