"""CLI package for pkgstrap.

This package contains the Typer application and all subcommands.
"""

from pkgstrap.cli.main import app

__all__ = ["app"]
