"""CLI commands for pkgstrap.

This package contains all subcommand implementations.
"""

from pkgstrap.cli.commands import config, reset, run, status

__all__ = ["config", "reset", "run", "status"]
