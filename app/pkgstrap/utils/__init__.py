"""Utility modules for pkgstrap.

This module exports commonly used utility functions.
"""

from pkgstrap.utils.formatting import (
    configure_logging,
    console,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from pkgstrap.utils.shell import (
    BackgroundCommand,
    CommandResult,
    command_exists,
    spawn_command,
)

__all__ = [
    "BackgroundCommand",
    "CommandResult",
    "command_exists",
    "configure_logging",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "spawn_command",
]
