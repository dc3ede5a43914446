"""Package services that execute installs and removals.

This module provides the abstract service interface and the command-line
implementation that drives the host package manager.
"""

from pkgstrap.services.base import PackageService, Request, RequestStatus, ServiceError
from pkgstrap.services.command import CommandPackageService, CommandRequest

__all__ = [
    "CommandPackageService",
    "CommandRequest",
    "PackageService",
    "Request",
    "RequestStatus",
    "ServiceError",
]
