"""Data models for pkgstrap.

This module exports the core data structures used throughout the application.
"""

from pkgstrap.models.catalog import PackageCatalog
from pkgstrap.models.operation import OperationResult, OperationState
from pkgstrap.models.package import PackageRef, SourceKind, is_url_identifier
from pkgstrap.models.progress import InstallProgress
from pkgstrap.models.registry import ScopedRegistry
from pkgstrap.models.report import EntryOutcome, RunReport

__all__ = [
    "EntryOutcome",
    "InstallProgress",
    "OperationResult",
    "OperationState",
    "PackageCatalog",
    "PackageRef",
    "RunReport",
    "ScopedRegistry",
    "SourceKind",
    "is_url_identifier",
]
