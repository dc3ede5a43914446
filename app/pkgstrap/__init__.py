"""pkgstrap - Resumable bootstrap installer for project package dependencies."""

__version__ = "0.3.0"
