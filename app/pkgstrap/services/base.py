"""Abstract base classes for package services.

A package service is the host's package manager seen as an opaque,
asynchronous collaborator: every call returns a Request immediately and
the caller polls it until it completes.
"""

from abc import ABC, abstractmethod
from enum import Enum


class RequestStatus(Enum):
    """Status of a service request."""

    IN_PROGRESS = "in_progress"
    SUCCESS = "success"
    FAILURE = "failure"


class ServiceError(Exception):
    """Raised when a service request cannot be issued."""


class Request(ABC):
    """Handle to one asynchronous service request.

    Implementations must be safe to poll repeatedly; none of the
    properties may block.
    """

    @property
    @abstractmethod
    def is_completed(self) -> bool:
        """Check if the request has finished."""

    @property
    @abstractmethod
    def status(self) -> RequestStatus:
        """Current request status."""

    @property
    def error(self) -> str | None:
        """Error message of a failed request."""
        return None

    @property
    def result(self) -> list[str]:
        """Package names returned by a completed list request."""
        return []

    def release(self) -> None:
        """Give up on the request and free what it holds.

        The underlying work is not cancelled. The request still completes
        on its own, but may no longer report details.
        """


class PackageService(ABC):
    """Abstract base class for package services.

    Example:
        >>> service = CommandPackageService(config.service, cwd=project_dir)
        >>> request = service.add("com.cysharp.unitask")
        >>> while not request.is_completed:
        ...     time.sleep(0.1)
        >>> request.status
        <RequestStatus.SUCCESS: 'success'>
    """

    def is_available(self) -> bool:
        """Check if the package manager can be reached."""
        return True

    @abstractmethod
    def add(self, identifier: str) -> Request:
        """Request installation of one package.

        Args:
            identifier: Registry name or URL locator.

        Returns:
            Request to poll for completion.

        Raises:
            ServiceError: If the request cannot be issued.
        """

    @abstractmethod
    def remove(self, identifier: str) -> Request:
        """Request removal of one package.

        Args:
            identifier: Package name.

        Returns:
            Request to poll for completion.

        Raises:
            ServiceError: If the request cannot be issued.
        """

    @abstractmethod
    def list_packages(self) -> Request:
        """Request the list of installed packages.

        Returns:
            Request whose ``result`` holds the package names once completed.

        Raises:
            ServiceError: If the request cannot be issued.
        """
