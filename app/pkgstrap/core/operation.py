"""Poll-based package operations.

A PackageOperation issues exactly one asynchronous request to the package
service and reports its progress through non-blocking polls. Once a poll
returns a terminal result, every later poll returns that same result.
Timeouts do not cancel the external request; the service offers no way
to do so.
"""

import logging
from abc import ABC, abstractmethod

from pkgstrap.core.clock import Clock, SystemClock
from pkgstrap.core.config import TimeoutsConfig
from pkgstrap.models.operation import PENDING, OperationResult, OperationState
from pkgstrap.models.package import PackageRef, SourceKind
from pkgstrap.services.base import PackageService, Request, RequestStatus, ServiceError

logger = logging.getLogger(__name__)


def timeout_for(package: PackageRef, timeouts: TimeoutsConfig) -> float:
    """Select the install timeout for a package.

    Args:
        package: Package about to be installed.
        timeouts: Configured timeouts.

    Returns:
        Timeout in seconds.
    """
    if package.source_kind == SourceKind.URL:
        return timeouts.url_large if package.large else timeouts.url
    return timeouts.registry_large if package.large else timeouts.registry


class PackageOperation(ABC):
    """One asynchronous request against the package service.

    Attributes:
        identifier: Package the operation acts on.
        timeout: Seconds after start before the operation times out.
    """

    verb: str = "operation"

    def __init__(
        self,
        identifier: str,
        service: PackageService,
        timeout: float,
        clock: Clock | None = None,
    ) -> None:
        if timeout <= 0:
            msg = f"Timeout must be positive, got {timeout}"
            raise ValueError(msg)
        self._identifier = identifier
        self._service = service
        self._timeout = timeout
        self._clock = clock if clock is not None else SystemClock()
        self._request: Request | None = None
        self._started_at: float | None = None
        self._result: OperationResult | None = None

    @property
    def identifier(self) -> str:
        return self._identifier

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def started_at(self) -> float | None:
        """Clock reading when the request was issued."""
        return self._started_at

    @property
    def is_started(self) -> bool:
        return self._started_at is not None

    @property
    def elapsed(self) -> float:
        """Seconds since start, 0 before start."""
        if self._started_at is None:
            return 0.0
        return self._clock.now() - self._started_at

    @property
    def is_settled(self) -> bool:
        """Check if the underlying request has finished.

        A timed-out operation leaves its request running; checking this
        lets the service reap it once it exits.
        """
        return self._request is None or self._request.is_completed

    def release(self) -> None:
        """Free the resources of a request that is still running."""
        if not self.is_settled:
            assert self._request is not None
            logger.debug("Releasing unfinished %s of %s", self.verb, self._identifier)
            self._request.release()

    @abstractmethod
    def _issue(self) -> Request:
        """Send the request to the service."""

    def start(self) -> None:
        """Issue the request.

        A request that cannot be issued makes the operation fail at once;
        it is never retried.

        Raises:
            RuntimeError: If the operation was already started.
        """
        if self._started_at is not None:
            msg = f"{self.verb.capitalize()} of {self._identifier} already started"
            raise RuntimeError(msg)

        self._started_at = self._clock.now()
        logger.info("Requesting %s of %s", self.verb, self._identifier)
        try:
            self._request = self._issue()
        except ServiceError as e:
            self._result = OperationResult(state=OperationState.FAILED, error=str(e))

    def poll(self) -> OperationResult:
        """Check the operation without blocking.

        Returns:
            The current result; terminal results are sticky.

        Raises:
            RuntimeError: If the operation has not been started.
        """
        if self._result is not None:
            return self._result
        if self._started_at is None or self._request is None:
            msg = f"{self.verb.capitalize()} of {self._identifier} not started"
            raise RuntimeError(msg)

        if self._request.is_completed:
            if self._request.status == RequestStatus.SUCCESS:
                self._result = OperationResult(state=OperationState.SUCCEEDED)
            else:
                self._result = OperationResult(
                    state=OperationState.FAILED,
                    error=self._request.error or "Unknown error",
                )
        elif self.elapsed > self._timeout:
            self._result = OperationResult(
                state=OperationState.TIMED_OUT,
                error=f"No result after {self._timeout:.0f}s",
            )
        else:
            return PENDING

        return self._result


class InstallOperation(PackageOperation):
    """Installs one catalog entry."""

    verb = "install"

    def __init__(
        self,
        package: PackageRef,
        service: PackageService,
        timeout: float,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(package.identifier, service, timeout, clock)
        self._package = package

    @property
    def package(self) -> PackageRef:
        return self._package

    def _issue(self) -> Request:
        return self._service.add(self._identifier)


class RemoveOperation(PackageOperation):
    """Removes one package."""

    verb = "removal"

    def _issue(self) -> Request:
        return self._service.remove(self._identifier)
