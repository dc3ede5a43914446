"""Installer self-removal.

After a run succeeds the installer removes its own package from the host
project. Removal is best-effort: failures and timeouts are logged and
never affect the outcome of the run.
"""

import json
import logging
from pathlib import Path

from pkgstrap.core.clock import Clock
from pkgstrap.core.operation import RemoveOperation
from pkgstrap.models.operation import OperationState
from pkgstrap.services.base import PackageService

logger = logging.getLogger(__name__)

DEFAULT_REMOVAL_TIMEOUT = 30.0


def read_package_name(package_json: Path) -> str | None:
    """Read the ``name`` field of a package.json file.

    Args:
        package_json: Path to the package metadata file.

    Returns:
        The package name, or None if it cannot be determined.
    """
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except FileNotFoundError:
        logger.warning("Package metadata not found: %s", package_json)
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Cannot read package metadata %s: %s", package_json, e)
        return None

    name = data.get("name") if isinstance(data, dict) else None
    if not isinstance(name, str) or not name.strip():
        logger.warning("Package metadata %s has no name", package_json)
        return None
    return name.strip()


class SelfRemoval:
    """Removes the installer's own package once.

    The package identity comes from an explicit name or, failing that,
    from the ``name`` field of the installer's package.json.
    """

    def __init__(
        self,
        service: PackageService,
        *,
        package_name: str | None = None,
        package_json: Path | None = None,
        timeout: float = DEFAULT_REMOVAL_TIMEOUT,
        clock: Clock | None = None,
    ) -> None:
        self._service = service
        self._package_name = package_name
        self._package_json = package_json
        self._timeout = timeout
        self._clock = clock
        self._operation: RemoveOperation | None = None
        self._final_state: OperationState | None = None

    def resolve_package_name(self) -> str | None:
        """Determine the installer's own package name."""
        if self._package_name:
            return self._package_name
        if self._package_json is not None:
            return read_package_name(self._package_json)
        return None

    @property
    def is_started(self) -> bool:
        return self._operation is not None or self._final_state is not None

    @property
    def is_pending(self) -> bool:
        """Check if a removal request is still in flight."""
        return self._operation is not None and self._final_state is None

    @property
    def is_lingering(self) -> bool:
        """Check if a timed-out removal request has not exited yet."""
        return self._operation is not None and self._final_state is not None

    @property
    def final_state(self) -> OperationState | None:
        """Terminal state of the removal, None until it finishes."""
        return self._final_state

    def start(self) -> bool:
        """Issue the removal request.

        Returns:
            True if a request is in flight, False if removal was skipped
            or could not be issued.
        """
        if self.is_started:
            logger.debug("Self-removal already started")
            return self.is_pending

        name = self.resolve_package_name()
        if name is None:
            logger.error("Removal failed: cannot resolve the installer's package name")
            self._final_state = OperationState.FAILED
            return False

        logger.info("Removing installer package %s", name)
        self._operation = RemoveOperation(name, self._service, self._timeout, self._clock)
        self._operation.start()
        return self.poll() == OperationState.PENDING

    def poll(self) -> OperationState:
        """Advance the removal; logs the terminal result once.

        Returns:
            Current removal state.
        """
        if self._final_state is not None:
            self._reap()
            return self._final_state
        if self._operation is None:
            return OperationState.PENDING

        result = self._operation.poll()
        if not result.is_terminal:
            return result.state

        self._final_state = result.state
        name = self._operation.identifier
        if result.state == OperationState.SUCCEEDED:
            logger.info("Installer package %s removed", name)
        elif result.state == OperationState.TIMED_OUT:
            logger.warning("Removal of %s timed out: %s", name, result.error)
        else:
            logger.error("Removal failed for %s: %s", name, result.error)
        self._reap()
        return self._final_state

    def _reap(self) -> None:
        if self._operation is not None and self._operation.is_settled:
            self._operation = None

    def release(self) -> None:
        """Free the removal request if it has not exited yet."""
        if self._operation is not None:
            self._operation.release()
            self._operation = None
