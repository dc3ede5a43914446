"""Resumable sequential installation orchestrator.

The orchestrator installs the package catalog one entry at a time. It owns
no thread and never blocks: a host scheduler calls ``tick()`` repeatedly
and every tick either starts the next install, polls the one in flight,
or does nothing while the inter-step delay runs.

Progress is persisted after every handled entry, so a later process can
resume an interrupted run exactly where it stopped. Entries that fail or
time out are recorded and skipped; they never stall the run.

State machine::

    IDLE --start--> RUNNING --all entries handled--> SUCCEEDED
                       |
                       +--cancel (at a step boundary)--> ABORTED

SUCCEEDED and ABORTED accept a new ``start()``; an aborted run resumes
from its persisted progress.
"""

import logging
from enum import Enum

from pkgstrap.core.clock import Clock, SystemClock
from pkgstrap.core.config import FailurePolicy, TimeoutsConfig
from pkgstrap.core.manifest import ManifestError, ManifestRegistryPatcher, PatchResult
from pkgstrap.core.operation import InstallOperation, timeout_for
from pkgstrap.core.progress import ProgressStore
from pkgstrap.core.removal import SelfRemoval
from pkgstrap.models.catalog import PackageCatalog
from pkgstrap.models.operation import OperationState
from pkgstrap.models.package import PackageRef
from pkgstrap.models.progress import InstallProgress
from pkgstrap.models.report import EntryOutcome, RunReport
from pkgstrap.services.base import PackageService

logger = logging.getLogger(__name__)


class OrchestratorState(Enum):
    """Lifecycle state of an orchestrator."""

    IDLE = "idle"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    ABORTED = "aborted"


class StartResult(Enum):
    """Outcome of a start request."""

    STARTED = "started"
    RESUMED = "resumed"
    ALREADY_RUNNING = "already_running"
    NOTHING_TO_INSTALL = "nothing_to_install"


class InstallationOrchestrator:
    """Drives the package catalog through the package service.

    Only one run can be active per instance; a start request while
    RUNNING is a reported no-op.
    """

    def __init__(
        self,
        catalog: PackageCatalog,
        service: PackageService,
        progress_store: ProgressStore,
        patcher: ManifestRegistryPatcher,
        registry_url: str,
        *,
        timeouts: TimeoutsConfig | None = None,
        self_removal: SelfRemoval | None = None,
        step_delay: float = 0.0,
        failure_policy: FailurePolicy = FailurePolicy.ADVANCE,
        clock: Clock | None = None,
    ) -> None:
        if step_delay < 0:
            msg = f"Step delay cannot be negative, got {step_delay}"
            raise ValueError(msg)
        self._catalog = catalog
        self._service = service
        self._store = progress_store
        self._patcher = patcher
        self._registry_url = registry_url
        self._timeouts = timeouts if timeouts is not None else TimeoutsConfig()
        self._self_removal = self_removal
        self._step_delay = step_delay
        self._failure_policy = failure_policy
        self._clock = clock if clock is not None else SystemClock()

        self._state = OrchestratorState.IDLE
        self._progress: InstallProgress | None = None
        self._operation: InstallOperation | None = None
        self._abandoned: list[InstallOperation] = []
        self._next_step_at = 0.0
        self._cancel_requested = False
        self._report = RunReport()

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def catalog(self) -> PackageCatalog:
        return self._catalog

    @property
    def service(self) -> PackageService:
        return self._service

    @property
    def report(self) -> RunReport:
        """Outcomes of the current (or last) run."""
        return self._report

    @property
    def current_index(self) -> int:
        """Index of the next entry to handle."""
        return self._progress.current_index if self._progress is not None else 0

    @property
    def total_count(self) -> int:
        return self._progress.total_count if self._progress is not None else len(self._catalog)

    @property
    def current_package(self) -> PackageRef | None:
        """Package whose install is in flight, if any."""
        return self._operation.package if self._operation is not None else None

    @property
    def abandoned_count(self) -> int:
        """Timed-out installs whose request has not exited yet."""
        return len(self._abandoned)

    @property
    def is_busy(self) -> bool:
        """Check if ticks still have work to do."""
        if self._state == OrchestratorState.RUNNING:
            return True
        return self._self_removal is not None and self._self_removal.is_pending

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self) -> StartResult:
        """Start a fresh run or resume an interrupted one.

        Persisted progress that no longer fits the catalog is discarded
        and a fresh run begins instead.

        Returns:
            How the request was handled.

        Raises:
            ManifestError: If the manifest cannot be patched. Nothing is
                persisted and the orchestrator does not enter RUNNING.
            PreferencesError: If progress cannot be persisted.
        """
        if self._state == OrchestratorState.RUNNING:
            logger.info(
                "Installation already running (%d/%d)", self.current_index, self.total_count
            )
            return StartResult.ALREADY_RUNNING

        self._report = RunReport()
        self._cancel_requested = False
        self._operation = None

        persisted = self._store.load()
        if persisted.is_installing:
            if persisted.is_valid_for(len(self._catalog)):
                logger.info(
                    "Resuming installation at %d/%d",
                    persisted.current_index,
                    persisted.total_count,
                )
                self._report.resumed_from = persisted.current_index
                self._begin(persisted)
                return StartResult.RESUMED

            logger.info(
                "Persisted progress %d/%d does not match the catalog of %d entries; "
                "starting over",
                persisted.current_index,
                persisted.total_count,
                len(self._catalog),
            )
            self._store.clear()

        return self._start_fresh()

    def resume_pending(self) -> StartResult | None:
        """Resume an interrupted run, if persisted progress records one.

        Intended to be called once when the process starts.

        Returns:
            The start result, or None if there was nothing to resume.
        """
        if self._state == OrchestratorState.RUNNING:
            return None
        if not self._store.load().is_installing:
            return None
        logger.info("Found an interrupted installation")
        return self.start()

    def cancel(self) -> bool:
        """Request an abort at the next step boundary.

        The install in flight always runs to its own terminal state first.

        Returns:
            True if a running installation will abort.
        """
        if self._state != OrchestratorState.RUNNING:
            return False
        if not self._cancel_requested:
            logger.info("Cancellation requested; stopping after the current package")
        self._cancel_requested = True
        return True

    def tick(self) -> OrchestratorState:
        """Advance the state machine by one non-blocking step.

        Returns:
            State after the tick.
        """
        if self._self_removal is not None and self._self_removal.is_started:
            self._self_removal.poll()
        if self._abandoned:
            self._reap_abandoned()

        if self._state != OrchestratorState.RUNNING:
            return self._state

        if self._operation is None:
            self._step_boundary()
        else:
            self._poll_operation()
        return self._state

    def release(self) -> None:
        """Free the requests of timed-out operations that are still running.

        Call once the host stops ticking. The external work is not cancelled.
        """
        for operation in self._abandoned:
            operation.release()
        self._abandoned = []
        if self._self_removal is not None:
            self._self_removal.release()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _start_fresh(self) -> StartResult:
        if len(self._catalog) == 0:
            logger.info("No packages to install")
            return StartResult.NOTHING_TO_INSTALL

        scopes = self._catalog.scopes()
        if scopes:
            try:
                result = self._patcher.ensure_registry(self._registry_url, scopes)
            except ManifestError as e:
                self._report.halt_reason = str(e)
                logger.error("Cannot register %s: %s", self._registry_url, e)
                raise
            if result == PatchResult.PATCHED:
                logger.info("Manifest updated: %s", self._patcher.manifest_path)

        progress = InstallProgress.fresh(len(self._catalog))
        self._store.save(progress)
        logger.info("Starting installation of %d package(s)", len(self._catalog))
        self._begin(progress)
        return StartResult.STARTED

    def _begin(self, progress: InstallProgress) -> None:
        self._progress = progress
        self._state = OrchestratorState.RUNNING
        self._next_step_at = self._clock.now()

    def _step_boundary(self) -> None:
        assert self._progress is not None

        if self._cancel_requested:
            self._abort("cancelled by operator")
            return

        if self._progress.is_finished:
            self._complete()
            return

        if self._clock.now() < self._next_step_at:
            return

        index = self._progress.current_index
        package = self._catalog[index]
        logger.info(
            "Installing %s (%d/%d)", package.identifier, index + 1, self._progress.total_count
        )
        self._operation = InstallOperation(
            package,
            self._service,
            timeout_for(package, self._timeouts),
            self._clock,
        )
        self._operation.start()
        self._poll_operation()

    def _poll_operation(self) -> None:
        assert self._operation is not None and self._progress is not None

        result = self._operation.poll()
        if not result.is_terminal:
            return

        package = self._operation.package
        outcome = EntryOutcome(
            index=self._progress.current_index,
            package=package,
            state=result.state,
            error=result.error,
        )
        self._report.record(outcome)
        if result.state == OperationState.SUCCEEDED:
            logger.info("Installed %s", package.identifier)
        elif result.state == OperationState.TIMED_OUT:
            logger.warning("Install timed out for %s: %s", package.identifier, result.error)
            self._abandoned.append(self._operation)
        else:
            logger.error("Install failed for %s: %s", package.identifier, result.error)

        self._operation = None
        self._progress = self._progress.advanced()
        self._store.save(self._progress)
        self._next_step_at = self._clock.now() + self._step_delay

        if not outcome.success and self._failure_policy == FailurePolicy.HALT:
            self._abort(f"{package.identifier} {result.state.value.replace('_', ' ')}")
            return

        if self._progress.is_finished:
            self._complete()

    def _reap_abandoned(self) -> None:
        running: list[InstallOperation] = []
        for operation in self._abandoned:
            if operation.is_settled:
                logger.debug("Timed-out install of %s has exited", operation.identifier)
            else:
                running.append(operation)
        self._abandoned = running

    def _abort(self, reason: str) -> None:
        assert self._progress is not None
        self._state = OrchestratorState.ABORTED
        self._cancel_requested = False
        self._report.halt_reason = reason
        logger.warning(
            "Installation aborted at %d/%d: %s",
            self._progress.current_index,
            self._progress.total_count,
            reason,
        )

    def _complete(self) -> None:
        self._store.clear()
        self._state = OrchestratorState.SUCCEEDED
        failed = len(self._report.failures)
        logger.info(
            "Installation finished: %d handled, %d failed", len(self._report.outcomes), failed
        )
        if self._self_removal is not None:
            self._self_removal.start()
