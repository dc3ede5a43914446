"""Run report models.

A RunReport collects the outcome of every catalog entry handled by one
orchestrator run and renders the single terminal message shown to the
operator.
"""

from dataclasses import dataclass, field

from pkgstrap.models.operation import OperationState
from pkgstrap.models.package import PackageRef


@dataclass(frozen=True, slots=True)
class EntryOutcome:
    """Terminal outcome of one catalog entry.

    Attributes:
        index: Position of the entry in the catalog.
        package: The package that was installed.
        state: Terminal operation state.
        error: Error detail for failed or timed-out entries.
    """

    index: int
    package: PackageRef
    state: OperationState
    error: str | None = None

    def __post_init__(self) -> None:
        """Validate the outcome after initialization."""
        if not self.state.is_terminal:
            msg = f"Entry outcome must be terminal, got {self.state.value}"
            raise ValueError(msg)

    @property
    def success(self) -> bool:
        """Check if the entry installed successfully."""
        return self.state == OperationState.SUCCEEDED


@dataclass(slots=True)
class RunReport:
    """Mutable record of one orchestrator run.

    Attributes:
        outcomes: Outcomes in the order entries were handled.
        resumed_from: Catalog index the run resumed at (None for fresh runs).
        halt_reason: Reason the run halted, if it did.
    """

    outcomes: list[EntryOutcome] = field(default_factory=list)
    resumed_from: int | None = None
    halt_reason: str | None = None

    def record(self, outcome: EntryOutcome) -> None:
        """Append an entry outcome."""
        self.outcomes.append(outcome)

    @property
    def failures(self) -> list[EntryOutcome]:
        """Entries that failed or timed out."""
        return [o for o in self.outcomes if not o.success]

    @property
    def succeeded(self) -> list[EntryOutcome]:
        """Entries that installed successfully."""
        return [o for o in self.outcomes if o.success]

    @property
    def halted(self) -> bool:
        """Check if the run halted instead of completing."""
        return self.halt_reason is not None

    def summary(self) -> str:
        """Render the single terminal message for the run.

        Returns:
            "halted: <reason>" for halted runs, otherwise "completed"
            followed by the failed entries, if any.
        """
        if self.halt_reason is not None:
            return f"halted: {self.halt_reason}"
        failures = self.failures
        if not failures:
            return "completed"
        names = ", ".join(
            f"{o.package.identifier} ({o.state.value})" for o in failures
        )
        return f"completed with {len(failures)} failed: {names}"
