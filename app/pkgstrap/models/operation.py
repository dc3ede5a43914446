"""Operation result models.

Defines the states an asynchronous package operation moves through and
the immutable result reported when polling it.
"""

from dataclasses import dataclass
from enum import Enum


class OperationState(Enum):
    """State of a package operation.

    Attributes:
        PENDING: Request issued, no result yet.
        SUCCEEDED: The service reported success.
        FAILED: The service reported failure or the request could not be issued.
        TIMED_OUT: No result arrived within the operation's timeout.
    """

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"

    @property
    def is_terminal(self) -> bool:
        """Check if the state will not change on further polling."""
        return self != OperationState.PENDING


@dataclass(frozen=True, slots=True)
class OperationResult:
    """Result of polling a package operation.

    Attributes:
        state: Current operation state.
        error: Error detail for failed or timed-out operations.
    """

    state: OperationState
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        """Check if the operation has finished."""
        return self.state.is_terminal

    @property
    def success(self) -> bool:
        """Check if the operation succeeded."""
        return self.state == OperationState.SUCCEEDED

    @property
    def failed(self) -> bool:
        """Check if the operation failed or timed out."""
        return self.state in (OperationState.FAILED, OperationState.TIMED_OUT)


PENDING = OperationResult(state=OperationState.PENDING)
