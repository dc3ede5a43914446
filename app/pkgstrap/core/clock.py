"""Clock abstraction for testing.

Operation timeouts, inter-step delays and the tick loop all read time
through a Clock so tests can advance time without sleeping.
"""

import time
from abc import ABC, abstractmethod


class Clock(ABC):
    """Abstract time source for dependency injection."""

    @abstractmethod
    def now(self) -> float:
        """Return a monotonic timestamp in seconds."""
        ...

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Sleep for the given number of seconds.

        Args:
            seconds: Number of seconds to sleep
        """
        ...


class SystemClock(Clock):
    """Production implementation using the monotonic clock."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)
