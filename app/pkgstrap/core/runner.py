"""Host tick loop.

The orchestrator never waits on its own; ``drive`` plays the host event
loop, ticking it at a fixed interval until it has no more work.
"""

from collections.abc import Callable

from pkgstrap.core.clock import Clock, SystemClock
from pkgstrap.core.orchestrator import InstallationOrchestrator, OrchestratorState

TickCallback = Callable[[InstallationOrchestrator], None]


def drive(
    orchestrator: InstallationOrchestrator,
    *,
    poll_interval: float = 0.1,
    clock: Clock | None = None,
    on_tick: TickCallback | None = None,
) -> OrchestratorState:
    """Tick the orchestrator until it is no longer busy.

    Args:
        orchestrator: Orchestrator to drive; it should already be started.
        poll_interval: Seconds to sleep between ticks.
        clock: Clock used for sleeping. Default: the system clock.
        on_tick: Called after every tick, e.g. to refresh a progress bar.

    Returns:
        The orchestrator state once all work is done.
    """
    clock = clock if clock is not None else SystemClock()
    while True:
        state = orchestrator.tick()
        if on_tick is not None:
            on_tick(orchestrator)
        if not orchestrator.is_busy:
            return state
        clock.sleep(poll_interval)
