"""Run command implementation.

Registers the scoped registry in the project manifest and installs the
package catalog one entry at a time, resuming an interrupted run.
"""

import signal
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from types import FrameType
from typing import Annotated

import typer

from pkgstrap.cli.display import create_run_progress, describe_tick, print_failures
from pkgstrap.cli.types import ConfigOption, ProjectOption, require_config
from pkgstrap.core.installer import build_orchestrator
from pkgstrap.core.manifest import ManifestError
from pkgstrap.core.orchestrator import InstallationOrchestrator, OrchestratorState, StartResult
from pkgstrap.core.preferences import PreferencesError
from pkgstrap.core.runner import drive
from pkgstrap.services.base import ServiceError
from pkgstrap.utils.formatting import console, print_error, print_info, print_success


app = typer.Typer(
    help="Install the package catalog.",
    invoke_without_command=True,
)


@contextmanager
def _cancel_on_interrupt(orchestrator: InstallationOrchestrator) -> Iterator[None]:
    """Turn SIGINT into a cancellation observed at the next step boundary.

    A second SIGINT interrupts immediately.
    """

    def handler(signum: int, frame: FrameType | None) -> None:
        if not orchestrator.cancel():
            raise KeyboardInterrupt
        signal.signal(signal.SIGINT, previous)

    previous = signal.getsignal(signal.SIGINT)
    signal.signal(signal.SIGINT, handler)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def _drive_with_progress(orchestrator: InstallationOrchestrator, poll_interval: float) -> None:
    """Drive the orchestrator while showing a progress bar."""
    with create_run_progress() as progress:
        task = progress.add_task(
            "Starting",
            total=orchestrator.total_count,
            completed=orchestrator.current_index,
        )

        def on_tick(current: InstallationOrchestrator) -> None:
            progress.update(
                task,
                completed=current.current_index,
                description=describe_tick(current),
            )

        with _cancel_on_interrupt(orchestrator):
            drive(orchestrator, poll_interval=poll_interval, on_tick=on_tick)


def _confirm_install(count: int, project: Path) -> None:
    confirmed = typer.confirm(f"Install {count} package(s) into {project}?", default=False)
    if not confirmed:
        print_info("Aborted.")
        raise typer.Exit(code=0)


@app.callback(invoke_without_command=True)
def run_installer(
    ctx: typer.Context,
    project: ProjectOption = Path("."),
    config_path: ConfigOption = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
) -> None:
    """Install the package catalog into a project.

    Registers the scoped registry in the package manifest, then installs
    every catalog entry in order. Failed or timed-out entries are reported
    and skipped. An interrupted run resumes where it stopped.

    Press Ctrl+C to stop after the package currently installing.

    Examples:
        pkgstrap run                      # Install into the current directory
        pkgstrap run --project ~/MyGame   # Install into another project
        pkgstrap run --yes                # Skip the confirmation prompt
    """
    if ctx.invoked_subcommand is not None:
        return

    config = require_config(project, config_path)
    orchestrator = build_orchestrator(config, project)
    catalog = orchestrator.catalog

    if len(catalog) > 0 and not orchestrator.service.is_available():
        print_error(
            f"{config.service.add[0]} not found. Install it or configure the "
            "service commands in pkgstrap.toml."
        )
        raise typer.Exit(code=1)

    try:
        # An interrupted run was already confirmed by whoever started it.
        result = orchestrator.resume_pending()
        if result is None:
            if not yes and len(catalog) > 0:
                _confirm_install(len(catalog), project)
            result = orchestrator.start()
    except ManifestError as e:
        print_error(f"halted: {e}")
        raise typer.Exit(code=1) from e
    except PreferencesError as e:
        print_error(f"Cannot save progress: {e}")
        raise typer.Exit(code=1) from e

    if result == StartResult.NOTHING_TO_INSTALL:
        print_info("No packages to install.")
        return
    if result == StartResult.RESUMED:
        print_info(
            f"Resuming at package {orchestrator.current_index + 1} "
            f"of {orchestrator.total_count}."
        )

    try:
        _drive_with_progress(orchestrator, config.installer.poll_interval)
    except (PreferencesError, ServiceError) as e:
        print_error(f"halted: {e}")
        raise typer.Exit(code=1) from e
    finally:
        orchestrator.release()

    report = orchestrator.report
    print_failures(report.failures)
    if orchestrator.state == OrchestratorState.SUCCEEDED:
        if report.failures:
            console.print(f"[warning]{report.summary()}[/warning]")
        else:
            print_success(report.summary())
        return

    print_error(report.summary())
    raise typer.Exit(code=1)
