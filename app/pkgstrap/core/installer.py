"""Assembly of the installer components for a host project.

Builds the orchestrator and its collaborators from an InstallerConfig so
that every command wires them the same way.
"""

from pathlib import Path

from pkgstrap.core.clock import Clock, SystemClock
from pkgstrap.core.config import InstallerConfig
from pkgstrap.core.manifest import ManifestRegistryPatcher
from pkgstrap.core.orchestrator import InstallationOrchestrator
from pkgstrap.core.paths import resolve_project_path
from pkgstrap.core.preferences import PreferencesStore
from pkgstrap.core.progress import ProgressStore
from pkgstrap.core.removal import SelfRemoval
from pkgstrap.services.base import PackageService, RequestStatus, ServiceError
from pkgstrap.services.command import CommandPackageService


def build_progress_store(
    config: InstallerConfig, preferences: PreferencesStore | None = None
) -> ProgressStore:
    """Create the progress store for the configured key prefix."""
    return ProgressStore(preferences, key_prefix=config.installer.state_prefix)


def build_patcher(config: InstallerConfig, project_dir: Path) -> ManifestRegistryPatcher:
    """Create the manifest patcher for a project."""
    manifest_path = resolve_project_path(project_dir, config.installer.manifest)
    return ManifestRegistryPatcher(manifest_path, config.registry.name)


def build_self_removal(
    config: InstallerConfig,
    project_dir: Path,
    service: PackageService,
    clock: Clock | None = None,
) -> SelfRemoval | None:
    """Create the self-removal step, or None if it is disabled."""
    settings = config.installer
    if not settings.self_remove:
        return None
    package_json = (
        resolve_project_path(project_dir, settings.package_json)
        if settings.package_json
        else None
    )
    return SelfRemoval(
        service,
        package_name=settings.package_name,
        package_json=package_json,
        timeout=config.timeouts.removal,
        clock=clock,
    )


def build_orchestrator(
    config: InstallerConfig,
    project_dir: Path,
    *,
    service: PackageService | None = None,
    progress_store: ProgressStore | None = None,
    clock: Clock | None = None,
) -> InstallationOrchestrator:
    """Create an orchestrator for a host project.

    Args:
        config: Installer configuration.
        project_dir: Root directory of the host project.
        service: Package service. Default: the configured command service
            running in the project directory.
        progress_store: Progress store. Default: the user's preferences file.
        clock: Clock shared by all timing decisions.

    Returns:
        An idle orchestrator.
    """
    if service is None:
        service = CommandPackageService(config.service, cwd=project_dir)
    if progress_store is None:
        progress_store = build_progress_store(config)

    return InstallationOrchestrator(
        config.build_catalog(),
        service,
        progress_store,
        build_patcher(config, project_dir),
        config.registry.url,
        timeouts=config.timeouts,
        self_removal=build_self_removal(config, project_dir, service, clock),
        step_delay=config.installer.step_delay,
        failure_policy=config.installer.failure_policy,
        clock=clock,
    )


def read_installed(
    config: InstallerConfig,
    project_dir: Path,
    *,
    service: PackageService | None = None,
    clock: Clock | None = None,
) -> dict[str, str]:
    """Read what the project already depends on.

    Uses the configured list command when there is one, otherwise the
    manifest's ``dependencies`` map. List results carry no version.

    Raises:
        ServiceError: If the list command cannot run, fails, or times out.
        ManifestError: If the manifest cannot be read.
    """
    if config.service.list_installed is None:
        return build_patcher(config, project_dir).read_dependencies()

    if service is None:
        service = CommandPackageService(config.service, cwd=project_dir)
    clock = clock if clock is not None else SystemClock()
    request = service.list_packages()
    deadline = clock.now() + config.timeouts.registry
    while not request.is_completed:
        if clock.now() > deadline:
            msg = f"List command gave no result after {config.timeouts.registry:.0f}s"
            raise ServiceError(msg)
        clock.sleep(config.installer.poll_interval)

    if request.status != RequestStatus.SUCCESS:
        raise ServiceError(f"List command failed: {request.error or 'unknown error'}")
    return dict.fromkeys(request.result, "")
