"""Unit tests for installer component assembly."""

from pathlib import Path
from unittest.mock import patch

import pytest
from pkgstrap.core.config import FailurePolicy, InstallerConfig
from pkgstrap.core.installer import (
    build_orchestrator,
    build_patcher,
    build_progress_store,
    build_self_removal,
    read_installed,
)
from pkgstrap.core.manifest import ManifestNotFoundError
from pkgstrap.core.preferences import PreferencesStore
from pkgstrap.services.base import RequestStatus, ServiceError
from pkgstrap.services.command import CommandPackageService

from fakes import FakeClock, FakePackageService, FakeRequest


class TestBuilders:
    """Tests for the build_* helpers."""

    def test_progress_store_uses_prefix(self, preferences: PreferencesStore) -> None:
        """The configured state prefix names the keys."""
        config = InstallerConfig.model_validate({"installer": {"state_prefix": "mygame"}})
        store = build_progress_store(config, preferences)

        assert store.keys == (
            "mygame.is_installing",
            "mygame.current_index",
            "mygame.total_count",
        )

    def test_patcher_resolves_manifest(self, tmp_path: Path) -> None:
        """The manifest path is resolved against the project."""
        patcher = build_patcher(InstallerConfig(), tmp_path)
        assert patcher.manifest_path == tmp_path / "Packages" / "manifest.json"

    def test_self_removal_disabled(self, tmp_path: Path, service: FakePackageService) -> None:
        """self_remove = false disables removal."""
        config = InstallerConfig.model_validate({"installer": {"self_remove": False}})
        assert build_self_removal(config, tmp_path, service) is None

    def test_self_removal_package_json(
        self, tmp_path: Path, service: FakePackageService
    ) -> None:
        """package_json is resolved against the project."""
        (tmp_path / "Installer").mkdir()
        (tmp_path / "Installer" / "package.json").write_text('{"name": "com.example.boot"}')
        config = InstallerConfig.model_validate(
            {"installer": {"package_json": "Installer/package.json"}}
        )

        removal = build_self_removal(config, tmp_path, service)

        assert removal is not None
        assert removal.resolve_package_name() == "com.example.boot"


class TestBuildOrchestrator:
    """Tests for build_orchestrator."""

    def test_defaults_to_command_service(self, project_dir: Path) -> None:
        """Without a service the configured command service is used."""
        orchestrator = build_orchestrator(InstallerConfig(), project_dir)

        assert isinstance(orchestrator._service, CommandPackageService)  # noqa: SLF001
        assert len(orchestrator.catalog) == 6

    def test_applies_settings(self, project_dir: Path, service: FakePackageService) -> None:
        """Policy and delay come from the config."""
        config = InstallerConfig.model_validate(
            {"installer": {"failure_policy": "halt", "step_delay": 0}}
        )
        orchestrator = build_orchestrator(config, project_dir, service=service)

        assert orchestrator._failure_policy == FailurePolicy.HALT  # noqa: SLF001
        assert orchestrator._step_delay == 0  # noqa: SLF001


class TestReadInstalled:
    """Tests for read_installed."""

    def test_reads_manifest_without_list_command(self, project_dir: Path) -> None:
        """The manifest dependencies are used by default."""
        assert read_installed(InstallerConfig(), project_dir) == {"com.unity.ugui": "1.0.0"}

    def test_missing_manifest(self, tmp_path: Path) -> None:
        """A missing manifest propagates."""
        with pytest.raises(ManifestNotFoundError):
            read_installed(InstallerConfig(), tmp_path)

    def test_uses_list_command(
        self, project_dir: Path, service: FakePackageService, clock: FakeClock
    ) -> None:
        """A configured list command replaces the manifest."""
        config = InstallerConfig.model_validate({"service": {"list_installed": ["openupm", "ls"]}})
        service.installed = ["org.a.x"]

        result = read_installed(config, project_dir, service=service, clock=clock)

        assert result == {"org.a.x": ""}
        assert ("list", "") in service.calls

    def test_list_command_failure(
        self, project_dir: Path, service: FakePackageService, clock: FakeClock
    ) -> None:
        """A failed list request raises ServiceError."""
        config = InstallerConfig.model_validate({"service": {"list_installed": ["openupm", "ls"]}})
        failed = FakeRequest(RequestStatus.FAILURE, error="no project")

        with (
            patch.object(service, "list_packages", return_value=failed),
            pytest.raises(ServiceError, match="no project"),
        ):
            read_installed(config, project_dir, service=service, clock=clock)

    def test_list_command_timeout(
        self, project_dir: Path, service: FakePackageService, clock: FakeClock
    ) -> None:
        """A list request that never completes times out."""
        config = InstallerConfig.model_validate({"service": {"list_installed": ["openupm", "ls"]}})

        with (
            patch.object(service, "list_packages", return_value=FakeRequest(None)),
            pytest.raises(ServiceError, match="no result"),
        ):
            read_installed(config, project_dir, service=service, clock=clock)

        assert sum(clock.sleeps) >= config.timeouts.registry
