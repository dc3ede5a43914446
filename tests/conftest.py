"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from pkgstrap.core.preferences import PreferencesStore
from pkgstrap.core.progress import ProgressStore

from fakes import FakeClock, FakePackageService


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the XDG state directory inside the test's tmp_path."""
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg-state"))


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo logging configuration applied by CLI invocations."""
    logger = logging.getLogger("pkgstrap")
    yield
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def clock() -> FakeClock:
    """Fake clock starting at a fixed reading."""
    return FakeClock()


@pytest.fixture
def service() -> FakePackageService:
    """Fake package service where everything succeeds by default."""
    return FakePackageService()


@pytest.fixture
def preferences(tmp_path: Path) -> PreferencesStore:
    """Preferences store in a temporary directory."""
    return PreferencesStore(tmp_path / "state" / "preferences.json")


@pytest.fixture
def progress_store(preferences: PreferencesStore) -> ProgressStore:
    """Progress store backed by the temporary preferences."""
    return ProgressStore(preferences)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Host project with a minimal package manifest."""
    project = tmp_path / "project"
    (project / "Packages").mkdir(parents=True)
    manifest = {"dependencies": {"com.unity.ugui": "1.0.0"}}
    (project / "Packages" / "manifest.json").write_text(
        json.dumps(manifest, indent=2) + "\n", encoding="utf-8"
    )
    return project


@pytest.fixture
def manifest_path(project_dir: Path) -> Path:
    """Path of the project's package manifest."""
    return project_dir / "Packages" / "manifest.json"
