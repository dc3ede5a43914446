"""Unit tests for path management.

Tests for XDG directories and project-relative paths.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pkgstrap.core.paths import (
    APP_NAME,
    ensure_dir,
    get_preferences_path,
    get_project_config_path,
    get_state_dir,
    resolve_project_path,
)


class TestXdgDirs:
    """Tests for XDG directory functions."""

    def test_default_state_dir(self) -> None:
        """get_state_dir falls back to ~/.local/state."""
        with patch.dict(os.environ, {}, clear=True):
            result = get_state_dir()
            expected = Path.home() / ".local" / "state" / APP_NAME

        assert result == expected

    def test_respects_xdg_state_home(self, tmp_path: Path) -> None:
        """get_state_dir respects XDG_STATE_HOME."""
        with patch.dict(os.environ, {"XDG_STATE_HOME": str(tmp_path)}):
            result = get_state_dir()

        assert result == tmp_path / APP_NAME

    def test_preferences_in_state_dir(self, tmp_path: Path) -> None:
        """The preferences file lives in the state directory."""
        with patch.dict(os.environ, {"XDG_STATE_HOME": str(tmp_path)}):
            result = get_preferences_path()

        assert result == tmp_path / APP_NAME / "preferences.json"


class TestProjectPaths:
    """Tests for project-relative paths."""

    def test_project_config_path(self, tmp_path: Path) -> None:
        """The config file sits at the project root."""
        assert get_project_config_path(tmp_path) == tmp_path / "pkgstrap.toml"

    def test_resolve_relative(self, tmp_path: Path) -> None:
        """Relative paths resolve against the project."""
        result = resolve_project_path(tmp_path, "Packages/manifest.json")
        assert result == tmp_path / "Packages" / "manifest.json"

    def test_resolve_absolute_unchanged(self, tmp_path: Path) -> None:
        """Absolute paths are kept as-is."""
        target = tmp_path / "elsewhere" / "manifest.json"
        assert resolve_project_path(Path("/project"), str(target)) == target


class TestEnsureDir:
    """Tests for ensure_dir."""

    def test_creates_nested(self, tmp_path: Path) -> None:
        """ensure_dir creates missing parents."""
        target = tmp_path / "a" / "b"
        assert ensure_dir(target, "test") == target
        assert target.is_dir()

    def test_permission_error(self, tmp_path: Path) -> None:
        """Permission errors become RuntimeError."""
        with (
            patch.object(Path, "mkdir", side_effect=PermissionError("denied")),
            pytest.raises(RuntimeError, match="Permission denied"),
        ):
            ensure_dir(tmp_path / "x", "test")
