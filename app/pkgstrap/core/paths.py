"""XDG-compliant and project-relative path management for pkgstrap.

XDG defaults:
- State: ~/.local/state/pkgstrap/

Project-relative defaults:
- Installer config: <project>/pkgstrap.toml
- Package manifest: <project>/Packages/manifest.json
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "pkgstrap"

CONFIG_FILENAME = "pkgstrap.toml"
DEFAULT_MANIFEST_RELPATH = "Packages/manifest.json"
PREFERENCES_FILENAME = "preferences.json"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_STATE_HOME").
        default_subdir: Default subdirectory under home (e.g., ".local/state").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_state_dir() -> Path:
    """Get the state directory path.

    State data holds the preferences store with the persisted
    installation progress.

    Returns:
        Path to ~/.local/state/pkgstrap/ (or XDG_STATE_HOME/pkgstrap/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_preferences_path() -> Path:
    """Get the preferences store path.

    Returns:
        Path to ~/.local/state/pkgstrap/preferences.json.
    """
    return get_state_dir() / PREFERENCES_FILENAME


def get_project_config_path(project_dir: Path) -> Path:
    """Get the installer config path for a project.

    Args:
        project_dir: Root directory of the host project.

    Returns:
        Path to <project>/pkgstrap.toml.
    """
    return project_dir / CONFIG_FILENAME


def resolve_project_path(project_dir: Path, relpath: str) -> Path:
    """Resolve a configured path against the project directory.

    Absolute paths are returned unchanged.

    Args:
        project_dir: Root directory of the host project.
        relpath: Path from configuration, usually project-relative.

    Returns:
        Absolute or project-relative resolved path.
    """
    path = Path(relpath).expanduser()
    if path.is_absolute():
        return path
    return project_dir / path


def ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
