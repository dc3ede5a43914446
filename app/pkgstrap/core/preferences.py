"""Process-wide preferences store.

This module provides the PreferencesStore class, a small durable
key/value store backed by a single JSON file. Values survive process
restarts and every write replaces the file atomically.
"""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from tempfile import NamedTemporaryFile

from pkgstrap.core.paths import get_preferences_path

logger = logging.getLogger(__name__)

PreferenceValue = bool | int | float | str


class PreferencesError(Exception):
    """Raised when the preferences file cannot be written."""


class PreferencesStore:
    """Durable key/value preferences backed by a JSON file.

    Storage location: ~/.local/state/pkgstrap/preferences.json

    Reads always go to disk so that a value written by an earlier process
    is visible to the current one. A corrupt file is logged and treated as
    empty; the next write replaces it.

    Attributes:
        path: Location of the preferences file.
    """

    def __init__(self, path: Path | None = None) -> None:
        """Initialize PreferencesStore.

        Args:
            path: Optional override for the preferences file.
                  Default: ~/.local/state/pkgstrap/preferences.json
        """
        self._path = path if path is not None else get_preferences_path()

    @property
    def path(self) -> Path:
        """Path to the preferences file."""
        return self._path

    def _load(self) -> dict[str, PreferenceValue]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable preferences file %s: %s", self._path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences file %s: not a JSON object", self._path)
            return {}
        return data

    def _store(self, data: Mapping[str, PreferenceValue]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(dict(data), f, indent=2, sort_keys=True)
                f.write("\n")
            os.replace(str(tmp_path), str(self._path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise PreferencesError(f"Failed to write preferences: {e}") from e

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Read a boolean preference."""
        value = self._load().get(key, default)
        return value if isinstance(value, bool) else default

    def get_int(self, key: str, default: int = 0) -> int:
        """Read an integer preference."""
        value = self._load().get(key, default)
        if isinstance(value, bool) or not isinstance(value, int):
            return default
        return value

    def set_many(self, values: Mapping[str, PreferenceValue]) -> None:
        """Set several preferences in one atomic write.

        Raises:
            PreferencesError: If the file cannot be written.
        """
        data = self._load()
        data.update(values)
        self._store(data)

    def delete_keys(self, *keys: str) -> None:
        """Delete preferences; missing keys are ignored.

        Raises:
            PreferencesError: If the file cannot be written.
        """
        data = self._load()
        if not any(key in data for key in keys):
            return
        for key in keys:
            data.pop(key, None)
        self._store(data)
