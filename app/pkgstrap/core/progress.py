"""Persisted installation progress.

ProgressStore maps InstallProgress onto three named entries of the
preferences store so that an interrupted run can be resumed by a later
process.
"""

import logging

from pkgstrap.core.preferences import PreferencesStore
from pkgstrap.models.progress import InstallProgress

logger = logging.getLogger(__name__)

DEFAULT_KEY_PREFIX = "pkgstrap"


class ProgressStore:
    """Durable record of {is_installing, current_index, total_count}.

    Only the orchestrator writes through this store. All three entries are
    written together so a reader never sees a half-updated record.
    """

    def __init__(
        self,
        preferences: PreferencesStore | None = None,
        key_prefix: str = DEFAULT_KEY_PREFIX,
    ) -> None:
        """Initialize ProgressStore.

        Args:
            preferences: Backing preferences store. Default: the user store.
            key_prefix: Prefix of the three preference keys.
        """
        self._preferences = preferences if preferences is not None else PreferencesStore()
        self._is_installing_key = f"{key_prefix}.is_installing"
        self._current_index_key = f"{key_prefix}.current_index"
        self._total_count_key = f"{key_prefix}.total_count"

    @property
    def keys(self) -> tuple[str, str, str]:
        """Names of the three preference entries."""
        return (self._is_installing_key, self._current_index_key, self._total_count_key)

    def load(self) -> InstallProgress:
        """Read the persisted progress.

        Returns:
            Stored progress, or an idle InstallProgress if nothing is stored.
        """
        return InstallProgress(
            is_installing=self._preferences.get_bool(self._is_installing_key),
            current_index=self._preferences.get_int(self._current_index_key),
            total_count=self._preferences.get_int(self._total_count_key),
        )

    def save(self, progress: InstallProgress) -> None:
        """Persist progress.

        Raises:
            PreferencesError: If the preferences file cannot be written.
        """
        self._preferences.set_many(
            {
                self._is_installing_key: progress.is_installing,
                self._current_index_key: progress.current_index,
                self._total_count_key: progress.total_count,
            }
        )
        logger.debug(
            "Saved progress %d/%d (installing=%s)",
            progress.current_index,
            progress.total_count,
            progress.is_installing,
        )

    def clear(self) -> None:
        """Remove all persisted progress entries.

        Raises:
            PreferencesError: If the preferences file cannot be written.
        """
        self._preferences.delete_keys(*self.keys)
        logger.debug("Cleared persisted progress")
