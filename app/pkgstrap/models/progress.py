"""Persisted installation progress model."""

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class InstallProgress:
    """Snapshot of an installation run's progress.

    Attributes:
        is_installing: True while a run is in flight (or was interrupted).
        current_index: Index of the next catalog entry to install.
        total_count: Catalog length recorded when the run started.
    """

    is_installing: bool = False
    current_index: int = 0
    total_count: int = 0

    @classmethod
    def fresh(cls, total_count: int) -> "InstallProgress":
        """Create progress for a run that has not installed anything yet."""
        return cls(is_installing=True, current_index=0, total_count=total_count)

    def advanced(self) -> "InstallProgress":
        """Return a copy with the current index moved past one entry."""
        return replace(self, current_index=self.current_index + 1)

    @property
    def is_finished(self) -> bool:
        """Check if every recorded entry has been handled."""
        return self.current_index >= self.total_count

    def is_valid_for(self, catalog_length: int) -> bool:
        """Check the progress still describes a catalog of the given length.

        Args:
            catalog_length: Length of the freshly built catalog.

        Returns:
            True if ``0 <= current_index <= total_count == catalog_length``.
        """
        return (
            self.total_count == catalog_length
            and 0 <= self.current_index <= self.total_count
        )
