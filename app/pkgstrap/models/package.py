"""Package reference models.

This module defines the data structures identifying a single installable
unit and the kind of source it is fetched from.
"""

from dataclasses import dataclass, field
from enum import Enum

# Prefixes that mark an identifier as a URL/VCS locator
URL_PREFIXES: tuple[str, ...] = (
    "http://",
    "https://",
    "ssh://",
    "git://",
    "git+",
    "git@",
    "file:",
)


class SourceKind(Enum):
    """Enumeration of package source kinds.

    Attributes:
        DEFAULT_REGISTRY: Package served by the host's built-in registry.
        SCOPED_REGISTRY: Package served by a named, scoped registry.
        URL: Package fetched from a URL or VCS locator.
    """

    DEFAULT_REGISTRY = "default"
    SCOPED_REGISTRY = "scoped"
    URL = "url"


def is_url_identifier(identifier: str) -> bool:
    """Check whether an identifier is a URL/VCS locator.

    Args:
        identifier: Package identifier to inspect.

    Returns:
        True if the identifier looks like a URL or VCS locator.
    """
    lowered = identifier.strip().lower()
    return lowered.startswith(URL_PREFIXES) or lowered.endswith(".git")


@dataclass(frozen=True, slots=True)
class PackageRef:
    """Identifies one installable unit.

    Instances are immutable; the source kind is fixed when the reference
    is created and never changes afterwards.

    Attributes:
        identifier: Registry name (e.g. 'org.scope.name') or URL locator.
        source_kind: Kind of source the package is installed from.
        large: Whether the package needs the extended install timeout.
    """

    identifier: str
    source_kind: SourceKind
    large: bool = field(default=False)

    def __post_init__(self) -> None:
        """Validate package reference after initialization."""
        if not self.identifier or not self.identifier.strip():
            msg = "Package identifier cannot be empty"
            raise ValueError(msg)
        if self.source_kind != SourceKind.URL and is_url_identifier(self.identifier):
            msg = f"URL identifier must use the URL source kind: {self.identifier}"
            raise ValueError(msg)

    @classmethod
    def from_identifier(
        cls,
        identifier: str,
        *,
        scoped: bool = True,
        large: bool = False,
    ) -> "PackageRef":
        """Create a reference, deriving the source kind from the identifier.

        URL-like identifiers always become URL sources. Any other identifier
        is a scoped-registry package if ``scoped`` is set, otherwise a
        default-registry package.

        Args:
            identifier: Package identifier.
            scoped: Whether a registry identifier belongs to the scoped registry.
            large: Whether the package needs the extended install timeout.

        Returns:
            New PackageRef.

        Raises:
            ValueError: If the identifier is empty.
        """
        identifier = identifier.strip()
        if is_url_identifier(identifier):
            kind = SourceKind.URL
        elif scoped:
            kind = SourceKind.SCOPED_REGISTRY
        else:
            kind = SourceKind.DEFAULT_REGISTRY
        return cls(identifier=identifier, source_kind=kind, large=large)

    @property
    def is_url(self) -> bool:
        """Check if the package is fetched from a URL/VCS locator."""
        return self.source_kind == SourceKind.URL

    @property
    def is_scoped(self) -> bool:
        """Check if the package is served by the scoped registry."""
        return self.source_kind == SourceKind.SCOPED_REGISTRY

    @property
    def scope(self) -> str:
        """Registry scope derived from the first two name components.

        'org.scope.name' becomes 'org.scope'; identifiers with fewer
        than two components are their own scope.
        """
        parts = self.identifier.split(".")
        if len(parts) >= 2:
            return f"{parts[0]}.{parts[1]}"
        return self.identifier
