"""Package catalog model.

The catalog is the fixed, ordered list of packages installed by one run.
"""

from collections.abc import Iterable, Iterator

from pkgstrap.models.package import PackageRef


class PackageCatalog:
    """Ordered, deduplicated, immutable sequence of package references.

    Insertion order is install order. Registry packages always come before
    URL packages so that quick registry installs are not queued behind
    slow VCS fetches.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[PackageRef] = ()) -> None:
        seen: set[str] = set()
        registry: list[PackageRef] = []
        urls: list[PackageRef] = []
        for entry in entries:
            if entry.identifier in seen:
                continue
            seen.add(entry.identifier)
            (urls if entry.is_url else registry).append(entry)
        self._entries: tuple[PackageRef, ...] = (*registry, *urls)

    @classmethod
    def build(
        cls,
        scoped: Iterable[str] = (),
        default: Iterable[str] = (),
        url: Iterable[str] = (),
        large: Iterable[str] = (),
    ) -> "PackageCatalog":
        """Build a catalog from raw identifier lists.

        Blank entries are dropped and duplicates collapse onto their first
        occurrence.

        Args:
            scoped: Identifiers served by the scoped registry.
            default: Identifiers served by the default registry.
            url: URL/VCS locators.
            large: Identifiers that need the extended timeout.

        Returns:
            New PackageCatalog.
        """
        large_set = {name.strip() for name in large}
        refs: list[PackageRef] = []
        for names, scoped_flag in ((scoped, True), (default, False), (url, False)):
            for name in names:
                if not name or not name.strip():
                    continue
                refs.append(
                    PackageRef.from_identifier(
                        name, scoped=scoped_flag, large=name.strip() in large_set
                    )
                )
        return cls(refs)

    @property
    def entries(self) -> tuple[PackageRef, ...]:
        """All catalog entries in install order."""
        return self._entries

    def scopes(self) -> tuple[str, ...]:
        """Distinct scopes of the scoped-registry entries, first-seen order."""
        return tuple(dict.fromkeys(entry.scope for entry in self._entries if entry.is_scoped))

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[PackageRef]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> PackageRef:
        return self._entries[index]

    def __repr__(self) -> str:
        return f"PackageCatalog({[entry.identifier for entry in self._entries]!r})"
