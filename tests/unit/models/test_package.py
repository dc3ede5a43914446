"""Unit tests for package reference models.

Tests for PackageRef, SourceKind and URL detection.
"""

import pytest
from pkgstrap.models.package import PackageRef, SourceKind, is_url_identifier


class TestIsUrlIdentifier:
    """Tests for is_url_identifier function."""

    @pytest.mark.parametrize(
        "identifier",
        [
            "https://github.com/HuiSungz/UnityProjectCore.git",
            "http://example.com/pkg",
            "git@github.com:org/repo.git",
            "git+https://example.com/repo",
            "file:../local-package",
            "ssh://git@example.com/repo",
        ],
    )
    def test_url_like_identifiers(self, identifier: str) -> None:
        """URL and VCS locators are detected."""
        assert is_url_identifier(identifier) is True

    @pytest.mark.parametrize("identifier", ["com.cysharp.unitask", "org.a.b", "single"])
    def test_registry_names(self, identifier: str) -> None:
        """Plain registry names are not URLs."""
        assert is_url_identifier(identifier) is False


class TestPackageRef:
    """Tests for PackageRef dataclass."""

    def test_create_scoped(self) -> None:
        """PackageRef stores identifier and kind."""
        ref = PackageRef("com.cysharp.unitask", SourceKind.SCOPED_REGISTRY)

        assert ref.identifier == "com.cysharp.unitask"
        assert ref.is_scoped is True
        assert ref.is_url is False
        assert ref.large is False

    def test_empty_identifier_rejected(self) -> None:
        """Empty identifiers raise ValueError."""
        with pytest.raises(ValueError, match="cannot be empty"):
            PackageRef("  ", SourceKind.SCOPED_REGISTRY)

    def test_url_identifier_requires_url_kind(self) -> None:
        """A URL cannot be declared as a registry package."""
        with pytest.raises(ValueError, match="URL source kind"):
            PackageRef("https://example.com/repo.git", SourceKind.DEFAULT_REGISTRY)

    def test_is_frozen(self) -> None:
        """PackageRef is immutable."""
        ref = PackageRef("org.a.b", SourceKind.SCOPED_REGISTRY)
        with pytest.raises(AttributeError):
            ref.identifier = "org.c.d"  # type: ignore[misc]

    def test_from_identifier_detects_url(self) -> None:
        """from_identifier derives URL kind regardless of the scoped flag."""
        ref = PackageRef.from_identifier("https://example.com/repo.git", scoped=True)
        assert ref.source_kind == SourceKind.URL

    def test_from_identifier_default_registry(self) -> None:
        """scoped=False yields a default-registry package."""
        ref = PackageRef.from_identifier("com.unity.textmeshpro", scoped=False)
        assert ref.source_kind == SourceKind.DEFAULT_REGISTRY

    def test_from_identifier_strips_whitespace(self) -> None:
        """Surrounding whitespace is dropped."""
        ref = PackageRef.from_identifier("  org.a.b  ", large=True)
        assert ref.identifier == "org.a.b"
        assert ref.large is True

    def test_scope_uses_first_two_components(self) -> None:
        """Scope is the first two dot-separated components."""
        assert PackageRef.from_identifier("com.coffee.ui-effect").scope == "com.coffee"

    def test_scope_of_short_identifier(self) -> None:
        """Identifiers with one component are their own scope."""
        assert PackageRef.from_identifier("single").scope == "single"
