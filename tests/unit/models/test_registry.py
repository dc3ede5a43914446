"""Unit tests for scoped registry models."""

import pytest
from pkgstrap.models.registry import ScopedRegistry
from pydantic import ValidationError


class TestScopedRegistry:
    """Tests for ScopedRegistry validation and helpers."""

    def test_scopes_default_empty(self) -> None:
        """scopes defaults to an empty list."""
        registry = ScopedRegistry(name="OpenUPM", url="https://package.openupm.com")
        assert registry.scopes == []

    def test_extra_keys_preserved(self) -> None:
        """Unknown keys survive validation."""
        registry = ScopedRegistry.model_validate(
            {"name": "r", "url": "https://r", "scopes": [], "overrideBuiltIns": True}
        )
        assert registry.model_dump()["overrideBuiltIns"] is True

    def test_blank_scope_rejected(self) -> None:
        """Blank scopes fail validation."""
        with pytest.raises(ValidationError):
            ScopedRegistry(name="r", url="https://r", scopes=["org.a", " "])

    def test_missing_url_rejected(self) -> None:
        """url is required."""
        with pytest.raises(ValidationError):
            ScopedRegistry.model_validate({"name": "r"})

    def test_matches_url_ignores_trailing_slash(self) -> None:
        """Trailing slashes do not affect URL matching."""
        registry = ScopedRegistry(name="r", url="https://package.openupm.com/")
        assert registry.matches_url("https://package.openupm.com") is True
        assert registry.matches_url("https://other.example.com") is False

    def test_missing_scopes_preserves_order(self) -> None:
        """missing_scopes returns absent scopes in request order."""
        registry = ScopedRegistry(name="r", url="https://r", scopes=["com.coffee"])
        assert registry.missing_scopes(["org.b", "com.coffee", "org.a", "org.b"]) == [
            "org.b",
            "org.a",
        ]
