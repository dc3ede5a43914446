"""Scoped registry models.

Pydantic models describing the ``scopedRegistries`` block of a package
manifest document.
"""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ScopedRegistry(BaseModel):
    """One scoped registry entry of the manifest.

    Unknown keys are kept so that entries written by other tools survive
    a round trip through the patcher.

    Attributes:
        name: Display name of the registry.
        url: Registry base URL.
        scopes: Package-name scopes served by this registry.
    """

    model_config = ConfigDict(extra="allow")

    name: Annotated[str, Field(description="Registry display name")]
    url: Annotated[str, Field(min_length=1, description="Registry base URL")]
    scopes: Annotated[
        list[str],
        Field(default_factory=list, description="Package scopes served by the registry"),
    ]

    @field_validator("scopes")
    @classmethod
    def validate_scopes(cls, v: list[str]) -> list[str]:
        """Reject blank scope strings."""
        for scope in v:
            if not scope.strip():
                msg = "Registry scopes cannot be blank"
                raise ValueError(msg)
        return v

    def matches_url(self, url: str) -> bool:
        """Check if this entry points at the given registry URL.

        Trailing slashes are ignored.
        """
        return self.url.rstrip("/") == url.rstrip("/")

    def missing_scopes(self, scopes: tuple[str, ...] | list[str]) -> list[str]:
        """Scopes from ``scopes`` not yet declared by this entry, in order."""
        present = set(self.scopes)
        return [scope for scope in dict.fromkeys(scopes) if scope not in present]
