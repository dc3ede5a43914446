"""Installer configuration and settings.

This module provides the configuration model and I/O functions for the
installer. Configuration is stored in ``pkgstrap.toml`` at the root of the
host project; when the file is absent the built-in defaults describe the
stock package catalog.
"""

import logging
import os
import tomllib
from enum import Enum
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from pkgstrap.core.paths import DEFAULT_MANIFEST_RELPATH, get_project_config_path
from pkgstrap.models.catalog import PackageCatalog

logger = logging.getLogger(__name__)

IDENTIFIER_PLACEHOLDER = "{identifier}"

DEFAULT_SCOPED_PACKAGES: list[str] = [
    "jp.hadashikick.vcontainer",
    "com.cysharp.unitask",
    "com.coffee.softmask-for-ugui",
    "com.coffee.ui-effect",
    "com.coffee.ui-particle",
]

DEFAULT_URL_PACKAGES: list[str] = [
    "https://github.com/HuiSungz/UnityProjectCore.git",
]


class FailurePolicy(str, Enum):
    """What the orchestrator does after an entry fails or times out."""

    ADVANCE = "advance"
    HALT = "halt"


class RegistryConfig(BaseModel):
    """Scoped registry registered in the package manifest.

    Attributes:
        name: Display name written into a new registry entry.
        url: Registry base URL.
    """

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(min_length=1, description="Registry display name")] = "OpenUPM"
    url: Annotated[
        str, Field(min_length=1, description="Registry base URL")
    ] = "https://package.openupm.com"


class PackagesConfig(BaseModel):
    """Package lists that make up the catalog.

    Attributes:
        scoped: Packages served by the scoped registry.
        default: Packages served by the host's default registry.
        url: URL/VCS package locators.
        large: Packages that need the extended install timeout.
    """

    model_config = ConfigDict(extra="forbid")

    scoped: Annotated[
        list[str],
        Field(default_factory=lambda: list(DEFAULT_SCOPED_PACKAGES)),
    ]
    default: Annotated[list[str], Field(default_factory=list)]
    url: Annotated[
        list[str],
        Field(default_factory=lambda: list(DEFAULT_URL_PACKAGES)),
    ]
    large: Annotated[list[str], Field(default_factory=list)]


class TimeoutsConfig(BaseModel):
    """Per-source-kind operation timeouts in seconds."""

    model_config = ConfigDict(extra="forbid")

    registry: Annotated[float, Field(gt=0)] = 30.0
    registry_large: Annotated[float, Field(gt=0)] = 90.0
    url: Annotated[float, Field(gt=0)] = 60.0
    url_large: Annotated[float, Field(gt=0)] = 180.0
    removal: Annotated[float, Field(gt=0)] = 30.0


class ServiceConfig(BaseModel):
    """Command templates of the external package service.

    ``{identifier}`` in a template is replaced by the package identifier.

    Attributes:
        add: Command that installs one package.
        remove: Command that removes one package.
        list_installed: Command that prints installed package names, one per line.
    """

    model_config = ConfigDict(extra="forbid")

    add: Annotated[list[str], Field(min_length=1)] = ["openupm", "add", IDENTIFIER_PLACEHOLDER]
    remove: Annotated[list[str], Field(min_length=1)] = [
        "openupm",
        "remove",
        IDENTIFIER_PLACEHOLDER,
    ]
    list_installed: Annotated[list[str] | None, Field(description="Optional list command")] = None

    @model_validator(mode="after")
    def validate_placeholders(self) -> "ServiceConfig":
        """Require the identifier placeholder in add and remove commands."""
        for name in ("add", "remove"):
            command = getattr(self, name)
            if not any(IDENTIFIER_PLACEHOLDER in part for part in command):
                msg = f"service.{name} must contain {IDENTIFIER_PLACEHOLDER}"
                raise ValueError(msg)
        return self


class InstallerSettings(BaseModel):
    """Orchestrator behaviour.

    Attributes:
        manifest: Project-relative path of the JSON package manifest.
        step_delay: Seconds to wait between catalog entries.
        poll_interval: Seconds between scheduler ticks.
        failure_policy: Whether a failed entry is skipped or halts the run.
        state_prefix: Key prefix of the persisted progress entries.
        self_remove: Remove the installer's own package after success.
        package_name: Installer package name used for self-removal.
        package_json: Project-relative package.json naming the installer package.
    """

    model_config = ConfigDict(extra="forbid")

    manifest: str = DEFAULT_MANIFEST_RELPATH
    step_delay: Annotated[float, Field(ge=0)] = 0.5
    poll_interval: Annotated[float, Field(gt=0, le=10)] = 0.1
    failure_policy: FailurePolicy = FailurePolicy.ADVANCE
    state_prefix: Annotated[str, Field(min_length=1)] = "pkgstrap"
    self_remove: bool = True
    package_name: str | None = None
    package_json: str | None = None


class InstallerConfig(BaseModel):
    """Complete installer configuration."""

    model_config = ConfigDict(extra="forbid")

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    packages: PackagesConfig = Field(default_factory=PackagesConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    installer: InstallerSettings = Field(default_factory=InstallerSettings)

    def build_catalog(self) -> PackageCatalog:
        """Build the package catalog described by this configuration."""
        return PackageCatalog.build(
            scoped=self.packages.scoped,
            default=self.packages.default,
            url=self.packages.url,
            large=self.packages.large,
        )


class ConfigError(Exception):
    """Base exception for installer configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path) -> InstallerConfig:
    """Load installer configuration from a TOML file.

    Args:
        path: Path to the config file.

    Returns:
        Validated InstallerConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    if not path.exists():
        raise ConfigNotFoundError(f"Config not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return InstallerConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_project_config(project_dir: Path, path: Path | None = None) -> InstallerConfig:
    """Load the configuration for a project, falling back to defaults.

    An explicit ``path`` must exist. Without one, ``pkgstrap.toml`` in the
    project directory is used when present.

    Args:
        project_dir: Root directory of the host project.
        path: Optional explicit config file.

    Returns:
        Validated InstallerConfig object.

    Raises:
        ConfigError: If a config file exists but cannot be loaded.
    """
    if path is not None:
        return load_config(path)

    config_path = get_project_config_path(project_dir)
    if not config_path.exists():
        logger.debug("No %s found, using built-in defaults", config_path)
        return InstallerConfig()
    return load_config(config_path)


def save_config(config: InstallerConfig, path: Path) -> Path:
    """Save installer configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The InstallerConfig object to save.
        path: Path to save the config.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return path


def config_to_dict(config: InstallerConfig) -> dict[str, Any]:
    """Convert InstallerConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are omitted.
    """
    return config.model_dump(mode="json", exclude_none=True)
