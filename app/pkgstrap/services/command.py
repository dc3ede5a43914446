"""Command-line package service implementation.

Drives the host package manager through configurable command templates,
each request running as a background subprocess.
"""

import logging
from pathlib import Path

from pkgstrap.core.config import IDENTIFIER_PLACEHOLDER, ServiceConfig
from pkgstrap.services.base import PackageService, Request, RequestStatus, ServiceError
from pkgstrap.utils.shell import BackgroundCommand, CommandResult, command_exists, spawn_command

logger = logging.getLogger(__name__)


class CommandRequest(Request):
    """Request backed by a background subprocess.

    The request completes when the process exits; exit code 0 is success.
    """

    def __init__(self, command: BackgroundCommand, *, parse_list: bool = False) -> None:
        self._command = command
        self._parse_list = parse_list

    def _poll(self) -> CommandResult | None:
        return self._command.poll()

    @property
    def is_completed(self) -> bool:
        return self._poll() is not None

    @property
    def status(self) -> RequestStatus:
        result = self._poll()
        if result is None:
            return RequestStatus.IN_PROGRESS
        return RequestStatus.SUCCESS if result.success else RequestStatus.FAILURE

    @property
    def error(self) -> str | None:
        result = self._poll()
        if result is None or result.success:
            return None
        detail = result.stderr.strip() or result.stdout.strip()
        return detail or f"{self._command.args[0]} exited with code {result.returncode}"

    @property
    def result(self) -> list[str]:
        result = self._poll()
        if result is None or not result.success or not self._parse_list:
            return []
        return parse_package_list(result.stdout)

    def release(self) -> None:
        self._command.close()


def parse_package_list(output: str) -> list[str]:
    """Parse package names from list command output.

    The first whitespace-separated token of each non-empty line is the
    package name; '@version' suffixes are stripped.

    Args:
        output: Raw stdout of the list command.

    Returns:
        Package names in output order.
    """
    names: list[str] = []
    for line in output.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        name = line.split()[0]
        if "@" in name[1:]:
            name = name[: name.index("@", 1)]
        names.append(name)
    return names


def render_command(template: list[str], identifier: str | None = None) -> list[str]:
    """Substitute the identifier placeholder in a command template.

    Args:
        template: Command template from configuration.
        identifier: Package identifier, if the command takes one.

    Returns:
        Command arguments ready to execute.
    """
    if identifier is None:
        return list(template)
    return [part.replace(IDENTIFIER_PLACEHOLDER, identifier) for part in template]


class CommandPackageService(PackageService):
    """Package service that shells out to a package manager CLI.

    Attributes:
        config: Command templates for add, remove and list.
        cwd: Working directory of every command (the host project).
    """

    def __init__(self, config: ServiceConfig, cwd: Path | None = None) -> None:
        self._config = config
        self._cwd = cwd

    def is_available(self) -> bool:
        """Check if the add command's executable is on PATH."""
        return command_exists(self._config.add[0])

    def _spawn(self, args: list[str]) -> BackgroundCommand:
        logger.debug("Spawning: %s", " ".join(args))
        try:
            return spawn_command(args, cwd=str(self._cwd) if self._cwd is not None else None)
        except FileNotFoundError as e:
            raise ServiceError(f"Command not found: {args[0]}") from e
        except OSError as e:
            raise ServiceError(f"Failed to run {args[0]}: {e}") from e

    def add(self, identifier: str) -> Request:
        return CommandRequest(self._spawn(render_command(self._config.add, identifier)))

    def remove(self, identifier: str) -> Request:
        return CommandRequest(self._spawn(render_command(self._config.remove, identifier)))

    def list_packages(self) -> Request:
        if self._config.list_installed is None:
            raise ServiceError("No list command configured")
        return CommandRequest(
            self._spawn(render_command(self._config.list_installed)), parse_list=True
        )
