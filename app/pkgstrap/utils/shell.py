"""Shell execution utilities.

Provides subprocess helpers for the command package service. Commands are
started in the background and polled without waiting for them.
"""

import shutil
import subprocess
import tempfile
from dataclasses import dataclass
from typing import IO


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


class BackgroundCommand:
    """A command running in the background.

    Output is spooled to temporary files rather than pipes so a chatty
    child can never block on a full pipe while nobody is reading.
    """

    def __init__(self, args: list[str], *, cwd: str | None = None) -> None:
        """Start the command.

        Args:
            args: Command and arguments to execute.
            cwd: Working directory for the command.

        Raises:
            FileNotFoundError: If command executable is not found.
            OSError: If command cannot be executed.
        """
        self._args = args
        self._result: CommandResult | None = None
        self._closed = False
        self._stdout: IO[str] = tempfile.TemporaryFile(mode="w+", encoding="utf-8")
        self._stderr: IO[str] = tempfile.TemporaryFile(mode="w+", encoding="utf-8")
        try:
            self._process = subprocess.Popen(
                args,
                stdout=self._stdout,
                stderr=self._stderr,
                stdin=subprocess.DEVNULL,
                text=True,
                cwd=cwd,
            )
        except OSError:
            self._close()
            raise

    @property
    def args(self) -> list[str]:
        """Command and arguments being executed."""
        return self._args

    def poll(self) -> CommandResult | None:
        """Check for completion without blocking.

        Returns:
            CommandResult once the process has exited, None while it runs.
        """
        if self._result is not None:
            return self._result
        returncode = self._process.poll()
        if returncode is None:
            return None
        self._result = CommandResult(
            stdout=self._read(self._stdout),
            stderr=self._read(self._stderr),
            returncode=returncode,
        )
        self._close()
        return self._result

    def close(self) -> None:
        """Stop collecting output.

        The process keeps running. Later polls still report its exit code,
        with empty output.
        """
        if self._result is None:
            self._close()

    def _read(self, stream: IO[str]) -> str:
        if self._closed:
            return ""
        stream.seek(0)
        return stream.read()

    def _close(self) -> None:
        self._stdout.close()
        self._stderr.close()
        self._closed = True


def spawn_command(args: list[str], *, cwd: str | None = None) -> BackgroundCommand:
    """Start a command in the background.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.

    Returns:
        BackgroundCommand that can be polled for the result.

    Raises:
        FileNotFoundError: If command executable is not found.
        OSError: If command cannot be executed.
    """
    return BackgroundCommand(args, cwd=cwd)
