"""Unit tests for shell execution utilities."""

import sys
import time
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pkgstrap.utils.shell import BackgroundCommand, CommandResult, command_exists, spawn_command


def _wait(command: BackgroundCommand, timeout: float = 10.0) -> CommandResult:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        result = command.poll()
        if result is not None:
            return result
        time.sleep(0.01)
    raise AssertionError("command did not finish")


class TestCommandResult:
    """Tests for CommandResult."""

    def test_success(self) -> None:
        """Exit code 0 is success."""
        assert CommandResult("", "", 0).success is True
        assert CommandResult("", "", 2).success is False


class TestCommandExists:
    """Tests for command_exists."""

    @patch("pkgstrap.utils.shell.shutil.which", return_value="/usr/bin/openupm")
    def test_found(self, mock_which: MagicMock) -> None:
        """A command on PATH exists."""
        assert command_exists("openupm") is True

    @patch("pkgstrap.utils.shell.shutil.which", return_value=None)
    def test_missing(self, mock_which: MagicMock) -> None:
        """A command not on PATH does not exist."""
        assert command_exists("openupm") is False


class TestBackgroundCommand:
    """Tests for BackgroundCommand."""

    def test_captures_output(self) -> None:
        """stdout, stderr and the exit code are captured."""
        command = spawn_command(
            [sys.executable, "-c", "import sys; print('out'); print('err', file=sys.stderr)"]
        )

        result = _wait(command)

        assert result.stdout.strip() == "out"
        assert result.stderr.strip() == "err"
        assert result.returncode == 0

    def test_nonzero_exit(self) -> None:
        """A failing command reports its exit code."""
        result = _wait(spawn_command([sys.executable, "-c", "raise SystemExit(4)"]))
        assert result.returncode == 4

    def test_result_cached(self) -> None:
        """Polling after exit returns the same result."""
        command = spawn_command([sys.executable, "-c", "pass"])
        first = _wait(command)
        assert command.poll() is first

    def test_poll_does_not_block(self) -> None:
        """A running command polls as None."""
        command = spawn_command([sys.executable, "-c", "import time; time.sleep(5)"])
        try:
            assert command.poll() is None
        finally:
            command._process.kill()  # noqa: SLF001
            _wait(command)

    def test_missing_executable(self) -> None:
        """A missing executable raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            spawn_command(["definitely-not-a-real-command-pkgstrap"])

    def test_runs_in_cwd(self, tmp_path: Path) -> None:
        """The command runs in the given directory."""
        command = spawn_command(
            [sys.executable, "-c", "import os; print(os.getcwd())"], cwd=str(tmp_path)
        )
        assert _wait(command).stdout.strip() == str(tmp_path)

    def test_spools_closed_after_exit(self) -> None:
        """Output spool files are closed once the result is read."""
        command = spawn_command([sys.executable, "-c", "print('out')"])
        _wait(command)

        assert command._stdout.closed is True  # noqa: SLF001
        assert command._stderr.closed is True  # noqa: SLF001

    def test_close_while_running(self) -> None:
        """Closing a running command drops its output but keeps the exit code."""
        command = spawn_command([sys.executable, "-c", "import time; time.sleep(5)"])
        command.close()
        assert command._stdout.closed is True  # noqa: SLF001

        command._process.terminate()  # noqa: SLF001
        result = _wait(command)

        assert result.stdout == ""
        assert result.returncode != 0
