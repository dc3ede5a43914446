"""Unit tests for the config command."""

from pathlib import Path

from pkgstrap.cli.main import app
from pkgstrap.core.config import InstallerConfig, load_config
from typer.testing import CliRunner

runner = CliRunner()


class TestConfigShow:
    """Tests for config show."""

    def test_shows_defaults(self, tmp_path: Path) -> None:
        """Without a file the defaults are printed as TOML."""
        result = runner.invoke(app, ["config", "show", "--project", str(tmp_path)])

        assert result.exit_code == 0
        assert "[registry]" in result.output
        assert "https://package.openupm.com" in result.output

    def test_shows_project_values(self, tmp_path: Path) -> None:
        """Values from pkgstrap.toml are shown."""
        (tmp_path / "pkgstrap.toml").write_text('[registry]\nname = "Mirror"\n')

        result = runner.invoke(app, ["config", "show", "--project", str(tmp_path)])

        assert result.exit_code == 0
        assert "Mirror" in result.output

    def test_explicit_missing_config(self, tmp_path: Path) -> None:
        """A missing --config file is an error."""
        result = runner.invoke(
            app,
            ["config", "show", "--project", str(tmp_path), "--config", str(tmp_path / "x.toml")],
        )

        assert result.exit_code == 1
        assert "Config not found" in result.output


class TestConfigInit:
    """Tests for config init."""

    def test_writes_default_config(self, tmp_path: Path) -> None:
        """init writes a loadable default config."""
        result = runner.invoke(app, ["config", "init", "--project", str(tmp_path)])

        assert result.exit_code == 0
        assert load_config(tmp_path / "pkgstrap.toml") == InstallerConfig()

    def test_refuses_to_overwrite(self, tmp_path: Path) -> None:
        """An existing file is kept unless --force is given."""
        path = tmp_path / "pkgstrap.toml"
        path.write_text('[registry]\nname = "Mine"\n')

        result = runner.invoke(app, ["config", "init", "--project", str(tmp_path)])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert "Mine" in path.read_text()

    def test_force_overwrites(self, tmp_path: Path) -> None:
        """--force replaces an existing file."""
        path = tmp_path / "pkgstrap.toml"
        path.write_text('[registry]\nname = "Mine"\n')

        result = runner.invoke(app, ["config", "init", "--project", str(tmp_path), "--force"])

        assert result.exit_code == 0
        assert load_config(path) == InstallerConfig()
