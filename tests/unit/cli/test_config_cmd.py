"""Unit tests for configuration CLI commands."""

import json
from pathlib import Path

from filedeck.cli.main import app
from filedeck.core.config import load_config
from typer.testing import CliRunner

runner = CliRunner()


class TestConfigShow:
    """Tests for filedeck config show."""

    def test_show_defaults_json(self) -> None:
        """Without a file the defaults are shown."""
        result = runner.invoke(app, ["config", "show", "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["search_max_depth"] == 5
        assert data["use_trash"] is True

    def test_show_table(self) -> None:
        """Table output lists setting names."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "retry_attempts" in result.stdout

    def test_invalid_config_file(self, isolated_config_home: Path) -> None:
        """A broken config file exits with code 1."""
        config_dir = isolated_config_home / "filedeck"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("= broken")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 1
        assert "Invalid TOML" in result.output


class TestConfigInit:
    """Tests for filedeck config init."""

    def test_init_writes_defaults(self, isolated_config_home: Path) -> None:
        """init creates the config file."""
        result = runner.invoke(app, ["config", "init"])

        path = isolated_config_home / "filedeck" / "config.toml"
        assert result.exit_code == 0
        assert path.exists()
        assert load_config(path).retry_attempts == 3

    def test_init_keeps_existing(self, isolated_config_home: Path) -> None:
        """init refuses to overwrite without --force."""
        config_dir = isolated_config_home / "filedeck"
        config_dir.mkdir()
        path = config_dir / "config.toml"
        path.write_text("show_hidden = true\n")

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        assert "already exists" in result.stdout
        assert path.read_text() == "show_hidden = true\n"

    def test_init_force(self, isolated_config_home: Path) -> None:
        """--force overwrites the existing file."""
        config_dir = isolated_config_home / "filedeck"
        config_dir.mkdir()
        path = config_dir / "config.toml"
        path.write_text("show_hidden = true\n")

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0
        assert load_config(path).show_hidden is False
