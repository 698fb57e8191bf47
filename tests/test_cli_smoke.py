"""Smoke tests for CLI commands.

Uses Click's CliRunner against real patch files in a temp directory.
Every invocation passes --log-file and --config-file so nothing is
written to the home directory.
"""

import json

import pytest
from click.testing import CliRunner

from rdmpatcher.cli.main import cli


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def invoke(runner, temp_dir):
    """Invoke the CLI with logging and config kept inside temp_dir."""
    def run(*args, **kwargs):
        base = [
            "--log-file", str(temp_dir / "test.log"),
            "--config-file", str(temp_dir / "config.json"),
        ]
        return runner.invoke(cli, base + [str(a) for a in args], **kwargs)
    return run


@pytest.mark.integration
class TestCLIHelp:
    """Test that all commands have working help text."""

    def test_main_help(self, runner):
        """Test main CLI help displays."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "RDM Patcher" in result.output

    def test_version_flag(self, runner):
        """Test --version flag works."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    @pytest.mark.parametrize("command", ["show", "lanes", "move", "drop", "edit", "config"])
    def test_command_help(self, runner, command):
        result = runner.invoke(cli, [command, "--help"])
        assert result.exit_code == 0


@pytest.mark.integration
class TestShowCommands:
    """Read-only commands."""

    def test_show(self, invoke, patch_file):
        result = invoke("show", patch_file)
        assert result.exit_code == 0
        assert "Universe 3: 3 devices in 2 lane(s)" in result.output
        assert "[Dimmer" in result.output
        assert "{Strobe" in result.output
        assert "overflows the 512 slot limit" in result.output

    def test_show_all_rows(self, invoke, patch_file):
        result = invoke("show", patch_file, "--all-rows", "--cell-width", "4")
        assert result.exit_code == 0
        assert " 256 " in result.output

    def test_lanes(self, invoke, patch_file):
        result = invoke("lanes", patch_file)
        assert result.exit_code == 0
        assert "2 lane(s)" in result.output
        assert "lane 1    5-7    b  Spot" in result.output
        assert "z  Strobe  OVERFLOW" in result.output

    def test_missing_patch_file(self, invoke, temp_dir):
        result = invoke("show", temp_dir / "missing.json")
        assert result.exit_code != 0

    def test_invalid_patch_file(self, invoke, temp_dir):
        path = temp_dir / "bad.json"
        path.write_text('{"devices": [],}')
        result = invoke("show", path)
        assert result.exit_code == 1
        assert "ERROR: Configuration file has a trailing comma" in result.output


@pytest.mark.integration
class TestEditCommands:
    """Commands that change the patch file."""

    def test_move(self, invoke, patch_file):
        result = invoke("move", patch_file, "a", "17")
        assert result.exit_code == 0
        assert "Moved Dimmer to 17" in result.output

        data = json.loads(patch_file.read_text())
        assert data["devices"][0]["start_address"] == 17

    @pytest.mark.parametrize("address", ["0", "513", "abc"])
    def test_move_invalid_address(self, invoke, patch_file, address):
        before = patch_file.read_text()
        result = invoke("move", patch_file, "a", address)
        assert result.exit_code == 1
        assert "Must be between 1 and 512" in result.output
        assert patch_file.read_text() == before

    def test_move_unknown_device(self, invoke, patch_file):
        result = invoke("move", patch_file, "nope", "17")
        assert result.exit_code == 1
        assert "Device nope not found" in result.output

    def test_drop(self, invoke, patch_file):
        """Two lanes make 42px rows, so y=84 lands on the third row."""
        result = invoke("drop", patch_file, "b", "0", "84", "--row-width", "400")
        assert result.exit_code == 0
        assert "Dropped Spot at 17" in result.output

        data = json.loads(patch_file.read_text())
        assert data["devices"][1]["start_address"] == 17


@pytest.mark.integration
class TestConfigCommands:
    """Test config subcommands."""

    def test_config_path(self, invoke, temp_dir):
        result = invoke("config", "path")
        assert result.exit_code == 0
        assert str(temp_dir / "config.json") in result.output

    def test_config_show_defaults(self, invoke):
        result = invoke("config", "show")
        assert result.exit_code == 0
        assert '"slots_per_row": 8' in result.output

    def test_config_reset(self, invoke, temp_dir):
        result = invoke("config", "reset", "--yes")
        assert result.exit_code == 0
        assert (temp_dir / "config.json").exists()

    def test_config_changes_layout(self, invoke, temp_dir, patch_file):
        (temp_dir / "config.json").write_text(json.dumps({
            "address_space": {"total_slots": 512, "slots_per_row": 16},
        }))
        result = invoke("show", patch_file)
        assert result.exit_code == 0
        assert " 16 " in result.output.splitlines()[2]
