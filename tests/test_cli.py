"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from fraglog import __version__
from fraglog.cli import app

LOG_TEXT = """\
  0:00 InitGame: \\sv_floodProtect\\1\\mapname\\q3dm17
  1:00 Kill: 1 2 3: Dono da Bola killed Zeh by MOD_ROCKET
  1:05 Kill: 1022 2 19: <world> killed Zeh by MOD_FALLING
  1:10 ShutdownGame:
  0:00 InitGame: \\sv_floodProtect\\1\\mapname\\q3dm6
  0:30 Kill: 2 3 10: Zeh killed Mal by MOD_RAILGUN
  0:40 ShutdownGame:
"""

BROKEN_TEXT = LOG_TEXT + "  0:00 InitGame:\n  0:10 Kill: 1 2 3: A killed B by MOD_SPORK\n"

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Run each command from an empty directory with no FRAGLOG_* settings."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    for var in ("FRAGLOG_EXPORT_FORMAT", "FRAGLOG_USE_MMAP", "FRAGLOG_LOG_FILE", "FRAGLOG_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def log_file(tmp_path):
    """Write a clean two-game log."""
    path = tmp_path / "games.log"
    path.write_text(LOG_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def broken_log(tmp_path):
    """Write a log whose third game has an unknown cause."""
    path = tmp_path / "broken.log"
    path.write_text(BROKEN_TEXT, encoding="utf-8")
    return path


class TestVersion:
    """Tests for global options."""

    def test_version(self):
        """Verify --version prints the version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestReportCommand:
    """Tests for the report command."""

    def test_text_report(self, log_file):
        """Test the default text output."""
        result = runner.invoke(app, ["report", str(log_file)])
        assert result.exit_code == 0
        assert '"game_0": {' in result.output
        assert '"game_1": {' in result.output
        assert '"Dono da Bola": 1' in result.output
        assert '"Zeh": -1' in result.output
        assert '"MOD_RAILGUN": 1' in result.output

    def test_json_report(self, log_file):
        """Test JSON output on stdout."""
        result = runner.invoke(app, ["report", str(log_file), "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["game_0"]["total_kills"] == 2
        assert data["game_1"]["kills"] == {"Zeh": 1}

    def test_csv_report(self, log_file):
        """Test CSV output on stdout."""
        result = runner.invoke(app, ["report", str(log_file), "-f", "csv"])
        assert result.exit_code == 0
        assert result.output.splitlines()[0] == "game,player,kills,total_kills"

    def test_output_file_format_from_suffix(self, log_file, tmp_path):
        """Verify the output extension picks the format."""
        out = tmp_path / "reports.json"
        result = runner.invoke(app, ["report", str(log_file), "--output", str(out)])
        assert result.exit_code == 0
        assert "game_1" in json.loads(out.read_text(encoding="utf-8"))

    @pytest.mark.parametrize("flags", [["--mmap"], ["--stream"], ["--no-mmap"]])
    def test_read_modes(self, log_file, flags):
        """Verify every read mode gives the same report."""
        plain = runner.invoke(app, ["report", str(log_file)])
        other = runner.invoke(app, ["report", str(log_file), *flags])
        assert other.exit_code == 0
        assert other.output == plain.output

    def test_unsupported_format(self, log_file):
        """Verify an unknown format is rejected."""
        result = runner.invoke(app, ["report", str(log_file), "--format", "xml"])
        assert result.exit_code == 2

    def test_missing_file(self, tmp_path):
        """Verify a missing log is a usage error."""
        result = runner.invoke(app, ["report", str(tmp_path / "nope.log")])
        assert result.exit_code == 2

    def test_partial_results_on_failure(self, broken_log):
        """Verify closed games are still printed when a line fails."""
        result = runner.invoke(app, ["report", str(broken_log)])
        assert result.exit_code == 1
        assert '"game_0": {' in result.output
        assert '"game_1": {' in result.output
        assert "game_2" not in result.output
        assert "MOD_SPORK" in result.output

    def test_config_file_format(self, log_file, tmp_path):
        """Verify the config file sets the default format."""
        config = tmp_path / "custom.yaml"
        config.write_text("export:\n  default_format: json\n  json_indent: 4\n")
        result = runner.invoke(app, ["report", str(log_file), "--config", str(config)])
        assert result.exit_code == 0
        assert json.loads(result.output)["game_0"]["total_kills"] == 2


class TestSummaryCommand:
    """Tests for the summary command."""

    def test_summary(self, log_file):
        """Test the summary table."""
        result = runner.invoke(app, ["summary", str(log_file)])
        assert result.exit_code == 0
        assert "game_0" in result.output
        assert "game_1" in result.output
        assert "2 games" in result.output

    def test_summary_failure(self, broken_log):
        """Verify the summary reports the parse failure."""
        result = runner.invoke(app, ["summary", str(broken_log)])
        assert result.exit_code == 1
        assert "game_1" in result.output


class TestInitConfigCommand:
    """Tests for the init-config command."""

    def test_writes_default(self, tmp_path):
        """Test writing the default YAML config."""
        path = tmp_path / "fraglog.yaml"
        result = runner.invoke(app, ["init-config", str(path)])
        assert result.exit_code == 0
        assert "parser:" in path.read_text()

    def test_refuses_overwrite(self, tmp_path):
        """Verify an existing file is kept unless --force is given."""
        path = tmp_path / "fraglog.yaml"
        path.write_text("keep me")
        result = runner.invoke(app, ["init-config", str(path)])
        assert result.exit_code == 1
        assert path.read_text() == "keep me"

        result = runner.invoke(app, ["init-config", str(path), "--force"])
        assert result.exit_code == 0
        assert "parser:" in path.read_text()

    def test_json_config(self, tmp_path):
        """Test writing a JSON config."""
        path = tmp_path / "fraglog.json"
        result = runner.invoke(app, ["init-config", str(path)])
        assert result.exit_code == 0
        assert json.loads(path.read_text())["export"]["default_format"] == "text"


class TestInfoCommand:
    """Tests for the info command."""

    def test_info(self):
        """Verify info shows the version."""
        result = runner.invoke(app, ["info"])
        assert result.exit_code == 0
        assert __version__ in result.output
