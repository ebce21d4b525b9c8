"""Tests for report rendering and export."""

import csv
import json
from io import StringIO
from pathlib import Path

import pytest

from fraglog.core.causes import CauseTally, DeathCause
from fraglog.core.schemas import GameReport
from fraglog.export import (
    detect_format,
    export_reports,
    export_to_csv,
    export_to_json,
    render_report,
    render_reports,
    reports_to_dict,
)


@pytest.fixture
def report():
    """Report for the reference two-kill match."""
    means = CauseTally()
    means.increment(DeathCause.FALLING)
    means.increment(DeathCause.ROCKET)
    return GameReport.snapshot(
        game_number=0,
        total_kills=2,
        kills={"A": 1, "B": -1},
        players=["A", "B"],
        means=means,
    )


@pytest.fixture
def empty_report():
    """Report for a match without kills."""
    return GameReport.snapshot(1, 0, {}, [], CauseTally())


class TestRenderReport:
    """Tests for the text report."""

    def test_render(self, report):
        """Verify the full text layout."""
        expected = (
            '"game_0": {\n'
            '  "total_kills": 2,\n'
            '  "players": ["A", "B"],\n'
            '  "kills": {\n'
            '    "A": 1,\n'
            '    "B": -1\n'
            "  }\n"
            '  "kills_by_means": {\n'
            '    "MOD_ROCKET": 1,\n'
            '    "MOD_FALLING": 1\n'
            "  }\n"
            "}\n"
        )
        assert render_report(report) == expected

    def test_render_empty(self, empty_report):
        """Test a match without kills."""
        text = render_report(empty_report)
        assert '"game_1": {' in text
        assert '"total_kills": 0,' in text
        assert '"players": [],' in text
        assert '"kills": {  }' in text
        assert '"kills_by_means": {  }' in text

    def test_names_are_quoted(self):
        """Verify player names with quotes stay valid."""
        report = GameReport.snapshot(0, 1, {'Big "Boss"': 1}, ['Big "Boss"'], CauseTally())
        assert '"Big \\"Boss\\"": 1' in render_report(report)

    def test_render_reports(self, report, empty_report):
        """Test rendering several reports."""
        text = render_reports([report, empty_report])
        assert text.index("game_0") < text.index("game_1")


class TestJsonExport:
    """Tests for JSON export."""

    def test_reports_to_dict(self, report):
        """Test the game_N keyed mapping."""
        data = reports_to_dict([report])
        assert list(data) == ["game_0"]
        assert data["game_0"]["kills_by_means"] == {"MOD_ROCKET": 1, "MOD_FALLING": 1}

    def test_json_round_trip(self, report):
        """Verify the JSON decodes to the report fields."""
        data = json.loads(export_to_json([report]))
        assert data == {
            "game_0": {
                "total_kills": 2,
                "players": ["A", "B"],
                "kills": {"A": 1, "B": -1},
                "kills_by_means": {"MOD_ROCKET": 1, "MOD_FALLING": 1},
            }
        }

    def test_json_metadata(self, report):
        """Test the optional metadata block."""
        data = json.loads(export_to_json([report], include_metadata=True))
        assert data["_metadata"]["format"] == "fraglog_json"
        assert "game_0" in data

    def test_json_to_file(self, report, tmp_path):
        """Test writing the JSON file."""
        path = tmp_path / "out.json"
        export_to_json([report], output_path=path)
        assert json.loads(path.read_text(encoding="utf-8"))["game_0"]["total_kills"] == 2


class TestCsvExport:
    """Tests for CSV export."""

    def test_rows(self, report):
        """Verify one row per game and player."""
        rows = list(csv.DictReader(StringIO(export_to_csv([report]))))
        assert rows == [
            {"game": "0", "player": "A", "kills": "1", "total_kills": "2"},
            {"game": "0", "player": "B", "kills": "-1", "total_kills": "2"},
        ]

    def test_player_without_frags(self):
        """Verify players absent from the frag tally get 0."""
        report = GameReport.snapshot(0, 1, {"A": 1}, ["A", "C"], CauseTally())
        rows = list(csv.DictReader(StringIO(export_to_csv([report]))))
        assert rows[1]["kills"] == "0"

    def test_delimiter(self, report):
        """Test a custom delimiter."""
        assert export_to_csv([report], delimiter=";").splitlines()[0] == "game;player;kills;total_kills"


class TestExportReports:
    """Tests for format dispatch."""

    @pytest.mark.parametrize(
        "name,fmt",
        [("out.json", "json"), ("out.CSV", "csv"), ("out.txt", "text"), ("out", "text")],
    )
    def test_detect_format(self, name, fmt):
        """Test format detection from the extension."""
        assert detect_format(Path(name)) == fmt

    def test_text(self, report):
        """Verify the text format is the rendered report."""
        assert export_reports([report], fmt="text") == render_report(report)

    def test_text_to_file(self, report, tmp_path):
        """Test writing the text report."""
        path = tmp_path / "out.txt"
        export_reports([report], fmt="text", output_path=path)
        assert path.read_text(encoding="utf-8") == render_report(report)

    def test_unknown_format(self, report):
        """Verify unsupported formats raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported export format"):
            export_reports([report], fmt="xlsx")
