"""
Report Rendering and Export for fraglog

Provides multiple output formats for game reports:
- Text (the classic `"game_N": {...}` block per match)
- JSON
- CSV (one row per game and player)
"""

import csv
import json
import logging
from collections.abc import Iterable
from datetime import datetime
from io import StringIO
from pathlib import Path
from typing import Any, Optional

from fraglog import __version__
from fraglog.core.schemas import GameReport

logger = logging.getLogger(__name__)

INDENT = " " * 2

CSV_FIELDS = ["game", "player", "kills", "total_kills"]


# ============================================================================
# Text Report
# ============================================================================


def _render_mapping(name: str, mapping: dict[str, int]) -> list[str]:
    """Render a `"name": {...}` block, one entry per line."""
    if not mapping:
        # Classic layout keeps an empty block on one line: "kills": {  }
        return [f'{INDENT}"{name}": {{{INDENT}}}']

    entries = [f"{INDENT * 2}{json.dumps(key)}: {value}" for key, value in mapping.items()]
    return [f'{INDENT}"{name}": {{', ",\n".join(entries), f"{INDENT}}}"]


def render_report(report: GameReport) -> str:
    """
    Render one report as text.

    Example:
        "game_0": {
          "total_kills": 2,
          "players": ["A", "B"],
          "kills": {
            "A": 1,
            "B": -1
          }
          "kills_by_means": {
            "MOD_ROCKET": 1,
            "MOD_FALLING": 1
          }
        }
    """
    players = json.dumps(list(report.players))
    lines = [
        f'"{report.name}": {{',
        f'{INDENT}"total_kills": {report.total_kills},',
        f'{INDENT}"players": {players},',
        *_render_mapping("kills", dict(report.kills)),
        *_render_mapping("kills_by_means", report.kills_by_means),
        "}",
    ]
    return "\n".join(lines) + "\n"


def render_reports(reports: Iterable[GameReport]) -> str:
    """Render every report, one text block after the other."""
    return "\n".join(render_report(report) for report in reports)


# ============================================================================
# JSON Export
# ============================================================================


def reports_to_dict(reports: Iterable[GameReport]) -> dict[str, Any]:
    """Map `game_N` -> report fields."""
    return {report.name: report.to_dict() for report in reports}


def export_to_json(
    reports: Iterable[GameReport],
    output_path: Optional[Path] = None,
    indent: int = 2,
    include_metadata: bool = False,
) -> str:
    """
    Export reports to JSON format.

    Args:
        reports: Game reports to export
        output_path: Optional path to write the file
        indent: JSON indentation level
        include_metadata: Whether to include export metadata

    Returns:
        JSON string
    """
    export_data: dict[str, Any] = reports_to_dict(reports)

    if include_metadata:
        export_data = {
            "_metadata": {
                "exported_at": datetime.now().isoformat(),
                "format": "fraglog_json",
                "version": __version__,
            },
            **export_data,
        }

    json_str = json.dumps(export_data, indent=indent, ensure_ascii=False)

    if output_path:
        output_path.write_text(json_str, encoding="utf-8")
        logger.info(f"Exported JSON to {output_path}")

    return json_str


# ============================================================================
# CSV Export
# ============================================================================


def export_to_csv(
    reports: Iterable[GameReport],
    output_path: Optional[Path] = None,
    delimiter: str = ",",
) -> str:
    """
    Export net frags to CSV, one row per (game, player).

    Players that appear in a game without a frag entry get 0.

    Args:
        reports: Game reports to export
        output_path: Optional path to write the file
        delimiter: CSV field delimiter

    Returns:
        CSV string
    """
    output = StringIO()
    writer = csv.DictWriter(output, fieldnames=CSV_FIELDS, delimiter=delimiter, lineterminator="\n")
    writer.writeheader()

    for report in reports:
        for player in report.players:
            writer.writerow(
                {
                    "game": report.game_number,
                    "player": player,
                    "kills": report.kills.get(player, 0),
                    "total_kills": report.total_kills,
                }
            )

    csv_str = output.getvalue()

    if output_path:
        output_path.write_text(csv_str, encoding="utf-8")
        logger.info(f"Exported CSV to {output_path}")

    return csv_str


# ============================================================================
# Dispatch
# ============================================================================

EXPORT_FORMATS = ("text", "json", "csv")

_SUFFIX_FORMATS = {".json": "json", ".csv": "csv", ".txt": "text", ".log": "text"}


def detect_format(path: Path, default: str = "text") -> str:
    """Pick an export format from a file extension."""
    return _SUFFIX_FORMATS.get(path.suffix.lower(), default)


def export_reports(
    reports: list[GameReport],
    fmt: str = "text",
    output_path: Optional[Path] = None,
    json_indent: int = 2,
    csv_delimiter: str = ",",
    include_metadata: bool = False,
) -> str:
    """
    Render reports in the requested format.

    Args:
        reports: Game reports to export
        fmt: One of "text", "json", "csv"
        output_path: Optional path to write the result to

    Returns:
        The rendered string

    Raises:
        ValueError: If the format is not supported
    """
    if fmt == "json":
        return export_to_json(reports, output_path, indent=json_indent, include_metadata=include_metadata)
    elif fmt == "csv":
        return export_to_csv(reports, output_path, delimiter=csv_delimiter)
    elif fmt == "text":
        text = render_reports(reports)
        if output_path:
            output_path.write_text(text, encoding="utf-8")
            logger.info(f"Exported report to {output_path}")
        return text
    else:
        raise ValueError(f"Unsupported export format: {fmt}")
