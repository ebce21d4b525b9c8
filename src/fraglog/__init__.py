"""
fraglog - Quake III Arena Server Log Analyzer

Reads a Quake III Arena `games.log` and summarizes every match: total kills,
net frags per player and kills grouped by means of death.

Usage:
    from fraglog import parse_log_file, render_report

    result = parse_log_file("games.log")
    for report in result.reports:
        print(render_report(report))
"""

__version__ = "0.1.0"
__author__ = "fraglog Contributors"


def __getattr__(name):
    """Lazy import so `import fraglog` stays cheap."""
    # Parser
    if name == "LogParser":
        from fraglog.parser import LogParser
        return LogParser
    elif name == "parse_log":
        from fraglog.parser import parse_log
        return parse_log
    elif name == "parse_log_file":
        from fraglog.parser import parse_log_file
        return parse_log_file
    # Data contracts
    elif name == "GameReport":
        from fraglog.core.schemas import GameReport
        return GameReport
    elif name == "ParseResult":
        from fraglog.core.schemas import ParseResult
        return ParseResult
    elif name == "DeathCause":
        from fraglog.core.causes import DeathCause
        return DeathCause
    elif name == "LogParseError":
        from fraglog.core.errors import LogParseError
        return LogParseError
    # Rendering
    elif name == "render_report":
        from fraglog.export import render_report
        return render_report
    elif name == "export_reports":
        from fraglog.export import export_reports
        return export_reports
    raise AttributeError(f"module 'fraglog' has no attribute '{name}'")


__all__ = [
    # Version
    "__version__",
    # Parser
    "LogParser",
    "parse_log",
    "parse_log_file",
    "GameReport",
    "ParseResult",
    "DeathCause",
    "LogParseError",
    "render_report",
    "export_reports",
]
