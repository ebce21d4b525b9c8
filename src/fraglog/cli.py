"""
fraglog CLI - Command Line Interface for Quake III log analysis

Provides commands for:
- Rendering per-match reports (text, JSON, CSV)
- Summarizing a log as a table
- Generating a default configuration file
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from fraglog import __version__
from fraglog.core.config import (
    FraglogConfig,
    LoggingConfig,
    generate_default_config,
    load_config,
)
from fraglog.core.schemas import ParseResult
from fraglog.export import EXPORT_FORMATS, detect_format, export_reports
from fraglog.parser import parse_log_file

app = typer.Typer(
    name="fraglog",
    help="Quake III Arena log analyzer - kills, frags and means of death per match",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def configure_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """Set up root logging from the logging section of the config."""
    level = logging.DEBUG if verbose else getattr(logging, config.level.upper(), logging.WARNING)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.file:
        handlers.append(
            RotatingFileHandler(
                config.file,
                maxBytes=config.file_max_bytes,
                backupCount=config.file_backup_count,
            )
        )

    logging.basicConfig(level=level, format=config.format, handlers=handlers, force=True)


def _setup(ctx: typer.Context, config_file: Optional[Path]) -> FraglogConfig:
    config = load_config(config_file)
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    configure_logging(config.logging, verbose=verbose)
    return config


def _parse(log_path: Path, config: FraglogConfig, use_mmap: Optional[bool], stream: bool) -> ParseResult:
    return parse_log_file(
        log_path,
        use_mmap=config.parser.use_mmap if use_mmap is None else use_mmap,
        streaming=stream,
        encoding=config.parser.encoding,
        errors=config.parser.encoding_errors,
    )


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]fraglog[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-V",
        help="Enable verbose output"
    )
) -> None:
    """fraglog - Quake III Arena Log Analyzer"""
    ctx.obj = {"verbose": verbose}


@app.command()
def report(
    ctx: typer.Context,
    log_path: Path = typer.Argument(
        ...,
        help="Path to the games.log file to analyze",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    fmt: Optional[str] = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format: text, json, csv (default: from --output extension or config)"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the reports to this file instead of stdout"
    ),
    use_mmap: Optional[bool] = typer.Option(
        None,
        "--mmap/--no-mmap",
        help="Memory-map the log file instead of reading it"
    ),
    stream: bool = typer.Option(
        False,
        "--stream",
        help="Read the log line by line instead of loading it whole"
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (YAML, TOML or JSON)"
    ),
) -> None:
    """
    Print one report per match found in a log.

    Each report lists the total kills, the players, their net frags (world
    kills count against the victim) and kills grouped by means of death.

    If a line cannot be parsed, the reports of every match closed before it
    are written to stderr and the command exits with status 1.
    """
    config = _setup(ctx, config_file)

    if fmt is None:
        default = config.export.default_format
        fmt = detect_format(output, default) if output else default
    if fmt not in EXPORT_FORMATS:
        err_console.print(f"[red]Error:[/red] unsupported format {fmt!r}, use one of {', '.join(EXPORT_FORMATS)}")
        raise typer.Exit(2)

    result = _parse(log_path, config, use_mmap, stream)

    rendered = export_reports(
        result.reports,
        fmt=fmt,
        output_path=output,
        json_indent=config.export.json_indent,
        csv_delimiter=config.export.csv_delimiter,
        include_metadata=config.export.include_metadata,
    )

    if result.ok:
        if output:
            console.print(f"[green]Wrote {len(result.reports)} report(s) to[/green] {output}")
        else:
            typer.echo(rendered, nl=False)
        return

    # Dump what was parsed before the failing line
    if not output:
        typer.echo(rendered, nl=False, err=True)
    err_console.print(f"[red]Error:[/red] {escape(str(result.error))}")
    err_console.print(
        f"[yellow]Failed to parse the entire file, "
        f"{len(result.reports)} complete game(s) reported[/yellow]"
    )
    raise typer.Exit(1)


@app.command()
def summary(
    ctx: typer.Context,
    log_path: Path = typer.Argument(
        ...,
        help="Path to the games.log file to analyze",
        exists=True,
        dir_okay=False,
        resolve_path=True,
    ),
    config_file: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (YAML, TOML or JSON)"
    ),
) -> None:
    """
    Show a one-row-per-match overview of a log.
    """
    config = _setup(ctx, config_file)
    result = _parse(log_path, config, None, False)

    table = Table(title=f"Games in {log_path.name}")
    table.add_column("Game", style="cyan")
    table.add_column("Kills", justify="right")
    table.add_column("Players", justify="right")
    table.add_column("Top Fragger", style="green")
    table.add_column("Top Cause", style="magenta")

    for game in result.reports:
        top = game.top_fragger
        top_text = f"{escape(top[0])} ({top[1]})" if top else "-"
        causes = sorted(game.means.iter_nonzero(), key=lambda item: item[1], reverse=True)
        cause_text = f"{causes[0][0].keyword} ({causes[0][1]})" if causes else "-"
        table.add_row(
            game.name,
            str(game.total_kills),
            str(len(game.players)),
            top_text,
            cause_text,
        )

    console.print(table)
    total = sum(game.total_kills for game in result.reports)
    console.print(f"\n[bold]{len(result.reports)}[/bold] games, [bold]{total}[/bold] kills")

    if not result.ok:
        err_console.print(f"[red]Error:[/red] {escape(str(result.error))}")
        raise typer.Exit(1)


@app.command("init-config")
def init_config(
    path: Path = typer.Argument(
        Path("fraglog.yaml"),
        help="Where to write the configuration (.yaml, .yml or .json)",
        dir_okay=False,
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Overwrite an existing file"
    ),
) -> None:
    """
    Write a configuration file with the default settings.
    """
    if path.exists() and not force:
        err_console.print(f"[red]Error:[/red] {path} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    try:
        generate_default_config(path)
    except ValueError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    console.print(
        Panel(
            f"[cyan]Config written to:[/cyan] {path}",
            title="[bold blue]fraglog[/bold blue]",
            expand=False,
        )
    )


@app.command()
def info() -> None:
    """
    Display information about fraglog and the environment.
    """
    import platform as plat

    console.print(f"\n[bold blue]fraglog[/bold blue] v{__version__}\n")

    table = Table(show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Python", plat.python_version())
    table.add_row("Platform", plat.system())
    table.add_row("Architecture", plat.machine())

    # Check for optional dependencies
    try:
        import yaml
        table.add_row("pyyaml", getattr(yaml, "__version__", "installed"))
    except ImportError:
        table.add_row("pyyaml", "[red]not installed[/red]")

    console.print(table)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
