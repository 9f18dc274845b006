"""levelgraph CLI - debug harness for progression on backup files."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table
from structlog.contextvars import bind_contextvars, clear_contextvars

from levelgraph.config import ConfigError, ProgressionConfig, load_config
from levelgraph.errors import BackupFormatError
from levelgraph.graph import empty_graph, normalize_label
from levelgraph.observability import configure_logging, get_logger
from levelgraph.portability import Backup, export_snapshot, parse_backup
from levelgraph.progression import (
    calculate_direct_progression,
    get_exp_for_level,
    get_exp_progress,
    get_level_for_exp,
    initial_statistics,
    process_manual_entry,
)

if TYPE_CHECKING:
    from levelgraph.graph import GraphState
    from levelgraph.progression import PlayerStatistics, ProgressionResult

app = typer.Typer(
    name="levelgraph",
    help="levelgraph: concept-graph experience propagation.",
    no_args_is_help=True,
)
console = Console()
log = get_logger(__name__)

_config_path: Path | None = None


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity: -v for INFO, -vv for DEBUG.",
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to levelgraph.yaml (or a directory containing it).",
            envvar="LEVELGRAPH_CONFIG",
        ),
    ] = None,
    log_file: Annotated[
        Path | None,
        typer.Option("--log", help="Append every event as JSON lines to this file."),
    ] = None,
) -> None:
    """levelgraph: concept-graph experience propagation."""
    global _config_path
    _config_path = config
    configure_logging(verbosity=verbose, log_file=log_file)
    clear_contextvars()
    bind_contextvars(command=ctx.invoked_subcommand)


def _load_config() -> ProgressionConfig:
    try:
        return load_config(_config_path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _read_backup(path: Path) -> Backup:
    bind_contextvars(backup=str(path))
    if not path.exists():
        console.print(f"[red]Error:[/red] Backup not found: {path}")
        console.print("Create one with: levelgraph init <file>")
        raise typer.Exit(1)
    try:
        return parse_backup(path.read_text(encoding="utf-8"))
    except BackupFormatError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from e


def _write_backup(path: Path, graph: GraphState, stats: PlayerStatistics) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(export_snapshot(graph, stats), encoding="utf-8")
    log.info("backup_written", path=str(path), nodes=len(graph.nodes))


def _print_result(result: ProgressionResult) -> None:
    table = Table(title="Experience awarded")
    table.add_column("Node")
    table.add_column("EXP", justify="right")
    table.add_column("Total", justify="right")
    table.add_column("Level", justify="right")

    by_key = {normalize_label(label): stats for label, stats in result.next_stats.items()}
    for label, amount in sorted(result.node_increases.items(), key=lambda kv: -kv[1]):
        stats = by_key.get(normalize_label(label))
        table.add_row(
            label,
            f"+{amount:g}",
            f"{stats.experience:g}" if stats else "-",
            str(stats.level) if stats else "-",
        )

    console.print(table)
    console.print(
        f"Total: [bold]{result.total_increase:g}[/bold] EXP, "
        f"[bold]{result.levels_gained}[/bold] level(s) gained"
    )


@app.command()
def version() -> None:
    """Show version information."""
    from levelgraph import __version__

    console.print(f"levelgraph v{__version__}")


@app.command()
def init(
    backup: Annotated[Path, typer.Argument(help="Backup file to create")],
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing file.")] = False,
) -> None:
    """Create a fresh backup holding only the progression root."""
    bind_contextvars(backup=str(backup))
    if backup.exists() and not force:
        console.print(f"[red]Error:[/red] {backup} already exists (use --force)")
        raise typer.Exit(1)

    config = _load_config()
    _write_backup(
        backup,
        empty_graph(config.root_id, config.root_label),
        initial_statistics(config.root_label),
    )
    console.print(f"[green]Created[/green] {backup}")


@app.command()
def inject(
    backup: Annotated[Path, typer.Argument(help="Backup file to update")],
    actions: Annotated[list[str], typer.Argument(help="Action labels to seed")],
    exp: Annotated[float, typer.Option("--exp", help="EXP seeded per action.")] = 1.0,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show the result without saving.")
    ] = False,
) -> None:
    """Inject a flat amount of EXP per action (no duration scaling)."""
    restored = _read_backup(backup)
    result = calculate_direct_progression(
        restored.graph, restored.player_statistics, actions, exp
    )
    _print_result(result)
    if not dry_run:
        _write_backup(backup, restored.graph, result.next_stats)


@app.command(name="log")
def log_entry(
    backup: Annotated[Path, typer.Argument(help="Backup file to update")],
    actions: Annotated[list[str], typer.Argument(help="Action labels performed")],
    duration: Annotated[
        str | None,
        typer.Option("--duration", "-d", help="Duration, e.g. 45, 45m or 1h30m."),
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", help="Show the result without saving.")
    ] = False,
) -> None:
    """Log a manual entry: add unknown actions to the graph and award EXP."""
    config = _load_config()
    restored = _read_backup(backup)
    outcome = process_manual_entry(
        restored.graph, restored.player_statistics, actions, duration, config=config
    )
    _print_result(outcome.result)
    if not dry_run:
        _write_backup(backup, outcome.graph, outcome.result.next_stats)


@app.command()
def levels(
    exp: Annotated[float, typer.Argument(help="Cumulative experience")],
) -> None:
    """Show the level, progress and next threshold for an EXP total."""
    level = get_level_for_exp(exp)
    console.print(f"Level: [bold]{level}[/bold]")
    console.print(f"Progress: {get_exp_progress(exp):.2%}")
    console.print(f"Next level at: {get_exp_for_level(level + 1)} EXP")
