"""Command-line interface for CommitLens."""

import asyncio
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from commitlens.coordinator import UpdateCoordinator
from commitlens.extraction import Dataset, load_dataset_async
from commitlens.filtering import BrushPhase, FilterEngine
from commitlens.log import configure_logging
from commitlens.models import Settings
from commitlens.rendering import ConsoleRenderer
from commitlens.reporting import AggregateReporter
from commitlens.visualization import CoordinateMapper

app = typer.Typer(
    name="commitlens",
    help="Commit activity analytics over per-line history logs",
    add_completion=False,
)
console = Console()

EXPLORE_HELP = """[bold]Commands[/bold]
  cutoff N            time slider position, 0-100
  until ISO           time cutoff as a timestamp (or 'none')
  brush X0 Y0 X1 Y1   rectangular selection in plot pixels
  clear [brush|time]  remove one or both filters
  show ID             commit details
  quit"""


@app.callback()
def main_callback(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Log level (default from settings)"),
) -> None:
    """Commit activity analytics over per-line history logs."""
    configure_logging(log_level or Settings().log_level)


def _settings(commit_key: Optional[str], repo_url: Optional[str]) -> Settings:
    settings = Settings()
    updates = {}
    if commit_key:
        updates["commit_key"] = commit_key
    if repo_url:
        updates["repository_url"] = repo_url
    return settings.model_copy(update=updates)


def _load(csv_path: Path, settings: Settings) -> Dataset:
    dataset = asyncio.run(load_dataset_async(csv_path, settings))
    skipped = dataset.normalization.rows_skipped
    if skipped:
        console.print(f"[yellow]Skipped {skipped} unusable rows[/yellow]")
    if dataset.is_empty:
        console.print("[yellow]No data:[/yellow] no commits could be built from this file")
    return dataset


def parse_brush(value: str) -> Tuple[float, float, float, float]:
    """Parse ``x0,y0,x1,y1`` into four floats."""
    parts = [p for p in value.replace(",", " ").split() if p]
    if len(parts) != 4:
        raise ValueError(f"Brush needs four coordinates x0,y0,x1,y1: {value!r}")
    x0, y0, x1, y1 = (float(p) for p in parts)
    return x0, y0, x1, y1


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO timestamp or date; ``none`` removes the cutoff."""
    if value.strip().lower() in ("none", "off", ""):
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise ValueError(f"Not an ISO timestamp: {value!r}") from None


def _session(
    dataset: Dataset, settings: Settings, show_scatter: bool = True, width: int = 60
) -> Tuple[FilterEngine, UpdateCoordinator, ConsoleRenderer]:
    mapper = CoordinateMapper(settings.layout, nice=settings.nice_time_axis)
    mapper.fit(dataset.commits)
    engine = FilterEngine(mapper)
    console_renderer = ConsoleRenderer(mapper, console=console, columns=width, show_scatter=show_scatter)
    coordinator = UpdateCoordinator(
        dataset.commits,
        engine,
        AggregateReporter(dataset.columns),
        renderer=console_renderer,
        rescale_on_cutoff=settings.rescale_on_cutoff,
    )
    return engine, coordinator, console_renderer


def _apply_filters(
    engine: FilterEngine,
    until: Optional[str],
    cutoff: Optional[float],
    brush: Optional[str],
) -> None:
    if until is not None and cutoff is not None:
        raise ValueError("Use either --until or --cutoff, not both")
    if until is not None:
        engine.set_time_cutoff(parse_timestamp(until))
    if cutoff is not None:
        engine.set_time_cutoff_from_slider(cutoff)
    if brush is not None:
        engine.set_brush(parse_brush(brush), BrushPhase.END)


@app.command()
def summary(
    csv_path: Path = typer.Argument(..., help="Per-line history CSV (e.g. loc.csv)"),
    until: Optional[str] = typer.Option(None, "--until", "-u", help="Only commits at or before this ISO timestamp"),
    cutoff: Optional[float] = typer.Option(None, "--cutoff", "-c", help="Time slider position, 0-100"),
    brush: Optional[str] = typer.Option(None, "--brush", "-b", help="Plot-pixel selection x0,y0,x1,y1"),
    commit_key: Optional[str] = typer.Option(None, "--commit-key", help="Column holding the commit id"),
    repo_url: Optional[str] = typer.Option(None, "--repo-url", help="Base URL for commit links"),
) -> None:
    """Show summary statistics for the selected commits."""
    try:
        settings = _settings(commit_key, repo_url)
        dataset = _load(csv_path, settings)
        engine, coordinator, _ = _session(dataset, settings, show_scatter=False)
        if not dataset.is_empty:
            _apply_filters(engine, until, cutoff, brush)

        coordinator.start()

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def scatter(
    csv_path: Path = typer.Argument(..., help="Per-line history CSV (e.g. loc.csv)"),
    until: Optional[str] = typer.Option(None, "--until", "-u", help="Only commits at or before this ISO timestamp"),
    cutoff: Optional[float] = typer.Option(None, "--cutoff", "-c", help="Time slider position, 0-100"),
    brush: Optional[str] = typer.Option(None, "--brush", "-b", help="Plot-pixel selection x0,y0,x1,y1"),
    width: int = typer.Option(60, "--width", "-w", help="Scatter width in characters"),
    commit_key: Optional[str] = typer.Option(None, "--commit-key", help="Column holding the commit id"),
    repo_url: Optional[str] = typer.Option(None, "--repo-url", help="Base URL for commit links"),
) -> None:
    """Plot commits by date and time of day, with summary panels."""
    try:
        settings = _settings(commit_key, repo_url)
        dataset = _load(csv_path, settings)
        engine, coordinator, _ = _session(dataset, settings, width=width)
        if not dataset.is_empty:
            _apply_filters(engine, until, cutoff, brush)

        coordinator.start()

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_commits(
    csv_path: Path = typer.Argument(..., help="Per-line history CSV (e.g. loc.csv)"),
    max_count: int = typer.Option(20, "--max", "-n", help="Maximum commits to show"),
    commit_key: Optional[str] = typer.Option(None, "--commit-key", help="Column holding the commit id"),
) -> None:
    """List commits in the order they appear in the log."""
    try:
        settings = _settings(commit_key, None)
        dataset = _load(csv_path, settings)

        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Commit", style="cyan", width=10)
        table.add_column("Author", style="green")
        table.add_column("Date", style="blue")
        table.add_column("Lines", justify="right", style="yellow")

        for commit in dataset.commits[:max_count]:
            table.add_row(
                commit.id[:10],
                (commit.author or "Unknown")[:20],
                commit.datetime.strftime("%Y-%m-%d %H:%M"),
                str(commit.total_lines),
            )

        console.print(table)
        if len(dataset.commits) > max_count:
            console.print(f"[dim]... and {len(dataset.commits) - max_count} more commits[/dim]")

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def show(
    csv_path: Path = typer.Argument(..., help="Per-line history CSV (e.g. loc.csv)"),
    commit_id: str = typer.Argument(..., help="Commit id or unique prefix"),
    commit_key: Optional[str] = typer.Option(None, "--commit-key", help="Column holding the commit id"),
    repo_url: Optional[str] = typer.Option(None, "--repo-url", help="Base URL for commit links"),
) -> None:
    """Show the details of one commit."""
    try:
        settings = _settings(commit_key, repo_url)
        dataset = _load(csv_path, settings)
        commit = dataset.find_commit(commit_id)
        if commit is None:
            raise ValueError(f"Commit not found: {commit_id}")

        renderer = ConsoleRenderer(CoordinateMapper(settings.layout), console=console)
        renderer.show_commit(commit)

    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


def run_explore_command(line: str, engine: FilterEngine, dataset: Dataset, renderer: ConsoleRenderer) -> bool:
    """Apply one interactive command.

    Returns:
        False when the session should end
    """
    words: List[str] = line.split()
    if not words:
        return True
    command, args = words[0].lower(), words[1:]

    if command in ("quit", "exit", "q"):
        return False
    if command == "help":
        console.print(EXPLORE_HELP)
    elif command == "cutoff" and len(args) == 1:
        cutoff = engine.set_time_cutoff_from_slider(float(args[0]))
        console.print(f"[dim]Cutoff: {cutoff:%Y-%m-%d %H:%M %z}[/dim]")
    elif command == "until" and len(args) == 1:
        engine.set_time_cutoff(parse_timestamp(args[0]))
    elif command == "brush" and len(args) == 4:
        engine.set_brush(parse_brush(" ".join(args)), BrushPhase.END)
    elif command == "clear" and len(args) <= 1:
        target = args[0].lower() if args else "all"
        if target == "brush":
            engine.clear_brush()
        elif target == "time":
            engine.set_time_cutoff(None)
        else:
            engine.clear()
    elif command == "show" and len(args) == 1:
        commit = dataset.find_commit(args[0])
        if commit is None:
            console.print(f"[yellow]Commit not found:[/yellow] {args[0]}")
        else:
            renderer.show_commit(commit)
    else:
        console.print(f"[yellow]Unknown command:[/yellow] {line.strip()}  (type 'help')")
    return True


@app.command()
def explore(
    csv_path: Path = typer.Argument(..., help="Per-line history CSV (e.g. loc.csv)"),
    width: int = typer.Option(60, "--width", "-w", help="Scatter width in characters"),
    commit_key: Optional[str] = typer.Option(None, "--commit-key", help="Column holding the commit id"),
    repo_url: Optional[str] = typer.Option(None, "--repo-url", help="Base URL for commit links"),
) -> None:
    """Interactively filter commits with a time cutoff and a brush."""
    try:
        settings = _settings(commit_key, repo_url)
        dataset = _load(csv_path, settings)
        engine, coordinator, renderer = _session(dataset, settings, width=width)
        coordinator.start()
        console.print(EXPLORE_HELP)
    except Exception as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    try:
        while True:
            try:
                line = Prompt.ask("[bold cyan]commitlens[/bold cyan]", console=console, default="quit")
            except (EOFError, KeyboardInterrupt):
                console.print()
                break
            try:
                if not run_explore_command(line, engine, dataset, renderer):
                    break
            except ValueError as e:
                console.print(f"[bold red]Error:[/bold red] {e}")
    finally:
        coordinator.stop()


@app.command()
def version() -> None:
    """Show version information."""
    from commitlens import __version__

    console.print(f"[bold]CommitLens[/bold] version {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
