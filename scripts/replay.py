from __future__ import annotations

from pathlib import Path
from typing import List, Optional
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from catrolls.core.events import read_events, summarize_event

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()


def _latest_run_dir(runs_dir: Path) -> Path:
    if not runs_dir.exists():
        raise typer.BadParameter(f"No runs directory at {runs_dir}")
    traced = [p for p in runs_dir.iterdir() if (p / "events.jsonl").is_file()]
    if not traced:
        raise typer.BadParameter(f"No traced runs in {runs_dir}")
    return max(traced, key=lambda p: (p / "events.jsonl").stat().st_mtime)


@app.command()
def replay(
    runs_dir: Path = typer.Option(Path("runs"), help="Directory containing runs"),
    run_path: Optional[Path] = typer.Option(None, help="Specific run directory to replay"),
    kind: List[str] = typer.Option([], help="Filter by event type or note kind, e.g. --kind row --kind reroll"),
    limit: int = typer.Option(200, help="Max events to display"),
):
    """Replay the trace of a tracks run (reads events.jsonl)."""
    run_dir = run_path or _latest_run_dir(runs_dir)
    path = run_dir / "events.jsonl"
    if not path.exists():
        raise typer.BadParameter(f"No events.jsonl in {run_dir}")

    events = read_events(path)
    if kind:
        wanted = set(kind)
        events = [e for e in events if e.get("type") in wanted or e.get("kind") in wanted]

    table = Table(title=f"Replay: {run_dir.name}")
    table.add_column("Seq", justify="right")
    table.add_column("Type")
    table.add_column("Summary")

    for event in events[:limit]:
        sequence = event.get("sequence")
        etype = event.get("kind") or event.get("type", "?")
        table.add_row("-" if sequence is None else str(sequence), str(etype), escape(summarize_event(event)))

    console.print(table)


if __name__ == "__main__":
    app()
