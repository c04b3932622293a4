from __future__ import annotations

from pathlib import Path
from datetime import datetime, timezone
from typing import Optional
import json
import typer

from catrolls.core.options import TrackOptions
from catrolls.core.tracks import run_tracks
from catrolls.eval.report import build_html, build_markdown
from catrolls.pool import load_pool

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command()
def tracks(
    pool: Path = typer.Option(Path("data/sample_pool.json"), help="Gacha pool JSON file"),
    seed: int = typer.Option(..., help="Seed (any integer; wrapped into 32 bits)"),
    version: str = typer.Option("8.6", help="Game version: 8.6, 8.5 or 8.4"),
    count: int = typer.Option(100, help="Rows to roll"),
    last: int = typer.Option(0, help="Id of the cat rolled last, 0 for none"),
    pick: Optional[str] = typer.Option(None, help="Cell to highlight, e.g. 4A, 5AR, 3BG, 6AX"),
    position: Optional[str] = typer.Option(None, help="Cell rolled next, e.g. 1A"),
    force_guaranteed: int = typer.Option(0, help="Override the pool's guaranteed rolls"),
    no_guaranteed: bool = typer.Option(False, help="Do not search guaranteed rolls with --find"),
    ubers: int = typer.Option(0, help="Future ubers to add to the pool"),
    find: int = typer.Option(0, help="Cat id to look for"),
    runs_dir: Path = typer.Option(Path("runs"), help="Directory to store run artifacts"),
    report: bool = typer.Option(False, help="Also write report.md and report.html"),
):
    """Roll both tracks for a seed and print them."""
    try:
        gacha_pool = load_pool(pool)
    except FileNotFoundError as e:
        raise typer.BadParameter(str(e))

    options = TrackOptions(
        seed=seed,
        version=version,
        count=count,
        last=last,
        pick=pick,
        position=position,
        force_guaranteed=force_guaranteed,
        no_guaranteed=no_guaranteed,
        ubers=ubers,
        find=find,
    )
    if options.version != version:
        typer.echo(f"Unknown version {version}, using {options.version}")

    run_id = f"tracks_{datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%SZ')}"
    out_dir = runs_dir / run_id
    out_dir.mkdir(parents=True, exist_ok=False)

    result = run_tracks(gacha_pool, options, run_dir=out_dir, run_id=run_id)

    if options.find:
        typer.echo(f"Cat {options.find}: {', '.join(result.found) or 'not found'}")

    if report:
        meta = json.loads((out_dir / "meta.json").read_text(encoding="utf-8"))
        (out_dir / "report.md").write_text(build_markdown(result.grid, meta), encoding="utf-8")
        (out_dir / "report.html").write_text(build_html(result.grid, meta), encoding="utf-8")

    typer.echo(f"Done. See {out_dir}")


if __name__ == "__main__":
    app()
