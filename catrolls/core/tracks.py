from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
import json

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from catrolls.finder.find import find_cat
from catrolls.notes.notes import RollNotes
from catrolls.pool.gacha_pool import GachaPool
from .cat import Cat, PickLabel
from .events import JsonlEventLog
from .gacha import Gacha
from .grid import Grid
from .options import TrackOptions


console = Console()

PICK_STYLES: Dict[PickLabel, str] = {
    PickLabel.PICKED: "bold green",
    PickLabel.PICKED_CONSECUTIVELY: "green",
    PickLabel.NEXT_POSITION: "bold cyan",
}

RARITY_STYLES: Dict[str, str] = {
    "rare": "white",
    "supa_fest": "yellow",
    "supa": "yellow",
    "uber_fest": "red",
    "uber": "red",
    "legend": "magenta",
}


@dataclass
class Tracks:
    gacha: Gacha
    grid: Grid
    guaranteed_rolls: int = 0
    found: List[str] = field(default_factory=list)


def build_tracks(pool: GachaPool, options: TrackOptions, notes: Optional[RollNotes] = None) -> Tracks:
    """Roll `options.count` rows and run every annotation pass the options ask for."""
    # future ubers change the pool; keep the caller's copy as it was
    pool = pool.model_copy(deep=True)
    if options.ubers > 0:
        pool.add_future_ubers(options.ubers)

    gacha = Gacha(pool, options.seed, options.version, notes=notes)
    if options.position:
        gacha.position = options.position
    if options.last:
        gacha.set_last_roll(options.last)

    # humans count from 1
    grid = Grid()
    for sequence in range(1, options.count + 1):
        grid.append(gacha.roll_both(sequence))

    if gacha.rerolls_dupes:
        gacha.finish_rerolled_links(grid)

    if options.last:
        gacha.finish_last_roll(grid.cell(0, 0))

    guaranteed_rolls = options.guaranteed_rolls(pool.guaranteed_rolls)
    if guaranteed_rolls > 0:
        gacha.finish_guaranteed(grid, guaranteed_rolls)

    # a pick labels its own next position
    if options.pick:
        gacha.finish_picking(grid, options.pick, guaranteed_rolls)
    elif options.position or options.last:
        gacha.mark_next_position(grid)

    found: List[str] = []
    if options.find:
        found = find_cat(
            gacha,
            options.find,
            grid,
            guaranteed=not options.no_guaranteed,
            guaranteed_rolls=guaranteed_rolls,
        )

    return Tracks(gacha=gacha, grid=grid, guaranteed_rolls=guaranteed_rolls, found=found)


def _cell_text(cat: Optional[Cat]) -> str:
    if cat is None:
        return ""
    style = PICK_STYLES.get(cat.picked_label) if cat.picked_label else RARITY_STYLES.get(cat.display_rarity, "")
    text = escape(cat.name)
    return f"[{style}]{text}[/]" if style else text


def render_table(tracks: Tracks, title: str = "Tracks") -> Table:
    table = Table(title=title)
    table.add_column("No.", justify="right")
    table.add_column("A")
    table.add_column("A guaranteed")
    table.add_column("B")
    table.add_column("B guaranteed")

    for index, (a_cat, b_cat) in enumerate(tracks.grid):
        table.add_row(
            str(index + 1),
            _cell_text(a_cat),
            _cell_text(a_cat.guaranteed),
            _cell_text(b_cat),
            _cell_text(b_cat.guaranteed),
        )
        if a_cat.rerolled is not None or b_cat.rerolled is not None:
            table.add_row(
                "",
                _cell_text(a_cat.rerolled),
                _cell_text(a_cat.rerolled.guaranteed if a_cat.rerolled else None),
                _cell_text(b_cat.rerolled),
                _cell_text(b_cat.rerolled.guaranteed if b_cat.rerolled else None),
            )
    return table


def row_event(row: List[Cat]) -> Dict[str, Any]:
    event: Dict[str, Any] = {"type": "row", "sequence": row[0].sequence, "cats": []}
    for cat in row:
        entry = cat.to_dict()
        if cat.rerolled is not None:
            entry["rerolled"] = cat.rerolled.to_dict()
        if cat.guaranteed is not None:
            entry["guaranteed"] = cat.guaranteed.to_dict()
        event["cats"].append(entry)
    return event


def run_tracks(pool: GachaPool, options: TrackOptions, run_dir: Path, run_id: str) -> Tracks:
    """Build the tracks, trace them into `run_dir` and print them."""
    meta = {
        "created_at": datetime.now(timezone.utc).isoformat(),
        "run_id": run_id,
        "pool": {"name": pool.name, "rare": pool.rare, "supa": pool.supa, "uber": pool.uber, "legend": pool.legend},
        "options": options.meta(),
    }
    (run_dir / "meta.json").write_text(json.dumps(meta, indent=2), encoding="utf-8")

    with JsonlEventLog(run_dir / "events.jsonl") as event_log:
        notes = RollNotes(event_log=event_log)
        notes.note(kind="startup", payload={"seed": options.seed, "version": options.version})

        tracks = build_tracks(pool, options, notes=notes)

        for row in tracks.grid:
            event_log.write(row_event(row))
        if options.find:
            notes.note(kind="find", payload={"id": options.find, "found": tracks.found})
        notes.note(kind="shutdown", payload={"rows": len(tracks.grid)})

    console.print(render_table(tracks, title=f"Tracks: seed {options.seed} ({pool.name or 'pool'})"))
    return tracks
