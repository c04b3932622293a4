from __future__ import annotations

from typing import List, Optional

from catrolls.core.gacha import Gacha
from catrolls.core.grid import Grid
from catrolls.core.options import MAX_ROWS


def scan_grid(grid: Grid, cat_id: int, *, guaranteed: bool = True) -> List[str]:
    """Numbers of every roll in `grid` (rerolls and guaranteed rolls too) that gives `cat_id`."""
    found: List[str] = []
    for cat in grid.all_cats():
        if cat.id != cat_id:
            continue
        if not guaranteed and cat.extra_label.endswith("G"):
            continue
        found.append(cat.number)
    return found


def replay_grid(gacha: Gacha, rows: int, guaranteed_rolls: int) -> Grid:
    """Roll a fresh replica of `gacha` out to `rows` rows, leaving `gacha` untouched."""
    replica = Gacha(gacha.pool, gacha.start_seed, gacha.version)
    if gacha.last_roll is not None:
        replica.set_last_roll(gacha.last_roll.id)

    grid = Grid()
    for sequence in range(1, rows + 1):
        grid.append(replica.roll_both(sequence))
    if replica.rerolls_dupes:
        replica.finish_rerolled_links(grid)
    if replica.last_roll is not None and len(grid):
        replica.finish_last_roll(grid.cell(0, 0))
    replica.finish_guaranteed(grid, guaranteed_rolls)
    return grid


def find_cat(
    gacha: Gacha,
    cat_id: int,
    grid: Grid,
    *,
    guaranteed: bool = True,
    max_rows: int = MAX_ROWS,
    guaranteed_rolls: Optional[int] = None,
) -> List[str]:
    """Where `cat_id` shows up: in `grid` first, then further down up to `max_rows`."""
    if not cat_id:
        return []
    found = scan_grid(grid, cat_id, guaranteed=guaranteed)
    if found or len(grid) >= max_rows:
        return found

    if guaranteed_rolls is None:
        guaranteed_rolls = gacha.pool.guaranteed_rolls
    extended = replay_grid(gacha, max_rows, guaranteed_rolls if guaranteed else 0)
    return scan_grid(extended, cat_id, guaranteed=guaranteed)
