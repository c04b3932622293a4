from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Pattern, Tuple, Union

from catrolls.notes.notes import RollNotes
from catrolls.pool.gacha_pool import BASE, GachaPool

from .cat import NONE_INFO, Cat, PickLabel, Rarity
from .fruit import DEFAULT_VERSION, Fruit
from .grid import Grid
from .seed import MAX_SEED, advance_seed

# Only this version rerolls a rare cat rolled twice in a row
REROLL_VERSION = "8.6"
DEFAULT_POSITION = "1A"

# Step-up gacha: 15 guaranteed rolls, rolls 3..7 highlighted apart
STEP_UP_ROLLS = 15
STEP_UP_HIGHLIGHT = range(3, 8)

MARKER = re.compile(r"(\d+)(\w)?")

Number = Union[str, Pattern[str]]


class RerollError(RuntimeError):
    """The reroll ran out of candidates without leaving the duplicated id."""


class Gacha:
    """Replica of the game's roller for one seed.

    Rolls rows of two tracks (A and B) and annotates the resulting Grid with
    dupe rerolls, guaranteed rolls and the picked path. One instance is owned
    by one request; nothing here is shared.
    """

    def __init__(
        self,
        pool: GachaPool,
        seed: int,
        version: str = DEFAULT_VERSION,
        *,
        notes: Optional[RollNotes] = None,
    ) -> None:
        self.pool = pool
        self.start_seed = int(seed) % MAX_SEED
        self.seed = self.start_seed
        self.version = version
        self.notes = notes
        self.last_both: Tuple[Optional[Cat], Optional[Cat]] = (None, None)
        self.last_roll: Optional[Cat] = None
        self.position: str = DEFAULT_POSITION
        self.rows_rolled = 0
        self._pool_cats: Dict[Rarity, List[Cat]] = {}

        # the game draws once before the first roll
        self.advance_seed()

    # ------------------------------ pool ------------------------------
    @property
    def rare(self) -> int:
        return self.pool.rare

    @property
    def supa(self) -> int:
        return self.pool.supa

    @property
    def uber(self) -> int:
        return self.pool.uber

    @property
    def legend(self) -> int:
        return self.pool.legend

    def pool_cats(self, rarity: Rarity) -> List[Cat]:
        rarity = Rarity(rarity)
        if rarity not in self._pool_cats:
            self._pool_cats[rarity] = [
                Cat(id=cat_id, info=self.pool.dig_cat(cat_id), rarity=rarity)
                for cat_id in self.pool.dig_slot(rarity)
            ]
        return self._pool_cats[rarity]

    @property
    def rare_cats(self) -> List[Cat]:
        return self.pool_cats(Rarity.RARE)

    @property
    def supa_cats(self) -> List[Cat]:
        return self.pool_cats(Rarity.SUPA)

    @property
    def uber_cats(self) -> List[Cat]:
        return self.pool_cats(Rarity.UBER)

    @property
    def legend_cats(self) -> List[Cat]:
        return self.pool_cats(Rarity.LEGEND)

    @property
    def rerolls_dupes(self) -> bool:
        return self.version == REROLL_VERSION

    def set_last_roll(self, cat_id: int) -> Cat:
        """Start from the cat the player rolled last; track A dupe-checks against it."""
        self.last_roll = Cat(id=int(cat_id))
        self.last_both = (self.last_roll, None)
        return self.last_roll

    # ------------------------------ rolling ------------------------------
    def roll(self) -> Cat:
        rarity_fruit = self._take_fruit()
        return self._roll_cat(rarity_fruit, self._take_fruit())

    def roll_both(self, sequence: Optional[int] = None) -> Tuple[Cat, Cat]:
        """Roll one row. B reads the seeds A is about to move past, without advancing."""
        if sequence is None:
            sequence = self.rows_rolled + 1

        a_rarity = self._take_fruit()
        b_rarity = self._peek_fruit()
        a_cat = self._roll_cat(a_rarity, self._take_fruit())
        b_cat = self._roll_cat(b_rarity, self._peek_fruit())

        a_cat.track = 0
        b_cat.track = 1
        a_cat.sequence = b_cat.sequence = sequence

        self.fill_cat_links(a_cat, self.last_both[0])
        self.fill_cat_links(b_cat, self.last_both[1])

        self.last_both = (a_cat, b_cat)
        self.rows_rolled += 1
        return self.last_both

    def dig_rarity(self, score: int) -> Rarity:
        upper = 0
        for rarity in (Rarity.RARE, Rarity.SUPA, Rarity.UBER):
            upper += self.pool.weight(rarity)
            if score < upper:
                return rarity
        return Rarity.LEGEND

    def reroll_cat(self, cat: Cat) -> Cat:
        """Reroll a duplicated rare cat.

        The reroll works on its own seed lineage starting at the duplicate's
        slot value, and drops one copy of the duplicated id per attempt, so it
        takes at most as many attempts as there are copies of that id.
        """
        rerolling_slots = list(self.pool.dig_slot(cat.rarity))
        next_seed = cat.slot_fruit.value
        slot = cat.slot
        cat_id = cat.id
        steps = None

        for step in range(1, rerolling_slots.count(cat.id) + 1):
            next_seed = advance_seed(next_seed)
            del rerolling_slots[slot]
            if not rerolling_slots:
                break
            slot = next_seed % len(rerolling_slots)
            cat_id = rerolling_slots[slot]
            if cat_id != cat.id:
                steps = step
                break

        if steps is None:
            raise RerollError(f"cannot reroll {cat.number} (id {cat.id}) into another cat")

        self._note(
            "reroll",
            {"number": cat.number, "from": cat.id, "to": cat_id, "steps": steps},
            sequence=cat.sequence,
        )
        return Cat(
            id=cat_id,
            info=self.pool.dig_cat(cat_id),
            rarity=cat.rarity,
            score=cat.score,
            slot_fruit=Fruit(next_seed, self.version),
            slot=slot,
            sequence=cat.sequence,
            track=cat.track,
            steps=steps,
            extra_label=f"{cat.extra_label}R",
        )

    def fill_cat_links(self, cat: Optional[Cat], last_cat: Optional[Cat]) -> None:
        if cat is None or last_cat is None:
            return
        if self.rerolls_dupes and cat.duped(last_cat):
            # both tracks can land on the same dupe; it is rerolled once
            if cat.rerolled is None:
                cat.rerolled = self.reroll_cat(cat)
            last_cat.next = cat.rerolled.ref()
        else:
            last_cat.next = cat.ref()

    # ------------------------------ links ------------------------------
    @staticmethod
    def next_index(track: int, steps: int) -> int:
        return ((track + steps) // 2) + 1

    @staticmethod
    def next_track(track: int, steps: int) -> int:
        return ((track + steps - 1) ^ 1) & 1

    def finish_rerolled_links(self, grid: Grid) -> None:
        # A reroll can land on another dupe, which rerolls again and can
        # bounce between the tracks
        for rolled_cat, index, track in grid.each_cat():
            rerolled = rolled_cat.rerolled
            if rerolled is None:
                continue
            next_cat = grid.cell(
                index + self.next_index(track, rerolled.steps),
                self.next_track(track, rerolled.steps),
            )
            if next_cat is not None:
                self.fill_cat_links(next_cat, rerolled)

    def finish_last_roll(self, first_cat: Optional[Cat]) -> None:
        self.fill_cat_links(first_cat, self.last_roll)

    def finish_guaranteed(self, grid: Grid, guaranteed_rolls: Optional[int] = None) -> None:
        if guaranteed_rolls is None:
            guaranteed_rolls = self.pool.guaranteed_rolls
        if guaranteed_rolls <= 0:
            return
        for rolled_cat, _, _ in grid.each_cat():
            self._fill_guaranteed(grid, guaranteed_rolls, rolled_cat)
            if rolled_cat.rerolled is not None:
                self._fill_guaranteed(grid, guaranteed_rolls, rolled_cat.rerolled)

    def _fill_guaranteed(self, grid: Grid, guaranteed_rolls: int, rolled_cat: Cat) -> None:
        last = self.follow_cat(grid, rolled_cat, guaranteed_rolls - 1)
        if last is None:
            return

        # the guaranteed uber eats one seed, so the next roll switches track
        next_index = last.sequence - (last.track ^ 1)
        next_track = last.track ^ 1
        next_cat = grid.cell(next_index, next_track)
        if next_cat is None:
            return

        # slot seed is the rarity seed of the roll it replaces
        replaced = grid.cell(last.sequence - 1, last.track)
        rolled_cat.guaranteed = self._new_cat(
            Rarity.UBER,
            replaced.rarity_fruit,
            sequence=rolled_cat.sequence,
            track=rolled_cat.track,
            next=next_cat.ref(),
            extra_label=f"{rolled_cat.extra_label}G",
        )
        self._note(
            "guaranteed",
            {"number": rolled_cat.guaranteed.number, "id": rolled_cat.guaranteed.id},
            sequence=rolled_cat.sequence,
        )

    @staticmethod
    def follow_cat(grid: Grid, cat: Optional[Cat], steps: int) -> Optional[Cat]:
        for _ in range(steps):
            cat = grid.next_of(cat)
            if cat is None:
                return None
        return cat

    # ------------------------------ picking ------------------------------
    def finish_picking(self, grid: Grid, pick: str, guaranteed_rolls: Optional[int] = None) -> None:
        if guaranteed_rolls is None:
            guaranteed_rolls = self.pool.guaranteed_rolls

        picked = self.dig_cats_from(grid, pick)
        # markers come from users and can point anywhere
        if picked is None:
            self._note("pick_ignored", {"pick": pick, "reason": "no such cat"})
            return
        if "G" in pick and picked.guaranteed is None:
            self._note("pick_ignored", {"pick": pick, "reason": "no guaranteed roll"})
            return

        number: Number
        if "X" in pick:
            number = re.compile(re.escape(picked.number))
        elif "G" in pick:
            number = f"{picked.number}G"
        else:
            number = picked.number

        if "G" in pick:
            self._fill_picking_guaranteed(grid, picked, number, guaranteed_rolls, pick)
        else:
            self._fill_picking_single(grid, picked, number, pick)

    def mark_next_position(self, grid: Grid) -> None:
        next_position = self.dig_cats_from(grid, self.position)
        if next_position is None:
            return
        # rolling next would dupe the last roll, so the reroll is what comes
        if (
            self.last_roll is not None
            and self.last_roll.id == next_position.id
            and next_position.rerolled is not None
        ):
            next_position.rerolled.picked_label = PickLabel.NEXT_POSITION
        else:
            next_position.picked_label = PickLabel.NEXT_POSITION

    def dig_cats_from(self, grid: Grid, marker: Optional[str]) -> Optional[Cat]:
        if not marker:
            return None
        m = MARKER.match(marker)
        if m is None:
            return None
        index = int(m.group(1)) - 1
        track = ord(m.group(2) or "A") - ord("A")
        located = grid.cell(index, track)
        if located is not None and "R" in marker:
            return located.rerolled
        return located

    def _fill_picking_single(self, grid: Grid, picked: Cat, number: Number, pick: str) -> None:
        detected = self._fill_picking_backtrack(grid, number)
        if detected is None:
            # no way back from the position, e.g. the path leaves the grid
            self._note("pick_fallback", {"pick": pick})
            detected = picked

        detected.picked_label = PickLabel.PICKED
        next_cat = grid.next_of(detected)
        if next_cat is not None:
            next_cat.picked_label = PickLabel.NEXT_POSITION

    def _fill_picking_guaranteed(
        self, grid: Grid, picked: Cat, number: Number, guaranteed_rolls: int, pick: str
    ) -> None:
        detected = self._fill_picking_backtrack(grid, number, guaranteed=True)
        if detected is None:
            self._note("pick_fallback", {"pick": pick})
            detected = picked

        guaranteed = detected.guaranteed
        guaranteed.picked_label = PickLabel.PICKED_CONSECUTIVELY
        next_cat = grid.next_of(guaranteed)
        if next_cat is not None:
            next_cat.picked_label = PickLabel.NEXT_POSITION

        self._fill_picked_consecutively_label(grid, guaranteed_rolls, detected)

    def _fill_picking_backtrack(self, grid: Grid, number: Number, guaranteed: bool = False) -> Optional[Cat]:
        cat = self.last_roll
        if cat is None:
            cat = self.dig_cats_from(grid, self.position)

        path: List[Cat] = []
        while cat is not None:
            # last_roll and out-of-range rolls have no guaranteed; keep walking
            checking = cat.guaranteed if guaranteed else cat
            if checking is not None and _number_matches(number, checking.number):
                for passed_cat in path:
                    passed_cat.picked_label = PickLabel.PICKED
                return cat
            path.append(cat)
            cat = grid.next_of(cat)
        return None

    def _fill_picked_consecutively_label(self, grid: Grid, guaranteed_rolls: int, cat: Cat) -> None:
        step_up = guaranteed_rolls == STEP_UP_ROLLS
        rolled: Optional[Cat] = cat
        for index in range(guaranteed_rolls - 1):
            if step_up and index in STEP_UP_HIGHLIGHT:
                rolled.picked_label = PickLabel.PICKED
            else:
                rolled.picked_label = PickLabel.PICKED_CONSECUTIVELY
            rolled = grid.next_of(rolled)
            if rolled is None:
                break

    # ------------------------------ seeds ------------------------------
    def advance_seed(self) -> int:
        self.seed = advance_seed(self.seed)
        return self.seed

    def _peek_fruit(self) -> Fruit:
        return Fruit(self.seed, self.version)

    def _take_fruit(self) -> Fruit:
        fruit = self._peek_fruit()
        self.advance_seed()
        return fruit

    def _roll_cat(self, rarity_fruit: Fruit, slot_fruit: Fruit) -> Cat:
        score = rarity_fruit.value % BASE
        cat = self._new_cat(self.dig_rarity(score), slot_fruit)
        cat.rarity_fruit = rarity_fruit
        cat.score = score
        return cat

    def _new_cat(self, rarity: Rarity, slot_fruit: Optional[Fruit], **fields: Any) -> Cat:
        slots = self.pool.dig_slot(rarity)
        if not slots:
            # nothing of this rarity in the pool
            slot = None
            cat_id = -1
            info = NONE_INFO
        else:
            slot = slot_fruit.value % len(slots)
            cat_id = slots[slot]
            info = self.pool.dig_cat(cat_id)
        return Cat(id=cat_id, info=info, rarity=rarity, slot_fruit=slot_fruit, slot=slot, **fields)

    def _note(self, kind: str, payload: Dict[str, Any], sequence: Optional[int] = None) -> None:
        if self.notes is not None:
            self.notes.note(kind=kind, payload=payload, sequence=sequence)


def _number_matches(number: Number, candidate: str) -> bool:
    if isinstance(number, str):
        return number == candidate
    return number.match(candidate) is not None
