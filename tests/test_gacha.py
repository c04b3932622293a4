from __future__ import annotations

import unittest

from catrolls.core.cat import NONE_INFO, CatRef, Rarity
from catrolls.core.gacha import Gacha
from catrolls.core.grid import Grid
from catrolls.pool.gacha_pool import GachaPool

GOLDEN = {
    "name": "golden",
    "rare": 7000,
    "supa": 2500,
    "uber": 400,
    "legend": 100,
    "rare_ids": [101, 102, 103],
    "supa_ids": [201, 202],
    "uber_ids": [301, 302, 303, 304],
    "legend_ids": [401],
}

# Base ids of rows 1..20 for seed 42
GOLDEN_A = [102, 101, 102, 103, 103, 102, 101, 201, 101, 201, 103, 103, 103, 101, 201, 101, 103, 101, 103, 101]
GOLDEN_B = [101, 102, 202, 102, 101, 201, 201, 202, 103, 103, 201, 201, 201, 101, 202, 103, 101, 103, 201, 102]


def _pool(**overrides) -> GachaPool:
    data = dict(GOLDEN)
    data.update(overrides)
    return GachaPool(**data)


def _rows(gacha: Gacha, rows: int) -> Grid:
    grid = Grid()
    for sequence in range(1, rows + 1):
        grid.append(gacha.roll_both(sequence))
    return grid


class TestRolling(unittest.TestCase):
    def test_construction_draws_once(self):
        gacha = Gacha(_pool(), 42, "8.6")
        self.assertEqual(gacha.seed, 2685485096)
        self.assertEqual(gacha.start_seed, 42)

    def test_golden_tracks(self):
        grid = _rows(Gacha(_pool(), 42, "8.6"), 20)
        self.assertEqual([row[0].id for row in grid], GOLDEN_A)
        self.assertEqual([row[1].id for row in grid], GOLDEN_B)

    def test_golden_first_row_details(self):
        a_cat, b_cat = Gacha(_pool(), 42, "8.6").roll_both(1)
        self.assertEqual((a_cat.score, a_cat.slot, a_cat.rarity), (5096, 1, Rarity.RARE))
        self.assertEqual((b_cat.score, b_cat.slot, b_cat.rarity), (4546, 0, Rarity.RARE))
        self.assertEqual(a_cat.rarity_fruit.seed, 2685485096)
        self.assertEqual(a_cat.slot_fruit.seed, 2315584546)
        self.assertEqual((a_cat.number, b_cat.number), ("1A", "1B"))

    def test_track_b_reads_seeds_a_moves_past(self):
        grid = _rows(Gacha(_pool(), 2263031574, "8.6"), 10)
        for index, (a_cat, b_cat) in enumerate(grid):
            self.assertEqual(b_cat.rarity_fruit.seed, a_cat.slot_fruit.seed)
            next_row = grid.cell(index + 1, 0)
            if next_row is not None:
                self.assertEqual(next_row.rarity_fruit.seed, b_cat.slot_fruit.seed)

    def test_roll_follows_track_a(self):
        gacha = Gacha(_pool(), 42, "8.6")
        self.assertEqual([gacha.roll().id for _ in range(5)], GOLDEN_A[:5])

    def test_roll_has_no_position(self):
        cat = Gacha(_pool(), 42, "8.6").roll()
        self.assertIsNone(cat.sequence)
        self.assertEqual(cat.number, "+")

    def test_determinism(self):
        a = Gacha(_pool(), 987654321, "8.6")
        b = Gacha(_pool(), 987654321, "8.6")
        self.assertEqual([a.roll().id for _ in range(50)], [b.roll().id for _ in range(50)])

        grid_a = _rows(Gacha(_pool(), 987654321, "8.6"), 30)
        grid_b = _rows(Gacha(_pool(), 987654321, "8.6"), 30)
        self.assertEqual(
            [(c.number, c.id) for c in grid_a.all_cats()],
            [(c.number, c.id) for c in grid_b.all_cats()],
        )

    def test_sequence_defaults_to_next_row(self):
        gacha = Gacha(_pool(), 42, "8.6")
        gacha.roll_both()
        a_cat, _ = gacha.roll_both()
        self.assertEqual(a_cat.sequence, 2)

    def test_rows_link_within_track(self):
        grid = _rows(Gacha(_pool(), 42, "8.6"), 3)
        self.assertEqual(grid.cell(0, 0).next, CatRef(2, 0, False))
        self.assertEqual(grid.cell(0, 1).next, CatRef(2, 1, False))
        self.assertIsNone(grid.cell(2, 0).next)


class TestRarity(unittest.TestCase):
    def test_partition_has_no_gaps(self):
        gacha = Gacha(_pool(), 1, "8.6")
        counts = {r: 0 for r in Rarity}
        for score in range(10000):
            counts[gacha.dig_rarity(score)] += 1
        self.assertEqual(counts, {Rarity.RARE: 7000, Rarity.SUPA: 2500, Rarity.UBER: 400, Rarity.LEGEND: 100})

    def test_boundaries_are_half_open(self):
        gacha = Gacha(_pool(), 1, "8.6")
        self.assertEqual(gacha.dig_rarity(6999), Rarity.RARE)
        self.assertEqual(gacha.dig_rarity(7000), Rarity.SUPA)
        self.assertEqual(gacha.dig_rarity(9499), Rarity.SUPA)
        self.assertEqual(gacha.dig_rarity(9500), Rarity.UBER)
        self.assertEqual(gacha.dig_rarity(9899), Rarity.UBER)
        self.assertEqual(gacha.dig_rarity(9900), Rarity.LEGEND)

    def test_empty_tier_gives_placeholder(self):
        gacha = Gacha(_pool(rare=10000, supa=0, uber=0, legend=0, rare_ids=[]), 42, "8.6")
        cat = gacha.roll()
        self.assertEqual(cat.id, -1)
        self.assertIsNone(cat.slot)
        self.assertIs(cat.info, NONE_INFO)
        self.assertIsNotNone(cat.slot_fruit)
        self.assertEqual(cat.name, "N/A")

    def test_pool_accessors(self):
        gacha = Gacha(_pool(), 42, "8.6")
        self.assertEqual((gacha.rare, gacha.supa, gacha.uber, gacha.legend), (7000, 2500, 400, 100))
        self.assertEqual([c.id for c in gacha.uber_cats], [301, 302, 303, 304])
        self.assertEqual([c.id for c in gacha.legend_cats], [401])
        self.assertIs(gacha.rare_cats, gacha.rare_cats)
        self.assertTrue(all(c.rarity == Rarity.SUPA for c in gacha.supa_cats))


class TestVersions(unittest.TestCase):
    def test_older_versions_keep_dupes(self):
        grid = _rows(Gacha(_pool(), 42, "8.5"), 6)
        self.assertIsNone(grid.cell(4, 0).rerolled)
        self.assertEqual(grid.cell(3, 0).next, CatRef(5, 0, False))

    def test_current_version_rerolls_dupes(self):
        grid = _rows(Gacha(_pool(), 42, "8.6"), 6)
        self.assertIsNotNone(grid.cell(4, 0).rerolled)
        self.assertEqual(grid.cell(3, 0).next, CatRef(5, 0, True))


if __name__ == "__main__":
    unittest.main()
