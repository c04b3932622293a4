from __future__ import annotations

import unittest

from catrolls.core.options import MAX_ROWS, TrackOptions
from catrolls.finder import find


class TestTrackOptions(unittest.TestCase):
    def test_defaults(self):
        options = TrackOptions()
        self.assertEqual((options.seed, options.version, options.count), (0, "8.6", 100))
        self.assertIsNone(options.pick)
        self.assertIsNone(options.position)
        self.assertFalse(options.no_guaranteed)

    def test_seed_wraps_into_32_bits(self):
        self.assertEqual(TrackOptions(seed=2**32 + 5).seed, 5)
        self.assertEqual(TrackOptions(seed=-42).seed, 42)
        self.assertEqual(TrackOptions(seed="123").seed, 123)

    def test_unknown_version_falls_back(self):
        self.assertEqual(TrackOptions(version="8.4").version, "8.4")
        self.assertEqual(TrackOptions(version="9.9").version, "8.6")
        self.assertEqual(TrackOptions(version="").version, "8.6")

    def test_count_is_clamped(self):
        self.assertEqual(TrackOptions(count=0).count, 1)
        self.assertEqual(TrackOptions(count=5000).count, 999)
        self.assertEqual(TrackOptions(count=None).count, 100)

    def test_row_limit_is_shared_with_find(self):
        self.assertEqual(TrackOptions(count=MAX_ROWS + 1).count, MAX_ROWS)
        self.assertIs(find.MAX_ROWS, MAX_ROWS)

    def test_negative_amounts_become_zero(self):
        options = TrackOptions(ubers=-3, force_guaranteed=-1)
        self.assertEqual((options.ubers, options.force_guaranteed), (0, 0))

    def test_blank_markers_are_none(self):
        options = TrackOptions(pick="  ", position="")
        self.assertIsNone(options.pick)
        self.assertIsNone(options.position)
        self.assertEqual(TrackOptions(pick=" 5AX ").pick, "5AX")

    def test_guaranteed_rolls(self):
        self.assertEqual(TrackOptions().guaranteed_rolls(11), 11)
        self.assertEqual(TrackOptions(force_guaranteed=15).guaranteed_rolls(11), 15)

    def test_meta(self):
        meta = TrackOptions(seed=42, pick="3A").meta()
        self.assertEqual(meta["seed"], 42)
        self.assertEqual(meta["pick"], "3A")
        self.assertIn("find", meta)


if __name__ == "__main__":
    unittest.main()
