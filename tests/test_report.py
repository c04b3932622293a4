from __future__ import annotations

import unittest

from catrolls.core.options import TrackOptions
from catrolls.core.tracks import build_tracks
from catrolls.eval.report import build_html, build_markdown, summarize
from catrolls.pool.gacha_pool import GachaPool

GOLDEN = {
    "rare": 7000,
    "supa": 2500,
    "uber": 400,
    "legend": 100,
    "rare_ids": [101, 102, 103],
    "supa_ids": [201, 202],
    "uber_ids": [301, 302, 303, 304],
    "legend_ids": [401],
    "cats": {"101": {"name": ["Bath <Cat>"]}},
}


def _grid(**options):
    return build_tracks(GachaPool(**GOLDEN), TrackOptions(seed=42, count=20, **options)).grid


class TestReport(unittest.TestCase):
    def test_summary(self):
        summary = summarize(_grid(pick="6B"))
        self.assertEqual(summary["rows"], 20)
        self.assertEqual(summary["cells"], 40)
        self.assertEqual(summary["rarities"], {"rare": 28, "supa": 12})
        self.assertEqual(summary["rerolls"], 5)
        self.assertEqual(summary["guaranteed"], 0)
        self.assertEqual(summary["labelled"], 7)

    def test_markdown(self):
        md = build_markdown(_grid(), {"run_id": "tracks_1"})
        self.assertIn("# Tracks Report: tracks_1", md)
        self.assertIn("- rare: 28 (70.00%)", md)
        self.assertIn("- Dupe rerolls: 5 | guaranteed rolls: 0", md)
        self.assertIn("5AR | ", md)

    def test_html_is_escaped(self):
        html = build_html(_grid(), {"run_id": "<run>"})
        self.assertIn("<pre>", html)
        self.assertIn("&lt;run&gt;", html)
        self.assertIn("Bath &lt;Cat&gt;", html)
        self.assertNotIn("Bath <Cat>", html)


if __name__ == "__main__":
    unittest.main()
