from __future__ import annotations

from collections import Counter
from html import escape
from typing import Any, Dict, Optional
import json

from catrolls.core.cat import Cat
from catrolls.core.grid import Grid


def _fmt_pct(x: float) -> str:
    return f"{100.0 * x:.2f}%"


def summarize(grid: Grid) -> Dict[str, Any]:
    """Tier counts and annotation totals over the base cells of `grid`."""
    rarities: Counter = Counter()
    rerolls = 0
    guaranteed = 0
    picked = 0
    cells = 0
    for cat, _, _ in grid.each_cat():
        cells += 1
        rarities[cat.rarity.name.lower() if cat.rarity is not None else "none"] += 1
        if cat.rerolled is not None:
            rerolls += 1
    for cat in grid.all_cats():
        if cat.extra_label.endswith("G"):
            guaranteed += 1
        if cat.picked_label is not None:
            picked += 1
    return {
        "rows": len(grid),
        "cells": cells,
        "rarities": dict(rarities),
        "rerolls": rerolls,
        "guaranteed": guaranteed,
        "labelled": picked,
    }


def _cell(cat: Optional[Cat]) -> str:
    if cat is None:
        return "-"
    text = f"{cat.name} ({cat.id})"
    if cat.picked_label is not None:
        text = f"**{text}** _{cat.picked_label.value}_"
    return text


def build_markdown(grid: Grid, meta: Optional[Dict[str, Any]] = None) -> str:
    meta = meta or {}
    summary = summarize(grid)
    cells = max(1, summary["cells"])

    md = [
        f"# Tracks Report: {meta.get('run_id', '(unknown)')}",
        "\n## Meta\n",
        "```json\n" + json.dumps(meta, indent=2) + "\n```\n",
        "## Summary\n",
        f"- Rows: {summary['rows']}",
    ]
    for rarity, count in sorted(summary["rarities"].items(), key=lambda kv: (-kv[1], kv[0])):
        md.append(f"- {rarity}: {count} ({_fmt_pct(count / cells)})")
    md.append(f"- Dupe rerolls: {summary['rerolls']} | guaranteed rolls: {summary['guaranteed']}")

    md.append("\n## Tracks\n")
    md.append("No. | A | A guaranteed | B | B guaranteed\n---|---|---|---|---")
    for index, (a_cat, b_cat) in enumerate(grid):
        md.append(
            f"{index + 1} | {_cell(a_cat)} | {_cell(a_cat.guaranteed)} | {_cell(b_cat)} | {_cell(b_cat.guaranteed)}"
        )
        for cat in (a_cat, b_cat):
            if cat.rerolled is not None:
                md.append(
                    f"{cat.rerolled.number} | {_cell(cat.rerolled)} | {_cell(cat.rerolled.guaranteed)} | | "
                )

    return "\n".join(md) + "\n"


def build_html(grid: Grid, meta: Optional[Dict[str, Any]] = None) -> str:
    """Self-contained HTML wrapper around the markdown report."""
    meta = meta or {}
    md = build_markdown(grid, meta)
    run_id = escape(str(meta.get("run_id", "")))
    return f"""
<!doctype html>
<html lang=\"en\"><head>
<meta charset=\"utf-8\" />
<title>Tracks Report: {run_id}</title>
<meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
<style>
body{{font-family: ui-sans-serif, system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial; margin: 1.5rem;}}
pre{{white-space: pre-wrap; background:#fafafa; padding:1rem; border:1px solid #eee; border-radius:8px;}}
</style>
</head><body>
<h1>Tracks Report: {run_id}</h1>
<pre>{escape(md)}</pre>
</body></html>
"""
