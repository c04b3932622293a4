from __future__ import annotations

from pathlib import Path
from typing import IO, Any, Dict, List, Optional
import json


class JsonlEventLog:
    """Append-only JSONL trace of a tracks run.

    One JSON object per line, flushed on every write so a crashed run still
    leaves a readable trace.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._fh: Optional[IO[str]] = self.path.open("a", encoding="utf-8")
        self.count = 0

    def __enter__(self) -> "JsonlEventLog":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def write(self, event: Dict[str, Any]) -> None:
        if self._fh is None:
            raise ValueError(f"event log {self.path} is closed")
        json.dump(event, self._fh, ensure_ascii=False)
        self._fh.write("\n")
        self._fh.flush()
        self.count += 1

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None


def summarize_event(event: Dict[str, Any], width: int = 80) -> str:
    """One line for a trace event: cat numbers and ids for rows, the payload for notes."""
    if event.get("type") == "row":
        parts = []
        for cat in event.get("cats", []):
            part = f"{cat.get('number')}={cat.get('id')}"
            rerolled = cat.get("rerolled")
            if rerolled:
                part += f" ({rerolled.get('number')}={rerolled.get('id')})"
            parts.append(part)
        summary = "  ".join(parts)
    else:
        summary = str(event.get("payload") or event.get("type"))
    return summary[:width]


def read_events(path: Path) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    path = Path(path)
    if not path.exists():
        return out
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                out.append(json.loads(line))
            except json.JSONDecodeError:
                # tolerate a torn last line
                continue
    return out
