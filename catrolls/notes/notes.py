from __future__ import annotations

from typing import Any, Dict, Optional

from catrolls.core.events import JsonlEventLog


class RollNotes:
    """Structured notes about what the roller did (rerolls, guaranteed rolls, picks)."""

    def __init__(self, event_log: JsonlEventLog):
        self.event_log = event_log

    def note(self, kind: str, payload: Dict[str, Any], sequence: Optional[int] = None) -> None:
        event = {"type": "note", "kind": kind, "payload": payload}
        if sequence is not None:
            event["sequence"] = sequence
        self.event_log.write(event)
