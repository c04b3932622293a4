from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from .fruit import Fruit


class Rarity(IntEnum):
    # the game's own rarity codes
    RARE = 2
    SUPA = 3
    UBER = 4
    LEGEND = 5


class PickLabel(str, Enum):
    PICKED = "picked"
    NEXT_POSITION = "next_position"
    PICKED_CONSECUTIVELY = "picked_consecutively"


# Display label by score, upper bounds exclusive; anything above is "legend"
SCORE_LABELS: List[Tuple[int, str]] = [
    (6470, "rare"),
    (6970, "supa_fest"),
    (9070, "supa"),
    (9470, "uber_fest"),
    (9970, "uber"),
]

NONE_INFO: Dict[str, Any] = {"name": ["N/A"]}


def future_uber_info(n: int) -> Dict[str, Any]:
    return {"name": [f"({n}?)"], "desc": ["An unknown future uber"]}


def label_for_score(score: Optional[int]) -> str:
    if score is None:
        return "rare"
    for upper, label in SCORE_LABELS:
        if score < upper:
            return label
    return "legend"


class CatRef(NamedTuple):
    """Non-owning pointer into a Grid: a cell's base cat or its rerolled variant."""

    sequence: int
    track: int
    rerolled: bool = False


@dataclass(eq=False)
class Cat:
    """One drawn cat.

    `rerolled` and `guaranteed` are owned by this cat; `next` only names the
    cell a following draw lands on and is resolved through the Grid.
    """

    id: int
    info: Optional[Dict[str, Any]] = None
    rarity: Optional[Rarity] = None
    rarity_fruit: Optional[Fruit] = None
    score: Optional[int] = None
    slot: Optional[int] = None
    slot_fruit: Optional[Fruit] = None
    sequence: Optional[int] = None
    track: Optional[int] = None
    steps: Optional[int] = None
    next: Optional[CatRef] = None
    rerolled: Optional["Cat"] = None
    guaranteed: Optional["Cat"] = None
    rarity_label: Optional[str] = None
    picked_label: Optional[PickLabel] = None
    extra_label: str = ""

    def __repr__(self) -> str:
        return f"<Cat number={self.number!r} name={self.name!r}>"

    @property
    def track_label(self) -> str:
        if self.track is None:
            return "+"
        return chr(self.track + ord("A"))

    @property
    def number(self) -> str:
        sequence = "" if self.sequence is None else str(self.sequence)
        return f"{sequence}{self.track_label}{self.extra_label}"

    @property
    def name(self) -> str:
        names = (self.info or {}).get("name") or []
        return str(names[0]) if names else str(self.id)

    @property
    def display_rarity(self) -> str:
        return self.rarity_label or label_for_score(self.score)

    def ref(self) -> CatRef:
        # only reroll results carry steps
        return CatRef(int(self.sequence or 0), int(self.track or 0), self.steps is not None)

    def duped(self, other: Optional["Cat"]) -> bool:
        """Same rare cat twice in a row: the game rerolls the second one."""
        return (
            other is not None
            and self.rarity == Rarity.RARE
            and self.id == other.id
            and self.id > 0
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "number": self.number,
            "id": self.id,
            "name": self.name,
            "rarity": self.rarity.name.lower() if self.rarity is not None else None,
            "score": self.score,
            "slot": self.slot,
        }
        if self.steps is not None:
            out["steps"] = self.steps
        if self.next is not None:
            out["next"] = list(self.next)
        if self.picked_label is not None:
            out["picked"] = self.picked_label.value
        return out
