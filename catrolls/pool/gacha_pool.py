from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from catrolls.core.cat import NONE_INFO, Rarity, future_uber_info

# Rarity weights are out of this many
BASE = 10000

SLOT_FIELDS: Dict[Rarity, str] = {
    Rarity.RARE: "rare_ids",
    Rarity.SUPA: "supa_ids",
    Rarity.UBER: "uber_ids",
    Rarity.LEGEND: "legend_ids",
}


class GachaPool(BaseModel):
    """One gacha event: rarity weights, the ids in each tier, and cat info.

    Loaded once per request and treated as read-only by the roller, except
    for `add_future_ubers` which a request applies to its own copy.
    """

    name: str = ""
    rare: int = 0
    supa: int = 0
    uber: int = 0
    legend: int = 0
    guaranteed_rolls: int = 0
    rare_ids: List[int] = Field(default_factory=list)
    supa_ids: List[int] = Field(default_factory=list)
    uber_ids: List[int] = Field(default_factory=list)
    legend_ids: List[int] = Field(default_factory=list)
    cats: Dict[int, Dict[str, Any]] = Field(default_factory=dict)

    @field_validator("rare", "supa", "uber", "legend", "guaranteed_rolls")
    @classmethod
    def _non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("must not be negative")
        return v

    @model_validator(mode="after")
    def _weights_fit_base(self) -> "GachaPool":
        total = self.rare + self.supa + self.uber + self.legend
        if total > BASE:
            raise ValueError(f"rarity weights add up to {total}, more than {BASE}")
        return self

    @property
    def exists(self) -> bool:
        return any(self.dig_slot(r) for r in Rarity)

    def dig_slot(self, rarity: Rarity) -> List[int]:
        return getattr(self, SLOT_FIELDS[Rarity(rarity)])

    def dig_cat(self, cat_id: int) -> Optional[Dict[str, Any]]:
        if cat_id == -1 and -1 not in self.cats:
            return NONE_INFO
        return self.cats.get(cat_id)

    def weight(self, rarity: Rarity) -> int:
        return {
            Rarity.RARE: self.rare,
            Rarity.SUPA: self.supa,
            Rarity.UBER: self.uber,
            Rarity.LEGEND: self.legend,
        }[Rarity(rarity)]

    def add_future_ubers(self, amount: int) -> None:
        """Put `amount` placeholder ubers (-1, -2, ...) in front of the uber ids."""
        for index in range(int(amount)):
            cat_id = -index - 1
            self.uber_ids.insert(0, cat_id)
            self.cats[cat_id] = future_uber_info(abs(cat_id))
