from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator

from .fruit import DEFAULT_VERSION, VERSIONS
from .seed import MAX_SEED

# Most rows a tracks request may show or search
MAX_ROWS = 999


class TrackOptions(BaseModel):
    """What to roll and how to annotate it.

    Values are normalized rather than rejected, the way the tracks page treats
    its query string: seeds wrap into 32 bits, unknown versions fall back to
    the default and the row count is clamped.
    """

    seed: int = 0
    version: str = DEFAULT_VERSION
    count: int = 100
    last: int = 0
    pick: Optional[str] = None
    position: Optional[str] = None
    force_guaranteed: int = 0
    no_guaranteed: bool = False
    ubers: int = 0
    find: int = 0

    @field_validator("seed", mode="before")
    @classmethod
    def _wrap_seed(cls, v: Any) -> int:
        return abs(int(v or 0)) % MAX_SEED

    @field_validator("version", mode="before")
    @classmethod
    def _known_version(cls, v: Any) -> str:
        v = str(v or "").strip()
        return v if v in VERSIONS else DEFAULT_VERSION

    @field_validator("count", mode="before")
    @classmethod
    def _clamp_count(cls, v: Any) -> int:
        if v is None:
            return 100
        return max(1, min(int(v), MAX_ROWS))

    @field_validator("ubers", "force_guaranteed", mode="before")
    @classmethod
    def _not_negative(cls, v: Any) -> int:
        return max(0, int(v or 0))

    @field_validator("pick", "position", mode="before")
    @classmethod
    def _blank_is_none(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    def guaranteed_rolls(self, pool_rolls: int) -> int:
        if self.force_guaranteed:
            return self.force_guaranteed
        return pool_rolls

    def meta(self) -> Dict[str, Any]:
        return self.model_dump()
