from __future__ import annotations
from pathlib import Path
from typing import Any, Dict
import json

from .gacha_pool import BASE, GachaPool


def pool_from_dict(data: Dict[str, Any]) -> GachaPool:
    return GachaPool.model_validate(data)


def load_pool(path: Path) -> GachaPool:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No pool file at {path}")
    return pool_from_dict(json.loads(path.read_text(encoding="utf-8")))

__all__ = ["BASE", "GachaPool", "load_pool", "pool_from_dict"]
