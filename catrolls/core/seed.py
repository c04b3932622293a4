from __future__ import annotations

from typing import List, Tuple

MAX_SEED = 2**32
MASK = MAX_SEED - 1

# (direction, bits); the game's xorshift32
ADVANCE_SHIFTS: List[Tuple[str, int]] = [("<<", 13), (">>", 17), ("<<", 15)]
RETREAT_SHIFTS: List[Tuple[str, int]] = [("<<", 15), ("<<", 30), (">>", 17), ("<<", 13), ("<<", 26)]


def _shift(seed: int, direction: str, bits: int) -> int:
    if direction == "<<":
        return seed ^ ((seed << bits) & MASK)
    return seed ^ (seed >> bits)


def advance_seed(seed: int) -> int:
    """Next seed of the game's generator."""
    for direction, bits in ADVANCE_SHIFTS:
        seed = _shift(seed, direction, bits)
    return seed


def retreat_seed(seed: int) -> int:
    """Inverse of `advance_seed`: retreat_seed(advance_seed(s)) == s."""
    for direction, bits in RETREAT_SHIFTS:
        seed = _shift(seed, direction, bits)
    return seed


def advance_many(seed: int, steps: int) -> int:
    for _ in range(int(steps)):
        seed = advance_seed(seed)
    return seed


def retreat_many(seed: int, steps: int) -> int:
    for _ in range(int(steps)):
        seed = retreat_seed(seed)
    return seed
