from __future__ import annotations

from dataclasses import dataclass

VERSIONS = ("8.6", "8.5", "8.4")
DEFAULT_VERSION = "8.6"


@dataclass(frozen=True)
class Fruit:
    """One draw: the seed read at a decision point and the value derived from it.

    Building a Fruit never advances anything; the roller advances its own seed.
    For every supported version the game reads the seed as-is, so `value`
    equals `seed`.
    """

    seed: int
    version: str = DEFAULT_VERSION

    @property
    def value(self) -> int:
        return int(self.seed)
