from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple

from .cat import Cat, CatRef

TRACKS = (0, 1)


class Grid:
    """Dense N x 2 arena of rolled cats.

    Row `index` is 0-based and holds the cats of sequence `index + 1`.
    Lookups outside the arena return None instead of wrapping around.
    """

    def __init__(self, rows: Optional[Sequence[Sequence[Cat]]] = None) -> None:
        self.rows: List[List[Cat]] = [list(r) for r in (rows or [])]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[List[Cat]]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> List[Cat]:
        return self.rows[index]

    def append(self, pair: Sequence[Cat]) -> None:
        self.rows.append(list(pair))

    def cell(self, index: int, track: int) -> Optional[Cat]:
        if not (0 <= index < len(self.rows)):
            return None
        row = self.rows[index]
        if not (0 <= track < len(row)):
            return None
        return row[track]

    def resolve(self, ref: Optional[CatRef]) -> Optional[Cat]:
        if ref is None:
            return None
        cat = self.cell(ref.sequence - 1, ref.track)
        if cat is not None and ref.rerolled:
            return cat.rerolled
        return cat

    def next_of(self, cat: Optional[Cat]) -> Optional[Cat]:
        if cat is None:
            return None
        return self.resolve(cat.next)

    def each_cat(self) -> Iterator[Tuple[Cat, int, int]]:
        """Yield (cat, index, track) row-major, track A before B."""
        for index, row in enumerate(self.rows):
            for track, cat in enumerate(row):
                yield cat, index, track

    def all_cats(self) -> Iterator[Cat]:
        """Every cat in the arena including rerolled and guaranteed variants."""
        for cat, _, _ in self.each_cat():
            yield cat
            if cat.guaranteed is not None:
                yield cat.guaranteed
            if cat.rerolled is not None:
                yield cat.rerolled
                if cat.rerolled.guaranteed is not None:
                    yield cat.rerolled.guaranteed
