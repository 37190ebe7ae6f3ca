"""Seed and target-tag selection for each growth iteration.

A strategy hands the decomposer a starting box and the tag it must carry.
The box is unmarked and uniform; growth only ever enlarges it.
"""
from __future__ import annotations

from typing import Optional, Tuple

import numpy as np

from compress.block import Box
from volume.errors import InvariantViolation
from volume.mask import CompressionMask
from volume.region import VoxelRegion

Seed = Tuple[Box, int]  # starting box, tag


class FirstUnmarkedSeeds:
    """First unmarked cell in z, y, x order; its own tag is the target.

    The mask only ever gains marks, so the first unmarked index never moves
    backwards and the scan resumes from a cursor.
    """

    name = "first"

    def __init__(self, region: VoxelRegion, mask: CompressionMask) -> None:
        self.region = region
        self.mask = mask
        self._cursor = 0

    def next_seed(self) -> Optional[Seed]:
        index = self.mask.first_unmarked(self._cursor)
        if index is None:
            return None
        self._cursor = index
        z, y, x = self.mask.coords(index)
        return Box(z, y, x), self.region.at(z, y, x)


class ModeSeeds:
    """Most frequent tag among unmarked cells; the seed is its first unmarked cell.

    Ties go to the lowest tag code.
    """

    name = "mode"

    def __init__(self, region: VoxelRegion, mask: CompressionMask) -> None:
        self.region = region
        self.mask = mask

    def _open_cells(self) -> np.ndarray:
        return ~self.mask.data.reshape(-1)

    def mode_tag(self) -> Optional[int]:
        candidates = self.region.values.reshape(-1)[self._open_cells()]
        if candidates.size == 0:
            return None
        return int(np.argmax(np.bincount(candidates, minlength=256)))

    def next_seed(self) -> Optional[Seed]:
        target = self.mode_tag()
        if target is None:
            return None
        hits = np.flatnonzero(self._open_cells() & (self.region.values.reshape(-1) == target))
        z, y, x = self.mask.coords(int(hits[0]))
        return Box(z, y, x), target


class CubeFitSeeds(ModeSeeds):
    """Largest unmarked cube of the mode tag, placed at its first fitting corner.

    The first try uses the region's smallest extent as the side and each
    retry shrinks the side by one. Corners are scanned in z, y, x order.
    """

    name = "fit"

    def next_seed(self) -> Optional[Seed]:
        target = self.mode_tag()
        if target is None:
            return None
        match = (self.region.values == target) & ~self.mask.data
        counts = _box_sums(match)
        for side in range(min(self.region.extents), 0, -1):
            found = find_cube(counts, side)
            if found is not None:
                z, y, x = found
                return Box(z, y, x, side, side, side), target
        raise InvariantViolation(
            f"no fitting block for tag {chr(target)!r} at minimal size in {self.region!r}"
        )


def _box_sums(match: np.ndarray) -> np.ndarray:
    """Summed-volume table; ``sums[z, y, x]`` counts matches in ``match[:z, :y, :x]``."""
    sums = np.zeros(tuple(n + 1 for n in match.shape), dtype=np.int64)
    sums[1:, 1:, 1:] = match.cumsum(axis=0).cumsum(axis=1).cumsum(axis=2)
    return sums


def find_cube(sums: np.ndarray, side: int) -> Optional[Tuple[int, int, int]]:
    """First corner, in z, y, x order, of a ``side``-cube made only of matching cells."""
    s = side
    if s > min(sums.shape) - 1:
        return None
    total = (
        sums[s:, s:, s:]
        - sums[:-s, s:, s:]
        - sums[s:, :-s, s:]
        - sums[s:, s:, :-s]
        + sums[:-s, :-s, s:]
        + sums[:-s, s:, :-s]
        + sums[s:, :-s, :-s]
        - sums[:-s, :-s, :-s]
    )
    hits = np.flatnonzero(total == s * s * s)
    if hits.size == 0:
        return None
    z, y, x = np.unravel_index(int(hits[0]), total.shape)
    return int(z), int(y), int(x)


SEED_STRATEGIES = {
    FirstUnmarkedSeeds.name: FirstUnmarkedSeeds,
    ModeSeeds.name: ModeSeeds,
    CubeFitSeeds.name: CubeFitSeeds,
}


def seed_strategy(name: str):
    try:
        return SEED_STRATEGIES[str(name).strip().lower()]
    except KeyError:
        raise ValueError(
            f"unknown seed strategy {name!r}; expected one of {sorted(SEED_STRATEGIES)}"
        ) from None
