"""Maximal-box growth from a seed cell.

A box may take one more layer along +x, +y or +z when the newly exposed face
lies inside the region, is still unmarked and carries the target tag. Growing
one axis to its limit first can block a larger extension along another, so
the ordered search tries every axis order and keeps the largest result.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Set, Tuple

import numpy as np

from compress.block import Box
from volume.mask import CompressionMask
from volume.region import VoxelRegion
from volume.row_scan import window_is_all_tag, window_is_all_unmarked
from volume.voxel_grid import TagLike, as_tag

AXIS_X = 0
AXIS_Y = 1
AXIS_Z = 2
ALL_AXES: Tuple[int, ...] = (AXIS_X, AXIS_Y, AXIS_Z)


class GrowthSearch:
    """Face tests and single-step extension for boxes of one target tag."""

    def __init__(self, region: VoxelRegion, mask: CompressionMask, tag: TagLike) -> None:
        self.region = region
        self.mask = mask
        self.tag = as_tag(tag)

    def exposed_face(self, box: Box, axis: int):
        """Half-open bounds of the layer ``box`` would gain along ``axis``, or ``None`` at the edge."""
        z0, z1, y0, y1, x0, x1 = box.bounds()
        if axis == AXIS_X:
            if x1 >= self.region.width:
                return None
            return z0, z1, y0, y1, x1, x1 + 1
        if axis == AXIS_Y:
            if y1 >= self.region.height:
                return None
            return z0, z1, y1, y1 + 1, x0, x1
        if z1 >= self.region.depth:
            return None
        return z1, z1 + 1, y0, y1, x0, x1

    def can_extend(self, box: Box, axis: int) -> bool:
        face = self.exposed_face(box, axis)
        if face is None:
            return False
        return window_is_all_tag(self.region, *face, self.tag) and window_is_all_unmarked(self.mask, *face)

    @staticmethod
    def extend(box: Box, axis: int, steps: int = 1) -> Box:
        if axis == AXIS_X:
            return box._replace(width=box.width + steps)
        if axis == AXIS_Y:
            return box._replace(height=box.height + steps)
        return box._replace(depth=box.depth + steps)

    def extend_fully(self, box: Box, axis: int) -> Box:
        while self.can_extend(box, axis):
            box = self.extend(box, axis)
        return box


def grow_ordered(search: GrowthSearch, seed: Box) -> Box:
    """Best box over all axis orders, each axis grown to its limit in turn.

    Explicit stack of ``(box, open axes)`` states; depth never exceeds three.
    Ties keep the box found first, exploring +x before +y before +z.
    """
    best = seed
    stack: List[Tuple[Box, Tuple[int, ...]]] = [(seed, ALL_AXES)]
    seen: Set[Tuple[Box, Tuple[int, ...]]] = set()

    while stack:
        box, open_axes = stack.pop()
        if (box, open_axes) in seen:
            continue
        seen.add((box, open_axes))
        if box.volume > best.volume:
            best = box

        branches = []
        for axis in open_axes:
            grown = search.extend_fully(box, axis)
            rest = tuple(a for a in open_axes if a != axis)
            branches.append((grown, rest))
        stack.extend(reversed(branches))
    return best


def grow_exhaustive(search: GrowthSearch, seed: Box) -> Box:
    """Largest box anchored at ``seed`` over every extent combination.

    ``runs[d, h]`` counts matching cells along +x from the seed column on
    layer ``d``, row ``h``; a 2D prefix minimum of it gives the widest box for
    each (depth, height) pair. Ties prefer the smaller depth, then height.
    """
    region, mask = search.region, search.mask
    z, y, x = seed.z, seed.y, seed.x
    match = (region.values[z:, y:, x:] == search.tag) & ~mask.data[z:, y:, x:]
    runs = np.logical_and.accumulate(match, axis=2).sum(axis=2)
    limits = np.minimum.accumulate(np.minimum.accumulate(runs, axis=0), axis=1)

    depths = np.arange(1, limits.shape[0] + 1)[:, None]
    heights = np.arange(1, limits.shape[1] + 1)[None, :]
    volumes = limits * depths * heights
    d, h = np.unravel_index(int(np.argmax(volumes)), volumes.shape)
    width = int(limits[d, h])
    if width < 1:
        return seed
    return Box(z, y, x, int(d) + 1, int(h) + 1, width)


GROWTH_STRATEGIES: Dict[str, Callable[[GrowthSearch, Box], Box]] = {
    "ordered": grow_ordered,
    "exhaustive": grow_exhaustive,
}


def growth_strategy(name: str) -> Callable[[GrowthSearch, Box], Box]:
    try:
        return GROWTH_STRATEGIES[str(name).strip().lower()]
    except KeyError:
        raise ValueError(
            f"unknown growth strategy {name!r}; expected one of {sorted(GROWTH_STRATEGIES)}"
        ) from None
