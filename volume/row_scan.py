"""Uniformity tests over contiguous runs and boxes of cells.

These dominate the decomposer's running time on large regions. Runs of at
least ``VECTOR_MIN_RUN`` cells are compared in one numpy pass; shorter runs use
a scalar loop that stops at the first mismatch. Both paths return the same
answer, and an empty run is always uniform. Tags may be given as codes or as
one-character strings.
"""
from __future__ import annotations

import numpy as np

from volume.mask import CompressionMask
from volume.region import VoxelRegion
from volume.voxel_grid import TagLike, as_tag

VECTOR_MIN_RUN = 16


def _scalar_all_equal(run: np.ndarray, value) -> bool:
    for cell in run.tolist():
        if cell != value:
            return False
    return True


def row_is_all_tag(region: VoxelRegion, z: int, y: int, x_start: int, x_end: int, tag: TagLike) -> bool:
    tag = as_tag(tag)
    run = region.row(z, y, x_start, x_end)
    if run.size < VECTOR_MIN_RUN:
        return _scalar_all_equal(run, tag)
    return bool(np.all(run == tag))


def row_is_all_unmarked(mask: CompressionMask, z: int, y: int, x_start: int, x_end: int) -> bool:
    run = mask.window(z, z + 1, y, y + 1, x_start, x_end)[0, 0]
    if run.size < VECTOR_MIN_RUN:
        return _scalar_all_equal(run, False)
    return not bool(run.any())


# Whole-face checks --------------------------------------------------------
def window_is_all_tag(region: VoxelRegion, z0: int, z1: int, y0: int, y1: int, x0: int, x1: int, tag: TagLike) -> bool:
    tag = as_tag(tag)
    cells = region.window(z0, z1, y0, y1, x0, x1)
    if cells.size < VECTOR_MIN_RUN:
        for z in range(z0, z1):
            for y in range(y0, y1):
                if not row_is_all_tag(region, z, y, x0, x1, tag):
                    return False
        return True
    return bool(np.all(cells == tag))


def window_is_all_unmarked(mask: CompressionMask, z0: int, z1: int, y0: int, y1: int, x0: int, x1: int) -> bool:
    cells = mask.window(z0, z1, y0, y1, x0, x1)
    if cells.size < VECTOR_MIN_RUN:
        for z in range(z0, z1):
            for y in range(y0, y1):
                if not row_is_all_unmarked(mask, z, y, x0, x1):
                    return False
        return True
    return not bool(cells.any())
