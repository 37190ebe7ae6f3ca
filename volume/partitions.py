"""Split a region into voxel-disjoint sub-regions for independent decomposition."""
from __future__ import annotations

from typing import Dict, Iterator, List, Sequence, Tuple

import numpy as np

from volume.region import VoxelRegion


def split_slabs(region: VoxelRegion, count: int) -> List[VoxelRegion]:
    """Cut ``region`` into at most ``count`` contiguous z-slabs.

    Slab depths differ by at most one; slabs that would be empty are dropped.
    """
    count = int(count)
    if count <= 0:
        raise ValueError("slab count must be positive")
    if region.volume == 0:
        return []
    depth = region.depth
    count = min(count, depth)
    base, extra = divmod(depth, count)

    slabs: List[VoxelRegion] = []
    z = 0
    for i in range(count):
        slab_depth = base + (1 if i < extra else 0)
        slabs.append(region.subregion((z, 0, 0), (slab_depth, region.height, region.width)))
        z += slab_depth
    return slabs


def _chunk_counts(region: VoxelRegion, chunk_size: Tuple[int, int, int]) -> Tuple[int, int, int]:
    return tuple(
        (extent + size - 1) // size for extent, size in zip(region.extents, chunk_size)
    )  # type: ignore[return-value]


def iter_chunk_bounds(
    region: VoxelRegion, chunk_size: Sequence[int]
) -> Iterator[Tuple[Tuple[int, int, int], Tuple[int, int, int]]]:
    """Yield ``(origin, extents)`` of each chunk in z, y, x order, clipped at the region edge."""
    if len(chunk_size) != 3:
        raise ValueError("chunk_size must be a 3-tuple (depth, height, width)")
    size = tuple(int(v) for v in chunk_size)
    if any(cs <= 0 for cs in size):
        raise ValueError("chunk dimensions must be positive")

    max_z, max_y, max_x = _chunk_counts(region, size)  # type: ignore[arg-type]
    for cz in range(max_z):
        for cy in range(max_y):
            for cx in range(max_x):
                start = (cz * size[0], cy * size[1], cx * size[2])
                end = tuple(min(s + cs, extent) for s, cs, extent in zip(start, size, region.extents))
                yield start, (end[0] - start[0], end[1] - start[1], end[2] - start[2])


def split_chunks(region: VoxelRegion, chunk_size: Sequence[int]) -> List[VoxelRegion]:
    if region.volume == 0:
        return []
    return [region.subregion(origin, extents) for origin, extents in iter_chunk_bounds(region, chunk_size)]


def find_overlap(partitions: Sequence[VoxelRegion]) -> Tuple[int, int] | None:
    """``(earlier, later)`` indices for the first partition landing on cells an earlier one holds, or ``None``.

    Each partition paints its index into an owner map of its grid, so the check
    costs one pass over the partitioned cells.
    """
    owners: Dict[int, np.ndarray] = {}
    for index, part in enumerate(partitions):
        if part.volume == 0:
            continue
        owner = owners.get(id(part.grid))
        if owner is None:
            owner = owners[id(part.grid)] = np.full(part.grid.shape, -1, dtype=np.int64)
        (z0, y0, x0), (d, h, w) = part.origin, part.extents
        cells = owner[z0:z0 + d, y0:y0 + h, x0:x0 + w]
        taken = cells[cells >= 0]
        if taken.size:
            return int(taken.min()), index
        cells[...] = index
    return None
