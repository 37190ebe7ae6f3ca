"""Read-only rectangular windows over a voxel grid."""
from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from volume.errors import OutOfRange
from volume.voxel_grid import VoxelGrid

Triple = Tuple[int, int, int]


def _triple(values: Sequence[int], name: str) -> Triple:
    if len(values) != 3:
        raise ValueError(f"{name} must contain three integers (z, y, x)")
    z, y, x = (int(v) for v in values)
    return z, y, x


class VoxelRegion:
    """Window ``origin .. origin + extents`` of a grid, addressed in local (z, y, x).

    The window is validated once at construction; every cell access is then
    checked against the local extents only.
    """

    __slots__ = ("grid", "origin", "extents", "_view")

    def __init__(self, grid: VoxelGrid, origin: Sequence[int] = (0, 0, 0), extents: Sequence[int] | None = None) -> None:
        z0, y0, x0 = _triple(origin, "origin")
        if extents is None:
            extents = (grid.depth - z0, grid.height - y0, grid.width - x0)
        depth, height, width = _triple(extents, "extents")
        if min(z0, y0, x0) < 0 or min(depth, height, width) < 0:
            raise OutOfRange(f"region origin {(z0, y0, x0)} / extents {(depth, height, width)} must be non-negative")
        if z0 + depth > grid.depth or y0 + height > grid.height or x0 + width > grid.width:
            raise OutOfRange(
                f"region at {(z0, y0, x0)} with extents {(depth, height, width)} exceeds grid {grid.shape}"
            )

        self.grid = grid
        self.origin: Triple = (z0, y0, x0)
        self.extents: Triple = (depth, height, width)
        view = grid.data[z0:z0 + depth, y0:y0 + height, x0:x0 + width]
        view.flags.writeable = False
        self._view = view

    # ------------------------------------------------------------------
    @property
    def depth(self) -> int:
        return self.extents[0]

    @property
    def height(self) -> int:
        return self.extents[1]

    @property
    def width(self) -> int:
        return self.extents[2]

    @property
    def volume(self) -> int:
        return self.depth * self.height * self.width

    @property
    def values(self) -> np.ndarray:
        """Non-writeable view of the window's tags."""
        return self._view

    @property
    def world_origin(self) -> Triple:
        """Origin as (x, y, z), the order output records use."""
        z0, y0, x0 = self.origin
        return x0, y0, z0

    def contains(self, z: int, y: int, x: int) -> bool:
        return 0 <= z < self.depth and 0 <= y < self.height and 0 <= x < self.width

    def at(self, z: int, y: int, x: int) -> int:
        if not self.contains(z, y, x):
            raise OutOfRange(f"cell ({z}, {y}, {x}) outside region extents {self.extents}")
        return int(self._view[z, y, x])

    def row(self, z: int, y: int, x_start: int, x_end: int) -> np.ndarray:
        """Tags of the half-open run ``[x_start, x_end)`` on row (z, y)."""
        if not (0 <= z < self.depth and 0 <= y < self.height and 0 <= x_start <= x_end <= self.width):
            raise OutOfRange(f"row ({z}, {y}, {x_start}:{x_end}) outside region extents {self.extents}")
        return self._view[z, y, x_start:x_end]

    def window(self, z0: int, z1: int, y0: int, y1: int, x0: int, x1: int) -> np.ndarray:
        if not (0 <= z0 <= z1 <= self.depth and 0 <= y0 <= y1 <= self.height and 0 <= x0 <= x1 <= self.width):
            raise OutOfRange(
                f"window z[{z0}:{z1}] y[{y0}:{y1}] x[{x0}:{x1}] outside region extents {self.extents}"
            )
        return self._view[z0:z1, y0:y1, x0:x1]

    def subregion(self, origin: Sequence[int], extents: Sequence[int]) -> "VoxelRegion":
        """Nested window; ``origin`` is relative to this region and must stay inside it."""
        oz, oy, ox = _triple(origin, "origin")
        d, h, w = _triple(extents, "extents")
        self.window(oz, oz + d, oy, oy + h, ox, ox + w)
        z0, y0, x0 = self.origin
        return VoxelRegion(self.grid, (z0 + oz, y0 + oy, x0 + ox), (d, h, w))

    def overlaps(self, other: "VoxelRegion") -> bool:
        if other.grid is not self.grid:
            return False
        for axis in range(3):
            lo = max(self.origin[axis], other.origin[axis])
            hi = min(self.origin[axis] + self.extents[axis], other.origin[axis] + other.extents[axis])
            if lo >= hi:
                return False
        return True

    def __repr__(self) -> str:
        return f"VoxelRegion(origin={self.origin}, extents={self.extents})"
