"""Per-region record of cells already covered by an emitted block."""
from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

from volume.errors import OutOfRange


class CompressionMask:
    """Monotonic boolean grid with a cached count of unmarked cells."""

    __slots__ = ("depth", "height", "width", "_data", "_flat", "_remaining")

    def __init__(self, extents: Sequence[int]) -> None:
        depth, height, width = (int(v) for v in extents)
        if depth < 0 or height < 0 or width < 0:
            raise ValueError("mask extents must be non-negative")
        self.depth, self.height, self.width = depth, height, width
        self._data = np.zeros((depth, height, width), dtype=np.bool_)
        self._flat = self._data.reshape(-1)
        self._remaining = depth * height * width

    @property
    def extents(self) -> Tuple[int, int, int]:
        return self.depth, self.height, self.width

    @property
    def remaining(self) -> int:
        return self._remaining

    @property
    def data(self) -> np.ndarray:
        return self._data

    def is_marked(self, z: int, y: int, x: int) -> bool:
        if not (0 <= z < self.depth and 0 <= y < self.height and 0 <= x < self.width):
            raise OutOfRange(f"cell ({z}, {y}, {x}) outside mask extents {self.extents}")
        return bool(self._data[z, y, x])

    def window(self, z0: int, z1: int, y0: int, y1: int, x0: int, x1: int) -> np.ndarray:
        if not (0 <= z0 <= z1 <= self.depth and 0 <= y0 <= y1 <= self.height and 0 <= x0 <= x1 <= self.width):
            raise OutOfRange(
                f"box z[{z0}:{z1}] y[{y0}:{y1}] x[{x0}:{x1}] outside mask extents {self.extents}"
            )
        return self._data[z0:z1, y0:y1, x0:x1]

    def mark_range(self, z0: int, z1: int, y0: int, y1: int, x0: int, x1: int) -> int:
        """Set every cell of the half-open box; returns how many were newly marked."""
        box = self.window(z0, z1, y0, y1, x0, x1)
        fresh = box.size - int(np.count_nonzero(box))
        if fresh:
            box[...] = True
            self._remaining -= fresh
        return fresh

    def all_marked(self) -> bool:
        return self._remaining == 0

    def first_unmarked(self, start: int = 0) -> Optional[int]:
        """Flat index of the first unmarked cell at or after ``start``, in z, y, x order."""
        if start >= self._flat.size:
            return None
        tail = self._flat[start:]
        offset = int(np.argmin(tail))
        if tail[offset]:
            return None
        return start + offset

    def coords(self, flat_index: int) -> Tuple[int, int, int]:
        rest, x = divmod(int(flat_index), self.width)
        z, y = divmod(rest, self.height)
        return z, y, x
