"""Dense tag storage addressed as (z, y, x)."""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence, Tuple, Union

import numpy as np

from volume.errors import OutOfRange

if TYPE_CHECKING:  # pragma: no cover
    from volume.region import VoxelRegion

Shape = Tuple[int, int, int]
TagLike = Union[int, str, bytes]

NO_TAG = 0


def as_tag(value: TagLike) -> int:
    """Normalise a tag given as a one-character string, byte or int."""
    if isinstance(value, (str, bytes)):
        if len(value) != 1:
            raise ValueError(f"tag must be a single character, got {value!r}")
        return ord(value)
    tag = int(value)
    if not 0 <= tag <= 255:
        raise ValueError(f"tag {tag} does not fit in one byte")
    return tag


def _check_shape(shape: Sequence[int]) -> Shape:
    if len(shape) != 3:
        raise ValueError("shape must contain three integers (depth, height, width)")
    depth, height, width = (int(axis) for axis in shape)
    if depth < 0 or height < 0 or width < 0:
        raise ValueError("grid dimensions must be non-negative")
    return depth, height, width


class VoxelGrid:
    """Owned, C-contiguous uint8 buffer of tags with shape (depth, height, width).

    Cell ``(z, y, x)`` lives at flat index ``(z * height + y) * width + x``.
    """

    __slots__ = ("depth", "height", "width", "_data")

    def __init__(self, shape: Sequence[int], fill: TagLike = NO_TAG) -> None:
        self.depth, self.height, self.width = _check_shape(shape)
        self._data = np.full((self.depth, self.height, self.width), as_tag(fill), dtype=np.uint8)

    # Constructors -------------------------------------------------------
    @classmethod
    def from_array(cls, array: np.ndarray) -> "VoxelGrid":
        arr = np.asarray(array)
        if arr.ndim != 3:
            raise ValueError("array must be three-dimensional (depth, height, width)")
        if arr.dtype.kind in ("U", "S"):
            arr = np.vectorize(as_tag, otypes=[np.uint8])(arr) if arr.size else np.zeros(arr.shape, dtype=np.uint8)
        elif arr.size and (arr.min() < 0 or arr.max() > 255):
            raise ValueError("tags must fit in one byte")
        grid = cls.__new__(cls)
        grid.depth, grid.height, grid.width = (int(v) for v in arr.shape)
        grid._data = np.ascontiguousarray(arr, dtype=np.uint8).copy()
        return grid

    @classmethod
    def from_flat(cls, data: Union[bytes, str, Sequence[TagLike]], shape: Sequence[int]) -> "VoxelGrid":
        """Build a grid from a flattened z-major run of tags."""
        depth, height, width = _check_shape(shape)
        if isinstance(data, str):
            data = data.encode("latin-1")
        if isinstance(data, (bytes, bytearray)):
            flat = np.frombuffer(bytes(data), dtype=np.uint8)
        else:
            flat = np.fromiter((as_tag(v) for v in data), dtype=np.uint8)
        expected = depth * height * width
        if flat.size != expected:
            raise ValueError(f"expected {expected} tags for shape {(depth, height, width)}, got {flat.size}")
        return cls.from_array(flat.reshape((depth, height, width)))

    # Internal utilities -------------------------------------------------
    def _check(self, z: int, y: int, x: int) -> None:
        if not (0 <= z < self.depth and 0 <= y < self.height and 0 <= x < self.width):
            raise OutOfRange(f"voxel ({z}, {y}, {x}) outside grid {self.shape}")

    # API ----------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        return self.depth, self.height, self.width

    @property
    def volume(self) -> int:
        return self.depth * self.height * self.width

    @property
    def data(self) -> np.ndarray:
        return self._data

    def index(self, z: int, y: int, x: int) -> int:
        self._check(z, y, x)
        return (z * self.height + y) * self.width + x

    def get(self, z: int, y: int, x: int) -> int:
        self._check(z, y, x)
        return int(self._data[z, y, x])

    def set(self, z: int, y: int, x: int, tag: TagLike) -> None:
        self._check(z, y, x)
        self._data[z, y, x] = as_tag(tag)

    def region(self, origin: Sequence[int] = (0, 0, 0), extents: Sequence[int] | None = None) -> "VoxelRegion":
        from volume.region import VoxelRegion

        return VoxelRegion(self, origin, extents)
