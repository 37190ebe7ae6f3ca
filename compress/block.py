"""Output record of the decomposition: one homogeneous cuboid."""
from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Tuple

from volume.region import VoxelRegion


class Box(NamedTuple):
    """Growth candidate in region-local coordinates."""

    z: int
    y: int
    x: int
    depth: int = 1
    height: int = 1
    width: int = 1

    @property
    def volume(self) -> int:
        return self.depth * self.height * self.width

    def bounds(self) -> Tuple[int, int, int, int, int, int]:
        """Half-open ``(z0, z1, y0, y1, x0, x1)``."""
        return (
            self.z, self.z + self.depth,
            self.y, self.y + self.height,
            self.x, self.x + self.width,
        )


@dataclass(frozen=True)
class Block:
    x: int
    y: int
    z: int
    width: int
    height: int
    depth: int
    tag: int
    x_offset: int = 0
    y_offset: int = 0
    z_offset: int = 0

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1 or self.depth < 1:
            raise ValueError(f"block extents must be >= 1, got {(self.width, self.height, self.depth)}")

    @classmethod
    def from_box(cls, region: VoxelRegion, box: Box, tag: int) -> "Block":
        z0, y0, x0 = region.origin
        return cls(
            x=x0 + box.x,
            y=y0 + box.y,
            z=z0 + box.z,
            width=box.width,
            height=box.height,
            depth=box.depth,
            tag=int(tag),
            x_offset=box.x,
            y_offset=box.y,
            z_offset=box.z,
        )

    @property
    def volume(self) -> int:
        return self.width * self.height * self.depth

    @property
    def x_end(self) -> int:
        return self.x + self.width

    @property
    def y_end(self) -> int:
        return self.y + self.height

    @property
    def z_end(self) -> int:
        return self.z + self.depth

    @property
    def char(self) -> str:
        return chr(self.tag)
