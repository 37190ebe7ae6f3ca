"""Voxel storage, region windows and the scan primitives used by the compressor."""
from .errors import InvariantViolation, OutOfRange
from .mask import CompressionMask
from .partitions import split_chunks, split_slabs
from .region import VoxelRegion
from .voxel_grid import VoxelGrid, as_tag

__all__ = [
    "CompressionMask",
    "InvariantViolation",
    "OutOfRange",
    "VoxelGrid",
    "VoxelRegion",
    "as_tag",
    "split_chunks",
    "split_slabs",
]
