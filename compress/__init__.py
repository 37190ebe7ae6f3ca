"""Greedy block decomposition of voxel regions."""
from .block import Block, Box
from .decomposer import BlockDecomposer, decompose_records
from .scheduler import PartitionFailed, PartitionScheduler
from .sink import BlockSink, ListSink, SynchronizedSink, TextBlockSink, format_record, normalize_tag_table

__all__ = [
    "Block",
    "BlockDecomposer",
    "BlockSink",
    "Box",
    "ListSink",
    "PartitionFailed",
    "PartitionScheduler",
    "SynchronizedSink",
    "TextBlockSink",
    "decompose_records",
    "format_record",
    "normalize_tag_table",
]
