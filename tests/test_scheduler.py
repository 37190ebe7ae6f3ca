import io
import threading
import time

import numpy as np
import pytest

from compress.decomposer import BlockDecomposer
from compress.scheduler import PartitionFailed, PartitionScheduler
from compress.sink import BlockSink, ListSink, TextBlockSink
from volume.partitions import split_chunks, split_slabs
from volume.voxel_grid import VoxelGrid


def _grid(shape=(6, 5, 7), seed=5):
    rng = np.random.default_rng(seed)
    codes = np.frombuffer(b"ABC", dtype=np.uint8)
    return VoxelGrid.from_array(rng.choice(codes, size=shape, p=[0.7, 0.2, 0.1]))


def _world_cover(grid, blocks):
    cover = np.zeros(grid.shape, dtype=np.int32)
    for block in blocks:
        box = (slice(block.z, block.z_end), slice(block.y, block.y_end), slice(block.x, block.x_end))
        cover[box] += 1
        assert np.all(grid.data[box] == block.tag)
    return cover


def test_two_halves_match_whole_region_coverage():
    grid = _grid()
    region = grid.region()
    whole = BlockDecomposer().run(region)
    halves = PartitionScheduler(workers=2).decompose(region, partitions=split_slabs(region, 2))

    assert np.all(_world_cover(grid, whole) == 1)
    assert np.all(_world_cover(grid, halves) == 1)
    assert sum(b.volume for b in halves) == sum(b.volume for b in whole) == region.volume


def test_results_keep_partition_order_and_emission_order():
    grid = _grid((8, 4, 4))
    region = grid.region()
    parts = split_slabs(region, 4)
    results = PartitionScheduler(workers=3).run(parts)
    assert len(results) == len(parts)
    for part, blocks in zip(parts, results):
        assert blocks == BlockDecomposer().run(part)


def test_chunked_partitions_from_scheduler_settings():
    grid = _grid((5, 6, 7), seed=9)
    scheduler = PartitionScheduler(workers=2, chunk_size=(2, 3, 4))
    parts = scheduler.partition(grid.region())
    assert len(parts) == len(split_chunks(grid.region(), (2, 3, 4)))
    blocks = scheduler.decompose(grid.region())
    assert np.all(_world_cover(grid, blocks) == 1)


def test_shared_sink_receives_every_record():
    grid = _grid((6, 6, 6), seed=1)
    stream = io.StringIO()
    blocks = PartitionScheduler(workers=4).decompose(grid.region(), TextBlockSink(stream, {"A": "air"}))
    lines = stream.getvalue().splitlines()
    assert len(lines) == len(blocks)
    for line in lines:
        fields = line.split(",")
        assert len(fields) == 7
        assert fields[6] in ("air", "B", "C")
        assert all(int(v) >= 0 for v in fields[:6])


class _ReentryDetectingSink(BlockSink):
    def __init__(self):
        super().__init__(note_missing=False)
        self._busy = threading.Event()
        self.clashes = 0
        self.count = 0

    def write(self, block, label):
        if self._busy.is_set():
            self.clashes += 1
        self._busy.set()
        time.sleep(0.0002)
        self.count += 1
        self._busy.clear()


def test_sink_emissions_never_interleave():
    grid = _grid((8, 6, 6), seed=2)
    sink = _ReentryDetectingSink()
    blocks = PartitionScheduler(workers=4).decompose(grid.region(), sink, split_slabs(grid.region(), 8))
    assert sink.clashes == 0
    assert sink.count == len(blocks)


class _FailingDecomposer(BlockDecomposer):
    def run(self, region, sink=None):
        if region.origin[0] == 2:
            raise RuntimeError("boom")
        return super().run(region, sink)


def test_failed_partition_is_reported():
    grid = _grid((4, 3, 3))
    parts = split_slabs(grid.region(), 4)
    sink = ListSink(note_missing=False)
    with pytest.raises(PartitionFailed) as info:
        PartitionScheduler(workers=2, decomposer_factory=_FailingDecomposer).run(parts, sink)
    assert info.value.index == 2
    assert info.value.partition is parts[2]
    assert isinstance(info.value.__cause__, RuntimeError)


def test_overlapping_partitions_are_rejected():
    grid = _grid((4, 3, 3))
    parts = [grid.region((0, 0, 0), (3, 3, 3)), grid.region((2, 0, 0), (2, 3, 3))]
    with pytest.raises(ValueError):
        PartitionScheduler(workers=2).run(parts)


def test_worker_count_must_be_positive():
    with pytest.raises(ValueError):
        PartitionScheduler(workers=0)


def test_single_worker_matches_sequential_order():
    grid = _grid((4, 4, 4), seed=3)
    region = grid.region()
    parts = split_slabs(region, 2)
    merged = PartitionScheduler(workers=1).decompose(region, partitions=parts)
    expected = BlockDecomposer().run(parts[0]) + BlockDecomposer().run(parts[1])
    assert merged == expected


def test_empty_region_schedules_nothing():
    assert PartitionScheduler(workers=2).decompose(VoxelGrid((0, 3, 3)).region()) == []
