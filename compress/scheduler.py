"""Parallel decomposition of voxel-disjoint partitions."""
from __future__ import annotations

import sys
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from compress.block import Block
from compress.decomposer import BlockDecomposer
from compress.sink import SynchronizedSink
from engine import config
from volume.partitions import find_overlap, split_chunks, split_slabs
from volume.region import VoxelRegion


class PartitionFailed(RuntimeError):
    """A worker raised while decomposing one partition."""

    def __init__(self, index: int, partition: VoxelRegion, cause: BaseException) -> None:
        super().__init__(f"partition {index} {partition!r} failed: {cause!r}")
        self.index = index
        self.partition = partition


class PartitionScheduler:
    """Runs one decomposer per partition on a fixed-size thread pool.

    Partitions never share mask state, so they must not overlap. Each
    partition keeps its own emission order; order between partitions is
    whatever the pool produces. The shared sink sees one record at a time.
    """

    def __init__(
        self,
        workers: int = 4,
        decomposer_factory: Callable[[], BlockDecomposer] = BlockDecomposer,
        *,
        chunk_size: Optional[Sequence[int]] = None,
        log_summary: bool = False,
    ) -> None:
        workers = int(workers)
        if workers < 1:
            raise ValueError("worker count must be at least 1")
        self.workers = workers
        self.decomposer_factory = decomposer_factory
        self.chunk_size = tuple(int(v) for v in chunk_size) if chunk_size else None
        self.log_summary = bool(log_summary)

    @classmethod
    def from_config(cls) -> "PartitionScheduler":
        chunk_size = config.get("scheduler.chunk_size")
        if chunk_size is not None and (not isinstance(chunk_size, list) or len(chunk_size) != 3):
            raise ValueError("config value 'scheduler.chunk_size' must be null or [depth, height, width]")
        return cls(
            workers=config.get_int("scheduler.workers", 4, minimum=1),
            decomposer_factory=BlockDecomposer.from_config,
            chunk_size=chunk_size,
            log_summary=bool(config.get("scheduler.log_summary", False)),
        )

    # ------------------------------------------------------------------
    def partition(self, region: VoxelRegion) -> List[VoxelRegion]:
        if self.chunk_size is not None:
            return split_chunks(region, self.chunk_size)
        return split_slabs(region, self.workers)

    def decompose(self, region: VoxelRegion, sink=None, partitions: Optional[Sequence[VoxelRegion]] = None) -> List[Block]:
        """Partition ``region`` (unless ``partitions`` is given) and return all blocks merged."""
        if partitions is None:
            partitions = self.partition(region)
        merged: List[Block] = []
        for blocks in self.run(partitions, sink):
            merged.extend(blocks)
        return merged

    def run(self, partitions: Sequence[VoxelRegion], sink=None) -> List[List[Block]]:
        """Decompose every partition; results come back in partition order."""
        partitions = list(partitions)
        overlap = find_overlap(partitions)
        if overlap is not None:
            i, j = overlap
            raise ValueError(f"partitions {i} {partitions[i]!r} and {j} {partitions[j]!r} overlap")

        shared = SynchronizedSink(sink) if sink is not None else None
        t_start = time.perf_counter()

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [executor.submit(self._decompose_one, part, shared) for part in partitions]

        # The executor has drained every future; surface the first failure in partition order.
        results: List[List[Block]] = []
        for index, future in enumerate(futures):
            exc = future.exception()
            if exc is not None:
                raise PartitionFailed(index, partitions[index], exc) from exc
            results.append(future.result())

        if self.log_summary:
            total = sum(len(blocks) for blocks in results)
            elapsed = time.perf_counter() - t_start
            print(
                f"[scheduler] partitions={len(partitions)} workers={self.workers} "
                f"blocks={total} time={elapsed:.3f}s",
                file=sys.stderr,
            )
        return results

    def _decompose_one(self, partition: VoxelRegion, sink: Optional[SynchronizedSink]) -> List[Block]:
        return self.decomposer_factory().run(partition, sink)
