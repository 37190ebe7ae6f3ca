"""Greedy decomposition of a region into disjoint tag-homogeneous blocks."""
from __future__ import annotations

from typing import Iterator, List, Mapping, Optional

from compress.block import Block
from compress.growth import GrowthSearch
from compress.growth import growth_strategy as resolve_growth
from compress.seeds import seed_strategy as resolve_seeds
from compress.sink import ListSink
from engine import config
from volume.errors import InvariantViolation
from volume.mask import CompressionMask
from volume.region import VoxelRegion


class BlockDecomposer:
    """Seed, grow, mark and emit until every cell of the region is covered.

    Each iteration marks at least the seed cell, so a run takes at most
    ``region.volume`` iterations. The mask lives for one run only.
    """

    def __init__(self, seed_strategy: str = "first", growth_strategy: str = "ordered") -> None:
        self._seeds_cls = resolve_seeds(seed_strategy)
        self._grow = resolve_growth(growth_strategy)
        self.seed_strategy = self._seeds_cls.name
        self.growth_strategy = str(growth_strategy).strip().lower()

    @classmethod
    def from_config(cls) -> "BlockDecomposer":
        return cls(
            seed_strategy=str(config.get("decomposer.seed_strategy", "first")),
            growth_strategy=str(config.get("decomposer.growth_strategy", "ordered")),
        )

    # ------------------------------------------------------------------
    def iter_blocks(self, region: VoxelRegion) -> Iterator[Block]:
        if region.volume == 0:
            return
        mask = CompressionMask(region.extents)
        seeds = self._seeds_cls(region, mask)

        while not mask.all_marked():
            seed = seeds.next_seed()
            if seed is None:
                raise InvariantViolation(
                    f"no unmarked seed found with {mask.remaining} cells still unmarked in {region!r}"
                )
            start, tag = seed
            search = GrowthSearch(region, mask, tag)
            box = self._grow(search, start)

            if mask.mark_range(*box.bounds()) != box.volume:
                raise InvariantViolation(f"grown box {box} overlaps cells already marked in {region!r}")
            yield Block.from_box(region, box, tag)

    def run(self, region: VoxelRegion, sink=None) -> List[Block]:
        """Decompose eagerly, emitting each block to ``sink`` in order when one is given."""
        blocks: List[Block] = []
        for block in self.iter_blocks(region):
            if sink is not None:
                sink.emit(block)
            blocks.append(block)
        return blocks


def decompose_records(
    region: VoxelRegion,
    tag_table: Optional[Mapping] = None,
    *,
    seed_strategy: str = "first",
    growth_strategy: str = "ordered",
) -> List[str]:
    """Decompose ``region`` and return its output records in emission order."""
    sink = ListSink(tag_table)
    BlockDecomposer(seed_strategy, growth_strategy).run(region, sink)
    return sink.records()
